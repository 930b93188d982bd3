"""
Remediation - Choose the question that follows the current one.

After a failed attempt the student is steered to an easier question on the
same topic that they haven't tried yet. When no such question exists the
current question is repeated; the renderer draws a fresh seed, so the
student sees a new variant.
"""

from dataclasses import dataclass

from stackquest.schemas import Difficulty

from .progress import ProgressTracker
from .sequence import QuestionSequence


@dataclass(frozen=True)
class NextChoice:
    """Destination of a forward move."""
    index: int
    adaptive: bool  # True when index is not the nominal current_index + 1


def find_remediation_candidates(
    sequence: QuestionSequence,
    progress: ProgressTracker,
    current_index: int,
) -> list[int]:
    """Unattempted indices sharing the current question's topic, in sequence order."""
    topic = sequence.get(current_index).topic
    if topic is None:
        return []
    return [
        idx for idx, descriptor in enumerate(sequence)
        if idx != current_index
        and descriptor.topic == topic
        and not progress.has_attempted(idx)
    ]


def select_remediation(
    sequence: QuestionSequence,
    progress: ProgressTracker,
    current_index: int,
) -> int:
    """
    Pick the remediation target for a failed question.

    Priority:
    1. First unattempted same-topic question with basic difficulty
    2. First unattempted same-topic question of any difficulty
    3. The current question again
    """
    candidates = find_remediation_candidates(sequence, progress, current_index)

    for idx in candidates:
        if sequence.get(idx).difficulty == Difficulty.BASIC:
            return idx

    if candidates:
        return candidates[0]

    return current_index


def select_next(
    sequence: QuestionSequence,
    progress: ProgressTracker,
    current_index: int,
) -> NextChoice:
    """
    Compute where forward() should go from current_index.

    The returned index may be current_index + 1 == length (past the end);
    the caller treats that as "nowhere to go".
    """
    nominal = current_index + 1
    entry = progress.result(current_index)

    if entry is not None and not entry.passed:
        target = select_remediation(sequence, progress, current_index)
        return NextChoice(index=target, adaptive=target != nominal)

    return NextChoice(index=nominal, adaptive=False)
