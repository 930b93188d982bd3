"""
Navigator - Question sequencing, attempt gating, and adaptive navigation.

Provides:
- Forward/backward/direct navigation through the question sequence
- Gating: cannot move forward past an unattempted question
- Adaptive remediation after a failed attempt
- Navigation labels and progress summary for the UI
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from stackquest.schemas import NavigationState, QuestionDescriptor

from .errors import IndexOutOfRange, NotYetAttempted
from .progress import ProgressTracker
from .remediation import select_next
from .sequence import QuestionSequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationEvent:
    """Emitted after every transition; tells the renderer what to load."""
    index: int
    descriptor: QuestionDescriptor
    action: str      # "jump", "forward" or "backward"
    adaptive: bool   # forward moves chosen by remediation only

    @property
    def file_reference(self) -> str:
        return self.descriptor.file_reference

    @property
    def question_name(self) -> Optional[str]:
        return self.descriptor.question_name


NavigationListener = Callable[[NavigationEvent], None]


class Navigator:
    """
    Navigate through the question sequence with attempt gating.

    Combines QuestionSequence (content) with ProgressTracker (user state).
    All state lives on the instance, so independent sessions each get
    their own Navigator.
    """

    def __init__(self, sequence: QuestionSequence, progress: ProgressTracker):
        """
        Initialize navigator.

        Args:
            sequence: QuestionSequence to navigate
            progress: ProgressTracker for the same sequence
        """
        if progress.sequence is not sequence:
            raise ValueError("ProgressTracker must track the navigated sequence")
        self.sequence = sequence
        self.progress = progress
        self._state = NavigationState()
        self._listeners: list[NavigationListener] = []

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def current_question(self) -> QuestionDescriptor:
        return self.sequence.get(self._state.current_index)

    @property
    def adaptive_mode_active(self) -> bool:
        return self._state.adaptive_mode_active

    @property
    def total_questions(self) -> int:
        return self.sequence.length()

    def get_state(self) -> NavigationState:
        """Snapshot of the navigation state."""
        with self.progress.lock:
            return self._state.model_copy(
                update={"all_attempted": self.progress.is_all_attempted()}
            )

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def subscribe(self, listener: NavigationListener):
        """Register a callback invoked after every transition."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: NavigationListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _move_to(self, index: int, action: str) -> NavigationEvent:
        self._state.current_index = index
        event = NavigationEvent(
            index=index,
            descriptor=self.sequence.get(index),
            action=action,
            adaptive=self._state.adaptive_mode_active and action == "forward",
        )
        logger.info(f"Loading question {index + 1}: {event.descriptor.title} ({action})")
        for listener in list(self._listeners):
            listener(event)
        return event

    # -------------------------------------------------------------------------
    # Gating
    # -------------------------------------------------------------------------

    def can_proceed(self) -> bool:
        """True once the current question (or every question) has been attempted."""
        return (
            self.progress.is_all_attempted()
            or self.progress.has_attempted(self._state.current_index)
        )

    def peek_next(self) -> int:
        """Destination forward() would pick, without touching adaptive mode."""
        with self.progress.lock:
            return select_next(self.sequence, self.progress, self._state.current_index).index

    def is_forward_allowed(self) -> bool:
        """True when forward() would move somewhere."""
        with self.progress.lock:
            return self.can_proceed() and self.sequence.contains(self.peek_next())

    def is_backward_allowed(self) -> bool:
        return self._state.current_index > 0

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def select_next(self) -> int:
        """
        Choose the forward destination and update adaptive mode.

        The result may equal total_questions when the current question is
        the last one and was passed.
        """
        with self.progress.lock:
            choice = select_next(self.sequence, self.progress, self._state.current_index)
            self._state.adaptive_mode_active = choice.adaptive
            if choice.adaptive:
                logger.info(
                    f"Remediation: question {self._state.current_index + 1} failed, "
                    f"next is question {choice.index + 1}"
                )
            return choice.index

    def jump_to(self, index: int) -> NavigationEvent:
        """Load a question directly. No gating is applied."""
        with self.progress.lock:
            if not self.sequence.contains(index):
                raise IndexOutOfRange(index, self.sequence.length())
            return self._move_to(index, "jump")

    def forward(self) -> Optional[NavigationEvent]:
        """
        Advance to the next question chosen by select_next().

        Returns the transition event, or None when there is no destination.

        Raises:
            NotYetAttempted: If the current question hasn't been attempted
        """
        with self.progress.lock:
            if not self.can_proceed():
                logger.info(f"Question {self._state.current_index + 1} not attempted; forward blocked")
                raise NotYetAttempted(self._state.current_index)

            destination = self.select_next()
            if not self.sequence.contains(destination):
                return None
            return self._move_to(destination, "forward")

    def backward(self) -> Optional[NavigationEvent]:
        """Go to the previous question. Never gated; None at the first question."""
        with self.progress.lock:
            if self._state.current_index <= 0:
                return None
            return self._move_to(self._state.current_index - 1, "backward")

    def record_result(self, passed: bool, score: Optional[float] = None, index: Optional[int] = None):
        """Record a graded submission, by default for the current question."""
        with self.progress.lock:
            target = self._state.current_index if index is None else index
            was_all_attempted = self.progress.is_all_attempted()
            entry = self.progress.record_attempt(target, passed, score)
            logger.info(f"Question {target + 1} marked as attempted (passed={passed})")
            if not was_all_attempted and self.progress.is_all_attempted():
                self._state.all_attempted = True
                logger.info("All questions have been attempted; free navigation enabled")
            return entry

    # -------------------------------------------------------------------------
    # UI helpers
    # -------------------------------------------------------------------------

    def get_previous_title(self) -> Optional[str]:
        return self.sequence.title_at(self._state.current_index - 1)

    def get_next_title(self) -> Optional[str]:
        """Title of the question forward() leads to, remediation included."""
        return self.sequence.title_at(self.peek_next())

    def get_position(self) -> tuple[int, int]:
        """Current position as (1-based number, total)."""
        return (self._state.current_index + 1, self.sequence.length())

    def get_progress_summary(self) -> dict:
        """Get progress summary for display."""
        stats = self.progress.get_completion_stats()
        position, total = self.get_position()
        return {
            **stats,
            "current_position": position,
            "current_title": self.current_question.title,
            "adaptive_mode_active": self._state.adaptive_mode_active,
        }
