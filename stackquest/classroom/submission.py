"""
Submission handling - feed a STACK grading result into progress and history.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from stackquest.schemas import GradeResponse, InputRecord, ProgressEntry, QuestionAttempt, ValidateResponse

from .navigator import Navigator
from .tracking import AttemptLog

logger = logging.getLogger(__name__)

INVALID_ANSWERS_MESSAGE = "Please enter valid answers for all parts of the question."
DEFAULT_QUESTION_PREFIX = "q1_"


@dataclass
class SubmissionOutcome:
    """Result of processing one grading response."""
    accepted: bool
    message: Optional[str] = None
    entry: Optional[ProgressEntry] = None
    attempt: Optional[QuestionAttempt] = None


def validation_summary(grade: GradeResponse) -> str:
    """JSON summary of a grading response stored with the final answers."""
    return json.dumps({
        "score": grade.score,
        "maxScore": grade.max_score,
        "isCorrect": grade.is_correct,
        "responseSummary": grade.responsesummary,
        "specificFeedback": grade.specificfeedback,
        "prts": grade.prts,
    }, ensure_ascii=False)


def process_grade(
    navigator: Navigator,
    grade: GradeResponse,
    answers: Optional[dict[str, str]] = None,
    attempt_log: Optional[AttemptLog] = None,
    session_id: Optional[int] = None,
    seed: Optional[int] = None,
    question_prefix: str = DEFAULT_QUESTION_PREFIX,
) -> SubmissionOutcome:
    """
    Record a graded submission for the navigator's current question.

    Non-gradable responses (missing or invalid answers) are rejected without
    touching progress. When an AttemptLog and session are supplied, the
    attempt, its score and the final answers are written to it.
    """
    if not grade.isgradable:
        return SubmissionOutcome(accepted=False, message=INVALID_ANSWERS_MESSAGE)

    question = navigator.current_question
    entry = navigator.record_result(passed=grade.is_correct, score=grade.final_score)

    attempt = None
    if attempt_log is not None and session_id is not None:
        attempt = attempt_log.create_attempt(
            session_id=session_id,
            question_file=question.file_reference,
            question_prefix=question_prefix,
            question_name=question.question_name,
            seed=seed,
        )
        attempt = attempt_log.update_attempt(
            attempt.id,
            score=grade.final_score,
            max_score=grade.max_score,
            is_correct=grade.is_correct,
        )
        attempt_log.track_input(
            attempt.id,
            input_name="final_answers",
            input_value=json.dumps(answers or {}, ensure_ascii=False),
            input_type="final_submission",
            is_final_answer=True,
            validation_result=validation_summary(grade),
        )
        logger.info(f"Attempt {attempt.id} stored (attempt #{attempt.attempt_number})")

    return SubmissionOutcome(accepted=True, entry=entry, attempt=attempt)


def record_validation(
    attempt_log: Optional[AttemptLog],
    attempt_id: Optional[int],
    input_name: str,
    input_value: str,
    validation: ValidateResponse,
) -> Optional[InputRecord]:
    """
    Log a live validation against the question's current attempt.

    Attempts are only created on submission, so validations made before the
    first submit have nothing to attach to and are not stored.
    """
    if attempt_log is None or attempt_id is None:
        return None
    return attempt_log.track_input(
        attempt_id,
        input_name=input_name,
        input_value=input_value,
        input_type="validation",
        validation_result=validation.validation or None,
    )
