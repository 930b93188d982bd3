"""
StackQuest Classroom - Runtime components for sequencing and tracking questions.

This module provides:
- QuestionSequence: Ordered question descriptors
- ProgressTracker: Per-question attempt results
- Navigator: Gated, adaptive navigation
- AttemptLog: Session/attempt/input history in SQLite
"""

from .errors import (
    IndexOutOfRange,
    NotYetAttempted,
)

from .sequence import (
    QuestionSequence,
)

from .progress import (
    ProgressTracker,
)

from .remediation import (
    NextChoice,
    find_remediation_candidates,
    select_remediation,
    select_next,
)

from .navigator import (
    Navigator,
    NavigationEvent,
)

from .tracking import (
    AttemptLog,
    generate_anonymous_id,
    DEFAULT_TRACKING_DIR,
    DEFAULT_TRACKING_DB,
)

from .submission import (
    SubmissionOutcome,
    process_grade,
    record_validation,
    validation_summary,
    INVALID_ANSWERS_MESSAGE,
)

__all__ = [
    # Errors
    "IndexOutOfRange",
    "NotYetAttempted",
    # Sequence
    "QuestionSequence",
    # Progress
    "ProgressTracker",
    # Remediation
    "NextChoice",
    "find_remediation_candidates",
    "select_remediation",
    "select_next",
    # Navigator
    "Navigator",
    "NavigationEvent",
    # Tracking
    "AttemptLog",
    "generate_anonymous_id",
    "DEFAULT_TRACKING_DIR",
    "DEFAULT_TRACKING_DB",
    # Submission
    "SubmissionOutcome",
    "process_grade",
    "record_validation",
    "validation_summary",
    "INVALID_ANSWERS_MESSAGE",
]
