"""
StackQuest Clients - External services behind plain Python calls.

This module provides:
- Question file loading (STACK quiz XML)
- StackApiClient: render/validate/grade against the STACK API
- FeedbackClient: AI tutoring feedback via Gemini
"""

from .question_file import (
    load_question_from_file,
    read_question_file,
    wrap_question,
    MISSING_QUESTION_XML,
)

from .stack_api import (
    StackApiClient,
    StackApiError,
    collect_answers,
    INPUT_PREFIX,
    FEEDBACK_PREFIX,
    VALIDATION_PREFIX,
)

from .feedback import (
    FeedbackClient,
    build_feedback_request,
    build_prompt,
    correct_answer_for,
    describe_question,
    extract_question_text,
    UNAVAILABLE_MESSAGE,
)

__all__ = [
    # Question files
    "load_question_from_file",
    "read_question_file",
    "wrap_question",
    "MISSING_QUESTION_XML",
    # STACK API
    "StackApiClient",
    "StackApiError",
    "collect_answers",
    "INPUT_PREFIX",
    "FEEDBACK_PREFIX",
    "VALIDATION_PREFIX",
    # Feedback
    "FeedbackClient",
    "build_feedback_request",
    "build_prompt",
    "correct_answer_for",
    "describe_question",
    "extract_question_text",
    "UNAVAILABLE_MESSAGE",
]
