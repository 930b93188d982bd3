"""
StackQuest Schemas - Pydantic models for the math question learning tool.

This module exports all schema classes for:
- Question: descriptors, difficulty tiers, loaded question files
- Progress: per-question results and navigation state
- Stack: STACK API requests and responses
- Tracking: sessions, attempts and input records
- Feedback: AI tutoring requests and results
"""

# Question schemas
from .question import (
    Difficulty,
    QuestionDescriptor,
    QuestionFile,
    DEFAULT_QUESTIONS,
)

# Progress schemas
from .progress import (
    ProgressEntry,
    NavigationState,
)

# STACK API schemas
from .stack import (
    StackRequest,
    StackInput,
    RenderResponse,
    ValidateResponse,
    GradeResponse,
)

# Tracking schemas
from .tracking import (
    LearningSession,
    QuestionAttempt,
    InputRecord,
)

# Feedback schemas
from .feedback import (
    FeedbackRequest,
    FeedbackResult,
)

__all__ = [
    # Question
    'Difficulty',
    'QuestionDescriptor',
    'QuestionFile',
    'DEFAULT_QUESTIONS',
    # Progress
    'ProgressEntry',
    'NavigationState',
    # Stack
    'StackRequest',
    'StackInput',
    'RenderResponse',
    'ValidateResponse',
    'GradeResponse',
    # Tracking
    'LearningSession',
    'QuestionAttempt',
    'InputRecord',
    # Feedback
    'FeedbackRequest',
    'FeedbackResult',
]
