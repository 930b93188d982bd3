"""
AI tutoring feedback schemas for StackQuest.
"""

from pydantic import BaseModel
from typing import Optional


class FeedbackRequest(BaseModel):
    """Everything the tutor prompt needs about one graded submission."""
    user_answers: dict[str, str] = {}
    correct_answer: str = "No solution provided"
    general_feedback: Optional[str] = None
    question_name: Optional[str] = None
    question_text: str = "Question text not found"
    question_type: str = "Unknown"
    additional_context: str = ""
    score: float = 0.0
    max_score: float = 1.0
    is_correct: bool = False


class FeedbackResult(BaseModel):
    success: bool
    feedback: Optional[str] = None
    error: Optional[str] = None
