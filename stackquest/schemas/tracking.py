"""
Attempt tracking schemas for StackQuest.

Rows of the relational attempt log:
- Learning sessions (one per browser visit)
- Question attempts (one per graded submission)
- Input records (answers captured for an attempt)
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class LearningSession(BaseModel):
    id: int
    anonymous_id: str
    page_url: Optional[str] = None
    user_agent: Optional[str] = None
    session_start: datetime
    session_end: Optional[datetime] = None


class QuestionAttempt(BaseModel):
    id: int
    session_id: int
    question_file: str
    question_name: Optional[str] = None
    question_prefix: str
    seed: Optional[int] = None
    attempt_number: int = Field(default=1, ge=1)
    score: Optional[float] = None
    max_score: Optional[float] = None
    is_correct: Optional[bool] = None
    created_at: datetime
    submitted_at: Optional[datetime] = None


class InputRecord(BaseModel):
    id: int
    attempt_id: int
    session_id: int
    input_name: str
    input_value: Optional[str] = None
    input_type: Optional[str] = None
    is_final_answer: bool = False
    validation_result: Optional[str] = None  # JSON text
    created_at: datetime
