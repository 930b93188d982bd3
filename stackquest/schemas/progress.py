"""
Progress tracking schemas for StackQuest.

Defines Pydantic models for student progress including:
- Per-question attempt results
- Navigation state
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ProgressEntry(BaseModel):
    question_index: int = Field(..., ge=0)
    attempted: bool = True
    passed: bool = False
    score: Optional[float] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class NavigationState(BaseModel):
    current_index: int = Field(default=0, ge=0)
    all_attempted: bool = False
    adaptive_mode_active: bool = False
