"""
STACK API schemas for StackQuest.

Defines Pydantic models for the third-party STACK question service:
- Request payload shared by render/validate/grade
- Render, validate and grade responses
"""

from pydantic import BaseModel, Field, computed_field
from typing import Any, Optional


class StackRequest(BaseModel):
    """Payload posted to /render, /validate and /grade."""
    questionDefinition: str
    answers: dict[str, str] = {}
    seed: Optional[int] = None
    renderInputs: str           # prefix the API applies to input names
    readOnly: bool = False
    inputName: Optional[str] = None  # validate only


class StackInput(BaseModel):
    """One rendered input of a STACK question."""
    render: str = ""
    samplesolution: dict[str, Any] = {}
    samplesolutionrender: Optional[str] = None
    validationtype: Optional[str] = None
    configuration: dict[str, Any] = {}


class RenderResponse(BaseModel):
    questionrender: str
    questionsamplesolutiontext: Optional[str] = None
    questioninputs: dict[str, StackInput] = {}
    questionassets: dict[str, str] = {}
    questionseed: Optional[int] = None
    questionvariants: list[Any] = []
    iframes: list[Any] = []


class ValidateResponse(BaseModel):
    validation: str = ""
    iframes: list[Any] = []


class GradeResponse(BaseModel):
    """
    Grading result for one submission.

    score is the fraction of available marks (0.0-1.0);
    scoreweights['total'] is the mark value of the whole question.
    """
    isgradable: bool = True
    score: float = 0.0
    scores: dict[str, float] = {}
    scoreweights: dict[str, float] = Field(default_factory=lambda: {"total": 1.0})
    specificfeedback: Optional[str] = None
    prts: dict[str, str] = {}
    gradingassets: dict[str, str] = {}
    responsesummary: Optional[str] = None
    generalfeedback: Optional[str] = None
    formatcorrectresponse: Optional[str] = None
    iframes: list[Any] = []

    @computed_field
    @property
    def max_score(self) -> float:
        return self.scoreweights.get("total", 1.0)

    @computed_field
    @property
    def final_score(self) -> float:
        return self.score * self.max_score

    @computed_field
    @property
    def is_correct(self) -> bool:
        return self.score >= 1.0
