"""
Question schemas for StackQuest.

Defines Pydantic models for the question sequence:
- Difficulty tiers used by remediation
- Question descriptors (static metadata for one question)
- Loaded STACK question files
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from enum import Enum


class Difficulty(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class QuestionDescriptor(BaseModel):
    """Static metadata for one question. Never mutated after load."""
    model_config = ConfigDict(frozen=True)

    title: str
    file_reference: str               # path to STACK question XML
    question_name: Optional[str] = None  # <name> of the question inside the file
    topic: Optional[str] = None
    difficulty: Optional[Difficulty] = None


class QuestionFile(BaseModel):
    """A single STACK question extracted from a question XML file."""
    question_xml: str        # wrapped in <quiz>...</quiz>
    seed: Optional[int] = None
    found: bool = True


# -----------------------------------------------------------------------------
# Default sequence (STACK sample questions)
# -----------------------------------------------------------------------------

DEFAULT_QUESTIONS: list[dict] = [
    {
        "title": "Simple question",
        "file_reference": "questions/Partial fraction decomposition.xml",
        "topic": "algebra",
        "difficulty": "basic",
    },
    {
        "title": "Matrix input",
        "file_reference": "questions/input-sample-questions.xml",
        "question_name": "Matrix",
        "topic": "inputs",
        "difficulty": "intermediate",
    },
    {
        "title": "Radio input",
        "file_reference": "questions/input-sample-questions.xml",
        "question_name": "Radio",
        "topic": "inputs",
        "difficulty": "basic",
    },
    {
        "title": "Reveal block",
        "file_reference": "questions/Reveal_block_example.xml",
        "topic": "algebra",
        "difficulty": "intermediate",
    },
    {
        "title": "Plot",
        "file_reference": "questions/Graphs of many to one functions.xml",
        "topic": "functions",
        "difficulty": "intermediate",
    },
    {
        "title": "JSXGraph",
        "file_reference": "questions/JSXGraph-behat.xml",
        "topic": "functions",
        "difficulty": "advanced",
    },
    {
        "title": "Parsons",
        "file_reference": "questions/Parsons-examples.xml",
        "question_name": "irrational-power-irrational (illustrates re-use of strings)",
        "topic": "proof",
        "difficulty": "advanced",
    },
]
