"""
Runtime configuration for StackQuest.

Values come from the environment, with a project-level .env file loaded
first:

    STACK_API_URL         STACK question service (default http://localhost:3080)
    STACK_API_TIMEOUT     HTTP timeout in seconds (default 30)
    STACKQUEST_DB         Attempt log path (default ~/.stackquest/attempts.db)
    STACKQUEST_QUESTIONS  Optional YAML question sequence
    STACKQUEST_MODEL      Gemini model for tutoring feedback
    GEMINI_API_KEY        API key for tutoring feedback
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from stackquest.classroom.tracking import DEFAULT_TRACKING_DB

PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_STACK_API_URL = "http://localhost:3080"
DEFAULT_MODEL = "gemini-2.5-flash"


class Settings(BaseModel):
    stack_api_url: str = DEFAULT_STACK_API_URL
    stack_api_timeout: float = 30.0
    db_path: Path = DEFAULT_TRACKING_DB
    questions_path: Optional[Path] = None
    model: str = DEFAULT_MODEL
    gemini_api_key: Optional[str] = None


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    questions = os.environ.get("STACKQUEST_QUESTIONS")
    return Settings(
        stack_api_url=os.environ.get("STACK_API_URL", DEFAULT_STACK_API_URL).rstrip("/"),
        stack_api_timeout=float(os.environ.get("STACK_API_TIMEOUT", "30")),
        db_path=Path(os.environ.get("STACKQUEST_DB", str(DEFAULT_TRACKING_DB))).expanduser(),
        questions_path=Path(questions) if questions else None,
        model=os.environ.get("STACKQUEST_MODEL", DEFAULT_MODEL),
        gemini_api_key=os.environ.get("GEMINI_API_KEY") or None,
    )
