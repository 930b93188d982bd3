"""
AI tutoring feedback via the Gemini API.

Feedback is advisory: any failure turns into an unsuccessful
FeedbackResult and never interrupts grading or navigation.
"""

import html
import logging
import os
import re
import time
from typing import Any, Optional

from google import genai
from google.genai import types as genai_types

from stackquest.schemas import FeedbackRequest, FeedbackResult, GradeResponse, RenderResponse
from stackquest.utils.prompt_loader import load_prompt, format_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
UNAVAILABLE_MESSAGE = "AI feedback temporarily unavailable. Please try again later."
MAX_QUESTION_TEXT = 500

_TAG_RE = re.compile(r"<[^>]+>")
_PLACEHOLDER_RE = re.compile(r"\[\[[^\]]*\]\]")


# -----------------------------------------------------------------------------
# Request assembly
# -----------------------------------------------------------------------------

def correct_answer_for(grade: GradeResponse) -> str:
    return (
        grade.formatcorrectresponse
        or grade.generalfeedback
        or grade.responsesummary
        or "No solution provided"
    )


def extract_question_text(render: RenderResponse) -> str:
    """Plain question text: tags and STACK placeholders removed, whitespace collapsed."""
    text = _PLACEHOLDER_RE.sub(" ", render.questionrender)
    text = html.unescape(_TAG_RE.sub(" ", text))
    text = re.sub(r"\s+", " ", text).strip()
    return text[:MAX_QUESTION_TEXT] or "Question text not found"


def describe_question(render: RenderResponse) -> tuple[str, str]:
    """Guess (question_type, additional_context) from rendered inputs."""
    question_type = "Unknown"
    context = ""

    inputs = render.questioninputs.values()
    if any(inp.configuration.get("options") for inp in inputs):
        question_type = "Multiple Choice"
    elif render.questioninputs:
        question_type = "Text/Algebraic Input"

    if "\\(" in render.questionrender or "\\[" in render.questionrender:
        context += " Contains mathematical expressions."

    if render.iframes:
        context += " Contains interactive graph or diagram."
        question_type = "Interactive/Graphical"

    return question_type, context.strip()


def build_feedback_request(
    grade: GradeResponse,
    answers: dict[str, str],
    question_name: Optional[str] = None,
    render: Optional[RenderResponse] = None,
) -> FeedbackRequest:
    """Assemble a FeedbackRequest from a grading result and the rendered question."""
    question_text = "Question text not found"
    question_type, context = "Unknown", ""
    if render is not None:
        question_text = extract_question_text(render)
        question_type, context = describe_question(render)

    return FeedbackRequest(
        user_answers=answers,
        correct_answer=correct_answer_for(grade),
        general_feedback=grade.generalfeedback,
        question_name=question_name,
        question_text=question_text,
        question_type=question_type,
        additional_context=context,
        score=grade.final_score,
        max_score=grade.max_score,
        is_correct=grade.is_correct,
    )


def build_prompt(request: FeedbackRequest, template: Optional[dict[str, Any]] = None) -> tuple[str, str]:
    """Return (system_prompt, user_prompt) for a feedback request."""
    template = template or load_prompt("feedback")
    answers = "\n".join(f"- {name}: {value}" for name, value in request.user_answers.items())
    user_prompt = format_prompt(
        template["user_template"],
        question_name=request.question_name or "(unnamed)",
        question_type=request.question_type,
        question_text=request.question_text,
        additional_context=request.additional_context,
        user_answers=answers or "- (no answers)",
        correct_answer=request.correct_answer,
        general_feedback=request.general_feedback or "(none)",
        score=f"{request.score:.2f}",
        max_score=f"{request.max_score:g}",
        verdict="correct" if request.is_correct else "not fully correct",
    )
    return template["system"], user_prompt


# -----------------------------------------------------------------------------
# Gemini API Client
# -----------------------------------------------------------------------------

class FeedbackClient:
    """Wrapper for Gemini API producing tutoring feedback."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float | None = None,
        client: Any = None,
        template: Optional[dict[str, Any]] = None,
    ):
        self.template = template or load_prompt("feedback")
        self.temperature = (
            temperature if temperature is not None
            else self.template.get("meta", {}).get("temperature", 0.4)
        )
        self.model_name = model

        if client is not None:
            self.client = client
        else:
            self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
            if not self.api_key:
                raise ValueError("GEMINI_API_KEY not set.")
            self.client = genai.Client(api_key=self.api_key)

    def generate(self, system_prompt: str, user_prompt: str, max_retries: int = 3) -> str:
        """Generate text using Gemini API."""
        full_prompt = f"{system_prompt}\n\n---\n\n{user_prompt}"

        for attempt in range(max_retries):
            try:
                response = self.client.models.generate_content(
                    model=self.model_name,
                    contents=full_prompt,
                    config=genai_types.GenerateContentConfig(
                        temperature=self.temperature,
                    )
                )

                if not response.text:
                    raise ValueError("Empty response from API")
                return response.text

            except Exception as e:
                logger.warning(f"API call failed (attempt {attempt + 1}/{max_retries}): {e}")
                if attempt < max_retries - 1:
                    time.sleep(2 ** attempt)
                else:
                    raise

    def request_feedback(self, request: FeedbackRequest, max_retries: int = 3) -> FeedbackResult:
        """Ask the tutor model for feedback on one submission."""
        system_prompt, user_prompt = build_prompt(request, self.template)
        try:
            text = self.generate(system_prompt, user_prompt, max_retries=max_retries)
        except Exception as e:
            logger.error(f"AI feedback error: {e}")
            return FeedbackResult(success=False, error=str(e))
        return FeedbackResult(success=True, feedback=text.strip())
