"""
STACK API client - render, validate and grade questions.

The STACK API is a stateless HTTP service: every call posts the full
question definition together with the seed and the student's answers.
"""

import json
import logging
from typing import Any, Optional
from urllib.error import URLError, HTTPError
from urllib.request import Request, urlopen

from stackquest.schemas import (
    QuestionFile,
    StackRequest,
    RenderResponse,
    ValidateResponse,
    GradeResponse,
)

logger = logging.getLogger(__name__)

INPUT_PREFIX = "stackapi_input_"
FEEDBACK_PREFIX = "stackapi_fb_"
VALIDATION_PREFIX = "stackapi_val_"


class StackApiError(Exception):
    """Error message reported by the STACK API."""


def collect_answers(form_values: dict[str, Any], question_prefix: str) -> dict[str, str]:
    """
    Extract answers for one question from submitted form values.

    Keys look like q1_stackapi_input_ans1; the prefix is stripped and
    validation companions (*_val) are dropped.
    """
    full_prefix = question_prefix + INPUT_PREFIX
    answers = {}
    for name, value in form_values.items():
        if not name.startswith(full_prefix) or "_val" in name:
            continue
        if value is None:
            continue
        answers[name[len(full_prefix):]] = str(value)
    return answers


class StackApiClient:
    """Thin JSON-over-HTTP wrapper for the STACK API."""

    def __init__(self, base_url: str = "http://localhost:3080", timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def plot_url(self, file: str) -> str:
        return f"{self.base_url}/plots/{file}"

    def _post(self, endpoint: str, payload: StackRequest) -> dict:
        url = f"{self.base_url}/{endpoint}"
        body = json.dumps(payload.model_dump(exclude_none=True)).encode("utf-8")
        req = Request(url, data=body, headers={"Content-Type": "application/json"}, method="POST")

        try:
            with urlopen(req, timeout=self.timeout) as response:
                text = response.read().decode("utf-8")
        except (URLError, HTTPError) as e:
            logger.error(f"STACK API {endpoint} failed: {e}")
            raise

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StackApiError(text) from e

        if isinstance(data, dict) and data.get("message"):
            logger.warning(f"STACK API {endpoint} error: {data['message']}")
            raise StackApiError(data["message"])
        return data

    def _request(
        self,
        question: QuestionFile,
        answers: Optional[dict[str, str]],
        question_prefix: str,
        seed: Optional[int] = None,
        input_name: Optional[str] = None,
    ) -> StackRequest:
        return StackRequest(
            questionDefinition=question.question_xml,
            answers=answers or {},
            seed=question.seed if seed is None else seed,
            renderInputs=question_prefix + INPUT_PREFIX,
            readOnly=False,
            inputName=input_name,
        )

    def render(
        self,
        question: QuestionFile,
        question_prefix: str = "q1_",
        answers: Optional[dict[str, str]] = None,
    ) -> RenderResponse:
        """Render question text, inputs and sample solution."""
        data = self._post("render", self._request(question, answers, question_prefix))
        return RenderResponse(**data)

    def validate(
        self,
        question: QuestionFile,
        input_name: str,
        answers: dict[str, str],
        question_prefix: str = "q1_",
    ) -> ValidateResponse:
        """Validate a single input while the student is typing."""
        payload = self._request(question, answers, question_prefix, input_name=input_name)
        return ValidateResponse(**self._post("validate", payload))

    def grade(
        self,
        question: QuestionFile,
        answers: dict[str, str],
        seed: Optional[int] = None,
        question_prefix: str = "q1_",
    ) -> GradeResponse:
        """Grade a submission against the seed the question was rendered with."""
        payload = self._request(question, answers, question_prefix, seed=seed)
        return GradeResponse(**self._post("grade", payload))
