"""
AI feedback renderer.
"""

import html
import re

from stackquest.schemas import FeedbackResult
from stackquest.client.feedback import UNAVAILABLE_MESSAGE


def format_ai_feedback(text: str) -> str:
    """Convert **bold**, blank lines and newlines in tutor output to HTML; other markup is escaped."""
    text = html.escape(text)
    text = re.sub(r"\*\*(.*?)\*\*", r"<strong>\1</strong>", text)
    text = text.replace("\n\n", "</p><p>")
    return text.replace("\n", "<br>")


def render_ai_feedback(result: FeedbackResult) -> str:
    """Render a feedback result, or the unavailable notice when it failed."""
    if not result.success or not result.feedback:
        return f'<div class="ai-error">{html.escape(UNAVAILABLE_MESSAGE)}</div>'

    return f"""
    <div class="ai-response-content">
        <div class="ai-response-header">
            <span class="ai-icon">🤖</span>
            <span class="ai-title">AI Tutor Feedback</span>
        </div>
        <div class="ai-response-body">
            <p>{format_ai_feedback(result.feedback)}</p>
        </div>
    </div>
    """
