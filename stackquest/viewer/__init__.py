"""
StackQuest Viewer - Rendering components for question display.

This module provides:
- STACK question assembly (inputs, plots, feedback slots)
- Score and tutor feedback rendering
- Navigation bar labels
"""

from .question import (
    get_question_css,
    replace_feedback_tags,
    replace_assets,
    build_correct_answers,
    build_question_html,
    render_score,
    render_specific_feedback,
    render_prt_feedback,
    fill_feedback_slots,
    fill_validation_slots,
    RenderedQuestion,
    STACK_STRINGS,
)

from .feedback import (
    format_ai_feedback,
    render_ai_feedback,
)

from .navigation import (
    NavigationLabels,
    get_navigation_labels,
)

__all__ = [
    # Question rendering
    "get_question_css",
    "replace_feedback_tags",
    "replace_assets",
    "build_correct_answers",
    "build_question_html",
    "render_score",
    "render_specific_feedback",
    "render_prt_feedback",
    "fill_feedback_slots",
    "fill_validation_slots",
    "RenderedQuestion",
    "STACK_STRINGS",
    # Feedback
    "format_ai_feedback",
    "render_ai_feedback",
    # Navigation
    "NavigationLabels",
    "get_navigation_labels",
]
