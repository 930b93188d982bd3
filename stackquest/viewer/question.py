"""
Question renderer - Assemble STACK API output into displayable HTML.

Provides:
- Input, validation and feedback placeholder substitution
- Plot asset URL rewriting
- Correct-answer summaries
- Score and per-part (PRT) feedback after grading
"""

import re
from dataclasses import dataclass
from typing import Callable

from stackquest.client.stack_api import FEEDBACK_PREFIX, VALIDATION_PREFIX
from stackquest.schemas import GradeResponse, RenderResponse, StackInput

PlotUrl = Callable[[str], str]

STACK_STRINGS = {
    "teacheranswershow_mcq": "A correct answer is: {display}",
    "api_which_typed": "which can be typed as follows",
    "api_valid_all_parts": "Please enter valid answers for all parts of the question.",
    "api_out_of": "out of",
    "api_marks_sub": "Marks for this submission",
    "generalfeedback": "General feedback",
    "score": "Score",
    "api_response": "Response summary",
    "api_correct": "Correct answers",
}

# Inputs that only carry state between submissions
HIDDEN_INPUTS = {"remember"}

_FEEDBACK_TAG_RE = re.compile(r"\[\[feedback:(.*?)\]\]")


@dataclass
class RenderedQuestion:
    """Question ready for display."""
    question_html: str
    correct_answers_html: str
    general_feedback_html: str
    input_names: list[str]


def get_question_css() -> str:
    """Get CSS styles for question display."""
    return """
    <style>
    .formulation {
        background: #f7f9fc;
        border-radius: 8px;
        padding: 1em 1.2em;
        line-height: 1.6;
    }
    .feedback {
        background: #fff8e1;
        border-left: 4px solid #FFA000;
        border-radius: 6px;
        padding: 0.8em 1em;
        margin: 0.8em 0;
    }
    .validation {
        display: block;
        color: #555;
        font-size: 0.9em;
        margin-top: 0.3em;
    }
    .correct-answer {
        font-family: monospace;
        background: #e8f5e9;
        padding: 0.1em 0.4em;
        border-radius: 4px;
    }
    </style>
    """


def replace_feedback_tags(text: str, question_prefix: str) -> str:
    """Replace [[feedback:part]] tags with named placeholder divs."""
    return _FEEDBACK_TAG_RE.sub(
        lambda m: f"<div name='{question_prefix}{FEEDBACK_PREFIX}{m.group(1)}'></div>",
        text,
    )


def replace_assets(text: str, assets: dict[str, str], plot_url: PlotUrl) -> str:
    """Point Moodle plot filenames at the STACK API plot endpoint."""
    for name, file in assets.items():
        text = text.replace(name, plot_url(file))
    return text


def _option_text(inp: StackInput, solution) -> str | None:
    options = inp.configuration.get("options")
    if not options:
        return None
    if isinstance(options, dict):
        return options.get(str(solution), options.get(solution))
    try:
        return options[int(solution)]
    except (ValueError, IndexError, TypeError):
        return None


def build_correct_answers(render: RenderResponse) -> str:
    """
    HTML summary of correct answers.

    Algebraic inputs show the model answer and how to type it;
    dropdowns, radio buttons etc. show only the correct option.
    """
    parts = []
    for name, inp in render.questioninputs.items():
        if name in HIDDEN_INPUTS:
            continue
        if inp.samplesolutionrender:
            display = f"\\[{{{inp.samplesolutionrender}}}\\]"
            typed = "".join(
                f"<span class='correct-answer'>{solution}</span>"
                for key, solution in inp.samplesolution.items()
                if "_val" not in key
            )
            parts.append(
                f"<p>{STACK_STRINGS['teacheranswershow_mcq'].format(display=display)}, "
                f"{STACK_STRINGS['api_which_typed']}: {typed}.</p>"
            )
        else:
            for solution in inp.samplesolution.values():
                text = _option_text(inp, solution)
                if text is not None:
                    parts.append(f"<p class='correct-answer'>{text}</p>")
    return "".join(parts)


def build_question_html(
    render: RenderResponse,
    question_prefix: str,
    plot_url: PlotUrl,
) -> RenderedQuestion:
    """
    Assemble a rendered question.

    Args:
        render: Response from the STACK /render endpoint
        question_prefix: Prefix for element names (e.g. "q1_")
        plot_url: Maps a plot file name to its URL

    Returns:
        RenderedQuestion with question, correct answer and general feedback HTML
    """
    question = render.questionrender
    for name, inp in render.questioninputs.items():
        question = question.replace(f"[[input:{name}]]", inp.render, 1)
        question = question.replace(
            f"[[validation:{name}]]",
            f"<span name='{question_prefix}{VALIDATION_PREFIX}{name}'></span>",
            1,
        )

    correct = build_correct_answers(render)
    general = render.questionsamplesolutiontext or ""

    question = replace_assets(question, render.questionassets, plot_url)
    correct = replace_assets(correct, render.questionassets, plot_url)
    general = replace_assets(general, render.questionassets, plot_url)

    return RenderedQuestion(
        question_html=replace_feedback_tags(question, question_prefix),
        correct_answers_html=correct,
        general_feedback_html=replace_feedback_tags(general, question_prefix) if general else "",
        input_names=list(render.questioninputs),
    )


# -----------------------------------------------------------------------------
# Grading output
# -----------------------------------------------------------------------------

def render_score(grade: GradeResponse) -> str:
    """Score line, e.g. '0.50 out of 1'."""
    return f"{grade.final_score:.2f} {STACK_STRINGS['api_out_of']} {grade.max_score:g}"


def render_specific_feedback(grade: GradeResponse, question_prefix: str, plot_url: PlotUrl) -> str:
    if not grade.specificfeedback:
        return ""
    text = replace_assets(grade.specificfeedback, grade.gradingassets, plot_url)
    return replace_feedback_tags(text, question_prefix)


def render_prt_feedback(grade: GradeResponse, plot_url: PlotUrl) -> dict[str, str]:
    """Feedback HTML per potential response tree, with marks where scored."""
    total = grade.max_score
    result = {}
    for name, feedback in grade.prts.items():
        feedback = replace_assets(feedback or "", grade.gradingassets, plot_url)
        if name in grade.scores:
            weight = grade.scoreweights.get(name, 0.0)
            earned = grade.scores[name] * weight * total
            available = weight * total
            feedback += (
                f"<div>{STACK_STRINGS['api_marks_sub']}: "
                f"{earned:.2f} / {available:.2f}.</div>"
            )
        result[name] = feedback
    return result


def fill_feedback_slots(html_text: str, prt_feedback: dict[str, str], question_prefix: str) -> str:
    """Insert PRT feedback into the placeholder divs created by replace_feedback_tags."""
    for name, feedback in prt_feedback.items():
        slot = f"<div name='{question_prefix}{FEEDBACK_PREFIX}{name}'></div>"
        filled = f"<div name='{question_prefix}{FEEDBACK_PREFIX}{name}' class='feedback'>{feedback}</div>"
        html_text = html_text.replace(slot, filled if feedback else slot)
    return html_text


def fill_validation_slots(html_text: str, validations: dict[str, str], question_prefix: str) -> str:
    """Insert /validate output into the spans left by [[validation:name]]."""
    for name, validation in validations.items():
        slot = f"<span name='{question_prefix}{VALIDATION_PREFIX}{name}'></span>"
        if validation:
            filled = f"<span name='{question_prefix}{VALIDATION_PREFIX}{name}' class='validation'>{validation}</span>"
            html_text = html_text.replace(slot, filled)
    return html_text
