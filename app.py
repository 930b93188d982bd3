"""
StackQuest - STACK Math Question Practice

Streamlit application that walks a student through a sequence of STACK
questions, grades answers via the STACK API, records attempts, and asks an
LLM for tutoring feedback.

Usage:
    streamlit run app.py
"""

import logging
from pathlib import Path
from urllib.error import URLError

import streamlit as st

from stackquest.config import load_settings
from stackquest.classroom import (
    AttemptLog,
    Navigator,
    NavigationEvent,
    NotYetAttempted,
    ProgressTracker,
    QuestionSequence,
    generate_anonymous_id,
    process_grade,
    record_validation,
)
from stackquest.client import (
    FeedbackClient,
    StackApiClient,
    StackApiError,
    build_feedback_request,
    collect_answers,
    read_question_file,
    INPUT_PREFIX,
)
from stackquest.viewer import (
    build_question_html,
    fill_feedback_slots,
    fill_validation_slots,
    get_navigation_labels,
    get_question_css,
    render_ai_feedback,
    render_prt_feedback,
    render_score,
    render_specific_feedback,
    STACK_STRINGS,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).parent
QUESTION_PREFIX = "q1_"

st.set_page_config(
    page_title="StackQuest",
    page_icon="🧮",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "settings" not in st.session_state:
        st.session_state.settings = load_settings()
    settings = st.session_state.settings

    if "navigator" not in st.session_state:
        if settings.questions_path:
            sequence = QuestionSequence.from_yaml(settings.questions_path)
        else:
            sequence = QuestionSequence.default()
        navigator = Navigator(sequence, ProgressTracker(sequence))
        navigator.subscribe(on_question_change)
        st.session_state.navigator = navigator
        reset_question_state()
        navigator.jump_to(0)

    if "stack_client" not in st.session_state:
        st.session_state.stack_client = StackApiClient(
            settings.stack_api_url, timeout=settings.stack_api_timeout
        )

    if "attempt_log" not in st.session_state:
        st.session_state.attempt_log = AttemptLog(settings.db_path)
        session = st.session_state.attempt_log.start_session(
            anonymous_id=generate_anonymous_id(),
            page_url="streamlit://stackquest",
        )
        st.session_state.tracking_session_id = session.id

    if "feedback_client" not in st.session_state:
        if settings.gemini_api_key:
            st.session_state.feedback_client = FeedbackClient(
                api_key=settings.gemini_api_key, model=settings.model
            )
        else:
            logger.warning("GEMINI_API_KEY not set; AI feedback disabled")
            st.session_state.feedback_client = None


def reset_question_state():
    """Forget the loaded question so the next run renders a fresh one."""
    st.session_state.question_file = None
    st.session_state.render = None
    st.session_state.rendered = None
    st.session_state.grade = None
    st.session_state.feedback = None
    st.session_state.validations = {}
    st.session_state.current_attempt_id = None
    for key in [k for k in st.session_state.keys() if str(k).startswith(QUESTION_PREFIX + INPUT_PREFIX)]:
        del st.session_state[key]


def on_question_change(event: NavigationEvent):
    """Navigator listener: drop the old question, render the new one on next run."""
    reset_question_state()
    st.session_state.adaptive_notice = event.adaptive


# -----------------------------------------------------------------------------
# STACK API
# -----------------------------------------------------------------------------

def load_current_question():
    """Read the current question file, draw a seed and render it."""
    nav = st.session_state.navigator
    client = st.session_state.stack_client
    question = nav.current_question

    try:
        question_file = read_question_file(
            PROJECT_ROOT / question.file_reference, question.question_name
        )
        if not question_file.found:
            st.error(f"Question not found in {question.file_reference}")
            return
        render = client.render(question_file, QUESTION_PREFIX)
    except FileNotFoundError as e:
        st.error(str(e))
        return
    except StackApiError as e:
        st.error(str(e))
        return
    except URLError as e:
        st.error(f"Could not reach the STACK API at {client.base_url}: {e}")
        return

    st.session_state.question_file = question_file
    st.session_state.render = render
    st.session_state.rendered = build_question_html(render, QUESTION_PREFIX, client.plot_url)


def current_answers() -> dict[str, str]:
    return collect_answers(st.session_state.to_dict(), QUESTION_PREFIX)


def validate_input(name: str):
    """Input callback: ask STACK how it reads the student's expression."""
    question_file = st.session_state.question_file
    if question_file is None:
        return

    answers = current_answers()
    try:
        result = st.session_state.stack_client.validate(
            question_file, name, answers, QUESTION_PREFIX
        )
    except (StackApiError, URLError) as e:
        logger.warning(f"Validation of {name} failed: {e}")
        st.session_state.validations[name] = ""
        return

    st.session_state.validations[name] = result.validation
    record_validation(
        st.session_state.attempt_log,
        st.session_state.current_attempt_id,
        name,
        answers.get(name, ""),
        result,
    )


def submit_answers(answers: dict[str, str]):
    """Grade answers, record the attempt and request tutor feedback."""
    nav = st.session_state.navigator
    client = st.session_state.stack_client
    question_file = st.session_state.question_file

    try:
        grade = client.grade(question_file, answers, seed=question_file.seed,
                             question_prefix=QUESTION_PREFIX)
    except (StackApiError, URLError) as e:
        st.error(str(e))
        return

    outcome = process_grade(
        nav,
        grade,
        answers=answers,
        attempt_log=st.session_state.attempt_log,
        session_id=st.session_state.tracking_session_id,
        seed=question_file.seed,
        question_prefix=QUESTION_PREFIX,
    )
    if not outcome.accepted:
        st.warning(outcome.message)
        return

    st.session_state.grade = grade
    if outcome.attempt is not None:
        st.session_state.current_attempt_id = outcome.attempt.id

    feedback_client = st.session_state.feedback_client
    if feedback_client is not None:
        request = build_feedback_request(
            grade, answers, nav.current_question.question_name, st.session_state.render
        )
        with st.spinner("AI is analyzing your response..."):
            st.session_state.feedback = feedback_client.request_feedback(request)


# -----------------------------------------------------------------------------
# Sidebar: Question List
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with the question list and progress."""
    st.sidebar.title("🧮 StackQuest")

    nav = st.session_state.navigator
    progress = nav.progress
    stats = nav.get_progress_summary()

    st.sidebar.markdown(
        f"**Progress:** {stats['attempted']}/{stats['total_questions']} attempted, "
        f"{stats['passed']} passed"
    )
    st.sidebar.progress(stats['completion_percent'] / 100)

    st.sidebar.divider()
    st.sidebar.subheader("Questions")

    for idx, question in enumerate(nav.sequence):
        entry = progress.result(idx)
        if idx == nav.current_index:
            indicator = "→"
        elif entry is None:
            indicator = "○"
        elif entry.passed:
            indicator = "✓"
        else:
            indicator = "✗"

        col1, col2 = st.sidebar.columns([1, 9])
        with col1:
            st.markdown(indicator)
        with col2:
            if st.button(question.title, key=f"question_{idx}", use_container_width=True):
                nav.jump_to(idx)
                st.rerun()


# -----------------------------------------------------------------------------
# Main Content: Question View
# -----------------------------------------------------------------------------

def render_navigation_bar():
    """Render navigation bar with prev/next buttons."""
    nav = st.session_state.navigator
    labels = get_navigation_labels(nav)
    pos, total = nav.get_position()

    col1, col2, col3 = st.columns([1, 2, 1])

    with col1:
        if st.button(labels.previous_label, disabled=not labels.previous_enabled,
                     use_container_width=True):
            nav.backward()
            st.rerun()

    with col2:
        st.markdown(f"<center>Question {pos} of {total}</center>", unsafe_allow_html=True)

    with col3:
        if st.button(labels.next_label, help=labels.next_hint,
                     disabled=not labels.next_enabled, use_container_width=True):
            try:
                if nav.forward() is not None:
                    st.rerun()
            except NotYetAttempted as e:
                st.warning(f"⚠️ {e}")

    if st.session_state.get("adaptive_notice"):
        st.info("This question was picked to help you practise the topic you just missed.")

    st.divider()


def render_question_view():
    """Render the current question, answer inputs and grading results."""
    nav = st.session_state.navigator
    question = nav.current_question

    render_navigation_bar()
    st.title(question.title)

    if st.session_state.rendered is None:
        load_current_question()
    rendered = st.session_state.rendered
    if rendered is None:
        return

    grade = st.session_state.grade
    question_html = rendered.question_html
    if grade is not None:
        prt_feedback = render_prt_feedback(grade, st.session_state.stack_client.plot_url)
        question_html = fill_feedback_slots(question_html, prt_feedback, QUESTION_PREFIX)
    question_html = fill_validation_slots(question_html, st.session_state.validations, QUESTION_PREFIX)

    st.markdown(get_question_css(), unsafe_allow_html=True)
    st.markdown(f'<div class="formulation">{question_html}</div>', unsafe_allow_html=True)

    for name in rendered.input_names:
        if name == "remember":
            continue
        st.text_input(
            name,
            key=f"{QUESTION_PREFIX}{INPUT_PREFIX}{name}",
            on_change=validate_input,
            args=(name,),
        )

    if st.button("Submit Answers", type="primary"):
        submit_answers(current_answers())
        st.rerun()

    if st.button("Show new example question"):
        reset_question_state()
        st.rerun()

    if grade is not None:
        render_results(grade, rendered)


def render_results(grade, rendered):
    """Render score, feedback and correct answers after submission."""
    client = st.session_state.stack_client

    st.subheader(f"{STACK_STRINGS['score']}: {render_score(grade)}")

    specific = render_specific_feedback(grade, QUESTION_PREFIX, client.plot_url)
    if specific:
        st.markdown(f'<div class="feedback">{specific}</div>', unsafe_allow_html=True)

    if rendered.general_feedback_html:
        st.subheader(STACK_STRINGS["generalfeedback"])
        st.markdown(f'<div class="feedback">{rendered.general_feedback_html}</div>',
                    unsafe_allow_html=True)

    if rendered.correct_answers_html:
        st.subheader(STACK_STRINGS["api_correct"])
        st.markdown(f'<div class="feedback">{rendered.correct_answers_html}</div>',
                    unsafe_allow_html=True)

    feedback = st.session_state.feedback
    if feedback is not None:
        st.subheader("🤖 AI Tutor Feedback")
        st.markdown(render_ai_feedback(feedback), unsafe_allow_html=True)


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()
    render_question_view()


if __name__ == "__main__":
    main()
