"""
Schema validation tests for StackQuest.

Tests all Pydantic models to ensure they validate correctly.
"""

import pytest
from datetime import datetime

from stackquest.schemas import (
    # Question
    Difficulty,
    QuestionDescriptor,
    QuestionFile,
    DEFAULT_QUESTIONS,
    # Progress
    ProgressEntry,
    NavigationState,
    # Stack
    StackRequest,
    RenderResponse,
    GradeResponse,
    # Tracking
    QuestionAttempt,
    # Feedback
    FeedbackRequest,
    FeedbackResult,
)


class TestQuestionSchemas:
    """Test question descriptor schemas."""

    def test_descriptor_minimal(self):
        q = QuestionDescriptor(title="Plot", file_reference="questions/plot.xml")
        assert q.question_name is None
        assert q.topic is None
        assert q.difficulty is None

    def test_descriptor_difficulty_from_string(self):
        q = QuestionDescriptor(
            title="Radio input",
            file_reference="questions/input-sample-questions.xml",
            question_name="Radio",
            topic="inputs",
            difficulty="basic",
        )
        assert q.difficulty == Difficulty.BASIC

    def test_descriptor_invalid_difficulty(self):
        with pytest.raises(ValueError):
            QuestionDescriptor(title="x", file_reference="x.xml", difficulty="expert")

    def test_descriptor_is_immutable(self):
        q = QuestionDescriptor(title="x", file_reference="x.xml")
        with pytest.raises(ValueError):
            q.title = "y"

    def test_default_questions_valid(self):
        descriptors = [QuestionDescriptor(**entry) for entry in DEFAULT_QUESTIONS]
        assert len(descriptors) == 7
        assert descriptors[0].title == "Simple question"
        assert descriptors[2].question_name == "Radio"

    def test_question_file_defaults(self):
        qf = QuestionFile(question_xml="<quiz>\n<question/>\n</quiz>")
        assert qf.found is True
        assert qf.seed is None


class TestProgressSchemas:
    """Test progress-related schemas."""

    def test_progress_entry_defaults(self):
        entry = ProgressEntry(question_index=2)
        assert entry.attempted is True
        assert entry.passed is False
        assert isinstance(entry.timestamp, datetime)

    def test_progress_entry_negative_index(self):
        with pytest.raises(ValueError):
            ProgressEntry(question_index=-1)

    def test_navigation_state_defaults(self):
        state = NavigationState()
        assert state.current_index == 0
        assert state.all_attempted is False
        assert state.adaptive_mode_active is False


class TestStackSchemas:
    """Test STACK API schemas."""

    def test_request_excludes_empty_input_name(self):
        req = StackRequest(questionDefinition="<quiz/>", renderInputs="q1_stackapi_input_")
        dumped = req.model_dump(exclude_none=True)
        assert "inputName" not in dumped
        assert dumped["readOnly"] is False

    def test_render_response_inputs(self):
        render = RenderResponse(
            questionrender="<p>[[input:ans1]]</p>",
            questioninputs={"ans1": {"render": "<input name='q1_stackapi_input_ans1'>",
                                     "samplesolution": {"ans1": "3"}}},
            unknown_field="ignored",
        )
        assert render.questioninputs["ans1"].samplesolution == {"ans1": "3"}

    def test_grade_scores(self):
        grade = GradeResponse(score=0.5, scoreweights={"total": 4, "prt1": 1.0})
        assert grade.max_score == 4
        assert grade.final_score == 2.0
        assert grade.is_correct is False

    def test_grade_full_marks_is_correct(self):
        grade = GradeResponse(score=1.0)
        assert grade.is_correct is True
        assert grade.max_score == 1.0


class TestTrackingSchemas:
    """Test attempt tracking schemas."""

    def test_attempt_number_positive(self):
        with pytest.raises(ValueError):
            QuestionAttempt(
                id=1, session_id=1, question_file="q.xml", question_prefix="q1_",
                attempt_number=0, created_at=datetime.now(),
            )


class TestFeedbackSchemas:
    """Test AI feedback schemas."""

    def test_request_defaults(self):
        req = FeedbackRequest()
        assert req.correct_answer == "No solution provided"
        assert req.question_type == "Unknown"

    def test_result_failure(self):
        result = FeedbackResult(success=False, error="timeout")
        assert result.feedback is None
