"""
Navigation tests for StackQuest.

Covers the question sequence, progress tracking, remediation and the
gated navigator.
"""

import random

import pytest

from stackquest.classroom import (
    IndexOutOfRange,
    Navigator,
    NotYetAttempted,
    ProgressTracker,
    QuestionSequence,
    select_next,
)


def make_sequence(topics, difficulties=None) -> QuestionSequence:
    difficulties = difficulties or [None] * len(topics)
    return QuestionSequence.from_config([
        {
            "title": f"Question {i + 1}",
            "file_reference": f"questions/q{i + 1}.xml",
            "topic": topic,
            "difficulty": difficulty,
        }
        for i, (topic, difficulty) in enumerate(zip(topics, difficulties))
    ])


def make_navigator(topics, difficulties=None) -> Navigator:
    sequence = make_sequence(topics, difficulties)
    return Navigator(sequence, ProgressTracker(sequence))


class TestQuestionSequence:
    """Test the read-only question sequence."""

    def test_length_and_get(self):
        seq = make_sequence(["A", "B"])
        assert seq.length() == 2
        assert seq.get(1).title == "Question 2"

    def test_get_out_of_range(self):
        seq = make_sequence(["A", "B"])
        with pytest.raises(IndexOutOfRange):
            seq.get(2)
        with pytest.raises(IndexOutOfRange):
            seq.get(-1)

    def test_out_of_range_is_index_error(self):
        seq = make_sequence(["A"])
        with pytest.raises(IndexError):
            seq.get(5)

    def test_empty_sequence_rejected(self):
        with pytest.raises(ValueError):
            QuestionSequence([])

    def test_default_sequence(self):
        seq = QuestionSequence.default()
        assert seq.length() == 7
        assert seq.get(6).title == "Parsons"

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "sequence.yaml"
        path.write_text(
            "- title: First\n"
            "  file_reference: questions/a.xml\n"
            "  topic: algebra\n"
            "  difficulty: basic\n"
            "- title: Second\n"
            "  file_reference: questions/b.xml\n"
            "  question_name: Matrix\n",
            encoding="utf-8",
        )
        seq = QuestionSequence.from_yaml(path)
        assert seq.length() == 2
        assert seq.get(1).question_name == "Matrix"

    def test_from_yaml_not_a_list(self, tmp_path):
        path = tmp_path / "sequence.yaml"
        path.write_text("title: only one\n", encoding="utf-8")
        with pytest.raises(ValueError):
            QuestionSequence.from_yaml(path)

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            QuestionSequence.from_yaml(tmp_path / "missing.yaml")

    def test_title_at(self):
        seq = make_sequence(["A"])
        assert seq.title_at(0) == "Question 1"
        assert seq.title_at(1) is None
        assert seq.title_at(-1) is None


class TestProgressTracker:
    """Test per-question progress."""

    def test_record_and_query(self):
        seq = make_sequence(["A", "B"])
        progress = ProgressTracker(seq)
        assert not progress.has_attempted(0)
        assert progress.result(0) is None

        progress.record_attempt(0, passed=True, score=1.0)
        assert progress.has_attempted(0)
        assert progress.result(0).passed is True
        assert progress.result(0).score == 1.0

    def test_latest_submission_wins(self):
        seq = make_sequence(["A", "B"])
        progress = ProgressTracker(seq)
        progress.record_attempt(0, passed=False, score=0.0)
        progress.record_attempt(0, passed=True, score=1.0)
        entry = progress.result(0)
        assert entry.passed is True
        assert entry.score == 1.0
        assert progress.attempted_indices() == {0}

    def test_record_is_idempotent(self):
        seq = make_sequence(["A", "B"])
        progress = ProgressTracker(seq)
        progress.record_attempt(1, passed=True, score=0.75)
        before = progress.result(1).model_copy()
        progress.record_attempt(1, passed=True, score=0.75)
        assert progress.result(1) == before

    def test_all_attempted_flag(self):
        seq = make_sequence(["A", "B", "C"])
        progress = ProgressTracker(seq)
        progress.record_attempt(0, True, 1.0)
        progress.record_attempt(2, True, 1.0)
        assert not progress.is_all_attempted()
        progress.record_attempt(1, False, 0.0)
        assert progress.is_all_attempted()

    def test_all_attempted_is_permanent(self):
        seq = make_sequence(["A", "B"])
        progress = ProgressTracker(seq)
        progress.record_attempt(0, True, 1.0)
        progress.record_attempt(1, True, 1.0)
        progress.record_attempt(0, False, 0.0)
        progress.record_attempt(1, False, 0.0)
        assert progress.is_all_attempted()

    def test_record_out_of_range(self):
        seq = make_sequence(["A"])
        progress = ProgressTracker(seq)
        with pytest.raises(IndexOutOfRange):
            progress.record_attempt(1, True, 1.0)

    def test_completion_stats(self):
        seq = make_sequence(["A", "B", "C", "D"])
        progress = ProgressTracker(seq)
        progress.record_attempt(0, True, 1.0)
        progress.record_attempt(1, False, 0.0)
        stats = progress.get_completion_stats()
        assert stats["total_questions"] == 4
        assert stats["attempted"] == 2
        assert stats["passed"] == 1
        assert stats["not_attempted"] == 2
        assert stats["completion_percent"] == 50.0


class TestRemediation:
    """Test selection of the next question."""

    def test_fail_with_only_intermediate_alternative(self):
        nav = make_navigator(["A", "A", "B"], ["basic", "intermediate", "basic"])
        nav.record_result(passed=False, score=0.0)
        assert nav.select_next() == 1
        assert nav.adaptive_mode_active is False

    def test_fail_prefers_basic_alternative(self):
        nav = make_navigator(["A", "A", "A"], ["intermediate", "advanced", "basic"])
        nav.record_result(passed=False, score=0.0)
        assert nav.select_next() == 2
        assert nav.adaptive_mode_active is True

    def test_fail_next_is_basic_same_topic(self):
        nav = make_navigator(["A", "A", "B"], ["intermediate", "basic", "basic"])
        nav.record_result(passed=False, score=0.0)
        assert nav.select_next() == 1

    def test_adaptive_when_remediation_skips_ahead(self):
        nav = make_navigator(["A", "B", "A"], ["basic", "basic", "basic"])
        nav.record_result(passed=False, score=0.0)
        assert nav.select_next() == 2
        assert nav.adaptive_mode_active is True

    def test_pass_progresses_normally(self):
        nav = make_navigator(["A", "A", "B"], ["basic", "intermediate", "basic"])
        nav.record_result(passed=True, score=1.0)
        assert nav.select_next() == 1
        assert nav.adaptive_mode_active is False

    def test_fail_last_question_repeats(self):
        nav = make_navigator(["A", "A", "B"], ["basic", "intermediate", "basic"])
        nav.jump_to(2)
        nav.record_result(passed=False, score=0.0)
        assert nav.select_next() == 2
        assert nav.adaptive_mode_active is True

    def test_attempted_candidates_skipped(self):
        nav = make_navigator(["A", "A", "A", "A"], ["advanced", "basic", "intermediate", "basic"])
        nav.progress.record_attempt(1, True, 1.0)
        nav.record_result(passed=False, score=0.0)
        assert nav.select_next() == 3

    def test_earlier_candidates_considered(self):
        nav = make_navigator(["A", "B", "A"], ["basic", "basic", "advanced"])
        nav.jump_to(2)
        nav.record_result(passed=False, score=0.0)
        assert nav.select_next() == 0

    def test_question_without_topic_repeats(self):
        nav = make_navigator([None, None])
        nav.record_result(passed=False, score=0.0)
        assert nav.select_next() == 0

    def test_select_next_function_is_pure(self):
        seq = make_sequence(["A", "A"], ["intermediate", "basic"])
        progress = ProgressTracker(seq)
        progress.record_attempt(0, False, 0.0)
        choice = select_next(seq, progress, 0)
        assert choice.index == 1
        assert choice.adaptive is False
        assert select_next(seq, progress, 0) == choice


class TestNavigator:
    """Test gated navigation."""

    def test_starts_at_first_question(self):
        nav = make_navigator(["A", "B"])
        assert nav.current_index == 0
        assert nav.current_question.title == "Question 1"

    def test_forward_blocked_until_attempted(self):
        nav = make_navigator(["A", "B", "C"])
        with pytest.raises(NotYetAttempted):
            nav.forward()
        assert nav.current_index == 0
        assert nav.is_forward_allowed() is False

    def test_forward_after_attempt(self):
        nav = make_navigator(["A", "B", "C"])
        nav.record_result(passed=True, score=1.0)
        assert nav.is_forward_allowed() is True
        event = nav.forward()
        assert event.index == 1
        assert nav.current_index == 1

    def test_forward_at_last_question_is_noop(self):
        nav = make_navigator(["A", "B"])
        nav.jump_to(1)
        nav.record_result(passed=True, score=1.0)
        assert nav.forward() is None
        assert nav.current_index == 1
        assert nav.is_forward_allowed() is False

    def test_failed_last_question_can_repeat(self):
        nav = make_navigator(["A", "B"])
        nav.jump_to(1)
        nav.record_result(passed=False, score=0.0)
        assert nav.is_forward_allowed() is True
        event = nav.forward()
        assert event.index == 1
        assert event.adaptive is True

    def test_adaptive_only_on_forward_events(self):
        nav = make_navigator(["A", "B", "A"], ["basic", "basic", "basic"])
        nav.record_result(passed=False, score=0.0)
        event = nav.forward()
        assert event.index == 2
        assert event.adaptive is True

        event = nav.jump_to(1)
        assert event.adaptive is False
        event = nav.backward()
        assert event.action == "backward"
        assert event.adaptive is False

    def test_next_title_follows_remediation(self):
        nav = make_navigator(["A", "B", "A"], ["intermediate", "basic", "basic"])
        assert nav.get_next_title() == "Question 2"
        nav.record_result(passed=False, score=0.0)
        assert nav.peek_next() == 2
        assert nav.get_next_title() == "Question 3"
        assert nav.adaptive_mode_active is False

    def test_backward_never_gated(self):
        nav = make_navigator(["A", "B", "C"])
        nav.jump_to(2)
        event = nav.backward()
        assert event.index == 1
        assert nav.is_backward_allowed() is True

    def test_backward_at_first_question(self):
        nav = make_navigator(["A", "B"])
        assert nav.is_backward_allowed() is False
        assert nav.backward() is None
        assert nav.current_index == 0

    def test_jump_to_out_of_range(self):
        nav = make_navigator(["A", "B"])
        with pytest.raises(IndexOutOfRange):
            nav.jump_to(2)
        assert nav.current_index == 0

    def test_free_navigation_after_all_attempted(self):
        nav = make_navigator(["A", "B", "C"])
        for idx in range(3):
            nav.record_result(passed=True, score=1.0, index=idx)
        nav.jump_to(0)
        nav.forward()
        assert nav.current_index == 1
        assert nav.get_state().all_attempted is True

    def test_listener_receives_descriptor(self):
        nav = make_navigator(["A", "B"])
        events = []
        nav.subscribe(events.append)
        nav.jump_to(1)
        assert len(events) == 1
        assert events[0].file_reference == "questions/q2.xml"
        assert events[0].question_name is None
        assert events[0].action == "jump"

    def test_unsubscribe(self):
        nav = make_navigator(["A", "B"])
        events = []
        nav.subscribe(events.append)
        nav.unsubscribe(events.append)
        nav.jump_to(1)
        assert events == []

    def test_no_event_when_forward_blocked(self):
        nav = make_navigator(["A", "B"])
        events = []
        nav.subscribe(events.append)
        with pytest.raises(NotYetAttempted):
            nav.forward()
        assert events == []

    def test_neighbour_titles(self):
        nav = make_navigator(["A", "B", "C"])
        assert nav.get_previous_title() is None
        assert nav.get_next_title() == "Question 2"
        nav.jump_to(2)
        assert nav.get_previous_title() == "Question 2"
        assert nav.get_next_title() is None

    def test_independent_instances(self):
        first = make_navigator(["A", "B"])
        second = make_navigator(["A", "B"])
        first.record_result(passed=True, score=1.0)
        first.forward()
        assert second.current_index == 0
        assert not second.progress.has_attempted(0)

    def test_mismatched_tracker_rejected(self):
        seq = make_sequence(["A"])
        other = make_sequence(["A"])
        with pytest.raises(ValueError):
            Navigator(seq, ProgressTracker(other))

    def test_progress_summary(self):
        nav = make_navigator(["A", "B"])
        nav.record_result(passed=True, score=1.0)
        summary = nav.get_progress_summary()
        assert summary["attempted"] == 1
        assert summary["current_position"] == 1
        assert summary["current_title"] == "Question 1"

    def test_index_stays_in_range_under_random_actions(self):
        rng = random.Random(1234)
        for _ in range(50):
            length = rng.randint(1, 6)
            topics = [rng.choice(["A", "B", None]) for _ in range(length)]
            difficulties = [rng.choice(["basic", "intermediate", "advanced", None]) for _ in range(length)]
            nav = make_navigator(topics, difficulties)

            for _ in range(40):
                action = rng.choice(["forward", "backward", "jump", "record"])
                if action == "forward":
                    try:
                        nav.forward()
                    except NotYetAttempted:
                        pass
                elif action == "backward":
                    nav.backward()
                elif action == "jump":
                    nav.jump_to(rng.randrange(length))
                else:
                    nav.record_result(passed=rng.random() < 0.5, score=rng.random())
                assert 0 <= nav.current_index < length

    def test_blocked_forward_leaves_state_unchanged(self):
        nav = make_navigator(["A", "B", "C"])
        nav.record_result(passed=False, score=0.0, index=0)
        nav.jump_to(1)
        state_before = nav.get_state()
        with pytest.raises(NotYetAttempted):
            nav.forward()
        assert nav.get_state() == state_before
