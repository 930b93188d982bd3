"""
Attempt export tests.
"""

import pytest

from scripts.export_attempts import load_attempts, summarize_attempts
from stackquest.classroom import AttemptLog


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "attempts.db"
    log = AttemptLog(path)

    alice = log.start_session(anonymous_id="anon_1_alice")
    bob = log.start_session(anonymous_id="anon_2_bob")

    a1 = log.create_attempt(alice.id, "questions/a.xml", "q1_")
    log.update_attempt(a1.id, score=0.0, max_score=1.0, is_correct=False)
    a2 = log.create_attempt(alice.id, "questions/a.xml", "q1_")
    log.update_attempt(a2.id, score=1.0, max_score=1.0, is_correct=True)
    b1 = log.create_attempt(bob.id, "questions/a.xml", "q1_")
    log.update_attempt(b1.id, score=1.0, max_score=1.0, is_correct=True)

    r1 = log.create_attempt(bob.id, "questions/b.xml", "q1_", question_name="Radio")
    log.update_attempt(r1.id, score=0.5, max_score=1.0, is_correct=False)

    # Rendered but never submitted
    log.create_attempt(bob.id, "questions/b.xml", "q1_", question_name="Radio")
    return path


class TestExportAttempts:

    def test_load_attempts(self, db_path):
        df = load_attempts(db_path)
        assert len(df) == 5
        assert set(df["anonymous_id"]) == {"anon_1_alice", "anon_2_bob"}

    def test_missing_database(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_attempts(tmp_path / "missing.db")

    def test_summary(self, db_path):
        summary = summarize_attempts(load_attempts(db_path))
        assert len(summary) == 2

        first = summary.iloc[0]
        assert first["question_file"] == "questions/a.xml"
        assert first["attempts"] == 3
        assert first["students"] == 2
        assert first["mean_score"] == pytest.approx(0.67)
        assert first["pass_rate"] == pytest.approx(66.7)

        radio = summary.iloc[1]
        assert radio["question_name"] == "Radio"
        assert radio["attempts"] == 1
        assert radio["pass_rate"] == 0.0
