"""
AttemptLog - Record learning sessions, question attempts and inputs.

Stored in ~/.stackquest/attempts.db:
- learning_sessions: one row per visit, keyed by an anonymous id
- question_attempts: one row per graded submission, numbered per question
- input_tracking: answers captured for an attempt
"""

import random
import sqlite3
import string
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from stackquest.schemas import LearningSession, QuestionAttempt, InputRecord


DEFAULT_TRACKING_DIR = Path.home() / ".stackquest"
DEFAULT_TRACKING_DB = DEFAULT_TRACKING_DIR / "attempts.db"

_BASE36 = string.digits + string.ascii_lowercase


def generate_anonymous_id(rng: Optional[random.Random] = None) -> str:
    """Anonymous user id of the form anon_<epoch ms>_<9 base36 chars>."""
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_BASE36) for _ in range(9))
    return f"anon_{int(time.time() * 1000)}_{suffix}"


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class AttemptLog:
    """
    Relational attempt history in SQLite.

    Each method opens its own connection, so one AttemptLog can be shared
    by several Streamlit sessions.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize attempt log.

        Args:
            db_path: Path to attempts.db (default: ~/.stackquest/attempts.db)
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_TRACKING_DB
        self._ensure_database()

    def _ensure_database(self):
        """Create database and tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS learning_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    anonymous_id TEXT NOT NULL,
                    page_url TEXT,
                    user_agent TEXT,
                    session_start TEXT NOT NULL,
                    session_end TEXT
                );

                CREATE TABLE IF NOT EXISTS question_attempts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id INTEGER NOT NULL REFERENCES learning_sessions(id),
                    question_file TEXT NOT NULL,
                    question_name TEXT,
                    question_prefix TEXT NOT NULL,
                    seed INTEGER,
                    attempt_number INTEGER NOT NULL DEFAULT 1,
                    score REAL,
                    max_score REAL,
                    is_correct INTEGER,
                    created_at TEXT NOT NULL,
                    submitted_at TEXT
                );

                CREATE TABLE IF NOT EXISTS input_tracking (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    attempt_id INTEGER NOT NULL REFERENCES question_attempts(id),
                    session_id INTEGER NOT NULL REFERENCES learning_sessions(id),
                    input_name TEXT NOT NULL,
                    input_value TEXT,
                    input_type TEXT,
                    is_final_answer INTEGER NOT NULL DEFAULT 0,
                    validation_result TEXT,
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_attempts_session
                ON question_attempts(session_id);

                CREATE INDEX IF NOT EXISTS idx_inputs_attempt
                ON input_tracking(attempt_id);
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def start_session(
        self,
        anonymous_id: Optional[str] = None,
        page_url: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> LearningSession:
        """Create a learning session."""
        conn = self._get_connection()
        try:
            now = datetime.now().isoformat()
            cursor = conn.execute(
                """INSERT INTO learning_sessions (anonymous_id, page_url, user_agent, session_start)
                   VALUES (?, ?, ?, ?)""",
                (anonymous_id or generate_anonymous_id(), page_url, user_agent, now)
            )
            conn.commit()
            session_id = cursor.lastrowid
        finally:
            conn.close()
        return self.get_session(session_id)

    def get_session(self, session_id: int) -> LearningSession:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                """SELECT id, anonymous_id, page_url, user_agent, session_start, session_end
                   FROM learning_sessions WHERE id = ?""",
                (session_id,)
            )
            row = cursor.fetchone()
            if not row:
                raise KeyError(f"Learning session not found: {session_id}")
            return LearningSession(
                id=row["id"],
                anonymous_id=row["anonymous_id"],
                page_url=row["page_url"],
                user_agent=row["user_agent"],
                session_start=_parse_time(row["session_start"]),
                session_end=_parse_time(row["session_end"]),
            )
        finally:
            conn.close()

    def end_session(self, session_id: int) -> LearningSession:
        """Stamp the end time of a session."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "UPDATE learning_sessions SET session_end = ? WHERE id = ?",
                (datetime.now().isoformat(), session_id)
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise KeyError(f"Learning session not found: {session_id}")
        finally:
            conn.close()
        return self.get_session(session_id)

    # -------------------------------------------------------------------------
    # Attempts
    # -------------------------------------------------------------------------

    def create_attempt(
        self,
        session_id: int,
        question_file: str,
        question_prefix: str,
        question_name: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> QuestionAttempt:
        """
        Create an attempt record.

        attempt_number counts attempts at the same question prefix within
        the session, starting at 1.
        """
        self.get_session(session_id)

        conn = self._get_connection()
        try:
            cursor = conn.execute(
                """SELECT COALESCE(MAX(attempt_number), 0) AS last
                   FROM question_attempts
                   WHERE session_id = ? AND question_prefix = ?""",
                (session_id, question_prefix)
            )
            attempt_number = cursor.fetchone()["last"] + 1

            cursor = conn.execute(
                """INSERT INTO question_attempts
                     (session_id, question_file, question_name, question_prefix,
                      seed, attempt_number, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (session_id, question_file, question_name or None, question_prefix,
                 seed, attempt_number, datetime.now().isoformat())
            )
            conn.commit()
            attempt_id = cursor.lastrowid
        finally:
            conn.close()
        return self.get_attempt(attempt_id)

    def update_attempt(
        self,
        attempt_id: int,
        score: float,
        max_score: float,
        is_correct: bool,
    ) -> QuestionAttempt:
        """Store submission results on an attempt."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                """UPDATE question_attempts
                   SET submitted_at = ?, score = ?, max_score = ?, is_correct = ?
                   WHERE id = ?""",
                (datetime.now().isoformat(), score, max_score, int(is_correct), attempt_id)
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise KeyError(f"Question attempt not found: {attempt_id}")
        finally:
            conn.close()
        return self.get_attempt(attempt_id)

    def get_attempt(self, attempt_id: int) -> QuestionAttempt:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT * FROM question_attempts WHERE id = ?", (attempt_id,)
            )
            row = cursor.fetchone()
            if not row:
                raise KeyError(f"Question attempt not found: {attempt_id}")
            return self._row_to_attempt(row)
        finally:
            conn.close()

    def get_attempts(self, session_id: Optional[int] = None) -> list[QuestionAttempt]:
        """All attempts, optionally limited to one session, oldest first."""
        conn = self._get_connection()
        try:
            if session_id is None:
                cursor = conn.execute("SELECT * FROM question_attempts ORDER BY id")
            else:
                cursor = conn.execute(
                    "SELECT * FROM question_attempts WHERE session_id = ? ORDER BY id",
                    (session_id,)
                )
            return [self._row_to_attempt(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    @staticmethod
    def _row_to_attempt(row: sqlite3.Row) -> QuestionAttempt:
        return QuestionAttempt(
            id=row["id"],
            session_id=row["session_id"],
            question_file=row["question_file"],
            question_name=row["question_name"],
            question_prefix=row["question_prefix"],
            seed=row["seed"],
            attempt_number=row["attempt_number"],
            score=row["score"],
            max_score=row["max_score"],
            is_correct=bool(row["is_correct"]) if row["is_correct"] is not None else None,
            created_at=_parse_time(row["created_at"]),
            submitted_at=_parse_time(row["submitted_at"]),
        )

    # -------------------------------------------------------------------------
    # Inputs
    # -------------------------------------------------------------------------

    def track_input(
        self,
        attempt_id: int,
        input_name: str,
        input_value: Optional[str],
        input_type: Optional[str] = None,
        is_final_answer: bool = False,
        validation_result: Optional[str] = None,
    ) -> InputRecord:
        """Record an input value for an attempt."""
        attempt = self.get_attempt(attempt_id)

        conn = self._get_connection()
        try:
            now = datetime.now().isoformat()
            cursor = conn.execute(
                """INSERT INTO input_tracking
                     (attempt_id, session_id, input_name, input_value, input_type,
                      is_final_answer, validation_result, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (attempt_id, attempt.session_id, input_name, input_value, input_type,
                 int(is_final_answer), validation_result, now)
            )
            conn.commit()
            return InputRecord(
                id=cursor.lastrowid,
                attempt_id=attempt_id,
                session_id=attempt.session_id,
                input_name=input_name,
                input_value=input_value,
                input_type=input_type,
                is_final_answer=is_final_answer,
                validation_result=validation_result,
                created_at=datetime.fromisoformat(now),
            )
        finally:
            conn.close()

    def get_inputs(self, attempt_id: int) -> list[InputRecord]:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT * FROM input_tracking WHERE attempt_id = ? ORDER BY id",
                (attempt_id,)
            )
            return [
                InputRecord(
                    id=row["id"],
                    attempt_id=row["attempt_id"],
                    session_id=row["session_id"],
                    input_name=row["input_name"],
                    input_value=row["input_value"],
                    input_type=row["input_type"],
                    is_final_answer=bool(row["is_final_answer"]),
                    validation_result=row["validation_result"],
                    created_at=_parse_time(row["created_at"]),
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()
