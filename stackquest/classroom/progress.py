"""
ProgressTracker - Track per-question attempt results for one session.

Stores, for each question index:
- Whether it has been attempted
- Pass/fail result and score of the latest submission
- When that result was recorded

Progress lives for the lifetime of the session; the relational attempt
history is kept separately by AttemptLog.
"""

import threading
from datetime import datetime
from typing import Optional

from stackquest.schemas import ProgressEntry

from .errors import IndexOutOfRange
from .sequence import QuestionSequence


class ProgressTracker:
    """
    Track attempted questions and their latest results.

    The tracker owns the lock that also guards navigation transitions, so
    the all-attempted flag flips atomically with respect to forward().
    """

    def __init__(self, sequence: QuestionSequence):
        """
        Initialize progress tracker.

        Args:
            sequence: QuestionSequence whose indices are tracked
        """
        self.sequence = sequence
        self.lock = threading.RLock()
        self._entries: dict[int, ProgressEntry] = {}
        self._all_attempted = False

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def record_attempt(self, index: int, passed: bool, score: Optional[float] = None) -> ProgressEntry:
        """
        Record a graded submission for a question.

        Repeated submissions overwrite passed/score; no history is kept.
        Re-recording an identical result leaves the entry untouched.
        """
        if not self.sequence.contains(index):
            raise IndexOutOfRange(index, self.sequence.length())

        with self.lock:
            entry = self._entries.get(index)
            if entry is None:
                entry = ProgressEntry(question_index=index, passed=passed, score=score)
                self._entries[index] = entry
            elif entry.passed != passed or entry.score != score:
                entry.passed = passed
                entry.score = score
                entry.timestamp = datetime.now()

            if not self._all_attempted and len(self._entries) == self.sequence.length():
                self._all_attempted = True
            return entry

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def has_attempted(self, index: int) -> bool:
        return index in self._entries

    def is_all_attempted(self) -> bool:
        return self._all_attempted

    def result(self, index: int) -> Optional[ProgressEntry]:
        """Latest result for a question, or None if never attempted."""
        return self._entries.get(index)

    def attempted_indices(self) -> set[int]:
        return set(self._entries)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def get_completion_stats(self) -> dict:
        """
        Get completion statistics.

        Returns:
            Dictionary with attempted/passed counts and percentages
        """
        total = self.sequence.length()
        attempted = len(self._entries)
        passed = sum(1 for e in self._entries.values() if e.passed)

        return {
            "total_questions": total,
            "attempted": attempted,
            "passed": passed,
            "not_attempted": total - attempted,
            "completion_percent": round(attempted / total * 100, 1) if total > 0 else 0,
            "all_attempted": self._all_attempted,
        }
