#!/usr/bin/env python3
"""
export_attempts.py - Export the attempt log to CSV.

Writes every graded attempt (joined with its session) to a CSV file and
prints a per-question summary: attempts, students, mean score and pass rate.

Usage:
  python scripts/export_attempts.py
  python scripts/export_attempts.py --db ~/.stackquest/attempts.db --output data/attempts.csv
  python scripts/export_attempts.py --summary-output data/summary.csv
"""

import argparse
import logging
import sqlite3
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

load_dotenv(PROJECT_ROOT / ".env")

import pandas as pd

from stackquest.config import load_settings

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ATTEMPTS_QUERY = """
    SELECT a.id AS attempt_id, a.session_id, s.anonymous_id,
           a.question_file, a.question_name, a.question_prefix, a.seed,
           a.attempt_number, a.score, a.max_score, a.is_correct,
           a.created_at, a.submitted_at
    FROM question_attempts a
    JOIN learning_sessions s ON a.session_id = s.id
    ORDER BY a.id
"""


def load_attempts(db_path: Path) -> pd.DataFrame:
    """Load all attempts joined with their session."""
    if not db_path.exists():
        raise FileNotFoundError(f"Attempt database not found: {db_path}")

    conn = sqlite3.connect(str(db_path))
    try:
        df = pd.read_sql_query(ATTEMPTS_QUERY, conn)
    finally:
        conn.close()

    df["is_correct"] = df["is_correct"].astype("boolean")
    return df


def summarize_attempts(df: pd.DataFrame) -> pd.DataFrame:
    """Per-question summary of graded attempts."""
    graded = df[df["submitted_at"].notna()].copy()
    graded["question_name"] = graded["question_name"].fillna("")
    graded["is_correct"] = graded["is_correct"].fillna(False).astype(bool)

    summary = (
        graded.groupby(["question_file", "question_name"])
        .agg(
            attempts=("attempt_id", "count"),
            students=("anonymous_id", "nunique"),
            mean_score=("score", "mean"),
            pass_rate=("is_correct", "mean"),
        )
        .reset_index()
        .sort_values("attempts", ascending=False)
    )
    summary["mean_score"] = summary["mean_score"].round(2)
    summary["pass_rate"] = (summary["pass_rate"] * 100).round(1)
    return summary


def main():
    parser = argparse.ArgumentParser(
        description="Export StackQuest attempt history to CSV"
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Attempt database (default: STACKQUEST_DB or ~/.stackquest/attempts.db)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=PROJECT_ROOT / "data" / "attempts.csv",
        help="CSV output for individual attempts"
    )
    parser.add_argument(
        "--summary-output",
        type=Path,
        default=None,
        help="Optional CSV output for the per-question summary"
    )

    args = parser.parse_args()
    db_path = args.db or load_settings().db_path

    logger.info(f"Loading attempts from {db_path}...")
    df = load_attempts(db_path)
    logger.info(f"  Loaded {len(df)} attempts from {df['session_id'].nunique()} sessions")

    args.output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.output, index=False)
    logger.info(f"Saved attempts to: {args.output}")

    summary = summarize_attempts(df)
    if args.summary_output:
        args.summary_output.parent.mkdir(parents=True, exist_ok=True)
        summary.to_csv(args.summary_output, index=False)
        logger.info(f"Saved summary to: {args.summary_output}")

    logger.info("")
    logger.info("=" * 50)
    logger.info("QUESTION SUMMARY")
    logger.info("=" * 50)
    for row in summary.itertuples(index=False):
        label = row.question_file + (f" [{row.question_name}]" if row.question_name else "")
        logger.info(
            f"{label}: {row.attempts} attempts, {row.students} students, "
            f"mean score {row.mean_score}, pass rate {row.pass_rate}%"
        )


if __name__ == "__main__":
    main()
