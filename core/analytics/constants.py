"""
Constants for score analytics.
"""

from __future__ import annotations

from typing import Final


RESULT_COLUMNS: Final[list[str]] = [
    "subject_id",
    "subject_title",
    "topic_title",
    "test_mode",
    "score_correct",
    "cards_attempted",
    "percentage",
    "timestamp",
    "day_utc",
]

SUBJECT_BREAKDOWN_COLUMNS: Final[list[str]] = [
    "subject_title",
    "tests",
    "cards_attempted",
    "average_percentage",
]
