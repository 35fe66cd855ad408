"""
Map session outcomes to TestResult documents.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from core.schemas import TestMode, TestResult
from core.session_events import SegmentResult, SessionOutcome, SessionSummary

UNKNOWN_SUBJECT_TITLE = "Unknown Subject"
UNKNOWN_TOPIC_TITLE = "Unknown Topic"
RANDOM_SESSION_TOPIC_TITLE = "All Random Flashcards"


@dataclass(frozen=True)
class ResultContext:
    """Who took the test, and on what."""
    user_id: str
    subject_id: str
    subject_title: Optional[str]
    mode: TestMode
    topic_id: Optional[str] = None
    topic_title: Optional[str] = None


def result_for_outcome(outcome: SessionOutcome, context: ResultContext) -> Optional[TestResult]:
    """
    Build the result document for one outcome.

    Returns:
        None when nothing was attempted (no record is kept for 0/0)
    """
    subject_title = context.subject_title or UNKNOWN_SUBJECT_TITLE

    if isinstance(outcome, SegmentResult):
        if outcome.attempted <= 0:
            return None
        # Each segment is stored as a test of its own topic
        return TestResult(
            user_id=context.user_id,
            subject_id=context.subject_id,
            subject_title=subject_title,
            topic_id=outcome.topic_id,
            topic_title=outcome.topic_title or UNKNOWN_TOPIC_TITLE,
            score_correct=outcome.score,
            cards_attempted=outcome.attempted,
            test_mode=TestMode.SPECIFIC_TOPIC,
        )

    if isinstance(outcome, SessionSummary):
        if outcome.cards_attempted <= 0:
            return None
        mode = TestMode(context.mode)
        if mode == TestMode.RANDOM_ALL_SUBJECT:
            topic_id = None
            topic_title = RANDOM_SESSION_TOPIC_TITLE
        else:
            topic_id = context.topic_id
            topic_title = context.topic_title or UNKNOWN_TOPIC_TITLE
        return TestResult(
            user_id=context.user_id,
            subject_id=context.subject_id,
            subject_title=subject_title,
            topic_id=topic_id,
            topic_title=topic_title,
            score_correct=outcome.score_correct,
            cards_attempted=outcome.cards_attempted,
            test_mode=mode,
        )

    raise TypeError(f"Unknown session outcome: {outcome!r}")


def build_results(events: Iterable[SessionOutcome], context: ResultContext) -> list[TestResult]:
    """Result documents for every outcome that should be recorded, in order."""
    results = []
    for event in events:
        result = result_for_outcome(event, context)
        if result is not None:
            results.append(result)
    return results
