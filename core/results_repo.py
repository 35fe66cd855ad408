"""
Result Recorder: append-only storage for TestResult documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pymongo import DESCENDING

from core import store
from core.errors import StudySpotError
from core.result_mapping import ResultContext, build_results
from core.schemas import TestMode, TestResult
from core.session_events import SessionOutcome
from core.study_session import TestSession
from core.users_repo import require_user_id

logger = logging.getLogger(__name__)

RECENT_RESULTS_LIMIT = 10


def record_result(result: TestResult) -> str:
    """
    Insert one result document.

    The server timestamp is applied when the result has none.

    Returns:
        The new document id

    Raises:
        RemoteOperationError: If the insert fails
    """
    require_user_id(result.user_id)
    doc = result.to_document()
    if doc.get("timestamp") is None:
        doc["timestamp"] = store.server_timestamp()

    with store.remote_operation("save the test result"):
        inserted = store.get_collection(store.TEST_RESULTS).insert_one(doc)
    logger.info(
        "Recorded %s result %s: %d/%d for topic '%s'",
        result.test_mode, inserted.inserted_id,
        result.score_correct, result.cards_attempted, result.topic_title,
    )
    return str(inserted.inserted_id)


def list_recent_results(
    user_id: str,
    limit: int = RECENT_RESULTS_LIMIT,
    test_mode: TestMode = TestMode.SPECIFIC_TOPIC
) -> list[TestResult]:
    """
    Most recent results of one test mode, newest first.
    """
    user_id = require_user_id(user_id)
    with store.remote_operation("load recent scores"):
        docs = list(
            store.get_collection(store.TEST_RESULTS)
            .find({"userId": user_id, "testMode": TestMode(test_mode).value})
            .sort([("timestamp", DESCENDING), ("_id", DESCENDING)])
            .limit(limit)
        )
    return [TestResult.from_document(doc) for doc in docs]


def list_results(user_id: str) -> list[TestResult]:
    """All of a user's results, oldest first."""
    user_id = require_user_id(user_id)
    with store.remote_operation("load test results"):
        docs = list(
            store.get_collection(store.TEST_RESULTS)
            .find({"userId": user_id})
            .sort(store.CREATION_ORDER)
        )
    return [TestResult.from_document(doc) for doc in docs]


@dataclass
class RecordReport:
    """What one drain of a session's outbox produced."""
    outcomes: list[SessionOutcome] = field(default_factory=list)
    recorded: int = 0
    errors: list[str] = field(default_factory=list)


def record_outcomes(session: TestSession, context: ResultContext) -> RecordReport:
    """
    Drain the session's outcomes and record the ones worth keeping.

    A failed write is reported in the returned errors; it never changes the
    session, so the test still reaches its finished state.
    """
    report = RecordReport(outcomes=session.drain_events())
    for result in build_results(report.outcomes, context):
        try:
            record_result(result)
        except StudySpotError as exc:
            report.errors.append(exc.user_message)
        else:
            report.recorded += 1
    return report
