"""
Test session lifecycle helpers for Streamlit app.

Button presses become UI events for the core TestSession; whatever the
session emits is mapped to result documents and recorded right away.
"""

from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from app.state import reset_test_state
from core import results_repo
from core.errors import StudySpotError
from core.result_mapping import ResultContext
from core.schemas import Subject, TestMode, Topic
from core.session_events import UIEvent
from core.session_loader import load_queue
from core.study_session import TestSession

logger = logging.getLogger(__name__)


def start_test(mode: TestMode, subject: Subject, topic: Optional[Topic] = None) -> bool:
    """
    Load the cards and start a new test session.

    Returns:
        True if a session was started
    """
    reset_test_state()

    try:
        with st.spinner("Loading flashcards..."):
            loaded = load_queue(
                st.session_state.user_id,
                mode,
                subject_id=subject.id,
                topic_id=topic.id if topic else None,
            )
    except StudySpotError as exc:
        st.error(exc.user_message)
        return False

    if loaded.partial:
        titles = ", ".join(t.title for t in loaded.failed_topics)
        st.session_state.load_warnings = [f"Some topics could not be loaded and were skipped: {titles}"]

    st.session_state.test_context = ResultContext(
        user_id=st.session_state.user_id,
        subject_id=subject.id,
        subject_title=subject.title,
        mode=TestMode(mode),
        topic_id=topic.id if topic else None,
        topic_title=topic.title if topic else None,
    )
    st.session_state.card_accent = subject.card_color_hex
    st.session_state.test_session = TestSession.start(loaded.queue, mode, loaded.topic_titles)
    logger.info(
        "Started %s test on subject %s with %d cards",
        TestMode(mode).value, subject.id, len(loaded.queue),
    )

    # An empty queue finishes immediately and may already have a summary
    _record_outcomes()
    return True


def handle_event(event: UIEvent) -> None:
    """
    Apply a UI event to the running session and record any outcomes.
    """
    session: Optional[TestSession] = st.session_state.test_session
    if session is None:
        return
    session.dispatch(event)
    _record_outcomes()


def _record_outcomes() -> None:
    report = results_repo.record_outcomes(
        st.session_state.test_session,
        st.session_state.test_context,
    )
    st.session_state.session_outcomes.extend(report.outcomes)
    st.session_state.recorded_count += report.recorded
    st.session_state.record_errors.extend(report.errors)


def end_test() -> None:
    """
    Leave the current test. Unfinished progress is discarded.
    """
    session: Optional[TestSession] = st.session_state.test_session
    if session is not None and not session.finished:
        logger.info(
            "Test abandoned at %s (%d/%d attempted)",
            session.progress_label(), session.overall_attempted, len(session.queue),
        )
    reset_test_state()
