"""
Session Statistics UI

Renders progress metrics, the exit control and the completion summary.
"""

from __future__ import annotations

import streamlit as st

from core.session_events import SegmentResult, SessionOutcome, SessionSummary
from core.study_session import TestSession


def render_session_stats(session: TestSession) -> bool:
    """
    Render session progress metrics and exit button.

    Returns:
        True if exit button was clicked, False otherwise
    """
    col1, col2, col3, col4 = st.columns([2, 2, 2, 1])

    with col1:
        st.metric("Progress", session.progress_label())

    with col2:
        st.metric("Correct", session.overall_score)

    with col3:
        st.metric("Wrong", session.incorrect_count)

    with col4:
        st.markdown("<br>", unsafe_allow_html=True)  # Align with metrics
        if st.button("❌", help="Exit test", use_container_width=True):
            return True

    st.divider()
    return False


def render_session_complete(outcomes: list[SessionOutcome], recorded: int) -> None:
    """
    Render the completion summary for a finished session.

    Args:
        outcomes: Everything the session emitted
        recorded: Number of results actually written
    """
    summaries = [o for o in outcomes if isinstance(o, SessionSummary)]
    segments = [o for o in outcomes if isinstance(o, SegmentResult)]

    if summaries:
        summary = summaries[-1]
        if summary.cards_attempted == 0:
            st.info("No flashcards to test. Score: 0 / 0 (0.0%)")
        else:
            st.success(f"🎉 Test complete! {summary.describe()}")
        return

    if not segments:
        st.info("Test complete. No cards were marked.")
        return

    st.success(f"🎉 Test complete! {len(segments)} topic(s) scored, {recorded} result(s) saved.")
    for segment in segments:
        st.markdown(
            f"- **{segment.topic_title or 'Unknown Topic'}**: "
            f"{segment.score} / {segment.attempted} ({segment.percentage:.1f}%)"
        )
