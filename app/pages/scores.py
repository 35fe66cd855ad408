"""
Scores page rendering.
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from core.analytics import build_scores_dashboard
from core.errors import StudySpotError
from core.schemas import TestResult


@st.cache_data(show_spinner=False, ttl=60)
def _cached_dashboard(user_id: str):
    return build_scores_dashboard(user_id)


def _recent_results_df(results: list[TestResult]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Date": r.timestamp,
                "Subject": r.subject_title,
                "Topic": r.topic_title,
                "Score": f"{r.score_correct} / {r.cards_attempted}",
                "Percentage": round(r.percentage, 1),
            }
            for r in results
        ]
    )


def render_scores_page() -> None:
    if not st.session_state.user_id:
        st.info("Sign in on the Account tab to see your scores.")
        return

    st.subheader("Scores")
    st.caption(f"User: {st.session_state.user_label}")

    if st.button("Refresh Scores", use_container_width=False):
        _cached_dashboard.clear()
        st.rerun()

    try:
        dashboard = _cached_dashboard(st.session_state.user_id)
    except StudySpotError as exc:
        st.error(exc.user_message)
        return

    overview = dashboard.overview
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Tests Recorded", f"{overview.total_tests:,}")
    with col2:
        st.metric("Cards Attempted", f"{overview.cards_attempted:,}")
    with col3:
        st.metric("Accuracy", f"{overview.accuracy:.1f}%")

    st.markdown("### Recent Topic Tests")
    if not dashboard.recent_results:
        st.info("No topic tests recorded yet.")
    else:
        st.dataframe(_recent_results_df(dashboard.recent_results), hide_index=True, use_container_width=True)

    st.markdown("### By Subject")
    if dashboard.subject_breakdown.empty:
        st.info("No results yet.")
    else:
        st.dataframe(dashboard.subject_breakdown, hide_index=True, use_container_width=True)

    st.markdown("### Accuracy Over Time")
    if dashboard.daily_accuracy.empty:
        st.info("No results yet.")
    else:
        chart_col1, chart_col2 = st.columns(2)
        with chart_col1:
            st.caption("Daily accuracy (%)")
            st.line_chart(dashboard.daily_accuracy.rename("accuracy").to_frame())
        with chart_col2:
            st.caption("Tests per day")
            st.bar_chart(dashboard.daily_tests.rename("tests").to_frame())
