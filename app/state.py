"""
Streamlit session state and logging initialization helpers.
"""

from __future__ import annotations

import logging

import streamlit as st

from core import config


def init_logging() -> None:
    """
    Configure logging once per server process.
    """
    @st.cache_resource
    def _init_logging() -> None:
        logging.basicConfig(
            level=config.get_log_level(),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )

    _init_logging()


def ensure_session_state() -> None:
    """
    Populate Streamlit session_state with defaults.
    """
    if "user_id" not in st.session_state:
        st.session_state.user_id = None
    if "user_label" not in st.session_state:
        st.session_state.user_label = None
    if "test_session" not in st.session_state:
        st.session_state.test_session = None
    if "test_context" not in st.session_state:
        st.session_state.test_context = None
    if "session_outcomes" not in st.session_state:
        st.session_state.session_outcomes = []
    if "record_errors" not in st.session_state:
        st.session_state.record_errors = []
    if "recorded_count" not in st.session_state:
        st.session_state.recorded_count = 0
    if "load_warnings" not in st.session_state:
        st.session_state.load_warnings = []
    if "confirm_exit" not in st.session_state:
        st.session_state.confirm_exit = False
    if "card_accent" not in st.session_state:
        st.session_state.card_accent = ""
    if "selected_subject_id" not in st.session_state:
        st.session_state.selected_subject_id = None
    if "selected_topic_id" not in st.session_state:
        st.session_state.selected_topic_id = None


def reset_test_state() -> None:
    """Forget the current test and everything it reported."""
    st.session_state.test_session = None
    st.session_state.test_context = None
    st.session_state.session_outcomes = []
    st.session_state.record_errors = []
    st.session_state.recorded_count = 0
    st.session_state.load_warnings = []
    st.session_state.confirm_exit = False
    st.session_state.card_accent = ""


def sign_in(user_id: str, label: str) -> None:
    reset_test_state()
    st.session_state.user_id = user_id
    st.session_state.user_label = label
    st.session_state.selected_subject_id = None
    st.session_state.selected_topic_id = None


def sign_out() -> None:
    sign_in(None, None)
