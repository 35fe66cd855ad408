"""
Study page rendering.
"""

from __future__ import annotations

import streamlit as st

from app.session_controller import end_test, handle_event, start_test
from app.ui import (
    render_flashcard,
    render_mark_buttons,
    render_session_complete,
    render_session_stats,
)
from app.ui.flashcard_style import ANSWER_STYLE, QUESTION_STYLE, style_with_accent
from core import config, content_repo
from core.errors import StudySpotError
from core.schemas import TEST_MODE_LABELS, TestMode
from core.session_events import FlipCard
from core.study_session import TestSession


def render_study_page() -> None:
    """
    Render the study flow (setup or active test).
    """
    if not st.session_state.user_id:
        st.info("Sign in on the Account tab to start studying.")
        return

    session: TestSession | None = st.session_state.test_session
    if session is None:
        _render_setup_screen()
    elif session.finished:
        _render_finished_screen()
    else:
        _render_active_session(session)


def _render_setup_screen() -> None:
    st.markdown("<style>.stApp h1 { font-size: 1.6rem; }</style>", unsafe_allow_html=True)
    st.title("📚 StudySpot")
    if config.is_test_mode():
        st.warning("⚠️ **TEST MODE** - Using the test database (set TEST_MODE=false in .env for production)")
    st.markdown(f"**Welcome {st.session_state.user_label}**")

    try:
        subjects = content_repo.list_subjects(st.session_state.user_id)
    except StudySpotError as exc:
        st.error(exc.user_message)
        return

    if not subjects:
        st.info("You have no subjects yet. Create one on the Library tab.")
        return

    default_subject = content_repo.pick_default(subjects, st.session_state.selected_subject_id)
    subject = st.selectbox(
        "Subject",
        subjects,
        index=subjects.index(default_subject),
        format_func=lambda s: f"{s.title} ({s.topic_count} topics)",
    )
    st.session_state.selected_subject_id = subject.id

    modes = list(TestMode)
    mode = st.radio(
        "Test mode",
        modes,
        format_func=lambda m: TEST_MODE_LABELS[m],
        horizontal=True,
    )

    topic = None
    if mode == TestMode.SPECIFIC_TOPIC:
        try:
            topics = content_repo.list_topics(subject.id)
        except StudySpotError as exc:
            st.error(exc.user_message)
            return
        if not topics:
            st.info("This subject has no topics yet.")
            return
        default_topic = content_repo.pick_default(topics, st.session_state.selected_topic_id)
        topic = st.selectbox(
            "Topic",
            topics,
            index=topics.index(default_topic),
            format_func=lambda t: f"{t.title} ({t.flashcard_count} cards)",
        )
        st.session_state.selected_topic_id = topic.id

    if st.button("Start Test", type="primary", use_container_width=True):
        if start_test(mode, subject, topic):
            st.rerun()


def _render_active_session(session: TestSession) -> None:
    for warning in st.session_state.load_warnings:
        st.warning(warning)

    if render_session_stats(session):
        st.session_state.confirm_exit = True

    if st.session_state.confirm_exit:
        _render_exit_confirmation(session)
        return

    card = session.current_card
    accent = st.session_state.card_accent
    st.markdown("<br>", unsafe_allow_html=True)

    if session.front_visible:
        render_flashcard(
            card.question,
            side_label="Question",
            corner_text=session.current_topic_title,
            style=style_with_accent(QUESTION_STYLE, accent),
        )
        st.markdown("<br>", unsafe_allow_html=True)
        if st.button("Reveal Answer", use_container_width=True, type="primary"):
            handle_event(FlipCard())
            st.rerun()
    else:
        render_flashcard(
            card.answer,
            side_label="Answer",
            corner_text=session.current_topic_title,
            style=ANSWER_STYLE,
        )
        st.markdown("<br>", unsafe_allow_html=True)

        event = render_mark_buttons(key_suffix=str(session.cursor))
        if event is not None:
            handle_event(event)
            st.rerun()

        if st.button("Show Question", use_container_width=True):
            handle_event(FlipCard())
            st.rerun()

    _render_record_errors()


def _render_exit_confirmation(session: TestSession) -> None:
    message = "Exit this test? Your progress on the remaining cards will not be saved."
    if session.mode == TestMode.SEQUENTIAL_BY_TOPIC:
        message += " Topics you already finished stay recorded."
    st.warning(message)

    col_stay, col_exit = st.columns(2)
    with col_stay:
        if st.button("Keep going", use_container_width=True):
            st.session_state.confirm_exit = False
            st.rerun()
    with col_exit:
        if st.button("Exit test", type="primary", use_container_width=True):
            end_test()
            st.rerun()


def _render_finished_screen() -> None:
    session: TestSession = st.session_state.test_session
    st.subheader("Test finished")
    st.caption(session.progress_label())
    render_session_complete(st.session_state.session_outcomes, st.session_state.recorded_count)
    _render_record_errors()

    if st.button("Back to Study", type="primary", use_container_width=True):
        end_test()
        st.rerun()


def _render_record_errors() -> None:
    for message in st.session_state.record_errors:
        st.error(message)

