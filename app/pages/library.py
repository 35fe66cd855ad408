"""
Library page rendering: subjects, topics and flashcards.
"""

from __future__ import annotations

import streamlit as st

from core import content_repo, flashcard_generator
from core.errors import StudySpotError
from core.schemas import Subject, Topic

NEW_QUESTION_KEY = "new_card_question"
NEW_ANSWER_KEY = "new_card_answer"


def render_library_page() -> None:
    if not st.session_state.user_id:
        st.info("Sign in on the Account tab to manage your library.")
        return

    st.subheader("Library")
    try:
        subject = _render_subjects()
        if subject is None:
            return
        st.divider()
        topic = _render_topics(subject)
        if topic is None:
            return
        st.divider()
        _render_flashcards(subject, topic)
    except StudySpotError as exc:
        st.error(exc.user_message)


# ---- Subjects ----

def _render_subjects() -> Subject | None:
    user_id = st.session_state.user_id

    with st.form("new_subject", clear_on_submit=True):
        title = st.text_input("New subject")
        if st.form_submit_button("Add Subject"):
            subject = content_repo.create_subject(user_id, title)
            st.session_state.selected_subject_id = subject.id
            st.rerun()

    subjects = content_repo.list_subjects(user_id)
    if not subjects:
        st.info("No subjects yet.")
        return None

    default = content_repo.pick_default(subjects, st.session_state.selected_subject_id)
    subject = st.selectbox(
        "Subject",
        subjects,
        index=subjects.index(default),
        format_func=lambda s: s.title,
    )
    if subject.id != st.session_state.selected_subject_id:
        st.session_state.selected_subject_id = subject.id
        st.session_state.selected_topic_id = None

    col1, col2, col3 = st.columns(3)
    col1.metric("Topics", subject.topic_count)
    col2.metric("Flashcards", content_repo.count_subject_flashcards(subject.id))
    col3.metric("Previous result", subject.previous_result)

    with st.expander("Edit subject"):
        new_title = st.text_input("Title", value=subject.title, key=f"subject_title_{subject.id}")
        col_save, col_delete = st.columns(2)
        with col_save:
            if st.button("Save", key=f"save_subject_{subject.id}", use_container_width=True):
                content_repo.rename_subject(user_id, subject.id, new_title)
                st.rerun()
        with col_delete:
            confirm = st.checkbox("Also delete all topics and flashcards", key=f"confirm_subject_{subject.id}")
            if st.button("Delete subject", key=f"delete_subject_{subject.id}", disabled=not confirm, use_container_width=True):
                content_repo.delete_subject(user_id, subject.id)
                st.session_state.selected_subject_id = None
                st.session_state.selected_topic_id = None
                st.rerun()

    return subject


# ---- Topics ----

def _render_topics(subject: Subject) -> Topic | None:
    user_id = st.session_state.user_id

    with st.form(f"new_topic_{subject.id}", clear_on_submit=True):
        title = st.text_input("New topic")
        if st.form_submit_button("Add Topic"):
            topic = content_repo.create_topic(user_id, subject.id, title)
            st.session_state.selected_topic_id = topic.id
            st.rerun()

    topics = content_repo.list_topics(subject.id)
    if not topics:
        st.info("No topics in this subject yet.")
        return None

    default = content_repo.pick_default(topics, st.session_state.selected_topic_id)
    topic = st.selectbox(
        "Topic",
        topics,
        index=topics.index(default),
        format_func=lambda t: f"{t.title} ({t.flashcard_count} cards)",
    )
    st.session_state.selected_topic_id = topic.id

    with st.expander("Edit topic"):
        subjects = content_repo.list_subjects(user_id)
        new_title = st.text_input("Title", value=topic.title, key=f"topic_title_{topic.id}")
        target = st.selectbox(
            "Subject",
            subjects,
            index=subjects.index(content_repo.pick_default(subjects, subject.id)),
            format_func=lambda s: s.title,
            key=f"topic_subject_{topic.id}",
        )
        col_save, col_delete = st.columns(2)
        with col_save:
            if st.button("Save", key=f"save_topic_{topic.id}", use_container_width=True):
                content_repo.update_topic(user_id, topic.id, new_title, target.id)
                st.session_state.selected_subject_id = target.id
                st.rerun()
        with col_delete:
            confirm = st.checkbox("Also delete its flashcards", key=f"confirm_topic_{topic.id}")
            if st.button("Delete topic", key=f"delete_topic_{topic.id}", disabled=not confirm, use_container_width=True):
                content_repo.delete_topic(user_id, topic.id)
                st.session_state.selected_topic_id = None
                st.rerun()

    return topic


# ---- Flashcards ----

def _render_flashcards(subject: Subject, topic: Topic) -> None:
    user_id = st.session_state.user_id

    st.markdown(f"### Flashcards in {topic.title}")
    _render_new_flashcard(subject, topic)

    flashcards = content_repo.list_flashcards(topic.id)
    if not flashcards:
        st.info("No flashcards in this topic yet.")
        return

    for card in flashcards:
        with st.expander(card.question):
            question = st.text_area("Question", value=card.question, key=f"q_{card.id}")
            answer = st.text_area("Answer", value=card.answer, key=f"a_{card.id}")
            col_save, col_delete = st.columns(2)
            with col_save:
                if st.button("Save", key=f"save_card_{card.id}", use_container_width=True):
                    content_repo.update_flashcard(user_id, card.id, question, answer)
                    st.rerun()
            with col_delete:
                if st.button("Delete", key=f"delete_card_{card.id}", use_container_width=True):
                    content_repo.delete_flashcard(user_id, card.id)
                    st.rerun()


def _render_new_flashcard(subject: Subject, topic: Topic) -> None:
    with st.expander("Add flashcard", expanded=True):
        # Generation writes into the inputs below, so it must run before they exist
        extra_context = st.text_input("Generate with AI: extra context (optional)", key="generate_context")
        if st.button("✨ Generate", key="generate_card"):
            try:
                with st.spinner("Generating flashcard..."):
                    cards = flashcard_generator.generate_flashcards(subject.title, topic.title, extra_context)
            except StudySpotError as exc:
                st.error(exc.user_message)
            else:
                st.session_state[NEW_QUESTION_KEY] = cards[0].question
                st.session_state[NEW_ANSWER_KEY] = cards[0].answer

        question = st.text_area("Question", key=NEW_QUESTION_KEY)
        answer = st.text_area("Answer", key=NEW_ANSWER_KEY)
        if st.button("Save Flashcard", type="primary", key="save_new_card"):
            content_repo.create_flashcard(st.session_state.user_id, topic.id, question, answer)
            st.session_state.pop(NEW_QUESTION_KEY, None)
            st.session_state.pop(NEW_ANSWER_KEY, None)
            st.rerun()
