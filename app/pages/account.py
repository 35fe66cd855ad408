"""
Account page rendering: sign in, create a profile, sign out, delete the account.
"""

from __future__ import annotations

import uuid

import streamlit as st

from app.state import sign_in, sign_out
from core import content_repo, users_repo
from core.errors import StudySpotError


def render_account_page() -> None:
    if st.session_state.user_id:
        _render_signed_in()
    else:
        _render_sign_in()


def _render_signed_in() -> None:
    st.subheader("Account")
    try:
        profile = users_repo.get_user_profile(st.session_state.user_id)
    except StudySpotError as exc:
        st.error(exc.user_message)
        profile = None

    if profile is not None:
        st.markdown(f"**{profile.display_name}**  \n{profile.email}")
        if profile.created_at:
            st.caption(f"Member since {profile.created_at:%d %b %Y}")

    if st.button("Sign Out"):
        sign_out()
        st.rerun()

    _render_delete_account()


def _render_delete_account() -> None:
    user_id = st.session_state.user_id
    with st.expander("Delete Account"):
        st.warning("This removes your profile. You will be signed out.")
        delete_content = st.checkbox("Also delete all my subjects, topics and flashcards")
        confirm = st.checkbox("I understand this cannot be undone")
        if st.button("Delete Account", type="primary", disabled=not confirm):
            try:
                if delete_content:
                    for subject in content_repo.list_subjects(user_id):
                        content_repo.delete_subject(user_id, subject.id)
                users_repo.delete_user_profile(user_id)
            except StudySpotError as exc:
                st.error(exc.user_message)
            else:
                sign_out()
                st.rerun()


def _render_sign_in() -> None:
    st.subheader("Sign In")
    with st.form("sign_in"):
        email = st.text_input("Email")
        if st.form_submit_button("Sign In", type="primary"):
            try:
                profile = users_repo.find_user_by_email(email)
            except StudySpotError as exc:
                st.error(exc.user_message)
            else:
                if profile is None:
                    st.error("No account with that email. Create one below.")
                else:
                    sign_in(profile.id, profile.display_name)
                    st.rerun()

    st.subheader("Create Account")
    with st.form("create_account"):
        display_name = st.text_input("Name")
        email = st.text_input("Email", key="create_email")
        if st.form_submit_button("Create Account"):
            try:
                if users_repo.find_user_by_email(email) is not None:
                    st.error("An account with that email already exists.")
                    return
                profile = users_repo.create_user_profile(uuid.uuid4().hex, display_name, email)
            except StudySpotError as exc:
                st.error(exc.user_message)
            else:
                sign_in(profile.id, profile.display_name)
                st.rerun()
