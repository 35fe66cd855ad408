"""
StudySpot - Main App

Flashcard study app: organize subjects, topics and flashcards, take tests
and track scores.
"""

import streamlit as st

from app.router import PAGES
from app.state import ensure_session_state, init_logging


# ---- Page Setup ----

st.set_page_config(
    page_title="StudySpot",
    page_icon="📚",
    layout="centered"
)

init_logging()
ensure_session_state()


# ---- Main App ----

def main():
    """Main app entry point."""
    tabs = st.tabs([page.title for page in PAGES])
    for tab, page in zip(tabs, PAGES):
        with tab:
            page.render()


if __name__ == "__main__":
    main()
