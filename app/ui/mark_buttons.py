"""
Mark Button UI

Renders the correct / wrong buttons shown on the answer side.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from core.session_events import MarkCorrect, MarkWrong, UIEvent


def render_mark_buttons(key_suffix: str) -> Optional[UIEvent]:
    """
    Render marking buttons.

    Returns:
        MarkCorrect or MarkWrong, or None if no button clicked
    """
    st.markdown("**Did you know the answer?**")
    col_wrong, col_correct = st.columns(2)

    with col_wrong:
        if st.button("❌ Wrong", use_container_width=True, key=f"mark_wrong_{key_suffix}"):
            return MarkWrong()
    with col_correct:
        if st.button("✅ Correct", type="primary", use_container_width=True, key=f"mark_correct_{key_suffix}"):
            return MarkCorrect()
    return None
