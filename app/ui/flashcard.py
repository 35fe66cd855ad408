"""
Flashcard UI Component

Renders one side of a flashcard.
"""

from __future__ import annotations

import html

import streamlit as st
from app.ui.flashcard_style import (
    CARD_MIN_HEIGHT,
    CARD_PADDING,
    QUESTION_STYLE,
    FlashcardStyle,
)


def render_flashcard(
    main_text: str,
    side_label: str = "",
    corner_text: str = "",
    style: FlashcardStyle | None = None,
) -> None:
    """
    Render a flashcard side.

    Args:
        main_text: Question or answer text (center)
        side_label: Small label above the text (e.g. "Question")
        corner_text: Optional text in top-right corner (e.g. topic title)
        style: Style preset (defaults to the question style)
    """
    style = style or QUESTION_STYLE

    corner_html = ""
    if corner_text:
        corner_html = (
            f'<div style="position: absolute; top: 15px; right: 20px; '
            f'font-size: {style.caption_font_size}; color: {style.caption_color}; '
            f'font-style: italic;">{html.escape(corner_text)}</div>'
        )

    label_html = ""
    if side_label:
        label_html = (
            f'<p style="font-size: {style.caption_font_size}; color: {style.caption_color}; '
            'text-transform: uppercase; letter-spacing: 0.08em; margin: 0 0 12px 0;">'
            f"{html.escape(side_label)}</p>"
        )

    main_html = (
        f'<h1 style="font-size: {style.main_font_size}; color: {style.main_color}; '
        'font-weight: normal; margin: 0; white-space: pre-wrap; text-align: center; '
        'line-height: 1.4; max-width: 100%; overflow-wrap: anywhere; word-break: break-word;">'
        f"{html.escape(main_text)}</h1>"
    )

    card_html = (
        f'<div style="background-color: {style.bg_color}; padding: {CARD_PADDING}; '
        'border-radius: 15px; text-align: center; box-shadow: 0 4px 6px '
        f'rgba(0, 0, 0, 0.1); min-height: {CARD_MIN_HEIGHT}; display: flex; '
        'flex-direction: column; align-items: center; justify-content: center; '
        f'position: relative;">{corner_html}{label_html}{main_html}</div>'
    )

    st.markdown(card_html, unsafe_allow_html=True)
