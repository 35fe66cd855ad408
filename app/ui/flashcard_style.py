"""
Flashcard style presets and constants.
"""

from __future__ import annotations

from dataclasses import dataclass


# ---- Shared Card Layout ----

CARD_PADDING = "35px 24px"
CARD_MIN_HEIGHT = "220px"
QUESTION_BG_COLOR = "#f0f2f6"
ANSWER_BG_COLOR = "#e8f4f8"


# ---- Shared Typography Defaults ----

DEFAULT_MAIN_FONT_SIZE = "1.8em"
DEFAULT_MAIN_COLOR = "#1f1f1f"
DEFAULT_CAPTION_FONT_SIZE = "0.9em"
DEFAULT_CAPTION_COLOR = "#666"


@dataclass(frozen=True)
class FlashcardStyle:
    """
    Visual style preset for flashcards.
    """
    main_font_size: str = DEFAULT_MAIN_FONT_SIZE
    main_color: str = DEFAULT_MAIN_COLOR
    caption_font_size: str = DEFAULT_CAPTION_FONT_SIZE
    caption_color: str = DEFAULT_CAPTION_COLOR
    bg_color: str = QUESTION_BG_COLOR


QUESTION_STYLE = FlashcardStyle()

ANSWER_STYLE = FlashcardStyle(
    main_font_size="1.6em",
    bg_color=ANSWER_BG_COLOR,
)


def style_with_accent(style: FlashcardStyle, accent_hex: str) -> FlashcardStyle:
    """Use a subject's card colour as background when one is set."""
    if not accent_hex:
        return style
    return FlashcardStyle(
        main_font_size=style.main_font_size,
        main_color=style.main_color,
        caption_font_size=style.caption_font_size,
        caption_color=style.caption_color,
        bg_color=accent_hex,
    )
