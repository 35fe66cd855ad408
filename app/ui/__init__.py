"""UI Components for StudySpot"""

from app.ui.flashcard import render_flashcard
from app.ui.mark_buttons import render_mark_buttons
from app.ui.session_stats import render_session_stats, render_session_complete

__all__ = [
    "render_flashcard",
    "render_mark_buttons",
    "render_session_stats",
    "render_session_complete",
]
