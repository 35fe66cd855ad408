"""
Simple page router for Streamlit tabs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from app.pages.account import render_account_page
from app.pages.library import render_library_page
from app.pages.scores import render_scores_page
from app.pages.study import render_study_page


@dataclass(frozen=True)
class AppPage:
    title: str
    render: Callable[[], None]


PAGES = [
    AppPage(title="Study", render=render_study_page),
    AppPage(title="Library", render=render_library_page),
    AppPage(title="Scores", render=render_scores_page),
    AppPage(title="Account", render=render_account_page),
]
