"""
Analytics package exports.
"""

from core.analytics.queries import load_results_df
from core.analytics.service import build_scores_dashboard
from core.analytics.types import ScoresDashboard, ScoresOverview

__all__ = [
    "load_results_df",
    "build_scores_dashboard",
    "ScoresDashboard",
    "ScoresOverview",
]
