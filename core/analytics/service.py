"""
Service layer to assemble the scores dashboard.
"""

from __future__ import annotations

from core import results_repo
from core.analytics.metrics import (
    build_day_index,
    compute_daily_accuracy,
    compute_daily_tests,
    compute_overview,
    compute_subject_breakdown,
)
from core.analytics.queries import load_results_df
from core.analytics.types import ScoresDashboard


def build_scores_dashboard(user_id: str) -> ScoresDashboard:
    """
    Build all KPI values and series needed by the scores page.
    """
    results_df = load_results_df(user_id)
    day_index = build_day_index(results_df)

    return ScoresDashboard(
        overview=compute_overview(results_df),
        recent_results=results_repo.list_recent_results(user_id),
        subject_breakdown=compute_subject_breakdown(results_df),
        daily_accuracy=compute_daily_accuracy(results_df),
        daily_tests=compute_daily_tests(results_df, day_index),
    )
