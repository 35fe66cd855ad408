"""
Types for the scores dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from core.schemas import TestResult


@dataclass(frozen=True)
class ScoresOverview:
    """
    Headline numbers across all recorded results.
    """
    total_tests: int
    cards_attempted: int
    cards_correct: int
    accuracy: float


@dataclass(frozen=True)
class ScoresDashboard:
    """
    Precomputed metrics and series for the scores page.
    """
    overview: ScoresOverview
    recent_results: list[TestResult]
    subject_breakdown: pd.DataFrame
    daily_accuracy: pd.Series
    daily_tests: pd.Series
