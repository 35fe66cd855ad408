"""
Metric computations for the scores dashboard.
"""

from __future__ import annotations

import pandas as pd

from core.analytics.constants import SUBJECT_BREAKDOWN_COLUMNS
from core.analytics.types import ScoresOverview
from core.schemas import compute_percentage


def build_day_index(results_df: pd.DataFrame) -> pd.DatetimeIndex:
    """
    Build a dense UTC day index spanning the result range.
    """
    if results_df.empty:
        return pd.DatetimeIndex([], tz="UTC")
    start = results_df["day_utc"].min()
    end = results_df["day_utc"].max()
    return pd.date_range(start=start, end=end, freq="D")


def compute_overview(results_df: pd.DataFrame) -> ScoresOverview:
    """
    Totals across all results; accuracy is correct / attempted in percent.
    """
    if results_df.empty:
        return ScoresOverview(total_tests=0, cards_attempted=0, cards_correct=0, accuracy=0.0)

    attempted = int(results_df["cards_attempted"].sum())
    correct = int(results_df["score_correct"].sum())
    return ScoresOverview(
        total_tests=len(results_df),
        cards_attempted=attempted,
        cards_correct=correct,
        accuracy=compute_percentage(correct, attempted),
    )


def compute_subject_breakdown(results_df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-subject test count, cards attempted and mean percentage.
    """
    if results_df.empty:
        return pd.DataFrame(columns=SUBJECT_BREAKDOWN_COLUMNS)

    grouped = results_df.groupby("subject_title", sort=True).agg(
        tests=("percentage", "size"),
        cards_attempted=("cards_attempted", "sum"),
        average_percentage=("percentage", "mean"),
    )
    grouped["average_percentage"] = grouped["average_percentage"].round(1)
    return grouped.reset_index()[SUBJECT_BREAKDOWN_COLUMNS]


def compute_daily_accuracy(results_df: pd.DataFrame) -> pd.Series:
    """
    Accuracy per day with at least one result (correct / attempted, percent).
    """
    if results_df.empty:
        return pd.Series(dtype="float64")

    daily = results_df.groupby("day_utc")[["score_correct", "cards_attempted"]].sum()
    daily = daily[daily["cards_attempted"] > 0]
    accuracy = daily["score_correct"] / daily["cards_attempted"] * 100.0
    return accuracy.astype("float64")


def compute_daily_tests(results_df: pd.DataFrame, day_index: pd.DatetimeIndex) -> pd.Series:
    """
    Number of recorded tests per day, zero-filled across the day index.
    """
    if results_df.empty or len(day_index) == 0:
        return pd.Series(dtype="int64")

    counts = results_df.groupby("day_utc").size()
    return counts.reindex(day_index, fill_value=0).astype("int64")
