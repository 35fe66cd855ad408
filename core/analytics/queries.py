"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

import pandas as pd

from core import results_repo
from core.analytics.constants import RESULT_COLUMNS


def load_results_df(user_id: str) -> pd.DataFrame:
    """
    Load all test results for a user into a dataframe, oldest first.
    """
    results = results_repo.list_results(user_id)
    if not results:
        return pd.DataFrame(columns=RESULT_COLUMNS)

    df = pd.DataFrame([r.model_dump(exclude={"id", "user_id"}) for r in results])
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df = df.dropna(subset=["timestamp"])
    df["day_utc"] = df["timestamp"].dt.floor("D")
    df = df.sort_values("timestamp").reset_index(drop=True)
    return df[RESULT_COLUMNS]
