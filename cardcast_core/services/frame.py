from __future__ import annotations

from typing import Iterable

import pandas as pd

from cardcast_core.domain.models import CARD_KEYS, DailySnapshot

EVENT_COLUMNS = ["paycheck", "spending", "rent"] + [f"{key}_payment" for key in CARD_KEYS]
BALANCE_COLUMNS = ["checking"] + list(CARD_KEYS)


def to_frame(snapshots: Iterable[DailySnapshot]) -> pd.DataFrame:
    """
    Daily ledger as a DataFrame indexed by date.
    Amounts become floats here; this is the display boundary.
    """
    df = pd.DataFrame([s.to_record() for s in snapshots])
    if df.empty:
        return pd.DataFrame(columns=EVENT_COLUMNS + BALANCE_COLUMNS + ["total_balance", "notes"])
    for col in EVENT_COLUMNS + BALANCE_COLUMNS:
        df[col] = df[col].astype(float)
    df["total_balance"] = df["checking"] - df[list(CARD_KEYS)].sum(axis=1)
    df["date"] = pd.to_datetime(df["date"])
    return df.set_index("date")


def monthly_rollup(frame: pd.DataFrame) -> pd.DataFrame:
    if frame.empty:
        return frame
    month = frame.index.to_period("M")
    events = frame[EVENT_COLUMNS].groupby(month).sum()
    balances = frame[BALANCE_COLUMNS + ["total_balance"]].groupby(month).last()
    return events.join(balances)
