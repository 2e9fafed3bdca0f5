from __future__ import annotations

import logging
from pathlib import Path
from decimal import Decimal
from typing import Dict

import pandas as pd

from cardcast_core.domain.models import CARD_KEYS, BalanceSnapshot, to_money

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"account", "current"}
CHECKING = "checking"


def load_balances(csv_path: str | Path) -> BalanceSnapshot:
    """
    Starting balances from a CSV with account,current[,pending,statement] columns.
    `account` is "checking" or a card key.
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip().lower() for c in df.columns]
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in balances CSV: {missing}")

    checking = None
    balances: Dict[str, Decimal] = {}
    pending: Dict[str, Decimal] = {}
    statements: Dict[str, Decimal] = {}
    for _, row in df.iterrows():
        account = str(row["account"]).strip().lower()
        if account == CHECKING:
            checking = to_money(row["current"])
            continue
        if account not in CARD_KEYS:
            raise ValueError(f"Unknown account in balances CSV: {account!r}")
        balances[account] = to_money(row["current"])
        pending[account] = to_money(row.get("pending"))
        statements[account] = to_money(row.get("statement"))

    if checking is None:
        raise ValueError("Balances CSV has no checking row")

    logger.info("Loaded balances for %d cards from %s", len(balances), path)
    return BalanceSnapshot(checking=checking, balances=balances, pending=pending, statements=statements)
