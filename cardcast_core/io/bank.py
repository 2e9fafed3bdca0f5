from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

from cardcast_core.domain.models import CARD_KEYS, ZERO, BalanceSnapshot, check_card_key, to_money

logger = logging.getLogger(__name__)

CHECKING = "checking"


def _target(account: Mapping[str, Any], account_map: Mapping[str, str]) -> str | None:
    for ident in (account.get("id"), account.get("name")):
        if ident is not None and ident in account_map:
            return account_map[ident]
    return None


def snapshot_from_payload(payload: Mapping[str, Any], account_map: Mapping[str, str]) -> BalanceSnapshot:
    """
    Map a bank-aggregation balances payload onto a starting snapshot.
    `account_map` sends an account id or name to "checking" or a card key;
    unmapped accounts are ignored.
    """
    for target in account_map.values():
        if target != CHECKING:
            check_card_key(target)

    checking = None
    balances: Dict[str, Any] = {}
    statements: Dict[str, Any] = {}
    ids: Dict[str, str] = {}
    for account in payload.get("accounts", []) or []:
        target = _target(account, account_map)
        if target is None:
            continue
        if target == CHECKING:
            checking = to_money(account.get("balance"))
            continue
        balances[target] = to_money(account.get("balance"))
        credit = account.get("creditCard") or {}
        statements[target] = to_money(credit.get("lastStatementBalance"))
        ids[str(account.get("id"))] = target

    if checking is None:
        raise ValueError("Bank payload has no account mapped to checking")

    pending = {key: ZERO for key in balances}
    for tx in payload.get("recentTransactions", []) or []:
        key = ids.get(str(tx.get("accountId")))
        if key is not None and tx.get("pending"):
            pending[key] += to_money(tx.get("amount"))

    as_of = None
    if payload.get("lastUpdated"):
        as_of = dt.datetime.fromisoformat(str(payload["lastUpdated"]).replace("Z", "+00:00")).date()

    missing = [key for key in CARD_KEYS if key not in balances]
    if missing:
        logger.warning("Bank payload has no accounts for %s", ", ".join(missing))
    return BalanceSnapshot(checking=checking, balances=balances, pending=pending, statements=statements, as_of=as_of)


def load_bank_snapshot(path: str | Path, account_map: Mapping[str, str]) -> BalanceSnapshot:
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    snapshot = snapshot_from_payload(payload, account_map)
    logger.info("Loaded bank snapshot from %s", path)
    return snapshot
