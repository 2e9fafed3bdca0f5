from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from cardcast_core.domain.models import (
    CARD_KEYS,
    THURSDAY,
    CardRule,
    RuleSet,
    SegmentPlan,
    check_card_key,
    default_cards,
    to_money,
)


def _date(value: Any) -> Optional[dt.date]:
    if value in (None, ""):
        return None
    try:
        return dt.date.fromisoformat(str(value))
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value!r}") from exc


def _payments(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {check_card_key(key): to_money(amount) for key, amount in (raw or {}).items()}


def _cards(raw: Dict[str, Any]) -> Dict[str, CardRule]:
    cards = default_cards()
    for key, data in (raw or {}).items():
        base = cards[check_card_key(key)]
        cards[key] = CardRule(
            label=str(data.get("label", base.label)),
            balance=to_money(data.get("balance")),
            pending=to_money(data.get("pending")),
            statement=to_money(data.get("statement")),
            payment_amount=to_money(data.get("payment_amount")),
            payment_day=int(data.get("payment_day", base.payment_day)),
        )
    return cards


def rule_set_from_dict(data: Dict[str, Any]) -> RuleSet:
    reference = _date(data.get("payday_reference"))
    if reference is None:
        raise ValueError("payday_reference is required")
    weekday = data.get("payday_weekday")
    return RuleSet(
        checking=to_money(data.get("checking")),
        payday_reference=reference,
        cards=_cards(data.get("cards", {})),
        paycheck_amount=to_money(data.get("paycheck_amount")),
        payday_weekday=int(weekday) if weekday is not None else None,
        rent=to_money(data.get("rent")),
        rent_day=int(data.get("rent_day", 23)),
        weekly_spending=to_money(data.get("weekly_spending")),
        spending_weekday=int(data.get("spending_weekday", THURSDAY)),
        spending_card=str(data.get("spending_card", "card_c")),
        start_date=_date(data.get("start_date")),
    )


def rule_set_to_dict(rules: RuleSet) -> Dict[str, Any]:
    return {
        "checking": float(rules.checking),
        "payday_reference": rules.payday_reference.isoformat(),
        "payday_weekday": rules.payday_weekday,
        "paycheck_amount": float(rules.paycheck_amount),
        "rent": float(rules.rent),
        "rent_day": rules.rent_day,
        "weekly_spending": float(rules.weekly_spending),
        "spending_weekday": rules.spending_weekday,
        "spending_card": rules.spending_card,
        "start_date": rules.start_date.isoformat() if rules.start_date else None,
        "cards": {
            key: {
                "label": card.label,
                "balance": float(card.balance),
                "pending": float(card.pending),
                "statement": float(card.statement),
                "payment_amount": float(card.payment_amount),
                "payment_day": card.payment_day,
            }
            for key, card in ((k, rules.card(k)) for k in CARD_KEYS)
        },
    }


def load_rule_set(path: str | Path) -> RuleSet:
    return rule_set_from_dict(_read_json(path))


def load_plan(path: str | Path) -> List[SegmentPlan]:
    data = _read_json(path)
    segments = data.get("segments", [])
    if not segments:
        raise ValueError("Plan has no segments")
    return [
        SegmentPlan(months=int(seg.get("months", 1)), payments=_payments(seg.get("payments", {})))
        for seg in segments
    ]


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
