from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from cardcast_core.domain.models import CARD_KEYS, ZERO, DailySnapshot, RuleSet, SimulationState
from cardcast_core.services import schedule

logger = logging.getLogger(__name__)

NEGATIVE_FLAG = "NEGATIVE"
STOPPED_FLAG = "STOPPED - Negative Cash"
PENDING_WINDOW = (1, 2)


def _resolve_start(rules: RuleSet, today: Optional[dt.date]) -> dt.date:
    if rules.start_date is not None:
        return rules.start_date
    if today is None:
        raise ValueError("Rule set has no start_date; pass today= explicitly")
    return today


def _join(notes: List[str]) -> str:
    return ", ".join(notes)


def initial_state(rules: RuleSet, start: dt.date) -> SimulationState:
    return SimulationState(
        start=start,
        checking=rules.checking,
        balances={key: rules.card(key).balance for key in CARD_KEYS},
        pending_posted=False,
        last_spending=start - dt.timedelta(days=schedule.WEEK_DAYS),
    )


def step_day(
    state: SimulationState,
    date: dt.date,
    rules: RuleSet,
    minimum: bool = False,
) -> Tuple[SimulationState, DailySnapshot]:
    """
    Apply one day's events to the running balances, in order:
    pending posting, paycheck, card payments, weekly spending, rent.
    With minimum=True card payments use the statement balance instead of the
    configured amount.
    """
    checking = state.checking
    balances = dict(state.balances)
    pending_posted = state.pending_posted
    last_spending = state.last_spending
    notes: List[str] = []
    debited = False

    paycheck = ZERO
    spending = ZERO
    rent = ZERO
    payments: Dict[str, Decimal] = {key: ZERO for key in CARD_KEYS}

    if not pending_posted:
        elapsed = schedule.days_between(state.start, date)
        if PENDING_WINDOW[0] <= elapsed <= PENDING_WINDOW[1]:
            for key in CARD_KEYS:
                card = rules.card(key)
                if card.pending:
                    balances[key] += card.pending
                    notes.append(f"Pending {card.label}")
            pending_posted = True

    if schedule.is_payday(date, rules.payday_reference, rules.payday_weekday):
        paycheck = rules.paycheck_amount
        checking += paycheck
        notes.append("Payday")

    for key in CARD_KEYS:
        card = rules.card(key)
        if not schedule.is_monthly_due(date, card.payment_day):
            continue
        target = card.statement if minimum else card.payment_amount
        if target > 0 and balances[key] > 0:
            payment = min(target, balances[key])
            checking -= payment
            balances[key] -= payment
            payments[key] = payment
            debited = True
            notes.append(f"{card.label} {'Min' if minimum else 'Payment'}")

    if date.weekday() == rules.spending_weekday and schedule.is_weekly_due(date, last_spending):
        spending = rules.weekly_spending
        balances[rules.spending_card] += spending
        last_spending = date
        if spending:
            notes.append("Spending")

    if schedule.is_monthly_due(date, rules.rent_day):
        rent = rules.rent
        checking -= rent
        debited = True
        notes.append("Rent")

    text = _join(notes)
    if debited and checking < 0:
        text = f"{text} {NEGATIVE_FLAG}"

    snapshot = DailySnapshot(
        date=date,
        paycheck=paycheck,
        spending=spending,
        rent=rent,
        payments=payments,
        checking=checking,
        balances=dict(balances),
        notes=text,
    )
    new_state = dataclasses.replace(
        state,
        checking=checking,
        balances=balances,
        pending_posted=pending_posted,
        last_spending=last_spending,
    )
    return new_state, snapshot


def _walk(rules: RuleSet, start: dt.date, end: dt.date, minimum: bool) -> List[DailySnapshot]:
    state = initial_state(rules, start)
    rows: List[DailySnapshot] = []
    current = start
    while current <= end:
        state, snapshot = step_day(state, current, rules, minimum=minimum)
        if minimum and snapshot.checking < 0:
            stopped = f"{snapshot.notes} {STOPPED_FLAG}" if snapshot.notes else STOPPED_FLAG
            rows.append(dataclasses.replace(snapshot, notes=stopped))
            logger.info("Minimum payments exhaust checking on %s", current.isoformat())
            break
        rows.append(snapshot)
        current += dt.timedelta(days=1)
    return rows


def simulate(rules: RuleSet, horizon_months: int = 4, *, today: Optional[dt.date] = None) -> List[DailySnapshot]:
    """Project balances under the configured payment strategy."""
    start = _resolve_start(rules, today)
    start, end = schedule.projection_window(start, horizon_months, rules.start_date is not None)
    logger.debug("Projecting %s -> %s (%d months)", start, end, horizon_months)
    return _walk(rules, start, end, minimum=False)


def simulate_minimum_payments(
    rules: RuleSet,
    max_months: int = 12,
    *,
    today: Optional[dt.date] = None,
) -> List[DailySnapshot]:
    """
    Pay only each card's statement balance on its due day and stop on the first
    day checking goes negative.
    """
    start = _resolve_start(rules, today)
    end = schedule.add_months(start, max_months)
    logger.debug("Minimum-payment projection %s -> %s", start, end)
    return _walk(rules, start, end, minimum=True)
