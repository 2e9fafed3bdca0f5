from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Sequence

from cardcast_core.domain.models import CARD_KEYS, ZERO, DailySnapshot, ProjectionSummary, RuleSet
from cardcast_core.services import schedule

WEEKS_PER_MONTH = Decimal("4.33")
STATUS_LEVELS = (
    (Decimal("5000"), "excellent"),
    (Decimal("2000"), "good"),
    (ZERO, "warning"),
)


def balance_status(balance: Decimal) -> str:
    for floor, label in STATUS_LEVELS:
        if balance >= floor:
            return label
    return "critical"


def summarize(rules: RuleSet, snapshots: Sequence[DailySnapshot], today: dt.date) -> ProjectionSummary:
    if not snapshots:
        raise ValueError("No snapshots to summarize")

    totals = {key: ZERO for key in CARD_KEYS}
    total_paychecks = total_spending = total_rent = ZERO
    lowest = snapshots[0]
    first_negative = None
    for row in snapshots:
        total_paychecks += row.paycheck
        total_spending += row.spending
        total_rent += row.rent
        for key in CARD_KEYS:
            totals[key] += row.payments.get(key, ZERO)
        if row.checking < lowest.checking:
            lowest = row
        if first_negative is None and row.checking < 0:
            first_negative = row.date

    last = snapshots[-1]
    payday = schedule.next_payday(today, rules.payday_reference, rules.payday_weekday)
    starting_debt = sum((rules.card(key).balance for key in CARD_KEYS), ZERO)

    return ProjectionSummary(
        total_paychecks=total_paychecks,
        total_spending=total_spending,
        total_rent=total_rent,
        total_payments=totals,
        starting_card_debt=starting_debt,
        ending_checking=last.checking,
        ending_card_debt=last.card_debt,
        projected_balance=last.total_balance,
        lowest_checking=lowest.checking,
        lowest_checking_date=lowest.date,
        first_negative_date=first_negative,
        next_payday=payday,
        days_until_payday=schedule.days_between(today, payday),
        monthly_costs=rules.rent + rules.weekly_spending * WEEKS_PER_MONTH,
        status=balance_status(last.total_balance),
    )
