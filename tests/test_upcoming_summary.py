import datetime as dt
from decimal import Decimal

import pandas as pd

from cardcast_core.domain.models import CardRule
from cardcast_core.services import frame, simulator, summary, upcoming

from conftest import make_rules

TODAY = dt.date(2025, 11, 1)


def test_upcoming_events_flatten_next_month(rules):
    rows = simulator.simulate(rules, 2)
    events = upcoming.upcoming_events(rows, TODAY)

    assert [(e.date.day, e.type) for e in events] == [
        (6, "Spending"),
        (13, "Paycheck"),
        (13, "Spending"),
        (20, "Spending"),
        (23, "Rent"),
        (27, "Paycheck"),
        (27, "Spending"),
    ]
    assert events[1].is_income
    assert not events[4].is_income
    assert events[4].amount == Decimal("1760")
    assert len(upcoming.upcoming_events(rows, TODAY, limit=3)) == 3


def test_upcoming_events_skip_past_days_and_label_cards():
    rules = make_rules(
        cards={"card_a": CardRule(label="BofA", balance=Decimal("900"), payment_amount=Decimal("250"), payment_day=3)}
    )
    rows = simulator.simulate(rules, 2)
    events = upcoming.upcoming_events(rows, dt.date(2025, 11, 10), labels={"card_a": "BofA", "card_b": "B", "card_c": "C"})

    assert events[0].date >= dt.date(2025, 11, 10)
    assert (dt.date(2025, 12, 3), "BofA Payment", Decimal("250")) in [(e.date, e.type, e.amount) for e in events]
    assert all(e.date <= dt.date(2025, 12, 10) for e in events)


def test_summary_figures(rules):
    rows = simulator.simulate(rules, 1)
    stats = summary.summarize(rules, rows, TODAY)

    assert stats.total_paychecks == Decimal("4000")
    assert stats.total_spending == Decimal("800")
    assert stats.total_rent == Decimal("1760")
    assert stats.ending_checking == Decimal("3240")
    assert stats.projected_balance == Decimal("2440")
    assert stats.status == "good"
    assert stats.next_payday == dt.date(2025, 11, 13)
    assert stats.days_until_payday == 12
    assert stats.lowest_checking == Decimal("1000")
    assert stats.lowest_checking_date == TODAY
    assert not stats.goes_negative
    assert stats.monthly_costs == Decimal("2626")


def test_summary_reports_first_negative_day():
    rules = make_rules(checking=Decimal("0"), paycheck_amount=Decimal("0"))
    stats = summary.summarize(rules, simulator.simulate(rules, 1), TODAY)
    assert stats.first_negative_date == dt.date(2025, 11, 23)
    assert stats.status == "critical"


def test_balance_status_levels():
    assert summary.balance_status(Decimal("5000")) == "excellent"
    assert summary.balance_status(Decimal("2000")) == "good"
    assert summary.balance_status(Decimal("0")) == "warning"
    assert summary.balance_status(Decimal("-0.01")) == "critical"


def test_frame_and_monthly_rollup(rules):
    rows = simulator.simulate(rules, 4)
    df = frame.to_frame(rows)

    assert len(df) == len(rows)
    assert isinstance(df.index, pd.DatetimeIndex)
    last = df.iloc[-1]
    assert last["total_balance"] == last["checking"] - last["card_a"] - last["card_b"] - last["card_c"]

    monthly = frame.monthly_rollup(df)
    assert [str(p) for p in monthly.index] == ["2025-11", "2025-12", "2026-01", "2026-02", "2026-03"]
    assert monthly.loc[pd.Period("2025-11", freq="M"), "rent"] == 1760.0
    assert monthly.loc[pd.Period("2025-11", freq="M"), "checking"] == 3240.0


def test_frame_of_nothing_is_empty():
    assert frame.to_frame([]).empty
