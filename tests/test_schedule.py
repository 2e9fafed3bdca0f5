import datetime as dt

from cardcast_core.services import schedule

REFERENCE = dt.date(2025, 11, 20)  # a Thursday


def test_payday_every_other_thursday_both_directions():
    assert schedule.is_payday(dt.date(2025, 11, 20), REFERENCE)
    assert schedule.is_payday(dt.date(2025, 12, 4), REFERENCE)
    assert schedule.is_payday(dt.date(2025, 11, 6), REFERENCE)
    assert schedule.is_payday(dt.date(2025, 10, 23), REFERENCE)
    assert not schedule.is_payday(dt.date(2025, 11, 27), REFERENCE)
    assert not schedule.is_payday(dt.date(2025, 10, 30), REFERENCE)
    assert not schedule.is_payday(dt.date(2025, 11, 21), REFERENCE)


def test_payday_explicit_weekday_must_match():
    assert not schedule.is_payday(dt.date(2025, 11, 20), REFERENCE, weekday=4)


def test_paydays_are_fourteen_days_apart():
    days = [REFERENCE + dt.timedelta(days=i) for i in range(-200, 200)]
    paydays = [d for d in days if schedule.is_payday(d, REFERENCE)]
    assert all(d.weekday() == REFERENCE.weekday() for d in paydays)
    gaps = {(b - a).days for a, b in zip(paydays, paydays[1:])}
    assert gaps == {14}


def test_monthly_due_short_month_never_fires():
    february = [dt.date(2026, 2, d) for d in range(1, 29)]
    assert not any(schedule.is_monthly_due(d, 30) for d in february)
    assert schedule.is_monthly_due(dt.date(2026, 3, 30), 30)


def test_weekly_due_after_seven_days():
    last = dt.date(2025, 11, 6)
    assert not schedule.is_weekly_due(dt.date(2025, 11, 12), last)
    assert schedule.is_weekly_due(dt.date(2025, 11, 13), last)


def test_next_payday():
    assert schedule.next_payday(dt.date(2025, 11, 21), REFERENCE) == dt.date(2025, 12, 4)
    assert schedule.next_payday(REFERENCE, REFERENCE) == REFERENCE


def test_month_arithmetic_clamps():
    assert schedule.add_months(dt.date(2026, 1, 31), 1) == dt.date(2026, 2, 28)
    assert schedule.add_months(dt.date(2025, 11, 1), 4) == dt.date(2026, 3, 1)
    assert schedule.month_end(dt.date(2024, 2, 10)) == dt.date(2024, 2, 29)


def test_projection_window_variants():
    start = dt.date(2025, 11, 15)
    assert schedule.projection_window(start, 1, True) == (start, dt.date(2025, 11, 30))
    assert schedule.projection_window(start, 1, False) == (start, dt.date(2025, 12, 15))
    assert schedule.projection_window(start, 2, True) == (start, dt.date(2026, 1, 15))
