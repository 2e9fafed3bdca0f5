from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional

from cardcast_core.domain.models import CARD_KEYS, DEFAULT_LABELS, DailySnapshot, UpcomingEvent
from cardcast_core.services import schedule


def flatten(snapshot: DailySnapshot, labels: Optional[dict] = None) -> List[UpcomingEvent]:
    labels = labels or DEFAULT_LABELS
    events: List[UpcomingEvent] = []
    if snapshot.paycheck > 0:
        events.append(UpcomingEvent(snapshot.date, "Paycheck", snapshot.paycheck))
    if snapshot.spending > 0:
        events.append(UpcomingEvent(snapshot.date, "Spending", snapshot.spending))
    if snapshot.rent > 0:
        events.append(UpcomingEvent(snapshot.date, "Rent", snapshot.rent))
    for key in CARD_KEYS:
        amount = snapshot.payments.get(key)
        if amount and amount > 0:
            events.append(UpcomingEvent(snapshot.date, f"{labels[key]} Payment", amount))
    return events


def upcoming_events(
    snapshots: Iterable[DailySnapshot],
    today: dt.date,
    *,
    months: int = 1,
    limit: Optional[int] = None,
    labels: Optional[dict] = None,
) -> List[UpcomingEvent]:
    """Discrete (date, type, amount) feed for the next `months` months, today inclusive."""
    horizon = schedule.add_months(today, months)
    events: List[UpcomingEvent] = []
    for snapshot in snapshots:
        if today <= snapshot.date <= horizon:
            events.extend(flatten(snapshot, labels))
    if limit is not None:
        return events[:limit]
    return events
