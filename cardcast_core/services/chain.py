from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from typing import List, Optional, Sequence

from cardcast_core.domain.models import CARD_KEYS, ZERO, DailySnapshot, RuleSet, SegmentPlan
from cardcast_core.services import simulator

logger = logging.getLogger(__name__)


def seed_next(rules: RuleSet, last: DailySnapshot) -> RuleSet:
    """
    Rule set for the segment after `last`: balances carried over, pending
    charges already posted, start on the following day.
    """
    cards = {
        key: dataclasses.replace(rules.card(key), balance=last.balances[key], pending=ZERO)
        for key in CARD_KEYS
    }
    return dataclasses.replace(
        rules,
        checking=last.checking,
        cards=cards,
        start_date=last.date + dt.timedelta(days=1),
    )


def simulate_chain(
    rules: RuleSet,
    plans: Sequence[SegmentPlan],
    *,
    today: Optional[dt.date] = None,
) -> List[DailySnapshot]:
    rows: List[DailySnapshot] = []
    segment_rules = rules
    for idx, plan in enumerate(plans):
        if idx and rows:
            segment_rules = seed_next(segment_rules, rows[-1])
        if plan.payments:
            segment_rules = segment_rules.with_payments(plan.payments)
        segment = simulator.simulate(segment_rules, plan.months, today=today)
        logger.debug("Segment %d: %d days", idx + 1, len(segment))
        rows.extend(segment)
    return rows
