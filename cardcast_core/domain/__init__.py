from cardcast_core.domain.models import (  # noqa: F401
    CARD_KEYS,
    BalanceSnapshot,
    CardRule,
    DailySnapshot,
    ProjectionSummary,
    RuleSet,
    SegmentPlan,
    SimulationState,
    UpcomingEvent,
    to_money,
)

__all__ = [
    "CARD_KEYS",
    "BalanceSnapshot",
    "CardRule",
    "DailySnapshot",
    "ProjectionSummary",
    "RuleSet",
    "SegmentPlan",
    "SimulationState",
    "UpcomingEvent",
    "to_money",
]
