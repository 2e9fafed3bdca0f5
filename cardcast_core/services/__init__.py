from cardcast_core.services.chain import seed_next, simulate_chain  # noqa: F401
from cardcast_core.services.frame import monthly_rollup, to_frame  # noqa: F401
from cardcast_core.services.simulator import simulate, simulate_minimum_payments, step_day  # noqa: F401
from cardcast_core.services.summary import summarize  # noqa: F401
from cardcast_core.services.upcoming import upcoming_events  # noqa: F401

__all__ = [
    "simulate",
    "simulate_minimum_payments",
    "step_day",
    "simulate_chain",
    "seed_next",
    "upcoming_events",
    "summarize",
    "to_frame",
    "monthly_rollup",
]
