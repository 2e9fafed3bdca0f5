from cardcast_core.io.balances import load_balances  # noqa: F401
from cardcast_core.io.bank import load_bank_snapshot  # noqa: F401
from cardcast_core.io.config import (  # noqa: F401
    load_plan,
    load_rule_set,
    rule_set_from_dict,
)

__all__ = ["load_balances", "load_bank_snapshot", "load_plan", "load_rule_set", "rule_set_from_dict"]
