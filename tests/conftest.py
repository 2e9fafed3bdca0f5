import datetime as dt
from decimal import Decimal
from pathlib import Path

import pytest

from cardcast_core.domain.models import CardRule, RuleSet

DATA = Path(__file__).parent / "data"


def make_rules(**overrides) -> RuleSet:
    cards = {
        "card_a": CardRule(label="Card A", payment_day=3),
        "card_b": CardRule(label="Card B", payment_day=8),
        "card_c": CardRule(label="Card C", payment_day=24),
    }
    for key, card in overrides.pop("cards", {}).items():
        cards[key] = card
    values = dict(
        checking=Decimal("1000"),
        payday_reference=dt.date(2025, 10, 16),
        cards=cards,
        paycheck_amount=Decimal("2000"),
        rent=Decimal("1760"),
        rent_day=23,
        weekly_spending=Decimal("200"),
        start_date=dt.date(2025, 11, 1),
    )
    values.update(overrides)
    return RuleSet(**values)


@pytest.fixture
def rules() -> RuleSet:
    return make_rules()


@pytest.fixture
def data_dir() -> Path:
    return DATA
