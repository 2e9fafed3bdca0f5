from __future__ import annotations

import dataclasses
import datetime as dt
import math
from decimal import Decimal, InvalidOperation
from typing import Dict, Mapping, Optional, Tuple, Union

CARD_KEYS: Tuple[str, ...] = ("card_a", "card_b", "card_c")
DEFAULT_PAYMENT_DAYS: Dict[str, int] = {"card_a": 3, "card_b": 8, "card_c": 24}
DEFAULT_LABELS: Dict[str, str] = {"card_a": "Card A", "card_b": "Card B", "card_c": "Card C"}

THURSDAY = 3
ZERO = Decimal("0")

MoneyLike = Union[Decimal, int, float, str]


def to_money(value: Optional[MoneyLike]) -> Decimal:
    """
    Coerce a currency value to Decimal.
    Accepts "1,234.50", "$12", "(40.00)" for negatives, ints and floats.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite amount: {value}")
        amount = Decimal(str(value))
    elif isinstance(value, int):
        amount = Decimal(value)
    else:
        text = str(value).strip()
        if not text:
            return ZERO
        negative = text.startswith("(") and text.endswith(")")
        text = text.strip("()").replace("$", "").replace(",", "").strip()
        try:
            amount = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"Invalid money value: {value!r}") from exc
        if negative:
            amount = -amount
    if not amount.is_finite():
        raise ValueError(f"Non-finite amount: {value}")
    return amount


def check_card_key(key: str) -> str:
    if key not in CARD_KEYS:
        raise ValueError(f"Unknown card key {key!r}; expected one of {CARD_KEYS}")
    return key


@dataclasses.dataclass(frozen=True)
class CardRule:
    label: str
    balance: Decimal = ZERO
    pending: Decimal = ZERO
    statement: Decimal = ZERO
    payment_amount: Decimal = ZERO
    payment_day: int = 3


def default_cards() -> Dict[str, CardRule]:
    return {
        key: CardRule(label=DEFAULT_LABELS[key], payment_day=DEFAULT_PAYMENT_DAYS[key])
        for key in CARD_KEYS
    }


@dataclasses.dataclass(frozen=True)
class BalanceSnapshot:
    """Starting balances as supplied by a spreadsheet export or a bank feed."""

    checking: Decimal
    balances: Dict[str, Decimal]
    pending: Dict[str, Decimal] = dataclasses.field(default_factory=dict)
    statements: Dict[str, Decimal] = dataclasses.field(default_factory=dict)
    as_of: Optional[dt.date] = None


@dataclasses.dataclass(frozen=True)
class RuleSet:
    checking: Decimal
    payday_reference: dt.date
    cards: Dict[str, CardRule] = dataclasses.field(default_factory=default_cards)
    paycheck_amount: Decimal = ZERO
    payday_weekday: Optional[int] = None
    rent: Decimal = ZERO
    rent_day: int = 23
    weekly_spending: Decimal = ZERO
    spending_weekday: int = THURSDAY
    spending_card: str = "card_c"
    start_date: Optional[dt.date] = None

    def __post_init__(self) -> None:
        missing = set(CARD_KEYS) - set(self.cards)
        if missing:
            raise ValueError(f"Rule set is missing cards: {sorted(missing)}")
        check_card_key(self.spending_card)
        if self.payday_weekday is not None and self.payday_weekday not in range(7):
            raise ValueError(f"payday_weekday must be 0-6, got {self.payday_weekday}")
        if self.spending_weekday not in range(7):
            raise ValueError(f"spending_weekday must be 0-6, got {self.spending_weekday}")

    def card(self, key: str) -> CardRule:
        return self.cards[check_card_key(key)]

    def with_payments(self, amounts: Mapping[str, MoneyLike]) -> "RuleSet":
        cards = dict(self.cards)
        for key, amount in amounts.items():
            cards[key] = dataclasses.replace(self.card(key), payment_amount=to_money(amount))
        return dataclasses.replace(self, cards=cards)

    def with_snapshot(self, snapshot: BalanceSnapshot) -> "RuleSet":
        cards = {}
        for key, card in self.cards.items():
            cards[key] = dataclasses.replace(
                card,
                balance=snapshot.balances.get(key, card.balance),
                pending=snapshot.pending.get(key, card.pending),
                statement=snapshot.statements.get(key, card.statement),
            )
        return dataclasses.replace(self, checking=snapshot.checking, cards=cards)


@dataclasses.dataclass(frozen=True)
class SimulationState:
    """Running balances and cursors carried from one simulated day to the next."""

    start: dt.date
    checking: Decimal
    balances: Dict[str, Decimal]
    pending_posted: bool
    last_spending: dt.date


@dataclasses.dataclass(frozen=True)
class DailySnapshot:
    date: dt.date
    paycheck: Decimal
    spending: Decimal
    rent: Decimal
    payments: Dict[str, Decimal]
    checking: Decimal
    balances: Dict[str, Decimal]
    notes: str = ""

    @property
    def card_debt(self) -> Decimal:
        return sum(self.balances.values(), ZERO)

    @property
    def total_balance(self) -> Decimal:
        return self.checking - self.card_debt

    def to_record(self) -> Dict[str, object]:
        record: Dict[str, object] = {
            "date": self.date,
            "paycheck": self.paycheck,
            "spending": self.spending,
            "rent": self.rent,
        }
        for key in CARD_KEYS:
            record[f"{key}_payment"] = self.payments.get(key, ZERO)
        record["checking"] = self.checking
        for key in CARD_KEYS:
            record[key] = self.balances.get(key, ZERO)
        record["notes"] = self.notes
        return record


@dataclasses.dataclass(frozen=True)
class SegmentPlan:
    months: int = 1
    payments: Dict[str, Decimal] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class UpcomingEvent:
    date: dt.date
    type: str
    amount: Decimal

    @property
    def is_income(self) -> bool:
        return "paycheck" in self.type.lower()


@dataclasses.dataclass
class ProjectionSummary:
    total_paychecks: Decimal
    total_spending: Decimal
    total_rent: Decimal
    total_payments: Dict[str, Decimal]
    starting_card_debt: Decimal
    ending_checking: Decimal
    ending_card_debt: Decimal
    projected_balance: Decimal
    lowest_checking: Decimal
    lowest_checking_date: Optional[dt.date]
    first_negative_date: Optional[dt.date]
    next_payday: Optional[dt.date]
    days_until_payday: Optional[int]
    monthly_costs: Decimal
    status: str

    @property
    def goes_negative(self) -> bool:
        return self.first_negative_date is not None
