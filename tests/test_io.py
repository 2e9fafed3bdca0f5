import datetime as dt
import json
from decimal import Decimal

import pytest

from cardcast_core.domain.models import to_money
from cardcast_core.io import balances as balances_io
from cardcast_core.io import bank as bank_io
from cardcast_core.io import config as config_io


def test_to_money_parses_currency_strings():
    assert to_money("$1,234.50") == Decimal("1234.50")
    assert to_money("(40.00)") == Decimal("-40.00")
    assert to_money(12.1) == Decimal("12.1")
    assert to_money("") == Decimal("0")
    assert to_money(None) == Decimal("0")


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), "abc", "NaN"])
def test_to_money_rejects_garbage(bad):
    with pytest.raises(ValueError):
        to_money(bad)


def test_load_rule_set(data_dir):
    rules = config_io.load_rule_set(data_dir / "rules.json")

    assert rules.start_date == dt.date(2025, 11, 1)
    assert rules.checking == Decimal("1000")
    assert rules.card("card_c").label == "BofA 2"
    assert rules.card("card_c").balance == Decimal("9971.6")
    assert rules.card("card_b").payment_day == 8
    assert rules.spending_card == "card_c"

    again = config_io.rule_set_from_dict(config_io.rule_set_to_dict(rules))
    assert again.card("card_a").payment_amount == rules.card("card_a").payment_amount


def test_rule_set_rejects_unknown_card():
    with pytest.raises(ValueError):
        config_io.rule_set_from_dict({"payday_reference": "2025-11-20", "cards": {"amex": {}}})
    with pytest.raises(ValueError):
        config_io.rule_set_from_dict({"checking": 10})


def test_load_plan(data_dir):
    plans = config_io.load_plan(data_dir / "plan.json")
    assert [p.months for p in plans] == [1, 1]
    assert plans[1].payments == {"card_c": Decimal("500")}


def test_load_balances(data_dir):
    snap = balances_io.load_balances(data_dir / "balances.csv")

    assert snap.checking == Decimal("1250.00")
    assert snap.balances["card_c"] == Decimal("2000.00")
    assert snap.pending["card_a"] == Decimal("25.50")
    assert snap.pending["card_b"] == Decimal("0")
    assert snap.statements["card_c"] == Decimal("1900")


def test_load_balances_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        balances_io.load_balances(tmp_path / "nope.csv")

    bad = tmp_path / "bad.csv"
    bad.write_text("name,current\nchecking,10\n")
    with pytest.raises(ValueError):
        balances_io.load_balances(bad)

    unknown = tmp_path / "unknown.csv"
    unknown.write_text("account,current\nchecking,10\namex,20\n")
    with pytest.raises(ValueError):
        balances_io.load_balances(unknown)


def test_rule_set_takes_snapshot(data_dir):
    rules = config_io.load_rule_set(data_dir / "rules.json")
    seeded = rules.with_snapshot(balances_io.load_balances(data_dir / "balances.csv"))

    assert seeded.checking == Decimal("1250.00")
    assert seeded.card("card_a").balance == Decimal("500")
    assert seeded.card("card_a").payment_amount == Decimal("1000")
    assert seeded.card("card_a").label == "BofA"


def test_bank_snapshot(data_dir):
    mapping = json.loads((data_dir / "bank_map.json").read_text())
    snap = bank_io.load_bank_snapshot(data_dir / "bank.json", mapping)

    assert snap.checking == Decimal("567.45")
    assert snap.balances == {"card_a": Decimal("3800.0"), "card_b": Decimal("850.0"), "card_c": Decimal("10100.0")}
    assert snap.statements["card_b"] == Decimal("808.07")
    assert snap.pending["card_a"] == Decimal("42.1")
    assert snap.pending["card_b"] == Decimal("0")
    assert snap.pending["card_c"] == Decimal("64.25")
    assert snap.as_of == dt.date(2025, 11, 13)


def test_bank_snapshot_requires_checking():
    with pytest.raises(ValueError):
        bank_io.snapshot_from_payload({"accounts": []}, {"x": "checking"})
    with pytest.raises(ValueError):
        bank_io.snapshot_from_payload({"accounts": []}, {"x": "amex"})


def test_rule_set_rejects_bad_payday_weekday():
    with pytest.raises(ValueError):
        config_io.rule_set_from_dict({"payday_reference": "2025-11-20", "payday_weekday": 9})
