from __future__ import annotations

import dataclasses
import datetime as dt
import enum
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cardcast_core.domain.models import CARD_KEYS, DailySnapshot, RuleSet, UpcomingEvent
from cardcast_core.io import balances as balances_io
from cardcast_core.io import bank as bank_io
from cardcast_core.io import config as config_io
from cardcast_core.services import chain, frame, simulator, summary, upcoming

app = typer.Typer(help="Cardcast CLI: day-by-day checking and credit card projections.")
console = Console()


class OutputFormat(str, enum.Enum):
    table = "table"
    json = "json"
    csv = "csv"


RULES_OPTION = typer.Option(..., envvar="CARDCAST_RULES", help="Rule set JSON")
BALANCES_OPTION = typer.Option(None, help="Balances CSV (account,current,pending,statement)")
BANK_OPTION = typer.Option(None, help="Bank balances payload JSON")
BANK_MAP_OPTION = typer.Option(None, help="JSON mapping bank account id/name to checking or card key")
START_OPTION = typer.Option(None, help="Projection start date (YYYY-MM-DD)")
TODAY_OPTION = typer.Option(None, help="Override today's date (YYYY-MM-DD)")
FORMAT_OPTION = typer.Option(OutputFormat.table, "--format", help="Output format")
OUT_OPTION = typer.Option(None, help="Write output to this path instead of stdout")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _parse_date(raw: Optional[str], name: str) -> Optional[dt.date]:
    if not raw:
        return None
    try:
        return dt.date.fromisoformat(raw)
    except ValueError as exc:
        raise typer.BadParameter(f"{name} must be YYYY-MM-DD, got {raw!r}") from exc


def _load_rules(
    rules: Path,
    balances: Optional[Path],
    bank: Optional[Path],
    bank_map: Optional[Path],
    start: Optional[str],
) -> RuleSet:
    try:
        rule_set = config_io.load_rule_set(rules)
        if balances:
            rule_set = rule_set.with_snapshot(balances_io.load_balances(balances))
        elif bank:
            if not bank_map:
                raise typer.BadParameter("--bank requires --bank-map")
            with bank_map.open("r", encoding="utf-8") as f:
                mapping = json.load(f)
            rule_set = rule_set.with_snapshot(bank_io.load_bank_snapshot(bank, mapping))
    except (ValueError, FileNotFoundError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    start_date = _parse_date(start, "--start")
    if start_date:
        rule_set = dataclasses.replace(rule_set, start_date=start_date)
    return rule_set


def _snapshot_to_json(row: DailySnapshot) -> dict:
    record = row.to_record()
    payload = {k: float(v) if k not in ("date", "notes") else v for k, v in record.items()}
    payload["date"] = row.date.isoformat()
    return payload


def _render_table(rows: List[DailySnapshot], title: str, labels: dict) -> None:
    table = Table(title=title)
    table.add_column("Date")
    for name in ["Paycheck", "Spending", "Rent"] + [f"{labels[k]} Pmt" for k in CARD_KEYS]:
        table.add_column(name, justify="right")
    table.add_column("Checking", justify="right")
    for key in CARD_KEYS:
        table.add_column(labels[key], justify="right")
    table.add_column("Notes")

    def fmt(v) -> str:
        return f"{v:,.2f}" if v else ""

    for row in rows:
        checking = f"{row.checking:,.2f}"
        if row.checking < 0:
            checking = f"[red]{checking}[/red]"
        table.add_row(
            row.date.strftime("%d-%b-%Y"),
            fmt(row.paycheck),
            fmt(row.spending),
            fmt(row.rent),
            *[fmt(row.payments[k]) for k in CARD_KEYS],
            checking,
            *[f"{row.balances[k]:,.2f}" for k in CARD_KEYS],
            row.notes,
        )
    console.print(table)


def _emit(rows: List[DailySnapshot], rules: RuleSet, fmt: OutputFormat, out: Optional[Path], title: str) -> None:
    if fmt == "json":
        payload = {"rules": config_io.rule_set_to_dict(rules), "rows": [_snapshot_to_json(r) for r in rows]}
        if out:
            _save_json(out, payload)
            typer.echo(f"Projection written to {out}")
        else:
            typer.echo(json.dumps(payload, indent=2))
    elif fmt == "csv":
        text = frame.to_frame(rows).to_csv()
        if out:
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(text, encoding="utf-8")
            typer.echo(f"Projection written to {out}")
        else:
            typer.echo(text)
    else:
        labels = {k: rules.card(k).label for k in CARD_KEYS}
        _render_table(rows, title, labels)


def _today(raw: Optional[str]) -> dt.date:
    return _parse_date(raw, "--today") or dt.date.today()


def _from_today(rule_set: RuleSet, now: dt.date) -> RuleSet:
    if rule_set.start_date is not None and rule_set.start_date < now:
        return dataclasses.replace(rule_set, start_date=now)
    return rule_set


@app.command()
def project(
    rules: Path = RULES_OPTION,
    months: int = typer.Option(4, help="Months to project"),
    balances: Optional[Path] = BALANCES_OPTION,
    bank: Optional[Path] = BANK_OPTION,
    bank_map: Optional[Path] = BANK_MAP_OPTION,
    start: Optional[str] = START_OPTION,
    today: Optional[str] = TODAY_OPTION,
    fmt: OutputFormat = FORMAT_OPTION,
    out: Optional[Path] = OUT_OPTION,
):
    """Project balances day by day under the configured payment strategy."""
    rule_set = _load_rules(rules, balances, bank, bank_map, start)
    rows = simulator.simulate(rule_set, months, today=_today(today))
    _emit(rows, rule_set, fmt, out, f"Cash Flow Projection ({months} months)")


@app.command()
def minimum(
    rules: Path = RULES_OPTION,
    max_months: int = typer.Option(12, help="Longest horizon to try"),
    balances: Optional[Path] = BALANCES_OPTION,
    bank: Optional[Path] = BANK_OPTION,
    bank_map: Optional[Path] = BANK_MAP_OPTION,
    start: Optional[str] = START_OPTION,
    today: Optional[str] = TODAY_OPTION,
    fmt: OutputFormat = FORMAT_OPTION,
    out: Optional[Path] = OUT_OPTION,
):
    """Pay statement minimums until checking runs out."""
    rule_set = _load_rules(rules, balances, bank, bank_map, start)
    rows = simulator.simulate_minimum_payments(rule_set, max_months, today=_today(today))
    _emit(rows, rule_set, fmt, out, "Minimum Payment Runway")
    if fmt == "table" and rows and rows[-1].checking < 0:
        console.print(f"[red]Checking runs out on {rows[-1].date.isoformat()}[/red]")


@app.command(name="chain")
def chain_cmd(
    plan: Path = typer.Option(..., help="Plan JSON with per-segment months and payments"),
    rules: Path = RULES_OPTION,
    balances: Optional[Path] = BALANCES_OPTION,
    bank: Optional[Path] = BANK_OPTION,
    bank_map: Optional[Path] = BANK_MAP_OPTION,
    start: Optional[str] = START_OPTION,
    today: Optional[str] = TODAY_OPTION,
    fmt: OutputFormat = FORMAT_OPTION,
    out: Optional[Path] = OUT_OPTION,
):
    """Run back-to-back segments, each seeded from the previous segment's last day."""
    rule_set = _load_rules(rules, balances, bank, bank_map, start)
    try:
        plans = config_io.load_plan(plan)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    rows = chain.simulate_chain(rule_set, plans, today=_today(today))
    _emit(rows, rule_set, fmt, out, f"Chained Projection ({len(plans)} segments)")


def _events_to_json(events: List[UpcomingEvent]) -> list:
    return [{"date": e.date.isoformat(), "type": e.type, "amount": float(e.amount)} for e in events]


@app.command(name="upcoming")
def upcoming_cmd(
    rules: Path = RULES_OPTION,
    months: int = typer.Option(1, help="How far ahead to list events"),
    limit: Optional[int] = typer.Option(None, help="Show at most this many events"),
    balances: Optional[Path] = BALANCES_OPTION,
    start: Optional[str] = START_OPTION,
    today: Optional[str] = TODAY_OPTION,
    fmt: OutputFormat = FORMAT_OPTION,
):
    """List paychecks, payments, rent and spending coming up."""
    rule_set = _load_rules(rules, balances, None, None, start)
    now = _today(today)
    rule_set = _from_today(rule_set, now)
    rows = simulator.simulate(rule_set, max(months, 1) + 1, today=now)
    labels = {k: rule_set.card(k).label for k in CARD_KEYS}
    events = upcoming.upcoming_events(rows, now, months=months, limit=limit, labels=labels)
    if fmt == "json":
        typer.echo(json.dumps(_events_to_json(events), indent=2))
        return
    if not events:
        console.print("No upcoming payments")
        return
    for event in events:
        sign, color = ("+", "green") if event.is_income else ("-", "red")
        console.print(
            f"{event.date.strftime('%a %b %d')}  {event.type:<20} [{color}]{sign}${event.amount:,.2f}[/{color}]"
        )


@app.command(name="summary")
def summary_cmd(
    rules: Path = RULES_OPTION,
    months: int = typer.Option(4, help="Months to project"),
    balances: Optional[Path] = BALANCES_OPTION,
    start: Optional[str] = START_OPTION,
    today: Optional[str] = TODAY_OPTION,
    fmt: OutputFormat = FORMAT_OPTION,
):
    """Quick stats for a projection."""
    rule_set = _load_rules(rules, balances, None, None, start)
    now = _today(today)
    rule_set = _from_today(rule_set, now)
    rows = simulator.simulate(rule_set, months, today=now)
    stats = summary.summarize(rule_set, rows, now)
    if fmt == "json":
        payload = {
            k: (float(v) if hasattr(v, "as_tuple") else v.isoformat() if isinstance(v, dt.date) else v)
            for k, v in dataclasses.asdict(stats).items()
            if k != "total_payments"
        }
        payload["total_payments"] = {k: float(v) for k, v in stats.total_payments.items()}
        typer.echo(json.dumps(payload, indent=2))
        return

    status_color = {"excellent": "green", "good": "green", "warning": "yellow"}.get(stats.status, "red")
    console.print(f"[bold cyan]== Quick Stats ==[/bold cyan]  [{status_color}]{stats.status.upper()}[/{status_color}]")
    console.print(f"Total card debt today: [bold]{stats.starting_card_debt:,.2f}[/bold]")
    if stats.next_payday is not None:
        console.print(f"Next paycheck: {stats.next_payday.isoformat()} ({stats.days_until_payday} days)")
    console.print(f"End balance (checking - cards): [bold]{stats.projected_balance:,.2f}[/bold]")
    console.print(f"Lowest checking: {stats.lowest_checking:,.2f} on {stats.lowest_checking_date}")
    console.print(f"Monthly costs: {stats.monthly_costs:,.2f}")
    monthly = frame.monthly_rollup(frame.to_frame(rows))
    table = Table(title="By month")
    table.add_column("Month")
    for col in ("paycheck", "spending", "rent", "checking", "total_balance"):
        table.add_column(col, justify="right")
    for period, rec in monthly.iterrows():
        table.add_row(str(period), *[f"{rec[c]:,.2f}" for c in ("paycheck", "spending", "rent", "checking", "total_balance")])
    console.print(table)
    if stats.goes_negative:
        console.print(
            f"[red]Heads up: checking goes negative on {stats.first_negative_date.isoformat()}. "
            "Consider paying less on cards or reducing spending.[/red]"
        )


if __name__ == "__main__":
    app()
