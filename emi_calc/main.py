"""Command-line interface for the EMI calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute the amortization schedule for a payment
frequency, view the summary or the yearly breakdown, and export results to
JSON/CSV files. Exports carry the engine's values unrounded.
"""

from __future__ import annotations

import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import click

from .data_models import Frequency, LoanParameters, NoSchedule, ScheduleResult
from .engine import compute_schedule
from .formatter import print_periods, print_schedule, print_summary, print_yearly
from .utils import parse_amount, parse_date, parse_percent

MAX_ROWS = 120

logger = logging.getLogger(__name__)


def build_parameters(
    principal: str,
    rate: str,
    years: int,
    extra_months: int,
    start_date: str,
    frequency: str,
) -> LoanParameters:
    """Turn raw option strings into ``LoanParameters``.

    Raises ``click.BadParameter`` for values that are not numbers or dates.
    Numbers that parse but make no valid loan (zero principal, zero rate)
    are accepted here and rejected by the engine.
    """
    try:
        principal_value = parse_amount(principal)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--principal")
    try:
        rate_value = parse_percent(rate)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--rate")
    try:
        start = parse_date(start_date)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--start-date")
    try:
        freq = Frequency.parse(frequency)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--frequency")
    return LoanParameters(
        principal=principal_value,
        annual_rate_percent=rate_value,
        term_years=years,
        extra_months=extra_months,
        start_date=start,
        frequency=freq,
    )


def run(params: LoanParameters) -> ScheduleResult:
    """Compute the schedule or exit with status 1 if there is none."""
    result = compute_schedule(params)
    if isinstance(result, NoSchedule):
        click.echo(f"No schedule: {result.reason}", err=True)
        sys.exit(1)
    return result


def summary_to_dict(result: ScheduleResult) -> Dict[str, Any]:
    summary = result.summary
    return {
        "principal": float(summary.principal),
        "annual_rate_percent": float(result.parameters.annual_rate_percent),
        "frequency": summary.frequency.value,
        "installment": float(summary.period_installment),
        "monthly_installment": float(summary.monthly_installment),
        "total_interest": float(summary.total_interest),
        "total_payment": float(summary.total_payment),
        "total_months": summary.total_months,
        "start_date": result.parameters.start_date.isoformat(),
        "end_date": summary.end_date.isoformat(),
        "effective_annual_rate": float(result.effective_annual_rate),
    }


def monthly_rows(result: ScheduleResult) -> List[Dict[str, Any]]:
    return [
        {
            "month": r.month,
            "date": r.date.isoformat(),
            "principal": float(r.principal_portion),
            "interest": float(r.interest_portion),
            "balance": float(r.remaining_balance),
        }
        for r in result.monthly
    ]


def period_rows(result: ScheduleResult) -> List[Dict[str, Any]]:
    return [
        {
            "period": r.period,
            "date": r.date.isoformat(),
            "months": r.months,
            "principal": float(r.principal_portion),
            "interest": float(r.interest_portion),
            "balance": float(r.closing_balance),
        }
        for r in result.periods
    ]


def export_to_json(path: Path, result: ScheduleResult) -> None:
    """Export summary, periodic and monthly schedules to a JSON file."""
    data = {
        "summary": summary_to_dict(result),
        "periods": period_rows(result),
        "schedule": monthly_rows(result),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    """Export schedule rows (monthly or periodic) to a CSV file."""
    if not rows:
        raise click.ClickException("Nothing to export: the schedule has no rows for this view")
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)


def loan_options(func: Callable) -> Callable:
    """Attach the loan parameter options shared by all commands."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (accepts 270k, 1.2m)"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--years", "-y", "years", type=int, default=0, show_default=True, help="Loan term in years"),
        click.option(
            "--extra-months", "-e", "extra_months", type=int, default=0, show_default=True,
            help="Months added to the term in years",
        ),
        click.option("--start-date", "-s", "start_date", required=True, help="First payment date (YYYY-MM-DD)"),
        click.option(
            "--frequency", "-f", "frequency",
            type=click.Choice([f.value for f in Frequency]), default="monthly", show_default=True,
            help="Payment frequency for the periodic view",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """An EMI loan calculator with monthly, quarterly and half-yearly views."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option(
    "--view", "view", type=click.Choice(["period", "monthly"]), default="period", show_default=True,
    help="Print periods of the selected frequency or every month",
)
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: str,
    years: int,
    extra_months: int,
    start_date: str,
    frequency: str,
    view: str,
    output: Optional[str],
) -> None:
    """Compute and print the amortization schedule."""
    params = build_parameters(principal, rate, years, extra_months, start_date, frequency)
    result = run(params)
    logger.debug("Computed %d months, %d periods", len(result.monthly), len(result.periods))
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, monthly_rows(result) if view == "monthly" else period_rows(result))
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(result)
    rows = result.monthly if view == "monthly" else result.periods
    # Limit schedule length printed to avoid flooding the terminal
    if len(rows) > MAX_ROWS:
        click.echo(f"Schedule has {len(rows)} rows; showing first {MAX_ROWS} rows.")
    if view == "monthly":
        print_schedule(result.monthly[:MAX_ROWS])
    else:
        print_periods(result.periods[:MAX_ROWS], result.frequency.value)
    dropped = len(result.monthly) - sum(p.months for p in result.periods)
    if view == "period" and dropped:
        click.echo(f"{dropped} trailing month(s) do not fill a {result.frequency.value} period; see --view monthly.")


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: str,
    years: int,
    extra_months: int,
    start_date: str,
    frequency: str,
    output: Optional[str],
) -> None:
    """Compute and print only the summary for a loan."""
    params = build_parameters(principal, rate, years, extra_months, start_date, frequency)
    result = run(params)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_to_dict(result)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result)


@cli.command()
@loan_options
def yearly(
    principal: str,
    rate: str,
    years: int,
    extra_months: int,
    start_date: str,
    frequency: str,
) -> None:
    """Print principal and interest paid in each loan year."""
    params = build_parameters(principal, rate, years, extra_months, start_date, frequency)
    result = run(params)
    print_yearly(result.yearly)


if __name__ == "__main__":
    cli()
