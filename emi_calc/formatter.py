"""Output helpers for the EMI calculator.

This module renders schedule results as plain tab separated text. Values are
rounded to two decimals here, at print time, and nowhere else.
"""

from __future__ import annotations

from typing import Iterable

import click

from .data_models import MonthlyRecord, PeriodRecord, ScheduleResult, YearRecord

PERIOD_LABELS = {
    "monthly": "Month",
    "quarterly": "Quarter",
    "half-yearly": "Half-year",
}


def print_summary(result: ScheduleResult) -> None:
    """Print the summary of a computed schedule in a human-readable format."""
    summary = result.summary
    params = result.parameters
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Principal          : {summary.principal:.2f}")
    click.echo(f"Annual rate        : {params.annual_rate_percent:.2f}%")
    click.echo(f"Term               : {summary.total_months} months")
    click.echo(f"Frequency          : {summary.frequency.value}")
    click.echo(f"Installment        : {summary.period_installment:.2f}")
    if summary.frequency.months_per_period > 1:
        click.echo(f"Monthly equivalent : {summary.monthly_installment:.2f}")
    click.echo(f"Total interest     : {summary.total_interest:.2f}")
    click.echo(f"Total payment      : {summary.total_payment:.2f}")
    click.echo(f"Effective rate     : {result.effective_annual_rate * 100:.2f}%")
    click.echo(f"First payment      : {params.start_date.isoformat()}")
    click.echo(f"Last payment       : {summary.end_date.isoformat()}")
    click.echo("-" * 72)


def print_schedule(schedule: Iterable[MonthlyRecord]) -> None:
    """Print the monthly amortization schedule as a simple table."""
    headers = ["Month", "Date", "Payment", "Principal", "Interest", "Balance"]
    click.echo("\t".join(headers))
    for record in schedule:
        row = [
            str(record.month),
            record.date.isoformat(),
            f"{record.payment:.2f}",
            f"{record.principal_portion:.2f}",
            f"{record.interest_portion:.2f}",
            f"{record.remaining_balance:.2f}",
        ]
        click.echo("\t".join(row))


def print_periods(periods: Iterable[PeriodRecord], frequency: str = "monthly") -> None:
    """Print the periodic schedule for the selected frequency."""
    headers = [PERIOD_LABELS.get(frequency, "Period"), "Date", "Payment", "Principal", "Interest", "Balance"]
    click.echo("\t".join(headers))
    for record in periods:
        row = [
            str(record.period),
            record.date.isoformat(),
            f"{record.payment:.2f}",
            f"{record.principal_portion:.2f}",
            f"{record.interest_portion:.2f}",
            f"{record.closing_balance:.2f}",
        ]
        click.echo("\t".join(row))


def print_yearly(years: Iterable[YearRecord]) -> None:
    """Print principal and interest paid per loan year."""
    click.echo("\t".join(["Year", "Principal", "Interest", "Total"]))
    for record in years:
        click.echo(
            f"Year {record.year}\t{record.principal_portion:.2f}\t"
            f"{record.interest_portion:.2f}\t{record.total:.2f}"
        )
