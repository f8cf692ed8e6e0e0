"""Data models for the EMI calculator.

This module defines the dataclasses passed between the engine and its
consumers: the immutable loan parameters, the monthly and periodic schedule
records, the yearly breakdown, the summary and the overall result. Invalid
parameters are represented by ``NoSchedule`` rather than by an exception or a
bare ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Tuple


class Frequency(Enum):
    """Payment frequency selected for the periodic view."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half-yearly"

    @property
    def months_per_period(self) -> int:
        return _MONTHS_PER_PERIOD[self]

    @classmethod
    def parse(cls, value: str) -> "Frequency":
        """Return the frequency named by ``value``.

        Accepts the enum value (``"half-yearly"``), the member name
        (``"HALF_YEARLY"``) and the underscore or joined spellings.
        """
        key = value.strip().lower().replace("_", "-")
        if key == "halfyearly":
            key = "half-yearly"
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Invalid payment frequency: {value}")


_MONTHS_PER_PERIOD = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.HALF_YEARLY: 6,
}


@dataclass(frozen=True)
class LoanParameters:
    """Inputs of a schedule computation.

    Attributes
    ----------
    principal: Decimal
        Amount borrowed, in the loan's base currency unit.
    annual_rate_percent: Decimal
        Nominal annual interest rate in percent (``6`` means 6 %).
    term_years: int
        Whole years of the term.
    extra_months: int
        Months added on top of ``term_years``.
    start_date: date
        Date of the first installment. Later installments fall on the same
        day of the month where that day exists.
    frequency: Frequency
        Frequency used for the periodic view and the displayed installment.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    term_years: int
    extra_months: int
    start_date: date
    frequency: Frequency = Frequency.MONTHLY

    def __post_init__(self) -> None:
        # Accept plain ints and floats; floats go through str() to keep 0.1 as 0.1.
        for name in ("principal", "annual_rate_percent"):
            value = getattr(self, name)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                object.__setattr__(self, name, Decimal(str(value)))

    @property
    def total_months(self) -> int:
        return self.term_years * 12 + self.extra_months

    @property
    def monthly_rate(self) -> Decimal:
        return self.annual_rate_percent / Decimal(12) / Decimal(100)


@dataclass(frozen=True)
class MonthlyRecord:
    """One month of the amortization schedule."""

    month: int
    date: date
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal

    @property
    def payment(self) -> Decimal:
        return self.principal_portion + self.interest_portion


@dataclass(frozen=True)
class PeriodRecord:
    """A billing period built from consecutive monthly records.

    ``closing_balance`` is the remaining balance of the period's last month
    and ``date`` the date of its first month.
    """

    period: int
    date: date
    months: int
    principal_portion: Decimal
    interest_portion: Decimal
    closing_balance: Decimal

    @property
    def payment(self) -> Decimal:
        return self.principal_portion + self.interest_portion


@dataclass(frozen=True)
class YearRecord:
    """Principal and interest paid during one loan year (12 months)."""

    year: int
    principal_portion: Decimal
    interest_portion: Decimal

    @property
    def total(self) -> Decimal:
        return self.principal_portion + self.interest_portion


@dataclass(frozen=True)
class Summary:
    """Aggregate figures derived from the monthly schedule."""

    principal: Decimal
    monthly_installment: Decimal
    period_installment: Decimal
    total_interest: Decimal
    total_payment: Decimal
    frequency: Frequency
    total_months: int
    end_date: date


@dataclass(frozen=True)
class ScheduleResult:
    """Everything computed for one set of ``LoanParameters``."""

    parameters: LoanParameters
    monthly_installment: Decimal
    summary: Summary
    monthly: Tuple[MonthlyRecord, ...]
    periods: Tuple[PeriodRecord, ...]
    yearly: Tuple[YearRecord, ...]

    @property
    def installment_amount(self) -> Decimal:
        """Installment shown for the selected frequency."""
        return self.summary.period_installment

    @property
    def total_interest(self) -> Decimal:
        return self.summary.total_interest

    @property
    def total_payment(self) -> Decimal:
        return self.summary.total_payment

    @property
    def frequency(self) -> Frequency:
        return self.summary.frequency

    @property
    def effective_annual_rate(self) -> Decimal:
        """Annual rate compounding the monthly rate, ``(1 + i)^12 - 1``."""
        return (1 + self.parameters.monthly_rate) ** 12 - 1


@dataclass(frozen=True)
class NoSchedule:
    """Result returned instead of a schedule when the parameters are invalid.

    It is falsy, so callers can write ``if result:``; ``reason`` says which
    check failed.
    """

    reason: str

    def __bool__(self) -> bool:
        return False
