"""Core calculation engine for the EMI calculator.

This module builds the monthly amortization schedule of an equated monthly
installment (EMI) loan and derives everything else from it: the periodic view
for the selected payment frequency, the summary totals and the yearly
breakdown. All functions are pure. Amounts are carried at full ``Decimal``
precision; rounding to two places is left to the presentation layer.

Invalid parameters do not raise. ``compute_schedule`` and
``generate_monthly_schedule`` return a ``NoSchedule`` value instead.
"""

from __future__ import annotations

import logging
from decimal import Decimal, DivisionByZero, InvalidOperation, Overflow, getcontext, localcontext
from typing import List, Optional, Sequence, Union

from .data_models import (
    Frequency,
    LoanParameters,
    MonthlyRecord,
    NoSchedule,
    PeriodRecord,
    ScheduleResult,
    Summary,
    YearRecord,
)
from .utils import add_months

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

# No real loan is longer; also bounds the loop and (1 + i)^n.
MAX_TOTAL_MONTHS = 1200

ZERO = Decimal("0")


def validate_parameters(params: LoanParameters) -> Optional[NoSchedule]:
    """Return a ``NoSchedule`` describing the first failed check, or ``None``."""
    principal = params.principal
    if not isinstance(principal, Decimal) or not principal.is_finite() or principal <= 0:
        return NoSchedule("principal must be a positive number")
    rate = params.annual_rate_percent
    if not isinstance(rate, Decimal) or not rate.is_finite() or rate <= 0:
        return NoSchedule("annual interest rate must be a positive number")
    if params.term_years < 0 or params.extra_months < 0:
        return NoSchedule("term years and extra months cannot be negative")
    if params.total_months <= 0:
        return NoSchedule("loan term must be at least one month")
    if params.total_months > MAX_TOTAL_MONTHS:
        return NoSchedule(f"loan term cannot exceed {MAX_TOTAL_MONTHS} months")
    try:
        add_months(params.start_date, params.total_months - 1)
    except ValueError:
        return NoSchedule("last payment date is past the supported calendar range")
    return _check_magnitudes(params)


def _check_magnitudes(params: LoanParameters) -> Optional[NoSchedule]:
    # Positive inputs can still be too small or too large for 28-digit arithmetic.
    rate_per_month = params.monthly_rate
    with localcontext() as ctx:
        ctx.traps[Overflow] = True
        ctx.traps[DivisionByZero] = True
        ctx.traps[InvalidOperation] = True
        try:
            factor = (1 + rate_per_month) ** params.total_months
        except Overflow:
            return NoSchedule("interest rate out of range")
        if not factor.is_finite() or factor - 1 <= 0:
            return NoSchedule("interest rate out of range")
        try:
            total = params.principal * rate_per_month * factor / (factor - 1) * params.total_months
        except (Overflow, DivisionByZero, InvalidOperation):
            return NoSchedule("principal out of range")
        if not total.is_finite():
            return NoSchedule("principal out of range")
    return None


def calculate_installment(principal: Decimal, rate_per_month: Decimal, months: int) -> Decimal:
    """Return the equated monthly installment for a loan.

    The formula is:

        payment = P * i * (1 + i)^n / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments.
    """
    if months <= 0:
        raise ValueError("Number of months must be positive")
    if rate_per_month <= 0:
        raise ValueError("Monthly rate must be positive")
    factor = (1 + rate_per_month) ** months
    return principal * rate_per_month * factor / (factor - 1)


def _amortize(params: LoanParameters, installment: Decimal) -> List[MonthlyRecord]:
    rate_per_month = params.monthly_rate
    balance = params.principal
    records: List[MonthlyRecord] = []
    for month in range(1, params.total_months + 1):
        interest = balance * rate_per_month
        principal_portion = installment - interest
        # Accumulated error can push the last balance just below zero.
        balance = max(ZERO, balance - principal_portion)
        records.append(
            MonthlyRecord(
                month=month,
                date=add_months(params.start_date, month - 1),
                principal_portion=principal_portion,
                interest_portion=interest,
                remaining_balance=balance,
            )
        )
    return records


def generate_monthly_schedule(params: LoanParameters) -> Union[List[MonthlyRecord], NoSchedule]:
    """Return one ``MonthlyRecord`` per month of the loan term.

    Parameters
    ----------
    params: LoanParameters
        The loan to amortize.

    Returns
    -------
    List[MonthlyRecord] or NoSchedule
        Records for months ``1..total_months`` in order, or ``NoSchedule``
        when the parameters fail validation. A partial schedule is never
        returned.
    """
    invalid = validate_parameters(params)
    if invalid is not None:
        logger.debug("Rejected loan parameters %s: %s", params, invalid.reason)
        return invalid
    installment = calculate_installment(params.principal, params.monthly_rate, params.total_months)
    return _amortize(params, installment)


def aggregate(monthly: Sequence[MonthlyRecord], frequency: Frequency) -> List[PeriodRecord]:
    """Group the monthly schedule into periods of the given frequency.

    Only complete periods are produced: months after the last full period
    stay visible in the monthly schedule but are left out here. Principal and
    interest are summed from the monthly records, never recomputed.
    """
    size = frequency.months_per_period
    periods: List[PeriodRecord] = []
    for period in range(1, len(monthly) // size + 1):
        chunk = monthly[(period - 1) * size : period * size]
        periods.append(
            PeriodRecord(
                period=period,
                date=chunk[0].date,
                months=len(chunk),
                principal_portion=sum((r.principal_portion for r in chunk), ZERO),
                interest_portion=sum((r.interest_portion for r in chunk), ZERO),
                closing_balance=chunk[-1].remaining_balance,
            )
        )
    return periods


def summarize(
    monthly: Sequence[MonthlyRecord],
    installment: Decimal,
    frequency: Frequency,
    principal: Decimal,
) -> Summary:
    """Derive the summary figures of a monthly schedule.

    The installment shown for quarterly and half-yearly frequencies is the
    monthly installment multiplied by the months in the period; it is not an
    annuity recomputed at that frequency.
    """
    if not monthly:
        raise ValueError("Cannot summarize an empty schedule")
    total_months = len(monthly)
    total_payment = installment * total_months
    return Summary(
        principal=principal,
        monthly_installment=installment,
        period_installment=installment * frequency.months_per_period,
        total_interest=total_payment - principal,
        total_payment=total_payment,
        frequency=frequency,
        total_months=total_months,
        end_date=monthly[-1].date,
    )


def yearly_breakdown(monthly: Sequence[MonthlyRecord]) -> List[YearRecord]:
    """Return principal and interest paid per loan year.

    The last year may hold fewer than 12 months; it is kept.
    """
    years: List[YearRecord] = []
    for start in range(0, len(monthly), 12):
        chunk = monthly[start : start + 12]
        years.append(
            YearRecord(
                year=start // 12 + 1,
                principal_portion=sum((r.principal_portion for r in chunk), ZERO),
                interest_portion=sum((r.interest_portion for r in chunk), ZERO),
            )
        )
    return years


def compute_schedule(params: LoanParameters) -> Union[ScheduleResult, NoSchedule]:
    """Compute the full result for a set of loan parameters.

    Everything is recomputed from scratch on each call; equal parameters give
    equal results.
    """
    invalid = validate_parameters(params)
    if invalid is not None:
        logger.debug("Rejected loan parameters %s: %s", params, invalid.reason)
        return invalid
    installment = calculate_installment(params.principal, params.monthly_rate, params.total_months)
    monthly = _amortize(params, installment)
    summary = summarize(monthly, installment, params.frequency, params.principal)
    return ScheduleResult(
        parameters=params,
        monthly_installment=installment,
        summary=summary,
        monthly=tuple(monthly),
        periods=tuple(aggregate(monthly, params.frequency)),
        yearly=tuple(yearly_breakdown(monthly)),
    )
