"""Utility functions for the EMI calculator.

This module provides helpers for parsing user input into Python data types and
for calendar arithmetic. Month addition is implemented explicitly so that the
result does not depend on any date library's overflow rules: the day of the
month is kept when it exists and clamped to the month's last day otherwise.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal, InvalidOperation, getcontext

getcontext().prec = 28  # increase decimal precision to avoid rounding errors


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` or ``YYYY-MM`` string into a ``date``.

    A missing day means the first day of the month.

    Raises
    ------
    ValueError
        If the string is not a valid calendar date.
    """
    parts = value.strip().split("-")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid date string: {value}")
    try:
        year = int(parts[0])
        month = int(parts[1])
        day = int(parts[2]) if len(parts) == 3 else 1
        return date(year, month, day)
    except ValueError as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and surrounding whitespace. It raises
    ``ValueError`` if conversion fails or the value is NaN or infinite.
    """
    try:
        result = Decimal(value.replace(",", "").strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a money amount with optional ``k``/``m`` suffixes.

    ``"270k"`` means 270 000 and ``"1.2m"`` means 1 200 000.
    """
    cleaned = value.strip().lower().replace(",", "")
    factor = Decimal(1)
    if cleaned.endswith("k"):
        factor = Decimal(1_000)
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = Decimal(1_000_000)
        cleaned = cleaned[:-1]
    if not cleaned:
        raise ValueError(f"Invalid amount: {value}")
    return decimal_from_str(cleaned) * factor


def parse_percent(value: str) -> Decimal:
    """Parse an annual rate such as ``"6"`` or ``"6.5%"`` (percent units)."""
    cleaned = value.strip()
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1]
    return decimal_from_str(cleaned)
