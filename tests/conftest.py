"""Shared fixtures.

Reference loan: 270 000 at 6 % for 6 years (72 months, 0.5 % a month),
first payment on 2026-02-12. Installment 4474.679731...
"""

from datetime import date
from decimal import Decimal

import pytest

from emi_calc.data_models import Frequency, LoanParameters


def make_params(**overrides) -> LoanParameters:
    values = dict(
        principal=Decimal("270000"),
        annual_rate_percent=Decimal("6"),
        term_years=6,
        extra_months=0,
        start_date=date(2026, 2, 12),
        frequency=Frequency.MONTHLY,
    )
    values.update(overrides)
    return LoanParameters(**values)


@pytest.fixture
def reference_params() -> LoanParameters:
    return make_params()


@pytest.fixture
def params_factory():
    return make_params
