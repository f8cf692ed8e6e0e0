from datetime import date
from decimal import Decimal

import pytest

from emi_calc.data_models import Frequency
from emi_calc.utils import add_months, decimal_from_str, parse_amount, parse_date, parse_percent


class TestAddMonths:
    def test_keeps_day_when_valid(self):
        assert add_months(date(2026, 2, 12), 1) == date(2026, 3, 12)

    def test_zero_months(self):
        assert add_months(date(2026, 2, 12), 0) == date(2026, 2, 12)

    def test_clamps_to_month_end(self):
        assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
        assert add_months(date(2026, 1, 31), 3) == date(2026, 4, 30)

    def test_leap_february(self):
        assert add_months(date(2028, 1, 31), 1) == date(2028, 2, 29)

    def test_crosses_year(self):
        assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)
        assert add_months(date(2026, 2, 12), 71) == date(2032, 1, 12)


class TestParsing:
    def test_parse_full_date(self):
        assert parse_date("2026-02-12") == date(2026, 2, 12)

    def test_parse_year_month(self):
        assert parse_date("2026-02") == date(2026, 2, 1)

    @pytest.mark.parametrize("value", ["", "2026", "2026-13-01", "2026-02-30", "feb-2026"])
    def test_parse_date_rejects(self, value):
        with pytest.raises(ValueError):
            parse_date(value)

    def test_decimal_strips_commas(self):
        assert decimal_from_str("270,000.50") == Decimal("270000.50")

    def test_decimal_rejects_text(self):
        with pytest.raises(ValueError):
            decimal_from_str("abc")

    @pytest.mark.parametrize("value", ["nan", "Infinity", "-inf"])
    def test_decimal_rejects_non_finite(self, value):
        with pytest.raises(ValueError):
            decimal_from_str(value)

    def test_amount_suffixes(self):
        assert parse_amount("270k") == Decimal("270000")
        assert parse_amount("1.2m") == Decimal("1200000")
        assert parse_amount("270000") == Decimal("270000")

    def test_amount_rejects_bare_suffix(self):
        with pytest.raises(ValueError):
            parse_amount("k")

    def test_percent(self):
        assert parse_percent("6.5%") == Decimal("6.5")
        assert parse_percent("6") == Decimal("6")


class TestFrequency:
    def test_months_per_period(self):
        assert Frequency.MONTHLY.months_per_period == 1
        assert Frequency.QUARTERLY.months_per_period == 3
        assert Frequency.HALF_YEARLY.months_per_period == 6

    @pytest.mark.parametrize("value", ["half-yearly", "HALF_YEARLY", "halfyearly", " Half-Yearly "])
    def test_parse_half_yearly_spellings(self, value):
        assert Frequency.parse(value) is Frequency.HALF_YEARLY

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            Frequency.parse("weekly")
