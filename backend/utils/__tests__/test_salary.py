"""
Tests for salary annualization and display-text parsing.

Run: python3 -m pytest utils/__tests__/test_salary.py -v
"""
import pytest

from utils.salary import annualize, normalize_period, parse_salary_text, salary_range


class TestAnnualize:

    @pytest.mark.parametrize("amount,period,expected", [
        (50, "hour", 104000),
        (75, "hourly", 156000),
        (400, "day", 104000),
        (2000, "week", 104000),
        (6000, "month", 72000),
        (120000, "year", 120000),
        ("95000", None, 95000),
    ])
    def test_multipliers(self, amount, period, expected):
        assert annualize(amount, period) == expected

    @pytest.mark.parametrize("amount", [None, 0, -10, "n/a", True])
    def test_missing_or_non_positive_is_none(self, amount):
        assert annualize(amount, "year") is None

    def test_unknown_period_is_annual(self):
        assert normalize_period("fortnightly") == "year"
        assert normalize_period("PER_HOUR") == "hour"


class TestSalaryRange:

    def test_hourly_bounds(self):
        result = salary_range(50, 75, "HOURLY")
        assert (result.min, result.max) == (104000, 156000)

    def test_inverted_range_is_swapped(self):
        result = salary_range(150000, 90000)
        assert (result.min, result.max) == (90000, 150000)

    def test_zero_bound_dropped(self):
        result = salary_range(0, 90000)
        assert result.min is None
        assert result.max == 90000


class TestParseSalaryText:

    def test_annual_range(self):
        result = parse_salary_text("$105,393 - $126,512 Annually")
        assert (result.min, result.max) == (105393, 126512)
        assert result.text == "$105,393 - $126,512 Annually"

    def test_hourly_range(self):
        result = parse_salary_text("$50 - $75 Hourly")
        assert (result.min, result.max) == (104000, 156000)

    def test_single_hourly_value(self):
        result = parse_salary_text("$30 Hourly")
        assert (result.min, result.max) == (62400, 62400)

    def test_k_suffix_with_en_dash(self):
        result = parse_salary_text("$100K – $150K")
        assert (result.min, result.max) == (100000, 150000)

    def test_monthly(self):
        result = parse_salary_text("$6,000/month")
        assert result.min == 72000

    def test_no_amount_keeps_text_only(self):
        result = parse_salary_text("Competitive")
        assert result.min is None and result.max is None
        assert result.text == "Competitive"

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty(self, text):
        result = parse_salary_text(text)
        assert (result.min, result.max, result.text) == (None, None, None)
