"""Tests for day-based proration of monthly prices."""

from datetime import date
from decimal import Decimal

import pytest
from planbilling.shared.money import to_currency
from planbilling.shared.proration import (
    amount_between,
    amount_for_period,
    complete_days_in,
    days_in_current_month,
    default_period,
    end_of_month,
)
from protean.exceptions import ValidationError


class TestCalendar:
    @pytest.mark.parametrize(
        "as_of, expected",
        [
            (date(2011, 1, 14), 31),
            (date(2011, 2, 14), 28),
            (date(2012, 2, 1), 29),
            (date(2011, 4, 30), 30),
        ],
    )
    def test_days_in_current_month(self, as_of, expected):
        assert days_in_current_month(as_of) == expected

    def test_end_of_month(self):
        assert end_of_month(date(2011, 2, 14)) == date(2011, 2, 28)

    def test_complete_days_excludes_start_and_includes_end(self):
        assert complete_days_in(date(2011, 1, 14), date(2011, 1, 31)) == 17

    def test_complete_days_is_signed(self):
        assert complete_days_in(date(2011, 1, 31), date(2011, 1, 14)) == -17

    def test_complete_days_of_same_day_is_zero(self):
        assert complete_days_in(date(2011, 1, 14), date(2011, 1, 14)) == 0


class TestDefaultPeriod:
    def test_runs_from_tomorrow_to_end_of_month(self):
        assert default_period(date(2011, 1, 14)) == (date(2011, 1, 15), date(2011, 1, 31))

    def test_collapses_on_last_day_of_month(self):
        start, end = default_period(date(2011, 1, 31))
        assert start == date(2011, 2, 1)
        assert end == start
        assert complete_days_in(start, end) == 0

    def test_crosses_year_boundary(self):
        assert default_period(date(2011, 12, 31)) == (date(2012, 1, 1), date(2012, 1, 1))


class TestAmountForPeriod:
    def test_prorates_per_day_of_month(self):
        amount = amount_for_period(Decimal("31"), date(2011, 1, 14), date(2011, 1, 14), date(2011, 1, 31))
        assert amount == Decimal("17")

    @pytest.mark.parametrize("price", ["10", "29.90", "199.99", "0.01"])
    @pytest.mark.parametrize(
        "as_of, start, end",
        [
            (date(2011, 1, 14), date(2010, 12, 31), date(2011, 1, 31)),
            (date(2011, 2, 14), date(2011, 1, 31), date(2011, 2, 28)),
            (date(2012, 2, 14), date(2012, 1, 31), date(2012, 2, 29)),
            (date(2011, 4, 2), date(2011, 3, 31), date(2011, 4, 30)),
        ],
    )
    def test_full_month_equals_price(self, price, as_of, start, end):
        amount = amount_for_period(price, as_of, start, end)
        assert to_currency(amount) == Decimal(price)

    def test_zero_days_is_exactly_zero(self):
        amount = amount_for_period("29.90", date(2011, 1, 31), date(2011, 2, 1), date(2011, 2, 1))
        assert amount == Decimal("0")

    def test_keeps_eight_fractional_digits(self):
        amount = amount_for_period("10", date(2011, 1, 14), date(2011, 1, 14), date(2011, 1, 15))
        assert amount == Decimal("0.32258065")

    def test_reversed_range_is_rejected(self):
        with pytest.raises(ValidationError):
            amount_for_period("10", date(2011, 1, 14), date(2011, 1, 20), date(2011, 1, 14))

    def test_invalid_price_is_rejected(self):
        with pytest.raises(ValidationError):
            amount_for_period("ten", date(2011, 1, 14), date(2011, 1, 14), date(2011, 1, 20))

    def test_accepts_float_prices_exactly(self):
        amount = amount_for_period(12.4, date(2011, 1, 14), date(2010, 12, 31), date(2011, 1, 31))
        assert amount == Decimal("12.4")


class TestAmountBetween:
    def test_three_days_of_a_28_day_month(self):
        amount = amount_between(28, date(2011, 2, 14), date(2011, 2, 14), date(2011, 2, 17))
        assert amount == Decimal("3")

    def test_range_outside_current_period(self):
        # Price is spread over the days of the as_of month, not the range's month
        amount = amount_between(28, date(2011, 2, 14), date(2011, 3, 1), date(2011, 3, 8))
        assert amount == Decimal("7")
