"""Day-based proration of monthly prices.

Pure calendar and decimal arithmetic, no persistence. A monthly price is
spread evenly over the days of the month containing ``as_of`` and charged for
the number of complete days in a range. Complete days exclude the start day
and include the end day, so January 14 to January 31 is 17 days.
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal

from protean.exceptions import ValidationError

from planbilling.shared.money import ZERO, quantize, to_decimal


def days_in_current_month(as_of: date) -> int:
    return calendar.monthrange(as_of.year, as_of.month)[1]


def end_of_month(as_of: date) -> date:
    return as_of.replace(day=days_in_current_month(as_of))


def complete_days_in(start: date, end: date) -> int:
    """Signed number of billable days between ``start`` and ``end``."""
    return (end - start).days


def default_period(today: date) -> tuple[date, date]:
    """Billing period starting tomorrow and ending with the current month.

    On the last day of a month tomorrow already belongs to the next month;
    the period then collapses to ``(tomorrow, tomorrow)`` and has no
    billable days.
    """
    tomorrow = today + timedelta(days=1)
    return tomorrow, max(end_of_month(today), tomorrow)


def amount_for_period(price, as_of: date, start: date, end: date) -> Decimal:
    """Prorated amount of a monthly ``price`` for the days between ``start`` and ``end``."""
    monthly = to_decimal(price, "price")
    days = complete_days_in(start, end)
    if days == 0:
        return ZERO

    amount = quantize(monthly / days_in_current_month(as_of) * days)
    if amount < 0:
        raise ValidationError({"amount": [f"Prorated amount for {start} to {end} would be negative ({amount})"]})
    return amount


def amount_between(price, as_of: date, date_a: date, date_b: date) -> Decimal:
    """Prorated amount for an arbitrary range, aligned to a billing period or not."""
    return amount_for_period(price, as_of, date_a, date_b)
