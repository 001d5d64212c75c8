"""Exact decimal money helpers.

Amounts are carried as ``decimal.Decimal`` and persisted as canonical decimal
text. Internal precision is 8 fractional digits; display and comparison
happen at currency precision (2 digits).
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

INTERNAL_PLACES = Decimal("0.00000001")
CURRENCY_PLACES = Decimal("0.01")
ZERO = Decimal("0").quantize(INTERNAL_PLACES)


def to_decimal(value, field: str = "amount") -> Decimal:
    """Coerce ``value`` to Decimal, raising ValidationError when it is not a number."""
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, bool) or value is None:
        raise ValidationError({field: ["is not a valid decimal amount"]})
    elif isinstance(value, float):
        # Go through the shortest repr so 12.1 stays 12.1
        amount = Decimal(repr(value))
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError({field: ["is not a valid decimal amount"]}) from None

    if not amount.is_finite():
        raise ValidationError({field: ["is not a valid decimal amount"]})
    return amount


def quantize(amount: Decimal, field: str = "amount") -> Decimal:
    """Round to the 8-digit internal precision.

    Amounts too large to carry 8 fractional digits in the decimal context
    are rejected as invalid.
    """
    try:
        return amount.quantize(INTERNAL_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError({field: ["exceeds the supported decimal precision"]}) from None


def to_currency(amount: Decimal) -> Decimal:
    """Round to the 2-digit precision used for display and comparisons."""
    return amount.quantize(CURRENCY_PLACES, rounding=ROUND_HALF_UP)


def non_negative_text(value, field: str) -> str:
    """Validate a non-negative amount and return its canonical stored text."""
    amount = to_decimal(value, field)
    if amount < 0:
        raise ValidationError({field: ["must not be negative"]})
    return str(quantize(amount, field))
