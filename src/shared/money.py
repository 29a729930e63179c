"""Fixed-point money helpers.

Amounts are held as integer minor units (cents) everywhere below the HTTP
layer so that order totals add up exactly.
"""

from decimal import Decimal, InvalidOperation

from protean.exceptions import ValidationError

MINOR_UNITS = 100


def to_minor_units(value, field: str = "price") -> int:
    """Convert a decimal amount (``"10.50"``, ``Decimal("10.5")``, ``10``) to cents.

    Amounts with more precision than a cent, negative amounts and
    non-numeric input are rejected instead of being rounded.
    """
    if isinstance(value, bool):
        raise ValidationError({field: [f"Invalid amount: {value!r}"]})

    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: [f"Invalid amount: {value!r}"]}) from None

    if not amount.is_finite():
        raise ValidationError({field: [f"Invalid amount: {value!r}"]})
    if amount < 0:
        raise ValidationError({field: ["Amount cannot be negative"]})

    cents = amount * MINOR_UNITS
    if cents != cents.to_integral_value():
        raise ValidationError({field: ["Amount cannot have more than 2 decimal places"]})

    return int(cents)


def to_decimal(cents: int) -> Decimal:
    return (Decimal(cents) / MINOR_UNITS).quantize(Decimal("0.01"))


def line_total(unit_price_cents: int, quantity: int) -> int:
    return unit_price_cents * quantity


def format_price(cents: int, symbol: str = "€") -> str:
    """Render an amount for display, e.g. ``format_price(1050) == "€10.50"``."""
    return f"{symbol}{to_decimal(cents):,.2f}"
