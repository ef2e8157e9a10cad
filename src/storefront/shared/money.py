"""Fixed-point money helpers.

Amounts are ``Decimal`` in memory and integer minor units (cents) at rest.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
MINOR_UNITS = 100


def quantize(amount: Decimal) -> Decimal:
    """Round to the currency's minor unit, half-up."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value) -> Decimal:
    """Convert user input (str, int, Decimal) into a two-place Decimal.

    Floats go through ``str`` first so binary artefacts such as
    ``0.1 + 0.2`` never reach the ledger.
    """
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid amount: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return quantize(amount)


def to_minor(amount: Decimal) -> int:
    return int(quantize(amount) * MINOR_UNITS)


def from_minor(minor: int | None) -> Decimal:
    return quantize(Decimal(minor or 0) / MINOR_UNITS)


def format_amount(amount: Decimal) -> str:
    """Render an amount as a plain two-place string, e.g. ``"730.00"``."""
    return f"{quantize(amount):.2f}"
