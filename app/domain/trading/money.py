"""
Fixed-point money helpers.

Fiat amounts carry 2 fractional digits, crypto amounts and rates carry 8.
Binary floating point never touches a monetary value.
No framework imports. No IO.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation

FIAT_QUANTUM = Decimal("0.01")
CRYPTO_QUANTUM = Decimal("0.00000001")
RATE_QUANTUM = Decimal("0.00000001")

ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal | None:
    """Parse a numeric value into a finite Decimal.

    Floats are converted through their shortest string form so that
    ``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.

    Returns:
        The parsed Decimal, or None when the value is not a finite number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        parsed = value
    else:
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not parsed.is_finite():
        return None
    return parsed


def to_fiat(value: Decimal) -> Decimal:
    """Quantize a fiat amount to 2 places, rounding half up."""
    return value.quantize(FIAT_QUANTUM, rounding=ROUND_HALF_UP)


def to_crypto(value: Decimal) -> Decimal:
    """Quantize a crypto amount to 8 places, truncating."""
    return value.quantize(CRYPTO_QUANTUM, rounding=ROUND_DOWN)


def to_rate(value: Decimal) -> Decimal:
    """Quantize a unit price to 8 places, rounding half up."""
    return value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)
