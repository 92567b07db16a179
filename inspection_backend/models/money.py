"""Fixed-point money helpers.

Amounts are ``Decimal`` values quantized to two decimal places. Float input is
converted through ``str`` so ``0.1`` stays ``0.10`` instead of picking up
binary noise.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """
    Convert a numeric value to a two-place Decimal.

    Args:
        value: int, float, Decimal or numeric string

    Returns:
        Quantized Decimal

    Raises:
        TypeError: If value is a bool or a non-numeric type
        ValueError: If value is not a finite number or has more than 26 integer digits
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not amounts")
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"not a number: {value!r}") from e
    else:
        raise TypeError(f"unsupported amount type {type(value).__name__}")

    if not amount.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"too many digits: {value!r}") from e


def round2(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(amount: Any, currency: str = "VND") -> str:
    """
    Format an amount for printed documents, e.g. ``1.234.567,5 VND``.

    Thousands are grouped with dots, decimals use a comma and trailing zeros
    are dropped. The currency code is spelled out because the standard PDF
    fonts have no glyph for the dong sign.
    """
    value = to_money(amount)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    fraction = fraction.rstrip("0")
    text = f"{grouped},{fraction}" if fraction else grouped
    return f"{sign}{text} {currency}"
