from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
# Scale of the amount columns in the database
CENT = Decimal("0.01")


def to_amount(value: Any) -> Decimal:
    """Coerce an imported amount to ``Decimal``.

    Sheet cells and form fields arrive as numbers, numeric strings, blanks or
    junk. Anything that is not a finite number becomes zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            return ZERO
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return ZERO
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def to_cents(value: Any) -> Decimal:
    """``to_amount`` rounded half-up to the stored scale, so a saved entry reads back unchanged."""
    try:
        return to_amount(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the context precision holds
        return ZERO


def clamp(value: Decimal) -> Decimal:
    return value if value > ZERO else ZERO


def to_float(value: Any) -> float:
    return float(to_amount(value))
