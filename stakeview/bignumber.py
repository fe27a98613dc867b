"""Exact decimal helpers for base-unit amounts and fiat math."""
from __future__ import annotations

from decimal import Context, Decimal, InvalidOperation
from typing import Any, Iterable

# Wide enough for 18-decimal tokens times fiat prices without rounding.
DECIMAL_CONTEXT = Context(prec=80)

ZERO = Decimal(0)


def bn(value: Any) -> Decimal:
    """Build a Decimal from a string, int, float or Decimal.

    Floats go through ``str()`` so binary noise never enters an amount.
    Raises ``InvalidOperation`` on unparseable input; use :func:`bn_or_zero`
    when that is not wanted.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"Not a number: {value!r}")
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, str):
        return Decimal(value.strip())
    raise InvalidOperation(f"Not a number: {value!r}")


def bn_or_zero(value: Any) -> Decimal:
    """Like :func:`bn` but never fails: bad input becomes zero."""
    if value is None:
        return ZERO
    try:
        result = bn(value)
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def bn_sum(values: Iterable[Any]) -> Decimal:
    """Left fold from an explicit zero."""
    total = ZERO
    for value in values:
        total = DECIMAL_CONTEXT.add(total, bn_or_zero(value))
    return total


def bn_plus(a: Any, b: Any) -> Decimal:
    return DECIMAL_CONTEXT.add(bn_or_zero(a), bn_or_zero(b))


def bn_times(a: Any, b: Any) -> Decimal:
    return DECIMAL_CONTEXT.multiply(bn_or_zero(a), bn_or_zero(b))


def from_base_unit(amount: Any, precision: int) -> Decimal:
    """Convert a base-unit amount to display units (``amount / 10**precision``)."""
    return bn_or_zero(amount).scaleb(-precision, DECIMAL_CONTEXT)


def to_base_unit(amount: Any, precision: int) -> Decimal:
    """Convert a display amount to base units (``amount * 10**precision``)."""
    return bn_or_zero(amount).scaleb(precision, DECIMAL_CONTEXT)


def bn_to_string(value: Any) -> str:
    """Plain notation, no trailing zeros, ``"0"`` for zero.

    Examples:
        Decimal("25.0") → "25"
        Decimal("1E-8") → "0.00000001"
        Decimal("1.25E+6") → "1250000"
    """
    d = bn_or_zero(value)
    if d.is_zero():
        return "0"
    return format(d.normalize(DECIMAL_CONTEXT), "f")
