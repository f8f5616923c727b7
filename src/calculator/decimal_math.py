"""
Decimal Math Utilities for Deduction Benefit Calculations.

Tax-benefit figures are shown to taxpayers as advice, so all arithmetic
runs in Decimal and is rounded to cents only at the edges.

- Float: 800 * 0.1875 * 0.3 may land a hair off 45.00
- Decimal: 800 * 0.1875 * 0.30 = 45.0000 exactly
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union, Optional
import logging

logger = logging.getLogger(__name__)

# Type alias for values that can be converted to Decimal
Numeric = Union[int, float, str, Decimal]

MONEY_PLACES = Decimal("0.01")  # Round to cents
RATE_PLACES = Decimal("0.0001")  # 4 decimal places for rates

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Floats go through str() so 0.3 becomes Decimal('0.3') rather than
    its binary expansion. Booleans and non-numeric strings are rejected.

    Examples:
        >>> to_decimal(100.50)
        Decimal('100.5')
        >>> to_decimal("100.50")
        Decimal('100.50')

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Expected a numeric value, got {value!r}")
    try:
        result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Expected a numeric value, got {value!r}")
    if not result.is_finite():
        raise ValueError(f"Expected a finite value, got {value!r}")
    return result


def money(value: Numeric) -> Decimal:
    """
    Convert value to money (rounded to cents, half up).

    Examples:
        >>> money(100.999)
        Decimal('101.00')
        >>> money(100.994)
        Decimal('100.99')
    """
    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def rate(value: Numeric) -> Decimal:
    """
    Convert value to a rate (4 decimal places).

    Examples:
        >>> rate(0.1875)
        Decimal('0.1875')
    """
    return to_decimal(value).quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def subtract(a: Numeric, b: Numeric) -> Decimal:
    """Subtract b from a with Decimal precision."""
    return to_decimal(a) - to_decimal(b)


def multiply(*values: Numeric) -> Decimal:
    """
    Multiply values with Decimal precision.

    Examples:
        >>> multiply(800, 0.1875, 0.30)
        Decimal('45.00000')
    """
    result = Decimal("1")
    for v in values:
        result *= to_decimal(v)
    return result


def divide(a: Numeric, b: Numeric, default: Optional[Numeric] = None) -> Decimal:
    """
    Divide a by b with Decimal precision.

    Args:
        a: Dividend
        b: Divisor
        default: Value to return if division by zero (None raises error)

    Raises:
        InvalidOperation: If b is zero and no default provided
    """
    b_dec = to_decimal(b)
    if b_dec == 0:
        if default is not None:
            return to_decimal(default)
        raise InvalidOperation("Division by zero")
    return to_decimal(a) / b_dec


def sum_money(values) -> Decimal:
    """Sum monetary values, rounded to cents."""
    total = ZERO
    for v in values:
        total += to_decimal(v)
    return money(total)


def to_float(value: Decimal) -> float:
    """
    Convert Decimal back to float for suggestion values.

    Use at the edges only - keep Decimal internally.
    """
    return float(value)


def format_money(value: Numeric) -> str:
    """
    Format value as a dollar string, sign before the symbol.

    Examples:
        >>> format_money(1234.5)
        '$1,234.50'
        >>> format_money(-12)
        '-$12.00'
    """
    m = money(value)
    if m < 0:
        return f"-${-m:,.2f}"
    return f"${m:,.2f}"


def format_percentage(value: Numeric, decimal_places: int = 0) -> str:
    """
    Format a rate as a percentage string.

    Examples:
        >>> format_percentage(0.375, 1)
        '37.5%'
    """
    pct = multiply(value, HUNDRED)
    return f"{pct:.{decimal_places}f}%"
