"""
Money helpers.

Amounts are Decimal inside the application and are rounded to cents
(half up) whenever a value is produced for reporting.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENTS = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """Convert to a Decimal rounded to cents."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(value: Number, symbol: str = "$") -> str:
    """
    Format an amount as US dollars.

    Examples:
        2800 -> $2,800.00
        -12.5 -> -$12.50
    """
    amount = to_money(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
