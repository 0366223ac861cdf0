"""Monetary type and conversion helpers.

All amounts handled by the payroll engine are ``Decimal`` so that comparisons
against bracket boundaries are exact. Floats are accepted at the edge only and
converted through their string form.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from src.payroll.errors import InvalidAmountError

Money = Decimal
"""Monetary amount in whole currency units (VND has no minor unit)."""

MoneyLike = Union[Decimal, int, float, str]

ZERO = Decimal("0")

MONEY_QUANTUM = Decimal("1")
"""Smallest amount withheld or paid out (one dong)."""


def to_money(value: MoneyLike, field_name: str = "amount") -> Money:
    """Convert a numeric value to an exact Decimal amount.

    Args:
        value: Amount as Decimal, int, str or float.
        field_name: Name used in the error message.

    Returns:
        Decimal amount.

    Raises:
        InvalidAmountError: If the value is not a finite number.

    Example:
        >>> to_money(0.1)
        Decimal('0.1')
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"{field_name} must be a number, got bool")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmountError(f"{field_name} is not a valid amount: {value!r}")
    else:
        raise InvalidAmountError(
            f"{field_name} must be a number, got {type(value).__name__}"
        )

    if not amount.is_finite():
        raise InvalidAmountError(f"{field_name} must be finite, got {value!r}")
    return amount


def quantize_money(
    amount: Decimal, quantum: Decimal = MONEY_QUANTUM, field_name: str = "amount"
) -> Money:
    """Round an amount to the currency unit, half up.

    Raises:
        InvalidAmountError: If the amount has more integer digits than the
            decimal context can hold.
    """
    try:
        return amount.quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidAmountError(f"{field_name} is too large: {amount}") from exc
