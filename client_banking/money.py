"""
Amount Handling Module

All balances and amounts are Decimal, rounded to cents. Floats are converted
through their string form so 0.1 stays 0.1 instead of its binary
approximation. Magnitudes are capped at MAX_AMOUNT so that the sum of any
balance and any amount stays exact under the default decimal context.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

AmountLike = Union[Decimal, int, float, str]

ZERO = Decimal("0")
CENTS = Decimal("0.01")

# Largest amount or balance held; 15 integer digits plus cents
MAX_AMOUNT = Decimal("999999999999999.99")


def to_amount(value: AmountLike) -> Decimal:
    """
    Normalise a monetary value to a Decimal rounded to cents.

    Raises:
        ValueError: if the value cannot be parsed, is not finite, or its
            magnitude exceeds MAX_AMOUNT
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount exceeds maximum of {MAX_AMOUNT}: {value!r}")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def fits_balance(balance: Decimal, amount: Decimal) -> bool:
    """Whether crediting `amount` keeps `balance` within MAX_AMOUNT"""
    return balance + amount <= MAX_AMOUNT


def format_amount(amount: Decimal) -> str:
    """Render an amount with two decimal places"""
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))
