from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from src.platform.exception.exceptions import ValidationError


CENT = Decimal('0.01')
ZERO = Decimal('0.00')

MoneyLike = Union[Decimal, int, float, str]


def to_money(value: MoneyLike) -> Decimal:
    """
    Convert to a 2-place Decimal, rounding half up (₹ 0.005 -> ₹ 0.01).

    Raises:
        ValidationError: Not a finite amount (NaN, infinity, malformed text)
    """
    if isinstance(value, float):
        # repr of a float is the shortest exact decimal; avoids binary noise
        value = repr(value)
    try:
        amount = Decimal(value)
        if not amount.is_finite():
            raise ValidationError(f'Invalid amount: {value}')
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f'Invalid amount: {value}') from e


def percent_of(amount: Decimal, percentage: MoneyLike) -> Decimal:
    return to_money(amount * Decimal(str(percentage)) / Decimal(100))
