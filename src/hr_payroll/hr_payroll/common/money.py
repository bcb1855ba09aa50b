from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Number | None) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 0.1 do not carry binary noise
    return Decimal(str(value))


def round2(value: Number | None) -> Decimal:
    """Round half-up to 2 decimals; the single rounding rule for hours and money."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def sum2(values: Iterable[Number | None]) -> Decimal:
    return round2(sum((to_decimal(v) for v in values), ZERO))
