"""
Decimal <-> raw on-chain unit conversion.

Raw units are integers equal to ``value * 10 ** decimals``. All arithmetic
is done on ``Decimal``; floats are accepted but routed through ``str`` so
binary floating-point error never leaks into the result.

These functions never raise on zero or negative values. Range checks
(``min_size``, tick alignment) belong to the caller.
"""

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal without going through binary float."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _scale(decimals: int) -> Decimal:
    return Decimal(10) ** decimals


def to_raw_price(price: Number, price_decimals: int) -> int:
    """Return ``floor(price * 10 ** price_decimals)``."""
    scaled = to_decimal(price) * _scale(price_decimals)
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def to_raw_size(size: Number, size_decimals: int) -> int:
    """Return ``floor(size * 10 ** size_decimals)``."""
    scaled = to_decimal(size) * _scale(size_decimals)
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def from_raw(raw: int, decimals: int) -> Decimal:
    """Convert raw units back to a decimal value."""
    return Decimal(raw) / _scale(decimals)


def round_to_tick(price: Number, tick_size: int, price_decimals: int) -> Decimal:
    """Round a decimal price to the nearest multiple of ``tick_size``.

    ``tick_size`` is in raw units. Halves round away from zero.

    Example:
        >>> round_to_tick(Decimal("50000.37"), 50, 2)
        Decimal('50000.5')
    """
    if tick_size <= 0:
        return to_decimal(price)
    raw = to_decimal(price) * _scale(price_decimals)
    ticks = (raw / tick_size).to_integral_value(rounding=ROUND_HALF_UP)
    return (ticks * tick_size) / _scale(price_decimals)
