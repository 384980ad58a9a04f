"""Temperature conversion for device units.

The device reports temperatures (``tact``) and takes heat targets
(``hmax``) in tenths of a Kelvin, e.g. ``2931`` is 293.1 K.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

KELVIN_OFFSET = Decimal("273.15")
FAHRENHEIT_OFFSET = Decimal(32)


def round_half_away(value: Decimal) -> int:
    """Round to the nearest integer, exact halves away from zero."""
    # ROUND_HALF_UP in decimal terms rounds away from zero
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _kelvin(raw: int | str) -> Decimal:
    return Decimal(int(raw)) / 10


def to_fahrenheit(raw: int | str) -> int:
    """Convert device units to whole degrees Fahrenheit."""
    celsius = _kelvin(raw) - KELVIN_OFFSET
    return round_half_away(celsius * 9 / 5 + FAHRENHEIT_OFFSET)


def from_fahrenheit(fahrenheit: int | float | str) -> int:
    """Convert degrees Fahrenheit to device units."""
    celsius = (Decimal(str(fahrenheit)) - FAHRENHEIT_OFFSET) * 5 / 9
    return round_half_away((celsius + KELVIN_OFFSET) * 10)


def to_celsius(raw: int | str) -> float:
    """Convert device units to degrees Celsius."""
    return float(_kelvin(raw) - KELVIN_OFFSET)


def from_celsius(celsius: int | float | str) -> int:
    """Convert degrees Celsius to device units."""
    return round_half_away((Decimal(str(celsius)) + KELVIN_OFFSET) * 10)
