"""Integer minor-unit money helpers.

All amounts are stored and computed as ``int`` minor units (paise). Decimal is
used only at the edges, for display and for converting user-entered major
units.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from django.conf import settings

MINOR_UNITS_PER_MAJOR = 100
DEFAULT_CURRENCY_SYMBOL = "₹"

_TWO_PLACES = Decimal("0.01")


def currency_symbol() -> str:
    return getattr(settings, "STORE_CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL)


def to_major_units(minor_units: int) -> Decimal:
    """Return the exact major-unit value of ``minor_units`` with two places."""

    return (Decimal(int(minor_units)) / MINOR_UNITS_PER_MAJOR).quantize(_TWO_PLACES)


def from_major_units(value: Union[int, float, Decimal, str]) -> int:
    """Convert a major-unit amount to minor units, rounding half away from zero.

    Floats are converted through ``str`` so that ``19.99`` becomes ``1999``
    rather than inheriting binary representation error.
    """

    if isinstance(value, bool):
        raise TypeError("Money values cannot be booleans")
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return int((amount * MINOR_UNITS_PER_MAJOR).to_integral_value(rounding=ROUND_HALF_UP))


def to_display(minor_units: int) -> str:
    """Format minor units for humans, e.g. ``12345`` -> ``"₹123.45"``."""

    major = to_major_units(minor_units)
    sign = "-" if major < 0 else ""
    return f"{sign}{currency_symbol()}{abs(major):.2f}"
