from decimal import Decimal

import pytest
from common.money import from_major_units, to_display, to_major_units


def test_to_major_units_is_exact():
    assert to_major_units(12345) == Decimal("123.45")
    assert to_major_units(5) == Decimal("0.05")


def test_from_major_units_avoids_float_error():
    assert from_major_units(19.99) == 1999
    assert from_major_units("0.015") == 2
    assert from_major_units(Decimal("500")) == 50000


def test_from_major_units_rejects_booleans():
    with pytest.raises(TypeError):
        from_major_units(True)


def test_to_display_uses_configured_symbol(settings):
    settings.STORE_CURRENCY_SYMBOL = "₹"
    assert to_display(12345) == "₹123.45"
    assert to_display(0) == "₹0.00"

    settings.STORE_CURRENCY_SYMBOL = "$"
    assert to_display(-250) == "-$2.50"
