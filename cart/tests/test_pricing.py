import random
from types import SimpleNamespace

import pytest
from cart.pricing import FLAT_SHIPPING_FEE, FREE_SHIPPING_THRESHOLD, PricedLine, compute_totals
from common.choices import DiscountType


def coupon(kind, value):
    return SimpleNamespace(discount_type=kind, discount_value=value)


def test_free_shipping_at_threshold():
    totals = compute_totals([PricedLine(unit_price=25000, quantity=2)])

    assert totals.as_dict() == {"subtotal": 50000, "shipping": 0, "discount": 0, "total": 50000}


def test_flat_discount_larger_than_order_floors_total_at_zero():
    totals = compute_totals([PricedLine(unit_price=30000, quantity=1)], coupon(DiscountType.FLAT, 100000))

    assert totals.as_dict() == {"subtotal": 30000, "shipping": 5000, "discount": 100000, "total": 0}


def test_empty_cart_is_still_charged_shipping():
    totals = compute_totals([])

    assert totals.subtotal == 0
    assert totals.shipping == FLAT_SHIPPING_FEE
    assert totals.total == FLAT_SHIPPING_FEE


@pytest.mark.parametrize(
    "subtotal,expected",
    [(0, 5000), (1, 5000), (FREE_SHIPPING_THRESHOLD - 1, 5000), (FREE_SHIPPING_THRESHOLD, 0), (10**7, 0)],
)
def test_shipping_rule(subtotal, expected):
    assert compute_totals([PricedLine(unit_price=subtotal, quantity=1)]).shipping == expected


@pytest.mark.parametrize("subtotal,pct", [(999, 10), (12345, 15), (50001, 33), (7, 50), (100000, 100)])
def test_percentage_discount_is_floored(subtotal, pct):
    totals = compute_totals([PricedLine(unit_price=subtotal, quantity=1)], coupon(DiscountType.PERCENTAGE, pct))

    assert totals.discount == (subtotal * pct) // 100
    assert totals.total == max(0, subtotal + totals.shipping - totals.discount)


@pytest.mark.parametrize("subtotal", [0, 100, 49999, 50000, 250000])
def test_flat_discount_is_verbatim(subtotal):
    totals = compute_totals([PricedLine(unit_price=subtotal, quantity=1)], coupon(DiscountType.FLAT, 7500))

    assert totals.discount == 7500


def test_large_discount_does_not_waive_shipping():
    totals = compute_totals([PricedLine(unit_price=10000, quantity=1)], coupon(DiscountType.FLAT, 12000))

    assert totals.shipping == 5000
    assert totals.total == 3000


def test_subtotal_is_independent_of_line_order():
    rng = random.Random(42)
    lines = [PricedLine(unit_price=rng.randint(0, 40000), quantity=rng.randint(1, 9)) for _ in range(25)]
    expected = sum(line.unit_price * line.quantity for line in lines)

    for _ in range(5):
        rng.shuffle(lines)
        totals = compute_totals(lines)
        assert totals.subtotal == expected
        assert totals.total >= 0


def test_thresholds_follow_settings(settings):
    settings.FREE_SHIPPING_THRESHOLD = 1000
    settings.FLAT_SHIPPING_FEE = 99

    assert compute_totals([PricedLine(unit_price=999, quantity=1)]).shipping == 99
    assert compute_totals([PricedLine(unit_price=1000, quantity=1)]).shipping == 0


def test_compute_totals_accepts_any_line_shape():
    lines = [SimpleNamespace(unit_price=1200, quantity=3)]

    assert compute_totals(lines).subtotal == 3600
