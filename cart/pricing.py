"""Cart pricing: subtotal, shipping, coupon discount and total.

All amounts are integer minor units. ``compute_totals`` is pure: it reads
two thresholds from settings and nothing else, so carts and orders can call
it freely.
"""

from dataclasses import asdict, dataclass
from typing import Iterable, Optional, Protocol

from common.choices import DiscountType
from django.conf import settings

FREE_SHIPPING_THRESHOLD = 50000
FLAT_SHIPPING_FEE = 5000


class PricedItem(Protocol):
    unit_price: int
    quantity: int


class Discountable(Protocol):
    discount_type: str
    discount_value: int


@dataclass(frozen=True)
class PricedLine:
    """A (price, quantity) pair detached from any database row."""

    unit_price: int
    quantity: int
    product_id: Optional[int] = None

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CartTotals:
    subtotal: int
    shipping: int
    discount: int
    total: int

    def as_dict(self) -> dict:
        return asdict(self)


def shipping_for(subtotal: int) -> int:
    """Flat fee below the free-shipping threshold.

    An empty cart (subtotal 0) is still charged the fee.
    """

    threshold = getattr(settings, "FREE_SHIPPING_THRESHOLD", FREE_SHIPPING_THRESHOLD)
    fee = getattr(settings, "FLAT_SHIPPING_FEE", FLAT_SHIPPING_FEE)
    return fee if subtotal < threshold else 0


def discount_for(subtotal: int, coupon: Optional[Discountable]) -> int:
    """Coupon discount; FLAT values are not capped at the subtotal."""

    if coupon is None:
        return 0
    if coupon.discount_type == DiscountType.PERCENTAGE:
        return (subtotal * int(coupon.discount_value)) // 100
    if coupon.discount_type == DiscountType.FLAT:
        return int(coupon.discount_value)
    return 0


def compute_totals(lines: Iterable[PricedItem], coupon: Optional[Discountable] = None) -> CartTotals:
    subtotal = sum(int(line.unit_price) * int(line.quantity) for line in lines)
    shipping = shipping_for(subtotal)
    discount = discount_for(subtotal, coupon)
    total = max(0, subtotal + shipping - discount)
    return CartTotals(subtotal=subtotal, shipping=shipping, discount=discount, total=total)
