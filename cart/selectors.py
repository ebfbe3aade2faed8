"""Selectors for read-only cart queries."""

from typing import List, Optional

from django.db.models import QuerySet, Sum

from .identity import CartOwner
from .models import Cart, CartItem
from .pricing import CartTotals, Discountable, PricedLine, compute_totals


def get_cart(*, owner: CartOwner) -> Optional[Cart]:
    """Return the owner's cart, or ``None``. Never creates one."""

    return Cart.objects.filter(**owner.lookup()).first()


def get_or_create_cart(*, owner: CartOwner) -> Cart:
    """Return the owner's cart, creating it if missing."""

    if owner.is_guest:
        cart, _ = Cart.objects.get_or_create(user=None, session_id=owner.session_id)
    else:
        cart, _ = Cart.objects.get_or_create(user_id=owner.user_id, session_id=None)
    return cart


def cart_items(*, cart: Optional[Cart]) -> QuerySet[CartItem]:
    if cart is None:
        return CartItem.objects.none()
    return cart.items.select_related("product").order_by("id")


def cart_lines(*, cart: Optional[Cart]) -> List[PricedLine]:
    """Snapshot the cart as priced lines using live product prices."""

    return [
        PricedLine(unit_price=int(item.product.price), quantity=int(item.quantity), product_id=item.product_id)
        for item in cart_items(cart=cart)
    ]


def cart_totals(*, cart: Optional[Cart], coupon: Optional[Discountable] = None) -> CartTotals:
    return compute_totals(cart_lines(cart=cart), coupon)


def cart_item_count(*, owner: CartOwner) -> int:
    """Total units across the owner's cart lines (0 without a cart)."""

    agg = CartItem.objects.filter(**{f"cart__{k}": v for k, v in owner.lookup().items()}).aggregate(
        count=Sum("quantity")
    )
    return int(agg.get("count") or 0)
