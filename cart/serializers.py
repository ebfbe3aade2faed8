"""Cart serializers for read and write operations."""

from typing import Optional

from common.money import to_display
from rest_framework import serializers

from .identity import CartOwner
from .models import Cart, CartItem
from .pricing import Discountable
from .selectors import cart_item_count, cart_items, cart_totals


class CartItemReadSerializer(serializers.ModelSerializer):
    """Read serializer for a cart item priced from the live product."""

    product_id = serializers.IntegerField(source="product.id", read_only=True)
    title = serializers.CharField(source="product.title", read_only=True)
    unit_price = serializers.IntegerField(read_only=True)
    line_total = serializers.IntegerField(read_only=True)
    stock = serializers.IntegerField(source="product.stock", read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "title",
            "quantity",
            "unit_price",
            "line_total",
            "stock",
        ]


def serialize_cart(cart: Optional[Cart], coupon: Optional[Discountable] = None) -> dict:
    """Cart summary: items, integer totals and their display strings."""

    items = list(cart_items(cart=cart))
    totals = cart_totals(cart=cart, coupon=coupon)
    return {
        "id": cart.id if cart is not None else None,
        "items": CartItemReadSerializer(items, many=True).data,
        "item_count": cart_item_count(owner=CartOwner.of_cart(cart)) if cart is not None else 0,
        "totals": totals.as_dict(),
        "display": {key: to_display(value) for key, value in totals.as_dict().items()},
    }


class AddItemSerializer(serializers.Serializer):
    """Write serializer for adding an item to the cart.

    Only the shape is checked here; quantity bounds are enforced by the service.
    """

    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(default=1)


class UpdateItemQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField()
