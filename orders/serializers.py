"""DRF serializers for Orders.

Money fields are integer minor units; ``display`` carries the formatted
strings for clients that do not format currency themselves.
"""

from common.choices import OrderStatus
from common.money import to_display
from rest_framework import serializers

from .models import Order, OrderItem
from .selectors import estimated_delivery


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "product_name", "quantity", "price", "line_total"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """API representation of an order with its frozen line items."""

    items = OrderItemSerializer(many=True, read_only=True)
    estimated_delivery = serializers.SerializerMethodField()
    display = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "status",
            "email",
            "created_at",
            "updated_at",
            "items",
            "subtotal",
            "shipping",
            "discount",
            "total",
            "display",
            "coupon_code",
            "shipping_address",
            "payment_order_id",
            "payment_id",
            "estimated_delivery",
        ]
        read_only_fields = fields

    def get_estimated_delivery(self, obj: Order):
        delivery = estimated_delivery(obj)
        return delivery.isoformat() if delivery else None

    def get_display(self, obj: Order) -> dict:
        return {name: to_display(getattr(obj, name)) for name in ("subtotal", "shipping", "discount", "total")}


class ShippingAddressSerializer(serializers.Serializer):
    """Shape-only check; field rules live in ``ShippingAddress.parse``."""

    name = serializers.CharField(allow_blank=True)
    address_line1 = serializers.CharField(allow_blank=True)
    address_line2 = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(allow_blank=True)
    state = serializers.CharField(allow_blank=True)
    pincode = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)


class CheckoutSerializer(serializers.Serializer):
    payment_order_id = serializers.CharField(max_length=128)
    payment_id = serializers.CharField(max_length=128)
    signature = serializers.CharField(max_length=256)
    shipping_address = ShippingAddressSerializer()
    coupon_code = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
