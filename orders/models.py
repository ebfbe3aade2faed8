from common.choices import OrderStatus
from common.models import TimeStampedModel
from django.conf import settings
from django.db import models


class Order(TimeStampedModel):
    """Purchase order frozen from a cart at payment time.

    Money columns are minor units computed once at creation and never
    recalculated; only ``status`` changes afterwards.
    """

    STATUS_CHOICES = OrderStatus.choices

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="orders", on_delete=models.CASCADE)
    number = models.CharField(max_length=32, unique=True, null=True, blank=True, db_index=True)
    email = models.EmailField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=OrderStatus.PENDING, db_index=True)
    subtotal = models.PositiveIntegerField()
    shipping = models.PositiveIntegerField()
    discount = models.PositiveIntegerField(default=0)
    total = models.PositiveIntegerField()
    shipping_address = models.JSONField()
    payment_order_id = models.CharField(max_length=128)
    payment_id = models.CharField(max_length=128, unique=True)
    coupon_code = models.CharField(max_length=50, null=True, blank=True)

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["user", "status", "created_at"], name="order_user_status_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="order_total_non_negative", condition=models.Q(total__gte=0)),
            models.CheckConstraint(name="order_subtotal_non_negative", condition=models.Q(subtotal__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Order#{self.id} user={self.user_id} status={self.status}"


class OrderItem(TimeStampedModel):
    """Line item within an order.

    ``price`` is the product price captured when the order was placed; the
    product link may later be cleared if the product is deleted.
    """

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey(
        "catalog.Product", null=True, blank=True, related_name="order_items", on_delete=models.SET_NULL
    )
    product_name = models.CharField(max_length=200, blank=True)
    quantity = models.PositiveIntegerField()
    price = models.PositiveIntegerField(help_text="Unit price in minor units at purchase time")

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["order", "product"], name="orderitem_order_product_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="orderitem_price_non_negative", condition=models.Q(price__gte=0)),
            models.CheckConstraint(name="orderitem_quantity_positive", condition=models.Q(quantity__gte=1)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"OrderItem#{self.id} order={self.order_id} product={self.product_id} qty={self.quantity}"

    @property
    def line_total(self) -> int:
        return int(self.price) * int(self.quantity)
