"""Cart app models.

A cart is owned by either an authenticated user or a guest session, never
both. Carts are ephemeral: they are deleted when an order is placed from them
and guest carts are deleted once merged into a user cart.
"""

from common.models import TimeStampedModel
from django.conf import settings
from django.db import models


class Cart(TimeStampedModel):
    """Shopping cart bound to a user or to a guest session id."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name="carts", on_delete=models.CASCADE
    )
    session_id = models.CharField(max_length=64, null=True, blank=True)

    class Meta:
        ordering = ["-updated_at"]
        constraints = [
            models.CheckConstraint(
                name="cart_exactly_one_owner",
                condition=(
                    models.Q(user__isnull=False, session_id__isnull=True)
                    | models.Q(user__isnull=True, session_id__isnull=False)
                ),
            ),
            models.UniqueConstraint(fields=["user"], name="unique_cart_per_user"),
            models.UniqueConstraint(fields=["session_id"], name="unique_cart_per_session"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        owner = f"user={self.user_id}" if self.user_id else f"session={self.session_id}"
        return f"Cart#{self.id} ({owner})"


class CartItem(TimeStampedModel):
    """Line item in a shopping cart. Prices are read live from the product."""

    cart = models.ForeignKey(Cart, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="cart_items", on_delete=models.CASCADE)
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["cart", "product"], name="unique_product_per_cart"),
            models.CheckConstraint(name="quantity_positive", condition=models.Q(quantity__gte=1)),
        ]
        indexes = [
            models.Index(fields=["cart", "product"], name="cartitem_cart_product_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartItem#{self.id} cart={self.cart_id} product={self.product_id} qty={self.quantity}"

    @property
    def unit_price(self) -> int:
        return int(self.product.price)

    @property
    def line_total(self) -> int:
        return self.unit_price * int(self.quantity)
