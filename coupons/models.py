"""Coupon model.

Codes are stored uppercase so lookups are case-insensitive. Usage is only
ever incremented, after an order that applied the coupon commits.
"""

from common.choices import DiscountType
from common.models import TimeStampedModel
from django.db import models


class Coupon(TimeStampedModel):
    code = models.CharField(max_length=50, unique=True)
    discount_type = models.CharField(max_length=16, choices=DiscountType.choices)
    discount_value = models.PositiveIntegerField(help_text="Percentage points, or minor units for FLAT coupons")
    min_order_value = models.PositiveIntegerField(default=0, help_text="Minimum subtotal in minor units")
    max_uses = models.PositiveIntegerField()
    current_uses = models.PositiveIntegerField(default=0)
    expires_at = models.DateTimeField()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                name="coupon_percentage_at_most_100",
                condition=~models.Q(discount_type=DiscountType.PERCENTAGE) | models.Q(discount_value__lte=100),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.code

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)
