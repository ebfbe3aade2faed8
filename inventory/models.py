"""Inventory models (single-location, focused).

Available stock is the ``stock`` column on ``catalog.Product``; this app owns
the audit trail of every change made to it.
"""

from common.choices import MovementType
from common.models import TimeStampedModel
from django.db import models


class StockMovement(TimeStampedModel):
    TYPE_INBOUND = MovementType.INBOUND
    TYPE_OUTBOUND = MovementType.OUTBOUND
    TYPE_CHOICES = MovementType.choices

    product = models.ForeignKey("catalog.Product", on_delete=models.CASCADE, related_name="stock_movements")
    movement_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    quantity = models.IntegerField()  # signed: +inbound, -outbound
    reason = models.CharField(max_length=200, blank=True)
    reference = models.CharField(max_length=120, blank=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            models.CheckConstraint(name="movement_non_zero", condition=~models.Q(quantity=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.movement_type} {self.quantity} for {self.product_id}"


# EOF
