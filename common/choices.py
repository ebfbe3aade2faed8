"""Shared enumerations and choices used across apps."""

from django.db import models


class MovementType(models.TextChoices):
    INBOUND = "in", "Inbound"
    OUTBOUND = "out", "Outbound"


class DiscountType(models.TextChoices):
    """How a coupon's discount value is interpreted."""

    PERCENTAGE = "PERCENTAGE", "Percentage"
    FLAT = "FLAT", "Flat amount"


class OrderStatus(models.TextChoices):
    """Lifecycle statuses for orders."""

    PENDING = "PENDING", "Pending"
    PROCESSING = "PROCESSING", "Processing"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"
