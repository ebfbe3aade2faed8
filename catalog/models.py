"""Catalog app models.

The checkout core only needs a product's price, stock and active flag; the
rest of the catalog (categories, media, search) lives outside this service.
"""

from common.models import TimeStampedModel
from django.db import models


class Product(TimeStampedModel):
    """Sellable product. ``price`` is in minor currency units (paise)."""

    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    description = models.TextField(blank=True)
    price = models.PositiveIntegerField(help_text="Unit price in minor currency units")
    stock = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["title"]
        constraints = [
            models.CheckConstraint(name="product_price_non_negative", condition=models.Q(price__gte=0)),
            models.CheckConstraint(name="product_stock_non_negative", condition=models.Q(stock__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.title
