"""Product reviews.

One review per (user, product) is kept by the submit service, which updates
an existing row instead of inserting a second one.
"""

from common.models import TimeStampedModel
from django.conf import settings
from django.db import models


class Review(TimeStampedModel):
    product = models.ForeignKey("catalog.Product", related_name="reviews", on_delete=models.CASCADE)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="reviews", on_delete=models.CASCADE)
    rating = models.PositiveSmallIntegerField()
    comment = models.TextField(max_length=500)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["product", "user"], name="review_product_user_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="review_rating_range", condition=models.Q(rating__gte=1, rating__lte=5)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Review#{self.id} product={self.product_id} user={self.user_id} rating={self.rating}"
