"""Read-only review queries."""

from common.choices import OrderStatus
from django.db.models import Avg, Count, Q, QuerySet
from orders.models import OrderItem

from .models import Review

# Paid orders count as purchases whether or not they have been delivered yet.
VERIFIED_PURCHASE_STATUSES = (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED)


def has_verified_purchase(*, user_id: int, product_id: int) -> bool:
    return OrderItem.objects.filter(
        order__user_id=user_id,
        order__status__in=VERIFIED_PURCHASE_STATUSES,
        product_id=product_id,
    ).exists()


def list_product_reviews(*, product_id: int) -> QuerySet[Review]:
    return Review.objects.filter(product_id=product_id).select_related("user")


def product_review_stats(*, product_id: int) -> dict:
    """Average rating, review count and per-star counts for a product."""

    stars = {f"rating_{n}": Count("id", filter=Q(rating=n)) for n in range(1, 6)}
    agg = Review.objects.filter(product_id=product_id).aggregate(average=Avg("rating"), total=Count("id"), **stars)
    return {
        "average_rating": round(float(agg["average"] or 0), 2),
        "total_reviews": agg["total"],
        "distribution": {n: agg[f"rating_{n}"] for n in range(5, 0, -1)},
    }
