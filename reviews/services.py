"""Review submission gated on a verified purchase."""

import logging
from typing import Tuple

from catalog.models import Product
from catalog.selectors import ProductNotFound
from common.errors import AuthorizationError, ValidationError
from common.identity import require_user
from django.utils.html import strip_tags

from .models import Review
from .selectors import has_verified_purchase

logger = logging.getLogger("storefront.reviews")

MIN_COMMENT_LENGTH = 10
MAX_COMMENT_LENGTH = 500


def _clean_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer")
    if rating < 1:
        raise ValidationError("Rating must be at least 1")
    if rating > 5:
        raise ValidationError("Rating must be at most 5")
    return rating


def _clean_comment(comment) -> str:
    text = strip_tags(comment if isinstance(comment, str) else "").strip()
    if len(text) < MIN_COMMENT_LENGTH:
        raise ValidationError(f"Review must be at least {MIN_COMMENT_LENGTH} characters")
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Review must be less than {MAX_COMMENT_LENGTH} characters")
    return text


def submit_review(*, user, product_id: int, rating: int, comment: str) -> Tuple[Review, bool]:
    """Create or update the user's review of a product.

    Returns ``(review, created)``. The existing row is looked up first and
    updated in place; there is no unique constraint behind it.
    """

    require_user(user, "You must be logged in to submit a review")
    rating = _clean_rating(rating)
    comment = _clean_comment(comment)
    if not Product.objects.filter(id=product_id).exists():
        raise ProductNotFound()
    if not has_verified_purchase(user_id=user.id, product_id=product_id):
        raise AuthorizationError("You must purchase this product before reviewing it")

    review = Review.objects.filter(user_id=user.id, product_id=product_id).first()
    created = review is None
    if created:
        review = Review.objects.create(user=user, product_id=product_id, rating=rating, comment=comment)
    else:
        review.rating = rating
        review.comment = comment
        review.save(update_fields=["rating", "comment", "updated_at"])

    event = "review.created" if created else "review.updated"
    logger.info(event, extra={"event": event, "review_id": review.id, "product_id": product_id, "user_id": user.id})
    return review, created
