"""Coupon services: validation against the live row and usage counting."""

import logging
from dataclasses import asdict, dataclass

from common.errors import NotFoundError, StateConflictError, ValidationError
from common.money import to_display
from django.db.models import F
from django.utils import timezone

from .models import Coupon

logger = logging.getLogger("storefront.coupons")


class CouponNotFound(NotFoundError):
    default_message = "Invalid coupon code"


class CouponRejected(StateConflictError):
    """The coupon exists but cannot be applied; ``reason`` says why."""

    EXPIRED = "expired"
    EXHAUSTED = "exhausted"
    BELOW_MINIMUM = "below_minimum"

    def __init__(self, reason: str, message: str):
        self.reason = reason
        super().__init__(message)


@dataclass(frozen=True)
class ValidatedCoupon:
    code: str
    discount_type: str
    discount_value: int
    min_order_value: int

    def as_dict(self) -> dict:
        return asdict(self)


def normalize_code(code) -> str:
    return (code or "").strip().upper()


def validate_coupon(*, code: str, order_subtotal: int) -> ValidatedCoupon:
    """Check that ``code`` can be applied to an order of ``order_subtotal``.

    Failures are checked in order: unknown code, expired, usage cap, minimum
    order value. The coupon row is read fresh on every call and never mutated.
    """

    normalized = normalize_code(code)
    if not normalized:
        raise ValidationError("Please enter a coupon code")
    if isinstance(order_subtotal, bool) or not isinstance(order_subtotal, int) or order_subtotal <= 0:
        raise ValidationError("Invalid order amount")

    coupon = Coupon.objects.filter(code=normalized).first()
    if coupon is None:
        raise CouponNotFound()
    if coupon.expires_at < timezone.now():
        raise CouponRejected(CouponRejected.EXPIRED, "This coupon has expired")
    if coupon.current_uses >= coupon.max_uses:
        raise CouponRejected(CouponRejected.EXHAUSTED, "This coupon has reached its usage limit")
    if order_subtotal < coupon.min_order_value:
        raise CouponRejected(
            CouponRejected.BELOW_MINIMUM,
            f"Minimum order value of {to_display(coupon.min_order_value)} required for this coupon",
        )

    return ValidatedCoupon(
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=int(coupon.discount_value),
        min_order_value=int(coupon.min_order_value),
    )


def increment_usage(*, code: str) -> bool:
    """Count one more use of ``code``.

    A coupon deleted since validation is logged and skipped; the order that
    used it must not fail because of it.
    """

    normalized = normalize_code(code)
    updated = Coupon.objects.filter(code=normalized).update(current_uses=F("current_uses") + 1)
    if not updated:
        logger.warning("coupon.missing_on_increment", extra={"event": "coupon.missing_on_increment", "code": normalized})
        return False
    logger.info("coupon.used", extra={"event": "coupon.used", "code": normalized})
    return True
