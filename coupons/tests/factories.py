from datetime import timedelta

import factory
from common.choices import DiscountType
from django.utils import timezone
from factory.django import DjangoModelFactory

from coupons.models import Coupon


class CouponFactory(DjangoModelFactory):
    class Meta:
        model = Coupon

    code = factory.Sequence(lambda n: f"SAVE{n}")
    discount_type = DiscountType.PERCENTAGE
    discount_value = 10
    min_order_value = 0
    max_uses = 100
    current_uses = 0
    expires_at = factory.LazyFunction(lambda: timezone.now() + timedelta(days=30))
