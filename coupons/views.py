"""Coupon endpoints."""

from cart.identity import CartOwner
from cart.selectors import cart_totals, get_cart
from cart.serializers import serialize_cart
from common.identity import require_user
from common.responses import invalid_input_response, result_response
from common.results import run_action
from common.throttling import StoreScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from .serializers import CouponValidateSerializer
from .services import validate_coupon


class CouponValidateView(APIView):
    """Quote the caller's cart with a coupon applied."""

    # Anonymous callers get the uniform 401 result from require_user.
    permission_classes = [AllowAny]
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Coupon Endpoints"],
        summary="Validate coupon",
        description="Validates a coupon against the signed-in user's current cart subtotal. Does not consume a use.",
        request=CouponValidateSerializer,
        responses={
            200: inline_serializer(
                name="CouponValidateResult",
                fields={
                    "success": rf_serializers.BooleanField(),
                    "message": rf_serializers.CharField(),
                    "data": rf_serializers.JSONField(required=False),
                },
            )
        },
        examples=[
            OpenApiExample(
                "Expired",
                value={"success": False, "message": "This coupon has expired"},
                response_only=True,
                status_codes=["409"],
            )
        ],
    )
    def post(self, request):
        serializer = CouponValidateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer)

        def _validate():
            user = require_user(request.user)
            cart = get_cart(owner=CartOwner.for_user(user.id))
            subtotal = cart_totals(cart=cart).subtotal
            coupon = validate_coupon(code=serializer.validated_data["code"], order_subtotal=subtotal)
            return {"coupon": coupon.as_dict(), "cart": serialize_cart(cart, coupon)}

        result = run_action(_validate, success_message="Coupon applied successfully", data=lambda value: value)
        return result_response(result, request=request)
