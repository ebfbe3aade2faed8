"""Orders API endpoints: checkout, order history and admin status updates."""

from common.responses import invalid_input_response, result_response
from common.results import run_action
from common.throttling import StoreScopedRateThrottle
from django.http import Http404
from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import filters as drf_filters
from rest_framework import generics
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.views import APIView

from .models import Order
from .selectors import OrderNotFound, get_order_for_user, list_orders_for_user, order_queryset
from .serializers import CheckoutSerializer, OrderSerializer, OrderStatusUpdateSerializer
from .services import update_order_status, verify_payment_and_create_order

ResultSchema = inline_serializer(
    name="OrderResult",
    fields={
        "success": rf_serializers.BooleanField(),
        "message": rf_serializers.CharField(),
        "data": rf_serializers.JSONField(required=False),
    },
)


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"


class OrderFilter(filters.FilterSet):
    status = filters.ChoiceFilter(choices=Order.STATUS_CHOICES)
    number = filters.CharFilter(field_name="number")
    created_after = filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")
    user = filters.NumberFilter(field_name="user_id")

    class Meta:
        model = Order
        fields = ["status", "number", "user"]


class CheckoutView(APIView):
    """Create an order from the signed-in user's cart after payment."""

    # Anonymous callers get the uniform 401 result from the service.
    permission_classes = [AllowAny]
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Verify payment and create order",
        description=(
            "Verifies the payment provider signature over `payment_order_id|payment_id`, then converts the "
            "cart into an order at current prices, decrements stock and consumes the coupon. A confirmation "
            "email is sent after the order commits."
        ),
        request=CheckoutSerializer,
        responses={201: ResultSchema, 400: ResultSchema, 401: ResultSchema, 404: ResultSchema, 409: ResultSchema},
        examples=[
            OpenApiExample(
                "Created",
                value={"success": True, "message": "Order created successfully", "data": {"order_id": 42}},
                response_only=True,
                status_codes=["201"],
            ),
            OpenApiExample(
                "Bad signature",
                value={"success": False, "message": "Payment verification failed. Please contact support."},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer)
        data = serializer.validated_data

        result = run_action(
            lambda: verify_payment_and_create_order(
                user=request.user,
                payment_order_id=data["payment_order_id"],
                payment_id=data["payment_id"],
                signature=data["signature"],
                shipping_address=dict(data["shipping_address"]),
                coupon_code=data.get("coupon_code") or None,
            ),
            success_message="Order created successfully",
            failure_message="Failed to create order. Please contact support.",
            data=lambda order: {"order_id": order.id, "number": order.number, "total": order.total},
        )
        return result_response(result, request=request, success_status=status.HTTP_201_CREATED)


class OrderListView(generics.ListAPIView):
    """List the authenticated user's orders, newest first."""

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "orders"

    def get_queryset(self):
        return list_orders_for_user(user=self.request.user)

    @extend_schema(tags=["Orders"], summary="List orders")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class OrderDetailView(generics.RetrieveAPIView):
    """Retrieve a single order owned by the authenticated user."""

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "orders"

    def get_object(self):
        try:
            return get_order_for_user(order_id=self.kwargs["order_id"], user=self.request.user)
        except OrderNotFound:
            raise Http404("Order not found")

    @extend_schema(tags=["Orders"], summary="Get order detail")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AdminOrderListView(generics.ListAPIView):
    """All orders for staff, filterable by status, number, user and creation window."""

    permission_classes = [IsAdminUser]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "orders"
    filter_backends = [filters.DjangoFilterBackend, drf_filters.OrderingFilter]
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total", "id"]
    ordering = ["-id"]

    def get_queryset(self):
        return order_queryset()

    @extend_schema(tags=["Admin Orders"], summary="List all orders")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AdminOrderStatusView(APIView):
    """Apply an allow-listed status transition to an order."""

    # Staff check happens in the service so non-admins get the uniform result.
    permission_classes = [AllowAny]
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Admin Orders"],
        summary="Update order status",
        description="Valid moves: PENDING→PROCESSING, PROCESSING→SHIPPED, SHIPPED→DELIVERED, and cancellation "
        "from PENDING or PROCESSING. Cancelling restores stock.",
        request=OrderStatusUpdateSerializer,
        responses={code: ResultSchema for code in (200, 400, 401, 403, 404, 409)},
        examples=[
            OpenApiExample(
                "Invalid transition",
                value={"success": False, "message": "Cannot transition from PENDING to DELIVERED"},
                response_only=True,
                status_codes=["409"],
            )
        ],
    )
    def post(self, request, order_id: int):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer)

        result = run_action(
            lambda: update_order_status(
                actor=request.user, order_id=order_id, new_status=serializer.validated_data["status"]
            ),
            success_message="Order status updated successfully",
            failure_message="Failed to update order status",
            data=lambda order: {"order_id": order.id, "status": order.status},
        )
        return result_response(result, request=request)
