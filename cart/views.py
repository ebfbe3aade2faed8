"""DRF views for cart operations.

One set of endpoints serves both shoppers: the cart owner is the
authenticated user, otherwise the guest identified by ``X-Session-Id``.
"""

from common.errors import ValidationError
from common.identity import is_authenticated
from common.responses import invalid_input_response, result_response
from common.results import ActionResult, run_action
from common.throttling import StoreScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from .identity import CartOwner
from .selectors import get_cart
from .serializers import AddItemSerializer, UpdateItemQuantitySerializer, serialize_cart
from .services import add_item, clear_cart, merge_guest_cart, remove_item, update_item_quantity

SESSION_HEADER = OpenApiParameter(
    name="X-Session-Id",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Guest session identifier; ignored for authenticated users",
    type=str,
)

ResultSchema = inline_serializer(
    name="CartResult",
    fields={
        "success": rf_serializers.BooleanField(),
        "message": rf_serializers.CharField(),
        "data": rf_serializers.JSONField(required=False),
    },
)

CART_EXAMPLE = OpenApiExample(
    "Cart",
    value={
        "success": True,
        "message": "Cart retrieved",
        "data": {
            "id": 1,
            "items": [
                {
                    "id": 10,
                    "product_id": 100,
                    "title": "Linen Shirt",
                    "quantity": 2,
                    "unit_price": 25000,
                    "line_total": 50000,
                    "stock": 8,
                }
            ],
            "item_count": 2,
            "totals": {"subtotal": 50000, "shipping": 0, "discount": 0, "total": 50000},
            "display": {"subtotal": "₹500.00", "shipping": "₹0.00", "discount": "₹0.00", "total": "₹500.00"},
        },
    },
)


def resolve_owner(request) -> CartOwner:
    """Cart owner for this request; signed-in users take precedence over the header."""

    if is_authenticated(request.user):
        return CartOwner.for_user(request.user.id)
    session_id = request.headers.get("X-Session-Id")
    if not session_id:
        raise ValidationError("User or session identifier required")
    return CartOwner.for_session(session_id)


def _cart_data(owner: CartOwner) -> dict:
    return serialize_cart(get_cart(owner=owner))


class CartView(APIView):
    """Return the caller's cart with items and totals."""

    permission_classes = [AllowAny]
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the caller's cart, priced from live product prices. A missing cart is reported empty.",
        parameters=[SESSION_HEADER],
        responses={200: ResultSchema, 400: ResultSchema},
        examples=[CART_EXAMPLE],
    )
    def get(self, request):
        try:
            owner = resolve_owner(request)
        except ValidationError as exc:
            return result_response(ActionResult.fail(exc.message, error=exc.code), request=request)
        return result_response(ActionResult.ok("Cart retrieved", _cart_data(owner)), request=request)


class CartAddItemView(APIView):
    """Add a product to the cart."""

    permission_classes = [AllowAny]
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description="Adds a product, merging with an existing line. Fails when stock, including what is already "
        "in the cart, is insufficient.",
        parameters=[SESSION_HEADER],
        request=AddItemSerializer,
        responses={201: ResultSchema, 400: ResultSchema, 404: ResultSchema, 409: ResultSchema},
        examples=[
            OpenApiExample(
                "Insufficient stock",
                value={"success": False, "message": "Only 10 items available. You already have 8 in your cart."},
                response_only=True,
                status_codes=["409"],
            )
        ],
    )
    def post(self, request):
        serializer = AddItemSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer)

        def _add():
            owner = resolve_owner(request)
            add_item(owner=owner, **serializer.validated_data)
            return owner

        result = run_action(_add, success_message="Item added to cart", data=_cart_data)
        return result_response(result, request=request, success_status=status.HTTP_201_CREATED)


class CartItemView(APIView):
    """Update or remove a single cart line."""

    permission_classes = [AllowAny]
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item quantity",
        description="Overwrites a line's quantity. A quantity of 0 removes the line.",
        parameters=[SESSION_HEADER],
        request=UpdateItemQuantitySerializer,
        responses={200: ResultSchema, 400: ResultSchema, 404: ResultSchema, 409: ResultSchema},
    )
    def patch(self, request, item_id: int):
        serializer = UpdateItemQuantitySerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer)

        def _update():
            owner = resolve_owner(request)
            update_item_quantity(owner=owner, item_id=item_id, quantity=serializer.validated_data["quantity"])
            return owner

        result = run_action(_update, success_message="Cart updated", data=_cart_data)
        return result_response(result, request=request)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Remove cart item",
        description="Removes a line from the caller's cart. Removing an absent line succeeds.",
        parameters=[SESSION_HEADER],
        responses={200: ResultSchema, 400: ResultSchema},
    )
    def delete(self, request, item_id: int):
        def _remove():
            owner = resolve_owner(request)
            remove_item(owner=owner, item_id=item_id)
            return owner

        result = run_action(_remove, success_message="Item removed from cart", data=_cart_data)
        return result_response(result, request=request)


class CartClearView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        parameters=[SESSION_HEADER],
        responses={200: ResultSchema, 400: ResultSchema},
    )
    def post(self, request):
        def _clear():
            owner = resolve_owner(request)
            clear_cart(owner=owner)
            return owner

        result = run_action(_clear, success_message="Cart cleared", data=_cart_data)
        return result_response(result, request=request)


class MergeGuestCartView(APIView):
    """Authenticated endpoint to merge a guest cart into the user's cart."""

    permission_classes = [IsAuthenticated]
    throttle_classes = [StoreScopedRateThrottle]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Merge guest cart into user cart",
        description="Moves the guest cart named by X-Session-Id into the user's cart, clamping quantities to "
        "stock, then deletes the guest cart.",
        parameters=[
            OpenApiParameter(
                name="X-Session-Id",
                location=OpenApiParameter.HEADER,
                required=True,
                description="Guest session identifier",
                type=str,
            )
        ],
        responses={200: ResultSchema, 400: ResultSchema},
        examples=[OpenApiExample("Merged", value={"success": True, "message": "Cart merged"}, response_only=True)],
    )
    def post(self, request):
        session_id = request.headers.get("X-Session-Id")
        if not session_id:
            return result_response(
                ActionResult.fail("Missing X-Session-Id.", error="validation"), request=request
            )

        def _merge():
            merge_guest_cart(session_id=session_id, user=request.user)
            return CartOwner.for_user(request.user.id)

        result = run_action(_merge, success_message="Cart merged", data=_cart_data)
        return result_response(result, request=request)
