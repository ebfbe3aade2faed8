"""Order services: payment-verified creation and the admin status lifecycle.

Stock-affecting work runs in one ``transaction.atomic`` block with the
touched rows locked. Notifications are registered with
``transaction.on_commit`` and only run once the transaction has committed.
"""

import logging
import re
from dataclasses import asdict, dataclass
from functools import partial
from typing import Optional

from cart.models import Cart, CartItem
from cart.pricing import PricedLine, compute_totals
from catalog.models import Product
from common.choices import OrderStatus
from common.errors import PaymentIntegrityError, StateConflictError, ValidationError
from common.identity import require_admin, require_user
from coupons.services import increment_usage, validate_coupon
from django.db import transaction
from inventory.services import decrement_stock, increment_stock

from . import emails
from .models import Order, OrderItem
from .payments import verify_payment_signature
from .selectors import OrderNotFound, estimated_delivery, get_order
from .transitions import ensure_transition

logger = logging.getLogger("storefront.orders")

PINCODE_RE = re.compile(r"^\d{6}$")
PHONE_RE = re.compile(r"^\d{10}$")


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    address_line1: str
    city: str
    state: str
    pincode: str
    phone: str
    address_line2: Optional[str] = None

    _LIMITS = (
        ("name", "Name", 255),
        ("address_line1", "Address line 1", 255),
        ("city", "City", 100),
        ("state", "State", 100),
    )

    @classmethod
    def parse(cls, payload) -> "ShippingAddress":
        """Validate and normalise a raw address mapping."""

        if not isinstance(payload, dict):
            raise ValidationError("Shipping address is required")

        def clean(key):
            value = payload.get(key)
            return value.strip() if isinstance(value, str) else ""

        values = {}
        for key, label, limit in cls._LIMITS:
            value = clean(key)
            if not value:
                raise ValidationError(f"{label} is required")
            if len(value) > limit:
                raise ValidationError(f"{label} is too long")
            values[key] = value
        line2 = clean("address_line2")
        if len(line2) > 255:
            raise ValidationError("Address line 2 is too long")
        pincode, phone = clean("pincode"), clean("phone")
        if not PINCODE_RE.match(pincode):
            raise ValidationError("Pincode must be exactly 6 digits")
        if not PHONE_RE.match(phone):
            raise ValidationError("Phone number must be exactly 10 digits")
        return cls(pincode=pincode, phone=phone, address_line2=line2 or None, **values)

    def as_dict(self) -> dict:
        data = asdict(self)
        if data["address_line2"] is None:
            data.pop("address_line2")
        return data


def verify_payment_and_create_order(
    *,
    user,
    payment_order_id: str,
    payment_id: str,
    signature: str,
    shipping_address,
    coupon_code: Optional[str] = None,
) -> Order:
    """Turn the user's cart into an order once the payment signature checks out.

    Prices, totals, the coupon and stock are all read from locked rows inside
    one transaction, so the order items carry exactly the prices the totals
    were computed from. Any failure leaves no order, no stock change and the
    cart intact.
    """

    require_user(user)
    if not verify_payment_signature(payment_order_id, payment_id, signature):
        logger.warning(
            "order.payment_signature_invalid",
            extra={
                "event": "order.payment_signature_invalid",
                "user_id": user.id,
                "payment_order_id": payment_order_id,
                "payment_id": payment_id,
            },
        )
        raise PaymentIntegrityError()
    address = ShippingAddress.parse(shipping_address)

    with transaction.atomic():
        if Order.objects.filter(payment_id=payment_id).exists():
            raise StateConflictError("This payment has already been used for an order")

        cart = Cart.objects.select_for_update().filter(user_id=user.id).first()
        items = list(CartItem.objects.select_for_update().filter(cart=cart).order_by("product_id")) if cart else []
        if not items:
            raise StateConflictError("Cart is empty")
        products = Product.objects.select_for_update().filter(id__in=[i.product_id for i in items]).order_by("id")
        products = {p.id: p for p in products}

        lines = [
            PricedLine(unit_price=int(products[i.product_id].price), quantity=int(i.quantity), product_id=i.product_id)
            for i in items
        ]
        coupon = None
        if coupon_code:
            coupon = validate_coupon(code=coupon_code, order_subtotal=sum(line.line_total for line in lines))
        totals = compute_totals(lines, coupon)

        order = Order.objects.create(
            user=user,
            email=user.email or "",
            status=OrderStatus.PENDING,
            subtotal=totals.subtotal,
            shipping=totals.shipping,
            discount=totals.discount,
            total=totals.total,
            shipping_address=address.as_dict(),
            payment_order_id=payment_order_id,
            payment_id=payment_id,
            coupon_code=coupon.code if coupon else None,
        )
        order.number = f"ORD-{int(order.id):06d}"
        order.save(update_fields=["number"])
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    product_name=products[line.product_id].title,
                    quantity=line.quantity,
                    price=line.unit_price,
                )
                for line in lines
            ]
        )
        reference = f"order:{order.id}"
        for line in lines:
            decrement_stock(product_id=line.product_id, quantity=line.quantity, reason="order", reference=reference)
        cart.delete()
        if coupon is not None:
            increment_usage(code=coupon.code)

        logger.info(
            "order.created",
            extra={
                "event": "order.created",
                "order_id": order.id,
                "user_id": user.id,
                "total": order.total,
                "coupon": order.coupon_code,
                "lines": len(lines),
            },
        )
        transaction.on_commit(partial(notify_order_confirmed, order.id), robust=True)
    return order


def update_order_status(*, actor, order_id, new_status: str) -> Order:
    """Move an order along the allow-listed lifecycle (admin only).

    Cancelling returns every item with a surviving product to stock in the
    same transaction as the status change.
    """

    require_admin(actor)
    if new_status not in OrderStatus.values:
        raise ValidationError(f"Invalid status: {new_status}")

    with transaction.atomic():
        try:
            order = Order.objects.select_for_update().get(id=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise OrderNotFound()
        previous = order.status
        ensure_transition(previous, new_status)
        order.status = new_status
        order.save(update_fields=["status", "updated_at"])

        if new_status == OrderStatus.CANCELLED:
            for item in order.items.filter(product__isnull=False).order_by("product_id"):
                increment_stock(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    reason="order cancelled",
                    reference=f"order:{order.id}",
                )

        logger.info(
            "order.status_changed",
            extra={
                "event": "order.status_changed",
                "order_id": order.id,
                "user_id": order.user_id,
                "actor_id": actor.id,
                "status_from": previous,
                "status_to": new_status,
            },
        )
        if new_status == OrderStatus.SHIPPED:
            transaction.on_commit(partial(notify_status_change, order.id, emails.ORDER_SHIPPED), robust=True)
        elif new_status == OrderStatus.DELIVERED:
            transaction.on_commit(partial(notify_status_change, order.id, emails.ORDER_DELIVERED), robust=True)
    return order


def _notification_data(order: Order) -> dict:
    delivery = estimated_delivery(order)
    user = order.user
    return {
        "order_number": order.number or str(order.id),
        "customer_name": user.get_full_name() or user.get_username(),
        "order_date": order.created_at.strftime("%d %B %Y") if order.created_at else "",
        "items": [{"name": i.product_name, "quantity": i.quantity, "price": i.price} for i in order.items.all()],
        "subtotal": order.subtotal,
        "shipping": order.shipping,
        "discount": order.discount,
        "total": order.total,
        "shipping_address": order.shipping_address,
        "estimated_delivery": delivery.strftime("%d %B %Y") if delivery else None,
        "order_url": emails.order_url(order.id),
    }


def notify_order_confirmed(order_id: int) -> bool:
    order = get_order(order_id=order_id)
    return emails.send_notification(order.email or order.user.email, emails.ORDER_CONFIRMATION, _notification_data(order))


def notify_status_change(order_id: int, template_id: str) -> bool:
    order = get_order(order_id=order_id)
    return emails.send_notification(order.email or order.user.email, template_id, _notification_data(order))
