"""Read-only order queries."""

from datetime import date, timedelta
from typing import Optional

from common.choices import OrderStatus
from common.errors import NotFoundError
from django.db.models import QuerySet
from django.utils import timezone

from .models import Order

PROCESSING_LEAD_DAYS = 7
IN_TRANSIT_DAYS = 3


class OrderNotFound(NotFoundError):
    default_message = "Order not found"


def order_queryset() -> QuerySet[Order]:
    return Order.objects.select_related("user").prefetch_related("items")


def get_order(*, order_id) -> Order:
    try:
        return order_queryset().get(id=order_id)
    except (Order.DoesNotExist, ValueError, TypeError):
        raise OrderNotFound()


def get_order_for_user(*, order_id, user) -> Order:
    """Like ``get_order`` but hides orders owned by someone else."""

    try:
        return order_queryset().get(id=order_id, user_id=getattr(user, "id", None))
    except (Order.DoesNotExist, ValueError, TypeError):
        raise OrderNotFound()


def list_orders_for_user(*, user) -> QuerySet[Order]:
    return order_queryset().filter(user_id=getattr(user, "id", None)).order_by("-created_at", "-id")


def estimated_delivery(order: Order, *, today: Optional[date] = None) -> Optional[date]:
    """Expected delivery date, or ``None`` once the order is delivered or cancelled.

    Open orders are promised a week after placement; shipped orders three
    days from today.
    """

    today = today or timezone.localdate()
    if order.status in (OrderStatus.PENDING, OrderStatus.PROCESSING):
        placed = timezone.localdate(order.created_at) if order.created_at else today
        return placed + timedelta(days=PROCESSING_LEAD_DAYS)
    if order.status == OrderStatus.SHIPPED:
        return today + timedelta(days=IN_TRANSIT_DAYS)
    return None
