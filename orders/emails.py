"""Order notification emails.

Plain-text messages sent through Django's email backend, with links composed
from FRONTEND_URL. Sending is best-effort: failures are logged and reported
as ``False``, never raised.
"""

import logging
from typing import Callable, Dict, Tuple

from common.money import to_display
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger("storefront.orders")

ORDER_CONFIRMATION = "order_confirmation"
ORDER_SHIPPED = "order_shipped"
ORDER_DELIVERED = "order_delivered"


def order_url(order_id) -> str:
    frontend = getattr(settings, "FRONTEND_URL", "")
    if not frontend:
        return ""
    return f"{frontend.rstrip('/')}/account/orders/{order_id}"


def _address_lines(address: dict) -> str:
    lines = [
        address.get("name", ""),
        address.get("address_line1", ""),
        address.get("address_line2") or "",
        f"{address.get('city', '')}, {address.get('state', '')} {address.get('pincode', '')}".strip(),
        f"Phone: {address.get('phone', '')}",
    ]
    return "\n".join(f"  {line}" for line in lines if line)


def _footer(data: dict) -> str:
    url = data.get("order_url")
    return f"\nYou can view your order here: {url}\n" if url else ""


def _render_confirmation(data: dict) -> Tuple[str, str]:
    items = "\n".join(
        f"  {item['name']} x {item['quantity']} @ {to_display(item['price'])}" for item in data.get("items", [])
    )
    body = (
        f"Hi {data.get('customer_name') or 'there'},\n\n"
        "Thank you for your purchase!\n\n"
        f"Order: {data['order_number']}\n"
        f"Date: {data.get('order_date', '')}\n\n"
        f"Items:\n{items}\n\n"
        f"Subtotal: {to_display(data['subtotal'])}\n"
        f"Shipping: {to_display(data['shipping'])}\n"
        f"Discount: -{to_display(data['discount'])}\n"
        f"Total: {to_display(data['total'])}\n\n"
        f"Shipping to:\n{_address_lines(data.get('shipping_address') or {})}\n\n"
        f"Estimated delivery: {data.get('estimated_delivery') or 'to be confirmed'}\n"
    )
    return f"Order Confirmation - Order #{data['order_number']}", body + _footer(data)


def _render_shipped(data: dict) -> Tuple[str, str]:
    body = (
        f"Hi {data.get('customer_name') or 'there'},\n\n"
        f"Good news! Your order {data['order_number']} has shipped.\n\n"
        f"Shipping to:\n{_address_lines(data.get('shipping_address') or {})}\n\n"
        f"Estimated delivery: {data.get('estimated_delivery') or 'to be confirmed'}\n"
    )
    return f"Your order #{data['order_number']} has shipped", body + _footer(data)


def _render_delivered(data: dict) -> Tuple[str, str]:
    body = (
        f"Hi {data.get('customer_name') or 'there'},\n\n"
        f"Your order {data['order_number']} has been delivered. We hope you enjoy it!\n"
    )
    return f"Your order #{data['order_number']} has been delivered", body + _footer(data)


TEMPLATES: Dict[str, Callable[[dict], Tuple[str, str]]] = {
    ORDER_CONFIRMATION: _render_confirmation,
    ORDER_SHIPPED: _render_shipped,
    ORDER_DELIVERED: _render_delivered,
}


def render_notification(template_id: str, data: dict) -> Tuple[str, str]:
    """Return ``(subject, body)`` for a template; unknown ids raise ``KeyError``."""

    return TEMPLATES[template_id](data)


def send_notification(recipient: str, template_id: str, data: dict) -> bool:
    """Render and send one notification. Returns whether it was handed to the backend."""

    log_extra = {"event": "notification.failed", "template": template_id, "order_number": data.get("order_number")}
    if not recipient:
        logger.warning("notification.no_recipient", extra={**log_extra, "event": "notification.no_recipient"})
        return False
    try:
        subject, body = render_notification(template_id, data)
        send_mail(subject, body, getattr(settings, "DEFAULT_FROM_EMAIL", None), [recipient], fail_silently=False)
    except Exception:
        # Notifications never fail the operation that triggered them.
        logger.exception("notification.failed", extra=log_extra)
        return False
    logger.info("notification.sent", extra={**log_extra, "event": "notification.sent"})
    return True
