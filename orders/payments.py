"""Payment provider signature checks.

The provider signs ``"<order_id>|<payment_id>"`` with HMAC-SHA256 using the
shared secret ``PAYMENT_KEY_SECRET``.
"""

import hashlib
import hmac
import logging

from django.conf import settings

logger = logging.getLogger("storefront.orders")


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str) -> bool:
    """Return True only when ``signature`` matches; fails closed without a secret."""

    secret = getattr(settings, "PAYMENT_KEY_SECRET", "")
    if not secret:
        logger.error("payment.secret_missing", extra={"event": "payment.secret_missing"})
        return False
    if not (order_id and payment_id and signature):
        return False
    expected = compute_signature(str(order_id), str(payment_id), secret)
    return hmac.compare_digest(expected, str(signature))
