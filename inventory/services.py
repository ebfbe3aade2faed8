"""Inventory services (single-location): stock checks and transactional movements."""

import logging
from typing import Optional

from catalog.models import Product
from common.errors import StateConflictError
from django.db import transaction

from .models import StockMovement

logger = logging.getLogger("storefront.inventory")


class OutOfStock(StateConflictError):
    default_message = "This product is currently out of stock"


class InsufficientStock(StateConflictError):
    """Requested quantity exceeds what is available.

    ``available`` is the product's stock; ``in_cart`` is the quantity the
    shopper already holds, when that is what tipped the request over.
    """

    def __init__(self, available: int, in_cart: int = 0, message: Optional[str] = None):
        self.available = int(available)
        self.in_cart = int(in_cart)
        if message is None:
            if self.in_cart:
                message = (
                    f"Only {self.available} items available. You already have {self.in_cart} in your cart."
                )
            else:
                message = f"Only {self.available} items available. Please reduce quantity."
        super().__init__(message)


def reserve_stock(*, product: Product, quantity: int, in_cart: int = 0) -> None:
    """Check that ``quantity`` more units of ``product`` can be held.

    Nothing is mutated: stock is only committed when an order is created.
    ``in_cart`` is the quantity already held in the shopper's cart.
    """

    stock = int(product.stock)
    if stock <= 0:
        raise OutOfStock()
    if quantity > stock:
        raise InsufficientStock(available=stock)
    if in_cart and quantity + in_cart > stock:
        raise InsufficientStock(available=stock, in_cart=in_cart)


@transaction.atomic
def decrement_stock(*, product_id: int, quantity: int, reason: str = "order", reference: str = "") -> Product:
    """Remove ``quantity`` units from stock, refusing to go below zero.

    Raises ``InsufficientStock``; the caller's transaction is expected to roll
    back with it.
    """

    if quantity <= 0:
        raise ValueError("Movement quantity must be positive")
    product = Product.objects.select_for_update().get(id=product_id)
    if quantity > int(product.stock):
        raise InsufficientStock(
            available=product.stock,
            message=f"Only {product.stock} of {product.title} available.",
        )
    product.stock = int(product.stock) - int(quantity)
    product.save(update_fields=["stock", "updated_at"])
    StockMovement.objects.create(
        product=product,
        movement_type=StockMovement.TYPE_OUTBOUND,
        quantity=-int(quantity),
        reason=reason,
        reference=reference,
    )
    logger.info(
        "stock.decremented",
        extra={"event": "stock.decremented", "product_id": product.id, "quantity": quantity, "reference": reference},
    )
    return product


@transaction.atomic
def increment_stock(*, product_id: int, quantity: int, reason: str = "", reference: str = "") -> Product:
    """Return ``quantity`` units to stock (cancellations, restocks)."""

    if quantity <= 0:
        raise ValueError("Movement quantity must be positive")
    product = Product.objects.select_for_update().get(id=product_id)
    product.stock = int(product.stock) + int(quantity)
    product.save(update_fields=["stock", "updated_at"])
    StockMovement.objects.create(
        product=product,
        movement_type=StockMovement.TYPE_INBOUND,
        quantity=int(quantity),
        reason=reason,
        reference=reference,
    )
    logger.info(
        "stock.incremented",
        extra={"event": "stock.incremented", "product_id": product.id, "quantity": quantity, "reference": reference},
    )
    return product


# EOF
