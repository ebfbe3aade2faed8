"""Cart services: line item mutations checked against live stock.

Every mutation takes an explicit ``CartOwner``. Stock is only checked here;
it is committed when an order is created from the cart.
"""

import logging
from typing import Optional

from catalog.models import Product
from catalog.selectors import get_active_product
from common.errors import NotFoundError, ValidationError
from django.db import transaction
from inventory.services import InsufficientStock, reserve_stock

from .identity import CartOwner
from .models import Cart, CartItem
from .selectors import get_cart, get_or_create_cart

logger = logging.getLogger("storefront.cart")

MAX_LINE_QUANTITY = 1000


class CartItemNotFound(NotFoundError):
    default_message = "Cart item not found"


def _validate_quantity(quantity, *, allow_zero: bool = False, cap: Optional[int] = None) -> int:
    # bool is an int subclass; True must not mean "1".
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be a whole number")
    lowest = 0 if allow_zero else 1
    if quantity < lowest:
        raise ValidationError("Quantity cannot be negative" if allow_zero else "Quantity must be at least 1")
    if cap is not None and quantity > cap:
        raise ValidationError(f"Quantity cannot exceed {cap}")
    return quantity


def _locked_cart(owner: CartOwner) -> Cart:
    cart = get_or_create_cart(owner=owner)
    return Cart.objects.select_for_update().get(pk=cart.pk)


@transaction.atomic
def add_item(*, owner: CartOwner, product_id: int, quantity: int) -> CartItem:
    """Add ``quantity`` units of a product, merging into an existing line.

    The stock check counts what is already in the cart: exceeding stock fails
    instead of clamping. Locks the cart, then the product row.
    """

    quantity = _validate_quantity(quantity, cap=MAX_LINE_QUANTITY)
    cart = _locked_cart(owner)
    product = get_active_product(product_id, for_update=True)
    item = CartItem.objects.select_for_update().filter(cart=cart, product=product).first()
    in_cart = int(item.quantity) if item else 0
    reserve_stock(product=product, quantity=quantity, in_cart=in_cart)

    if item is not None:
        item.quantity = in_cart + quantity
        item.save(update_fields=["quantity", "updated_at"])
        event = "cart.item_updated"
    else:
        item = CartItem.objects.create(cart=cart, product=product, quantity=quantity)
        event = "cart.item_added"
    cart.save(update_fields=["updated_at"])
    logger.info(
        event,
        extra={
            "event": event,
            "cart_id": cart.id,
            "product_id": product.id,
            "quantity": item.quantity,
            **owner.log_extra(),
        },
    )
    return item


@transaction.atomic
def update_item_quantity(*, owner: CartOwner, item_id: int, quantity: int):
    """Overwrite a line's quantity; 0 removes the line.

    Returns the updated item, or ``None`` when the line was removed.
    """

    quantity = _validate_quantity(quantity, allow_zero=True)
    cart = get_cart(owner=owner)
    if cart is None:
        raise CartItemNotFound()
    try:
        item = CartItem.objects.select_for_update().select_related("product").get(id=item_id, cart=cart)
    except (CartItem.DoesNotExist, ValueError, TypeError):
        raise CartItemNotFound()

    if quantity == 0:
        remove_item(owner=owner, item_id=item.id)
        return None

    stock = int(item.product.stock)
    if quantity > stock:
        raise InsufficientStock(available=stock, message=f"Only {stock} items available")
    item.quantity = quantity
    item.save(update_fields=["quantity", "updated_at"])
    logger.info(
        "cart.item_updated",
        extra={
            "event": "cart.item_updated",
            "cart_id": cart.id,
            "item_id": item.id,
            "quantity": quantity,
            **owner.log_extra(),
        },
    )
    return item


@transaction.atomic
def remove_item(*, owner: CartOwner, item_id: int) -> None:
    """Delete a line from the owner's cart. Absent lines are ignored."""

    cart = get_cart(owner=owner)
    if cart is None:
        return
    deleted, _ = CartItem.objects.filter(id=item_id, cart=cart).delete()
    if deleted:
        logger.info(
            "cart.item_removed",
            extra={"event": "cart.item_removed", "cart_id": cart.id, "item_id": item_id, **owner.log_extra()},
        )


@transaction.atomic
def clear_cart(*, owner: CartOwner) -> None:
    """Delete every line in the owner's cart, keeping the cart itself."""

    cart = get_cart(owner=owner)
    if cart is None:
        return
    CartItem.objects.filter(cart=cart).delete()
    logger.info("cart.cleared", extra={"event": "cart.cleared", "cart_id": cart.id, **owner.log_extra()})


@transaction.atomic
def merge_guest_cart(*, session_id: str, user) -> Cart:
    """Fold a guest session cart into the user's cart.

    Quantities are clamped to current stock rather than rejected; a line is
    only dropped when its product has no stock left. The guest cart is
    deleted afterwards whether or not anything was moved; without a guest
    cart this is a no-op.
    """

    guest = CartOwner.for_session(session_id)
    dest_owner = CartOwner.for_user(user.id)
    src = Cart.objects.select_for_update().filter(**guest.lookup()).first()
    if src is None:
        return get_cart(owner=dest_owner)

    dest = _locked_cart(dest_owner)
    moved = 0
    for guest_item in CartItem.objects.filter(cart=src).order_by("id"):
        product = Product.objects.select_for_update().filter(id=guest_item.product_id).first()
        if product is None:
            continue
        stock = int(product.stock)
        existing = CartItem.objects.select_for_update().filter(cart=dest, product=product).first()
        if existing is not None:
            existing.quantity = min(int(guest_item.quantity) + int(existing.quantity), stock)
            if existing.quantity > 0:
                existing.save(update_fields=["quantity", "updated_at"])
            else:
                existing.delete()
        else:
            qty = min(int(guest_item.quantity), stock)
            if qty <= 0:
                continue
            CartItem.objects.create(cart=dest, product=product, quantity=qty)
        moved += 1

    src_id = src.id
    src.delete()
    logger.info(
        "cart.merged",
        extra={
            "event": "cart.merged",
            "src_cart_id": src_id,
            "dest_cart_id": dest.id,
            "user_id": user.id,
            "session_id": session_id,
            "lines": moved,
        },
    )
    return dest


# EOF
