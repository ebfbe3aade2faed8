"""Selectors for the catalog domain.

Expose read-only query helpers to keep services thin. Selectors return
model instances or querysets and avoid side effects.
"""

from common.errors import NotFoundError

from .models import Product


class ProductNotFound(NotFoundError):
    default_message = "Product not found"


def get_active_product(product_id, *, for_update: bool = False) -> Product:
    """Return the active product with ``product_id`` or raise ``ProductNotFound``.

    With ``for_update`` the row is locked until the surrounding transaction ends.
    """

    qs = Product.objects.filter(is_active=True)
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(id=product_id)
    except (Product.DoesNotExist, ValueError, TypeError):
        raise ProductNotFound()
