import pytest
from catalog.models import Product
from django.core.management import call_command
from inventory.models import StockMovement


@pytest.mark.django_db
def test_seed_catalog_is_idempotent():
    call_command("seed_catalog")
    call_command("seed_catalog")

    assert Product.objects.count() == 3
    camcorder = Product.objects.get(slug="4k-camcorder")
    assert camcorder.price == 799000
    assert camcorder.stock == 5
    assert StockMovement.objects.filter(reference="seed").count() == 3
