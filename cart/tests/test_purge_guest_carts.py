from datetime import timedelta

import pytest
from cart.models import Cart
from cart.tests.factories import CartFactory, GuestCartFactory
from django.core.management import call_command
from django.utils import timezone


@pytest.mark.django_db
def test_purge_deletes_only_stale_guest_carts(settings):
    settings.CART_GUEST_TTL_DAYS = 30
    stale_guest = GuestCartFactory()
    fresh_guest = GuestCartFactory()
    stale_user = CartFactory()
    old = timezone.now() - timedelta(days=31)
    Cart.objects.filter(id__in=[stale_guest.id, stale_user.id]).update(updated_at=old)

    call_command("purge_guest_carts")

    remaining = set(Cart.objects.values_list("id", flat=True))
    assert remaining == {fresh_guest.id, stale_user.id}


@pytest.mark.django_db
def test_purge_dry_run_keeps_carts():
    cart = GuestCartFactory()
    Cart.objects.filter(id=cart.id).update(updated_at=timezone.now() - timedelta(days=90))

    call_command("purge_guest_carts", "--dry-run")

    assert Cart.objects.filter(id=cart.id).exists()
