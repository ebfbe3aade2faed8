from datetime import timedelta

from cart.models import Cart
from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone


class Command(BaseCommand):
    help = "Delete guest carts idle for longer than CART_GUEST_TTL_DAYS"

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, default=None, help="Override CART_GUEST_TTL_DAYS")
        parser.add_argument("--dry-run", action="store_true", help="Report without deleting")

    def handle(self, *args, **options):
        ttl_days = options["days"]
        if ttl_days is None:
            ttl_days = getattr(settings, "CART_GUEST_TTL_DAYS", 30)
        cutoff = timezone.now() - timedelta(days=int(ttl_days))
        qs = Cart.objects.filter(user__isnull=True, updated_at__lt=cutoff)
        count = qs.count()
        if options["dry_run"]:
            self.stdout.write(f"{count} guest cart(s) idle since before {cutoff:%Y-%m-%d} would be deleted.")
            return
        qs.delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} stale guest carts."))
