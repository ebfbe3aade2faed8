"""Seed a handful of products for local development.

Re-running is idempotent: products are reused by slug and only receive
opening stock when they are first created.
"""

from catalog.models import Product
from common.money import from_major_units
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify
from inventory.services import increment_stock

PRODUCTS = [
    {
        "title": "Studio Monitor Speakers",
        "description": "High-fidelity nearfield monitors for accurate mixing.",
        "price": "2999.00",
        "stock": 12,
    },
    {
        "title": "HDMI 2.1 Cable 2m",
        "description": "Ultra High Speed HDMI cable supporting 8K video.",
        "price": "199.99",
        "stock": 150,
    },
    {
        "title": "4K Camcorder",
        "description": "Compact camcorder with 4K recording and optical stabilization.",
        "price": "7990.00",
        "stock": 5,
    },
]


class Command(BaseCommand):
    help = "Seed development products with opening stock"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")

        created_count = 0
        for p in PRODUCTS:
            product, created = Product.objects.get_or_create(
                slug=slugify(p["title"]),
                defaults={
                    "title": p["title"],
                    "description": p["description"],
                    "price": from_major_units(p["price"]),
                    "is_active": True,
                },
            )
            if created:
                created_count += 1
                increment_stock(product_id=product.id, quantity=p["stock"], reason="opening stock", reference="seed")

        self.stdout.write(self.style.SUCCESS(f"Catalog seed complete ({created_count} new products)."))
