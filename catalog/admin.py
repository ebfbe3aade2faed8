"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("title", "slug", "price", "stock", "is_active")
    search_fields = ("title", "slug")
    list_filter = ("is_active",)
    prepopulated_fields = {"slug": ("title",)}
