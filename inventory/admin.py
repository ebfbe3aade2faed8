"""Admin registrations for inventory app."""

from django.contrib import admin

from .models import StockMovement


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "movement_type", "quantity", "reason", "reference", "created_at")
    list_filter = ("movement_type",)
    search_fields = ("product__title", "reference")
    readonly_fields = ("product", "movement_type", "quantity", "reason", "reference", "created_at", "updated_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


# EOF
