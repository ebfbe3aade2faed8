from django.contrib import admin

from .models import Coupon


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ("code", "discount_type", "discount_value", "min_order_value", "current_uses", "max_uses", "expires_at")
    list_filter = ("discount_type",)
    search_fields = ("code",)
    ordering = ("-created_at",)
    readonly_fields = ("current_uses", "created_at", "updated_at")
