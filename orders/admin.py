from common.choices import OrderStatus
from common.errors import StorefrontError
from django.contrib import admin, messages
from django.db import DatabaseError

from .models import Order, OrderItem
from .services import update_order_status


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    fields = ("product", "product_name", "quantity", "price")
    readonly_fields = fields


def _transition_action(new_status: str, description: str):
    def action(modeladmin, request, queryset):
        done = 0
        for order in queryset:
            try:
                update_order_status(actor=request.user, order_id=order.id, new_status=new_status)
                done += 1
            except (StorefrontError, DatabaseError) as exc:
                message = getattr(exc, "message", "Failed to update order status")
                modeladmin.message_user(request, f"{order.number or order.id}: {message}", level=messages.ERROR)
        if done:
            modeladmin.message_user(request, f"Marked {done} order(s) as {new_status}.", level=messages.SUCCESS)

    action.__name__ = f"mark_{new_status.lower()}"
    action.short_description = description
    return action


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "number", "status", "user", "email", "total", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("number", "email", "payment_id")
    date_hierarchy = "created_at"
    inlines = [OrderItemInline]
    # Status only moves through the lifecycle actions below.
    readonly_fields = (
        "user",
        "number",
        "status",
        "subtotal",
        "shipping",
        "discount",
        "total",
        "shipping_address",
        "payment_order_id",
        "payment_id",
        "coupon_code",
        "created_at",
        "updated_at",
    )
    actions = [
        _transition_action(OrderStatus.PROCESSING, "Mark as processing"),
        _transition_action(OrderStatus.SHIPPED, "Mark as shipped"),
        _transition_action(OrderStatus.DELIVERED, "Mark as delivered"),
        _transition_action(OrderStatus.CANCELLED, "Cancel orders (restores stock)"),
    ]

    def has_add_permission(self, request):
        return False


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "product", "product_name", "quantity", "price")
    search_fields = ("product_name", "order__number")
    raw_id_fields = ("order", "product")
