"""Cart URL routes (v1)."""

from django.urls import path

from .views import CartAddItemView, CartClearView, CartItemView, CartView, MergeGuestCartView

app_name = "cart"

urlpatterns = [
    path("", CartView.as_view(), name="cart-detail"),
    path("items/", CartAddItemView.as_view(), name="cart-add-item"),
    path("items/<int:item_id>/", CartItemView.as_view(), name="cart-item"),
    path("clear/", CartClearView.as_view(), name="cart-clear"),
    path("merge/", MergeGuestCartView.as_view(), name="cart-merge-guest"),
]
