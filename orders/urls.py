"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import CheckoutView, OrderDetailView, OrderListView

app_name = "orders"

urlpatterns = [
    path("", OrderListView.as_view(), name="order-list"),
    path("checkout/", CheckoutView.as_view(), name="order-checkout"),
    path("<int:order_id>/", OrderDetailView.as_view(), name="order-detail"),
]
