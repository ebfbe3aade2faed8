from django.urls import path

from .views import ProductReviewsView

app_name = "reviews"

urlpatterns = [
    path("products/<int:product_id>/reviews/", ProductReviewsView.as_view(), name="product-reviews"),
]
