"""Root URL configuration for the storefront API."""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .health import health

admin.site.site_header = "Storefront Admin"
admin.site.index_title = "Admin"

urlpatterns = [
    path("admin/", admin.site.urls),
    # API schema and Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="api-schema"), name="api-docs"),
    # Healthcheck
    path("health/", health, name="health"),
    # Versioned v1 routes only
    path("api/v1/cart/", include("cart.urls")),
    path("api/v1/coupons/", include("coupons.urls")),
    path("api/v1/orders/", include("orders.urls")),
    path("api/v1/admin/orders/", include("orders.admin_urls")),
    path("api/v1/", include("reviews.urls")),
]
