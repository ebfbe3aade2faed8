"""Scoped throttling for storefront endpoints.

Overrides DRF's ScopedRateThrottle rate lookup to read from Django settings
at request-time, so tests using override_settings reliably affect rates.
"""

from django.conf import settings
from rest_framework.throttling import ScopedRateThrottle


class StoreScopedRateThrottle(ScopedRateThrottle):
    def get_rate(self):
        rf = getattr(settings, "REST_FRAMEWORK", {})
        rates = rf.get("DEFAULT_THROTTLE_RATES", {})
        return rates.get(self.scope)

    def get_ident(self, request):
        # Guests are identified by their cart session so shoppers behind one NAT do not share a bucket.
        session_id = request.headers.get("X-Session-Id")
        if session_id and not getattr(request.user, "is_authenticated", False):
            return f"guest:{session_id}"
        return super().get_ident(request)
