from .base import *  # noqa
from .base import BASE_DIR
from .base import REST_FRAMEWORK as BASE_REST_FRAMEWORK

# Test settings: force SQLite for reliability and speed in CI/pytest
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test_db.sqlite3",
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

PAYMENT_KEY_SECRET = "test-payment-secret"
FRONTEND_URL = "http://testserver"
TIME_ZONE = "UTC"

# Relax throttling for tests to reduce flakiness
REST_FRAMEWORK = {**BASE_REST_FRAMEWORK}
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    **BASE_REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {}),
    "user": "10000/min",
    "anon": "10000/min",
    "cart": "10000/min",
    "cart_write": "10000/min",
    "orders": "10000/min",
    "orders_write": "10000/min",
    "reviews": "10000/min",
    "reviews_write": "10000/min",
}

# Let storefront loggers propagate so pytest's caplog sees them
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "loggers": {
        "storefront": {"level": "INFO", "propagate": True},
    },
}
