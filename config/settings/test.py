from .base import *  # noqa: F401, F403

DEBUG = False
SECRET_KEY = "test-secret-key"
SITE_URL = "http://testserver"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

REDIS_URL = None

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

# Run django-q2 tasks inline
Q_CLUSTER = {
    "name": "tenancy-test",
    "orm": "default",
    "sync": True,
}

PAYMENT_GATEWAY_BACKEND = "apps.billing.tests.fakes.FakeGateway"
STRIPE_WEBHOOK_SECRET = "whsec_test"
STRIPE_CONNECT_POLL_INTERVAL = 0
STRIPE_CONNECT_POLL_TIMEOUT = 0.5

SEARCH_INDEX_URL = ""

LOGGING["loggers"]["apps"]["level"] = "WARNING"  # noqa: F405
