# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS

- In-memory SQLite, fast hashing
- locmem mail outbox (notifications enabled so dispatch is observable)
- Throttle rates high enough that test suites never hit 429
- Dummy Stripe secrets (the HTTP client is patched in tests)
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import NOTIFICATIONS, PAYMENTS, REST_FRAMEWORK

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

NOTIFICATIONS = {**NOTIFICATIONS, "ENABLED": True}

PAYMENTS = {
    "STRIPE": {
        **PAYMENTS["STRIPE"],
        "SECRET_KEY": "sk_test_storefront",
        "WEBHOOK_SECRET": "whsec_storefront_test",
    }
}

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {
        scope: "10000/min" for scope in REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]
    },
}
