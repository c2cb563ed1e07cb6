"""
Test settings for PosLicenseService.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

SECRET_KEY = "test-secret-key"
LICENSE_TOKEN_SECRET = "test-token-secret"

# In-memory SQLite; tables are created from the models without migrations.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "TIMEOUT": 300,
        "OPTIONS": {
            "MAX_ENTRIES": 10000,
        },
    }
}

NOTIFICATION_CHANNEL = "logging"

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

# Disable logging during tests
LOGGING_CONFIG = None
