"""
Base Django settings for PosLicenseService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from celery.schedules import crontab

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-pos-license-service-development-key-change-me"
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # Local apps
    "core.apps.CoreConfig",
    "licenses",
    "subscriptions",
    "activations",
    "payments",
    "notifications",
]

# Database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "license_service"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Licensing
LICENSE_INITIAL_PRICE = int(os.environ.get("LICENSE_INITIAL_PRICE", "350"))
LICENSE_ANNUAL_PRICE = int(os.environ.get("LICENSE_ANNUAL_PRICE", "50"))
LICENSE_PRICE_PER_SEAT = int(os.environ.get("LICENSE_PRICE_PER_SEAT", "25"))
LICENSE_FREE_TRIAL_DAYS = int(os.environ.get("LICENSE_FREE_TRIAL_DAYS", "10"))
LICENSE_DEFAULT_SEAT_LIMIT = int(os.environ.get("LICENSE_DEFAULT_SEAT_LIMIT", "2"))
LICENSE_DEFAULT_PRODUCT_TAG = os.environ.get("LICENSE_DEFAULT_PRODUCT_TAG", "grocery")
LICENSE_PRODUCT_NAME = os.environ.get("LICENSE_PRODUCT_NAME", "POS")

# License cache
LICENSE_CACHE_TTL = int(os.environ.get("LICENSE_CACHE_TTL", "300"))
LICENSE_CACHE_MAX_KEYS = int(os.environ.get("LICENSE_CACHE_MAX_KEYS", "10000"))
LICENSE_CACHE_SCAN_WARNING_THRESHOLD = int(
    os.environ.get("LICENSE_CACHE_SCAN_WARNING_THRESHOLD", "10000")
)

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "pos-license-service",
        "TIMEOUT": LICENSE_CACHE_TTL,
        "OPTIONS": {
            "MAX_ENTRIES": LICENSE_CACHE_MAX_KEYS,
        },
    }
}

# Activation tokens
LICENSE_TOKEN_SECRET = os.environ.get("LICENSE_TOKEN_SECRET") or SECRET_KEY
LICENSE_TOKEN_ALGORITHM = os.environ.get("LICENSE_TOKEN_ALGORITHM", "HS256")
LICENSE_TOKEN_TTL_DAYS = int(os.environ.get("LICENSE_TOKEN_TTL_DAYS", "365"))

# Notifications
NOTIFICATION_CHANNEL = os.environ.get("NOTIFICATION_CHANNEL", "logging")
NOTIFICATION_GATEWAY_URL = os.environ.get("NOTIFICATION_GATEWAY_URL")
NOTIFICATION_GATEWAY_SECRET = os.environ.get("NOTIFICATION_GATEWAY_SECRET")
NOTIFICATION_GATEWAY_TIMEOUT = int(os.environ.get("NOTIFICATION_GATEWAY_TIMEOUT", "10"))
NOTIFICATION_CONCURRENCY = int(os.environ.get("NOTIFICATION_CONCURRENCY", "5"))
NOTIFICATION_BATCH_TIMEOUT = float(os.environ.get("NOTIFICATION_BATCH_TIMEOUT", "300"))
EXPIRATION_WARNING_DAYS = (3, 1)

# Celery
REDIS_URL = os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/0")
CELERY_BROKER_URL = REDIS_URL
CELERY_RESULT_BACKEND = REDIS_URL
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TIMEZONE = TIME_ZONE

# Sweeps run a few minutes apart to avoid contention.
CELERY_BEAT_SCHEDULE = {
    "expire-subscriptions": {
        "task": "core.tasks.expire_subscriptions_task",
        "schedule": crontab(hour=2, minute=0),
    },
    "expire-free-trials": {
        "task": "core.tasks.expire_trials_task",
        "schedule": crontab(hour=2, minute=5),
    },
    "send-expiration-warnings": {
        "task": "core.tasks.send_expiration_warnings_task",
        "schedule": crontab(hour=2, minute=10),
    },
}

# Observability
SERVICE_NAME = os.environ.get("SERVICE_NAME", "pos-license-service")
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
