"""
Production settings for PosLicenseService.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = False

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "").split(",")

# Secret key from environment
SECRET_KEY = os.environ["SECRET_KEY"]
LICENSE_TOKEN_SECRET = os.environ.get("LICENSE_TOKEN_SECRET") or SECRET_KEY

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_CACHE_URL", "redis://127.0.0.1:6379/1"),
        "TIMEOUT": LICENSE_CACHE_TTL,  # noqa: F405
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

NOTIFICATION_CHANNEL = os.environ.get("NOTIFICATION_CHANNEL", "http")

LOGGING = get_logging_config("production")
LOGGING["handlers"]["file"] = {
    "class": "logging.handlers.RotatingFileHandler",
    "filename": os.environ.get("LOG_FILE", "/var/log/pos-license-service/app.log"),
    "maxBytes": 1024 * 1024 * 10,  # 10 MB
    "backupCount": 10,
    "formatter": "json",
}
LOGGING["root"]["handlers"].append("file")
LOGGING["loggers"]["core.audit"]["handlers"].append("file")
