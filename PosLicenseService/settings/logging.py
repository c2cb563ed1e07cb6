"""
Logging configuration for structured JSON logging.

Every record carries the service name so aggregated logs can be
filtered per deployment.
"""

import os
import sys

from pythonjsonlogger import jsonlogger

APP_LOGGERS = ("core", "licenses", "subscriptions", "activations", "payments", "notifications")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that stamps the service name."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = os.environ.get("SERVICE_NAME", "pos-license-service")
        log_record.setdefault("level", record.levelname)


def get_logging_config(environment: str = "development") -> dict:
    """
    Get logging configuration for the application.

    Args:
        environment: Environment name (development, production, test)

    Returns:
        Django logging configuration dictionary
    """
    log_level = "DEBUG" if environment == "development" else "INFO"

    loggers = {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "django.db.backends": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
        "celery": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    }
    for name in APP_LOGGERS:
        loggers[name] = {
            "handlers": ["console"],
            "level": log_level,
            "propagate": False,
        }
    # Audit trail stays at INFO even when debugging.
    loggers["core.audit"] = {
        "handlers": ["console"],
        "level": "INFO",
        "propagate": False,
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d",
            },
            "simple": {
                "format": "{levelname} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": log_level,
        },
        "loggers": loggers,
    }
