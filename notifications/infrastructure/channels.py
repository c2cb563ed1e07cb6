"""
Notification channel adapters.

``HttpNotificationChannel`` posts signed JSON to a messaging gateway;
``LoggingNotificationChannel`` only logs and is the development default.
"""
import hashlib
import hmac
import json
import logging
from typing import Optional

import requests
from django.conf import settings
from django.utils import timezone

from notifications.ports.notification_channel import NotificationChannel

logger = logging.getLogger(__name__)


class LoggingNotificationChannel(NotificationChannel):
    """Channel that writes messages to the log instead of sending them."""

    def send(self, destination: str, message: str) -> bool:
        logger.info(
            "Notification to %s (%s chars)",
            destination,
            len(message),
            extra={"destination": destination},
        )
        logger.debug("Notification body: %s", message)
        return True


class HttpNotificationChannel(NotificationChannel):
    """Service for delivering messages to an HTTP messaging gateway."""

    def __init__(self, url: str, secret: Optional[str] = None, timeout: int = 10):
        """
        Initialize the channel.

        Args:
            url: Gateway endpoint accepting JSON {to, message, timestamp}
            secret: Shared secret used to sign the body
            timeout: Request timeout in seconds
        """
        self.url = url
        self.secret = secret
        self.timeout = timeout

    @staticmethod
    def generate_signature(payload: str, secret: str) -> str:
        """
        Generate HMAC signature for a payload.

        Args:
            payload: JSON string payload
            secret: Shared secret

        Returns:
            HMAC SHA-256 signature (hex)
        """
        return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()

    def send(self, destination: str, message: str) -> bool:
        """
        Deliver one message.

        Returns:
            True if the gateway answered with a success status
        """
        payload_json = json.dumps(
            {
                "to": destination,
                "message": message,
                "timestamp": timezone.now().isoformat(),
            },
            sort_keys=True,
        )
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "POS-License-Service/1.0",
        }
        if self.secret:
            headers["X-Signature"] = self.generate_signature(payload_json, self.secret)

        try:
            response = requests.post(
                self.url, data=payload_json, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning("Notification delivery to %s failed: %s", destination, e)
            return False

        logger.info("Notification delivered to %s", destination)
        return True


def build_notification_channel() -> NotificationChannel:
    """Pick the channel configured in settings."""
    channel = getattr(settings, "NOTIFICATION_CHANNEL", "logging")
    if channel == "http":
        url = getattr(settings, "NOTIFICATION_GATEWAY_URL", None)
        if not url:
            raise ValueError("NOTIFICATION_GATEWAY_URL is required for the http channel")
        return HttpNotificationChannel(
            url=url,
            secret=getattr(settings, "NOTIFICATION_GATEWAY_SECRET", None),
            timeout=getattr(settings, "NOTIFICATION_GATEWAY_TIMEOUT", 10),
        )
    if channel != "logging":
        raise ValueError(f"Unknown notification channel: {channel}")
    return LoggingNotificationChannel()
