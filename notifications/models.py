"""Model registration for the notifications app."""
from notifications.infrastructure.models import ContactVerification  # noqa: F401
