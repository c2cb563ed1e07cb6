"""Model registration for the payments app."""
from payments.infrastructure.models import Payment  # noqa: F401
