"""Model registration for the activations app."""
from activations.infrastructure.models import Activation  # noqa: F401
