"""
Activation administration commands.
"""

from dataclasses import dataclass


@dataclass
class DeactivateActivationCommand:
    """Command to deactivate one device binding."""

    activation_id: int


@dataclass
class DeactivateAllActivationsCommand:
    """Command to reset every device binding of a license."""

    license_id: int
