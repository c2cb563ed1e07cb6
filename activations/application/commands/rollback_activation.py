"""
RollbackActivationCommand.

Command to undo an activation whose follow-up setup failed on the device.
"""

from dataclasses import dataclass


@dataclass
class RollbackActivationCommand:
    """Command to roll back an activation."""

    license_key: str
    hardware_id: str
