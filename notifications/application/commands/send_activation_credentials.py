"""
SendActivationCredentialsCommand.

Command a POS installation sends after creating its owner account.
"""
from dataclasses import dataclass


@dataclass
class SendActivationCredentialsCommand:
    """Command to message the license owner their login credentials."""

    license_key: str
    username: str
    password: str
