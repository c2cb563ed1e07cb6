"""
License key codec.

Keys look like ``XXXX-XXXX-XXXX-XXXX-CCCC``: sixteen random base-36
characters in four groups, followed by a checksum group derived from
them. Keys are compared after normalization, so callers may pass them
in any case and with stray whitespace.
"""

import re
import secrets
import string
from dataclasses import dataclass
from typing import Awaitable, Callable

from core.domain.exceptions import InvalidLicenseKeyError, LicenseKeyGenerationError
from core.domain.value_objects import ValueObject

ALPHABET = string.digits + string.ascii_uppercase
DATA_LENGTH = 16
GROUP_LENGTH = 4
CHECKSUM_MODULUS = 10000
MAX_GENERATION_ATTEMPTS = 10

KEY_PATTERN = re.compile(r"^[A-Z0-9]{4}(-[A-Z0-9]{4}){4}$")
_WHITESPACE = re.compile(r"\s+")


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(ALPHABET[remainder])
    return "".join(reversed(digits))


def calculate_checksum(data: str) -> str:
    """
    Compute the checksum group for the sixteen data characters.

    Args:
        data: Data characters without dashes

    Returns:
        Four uppercase base-36 characters
    """
    total = sum(ord(char) for char in data)
    return _to_base36(total % CHECKSUM_MODULUS).zfill(GROUP_LENGTH)


def normalize_license_key(raw: str) -> str:
    """Strip all whitespace and uppercase."""
    return _WHITESPACE.sub("", raw or "").upper()


def validate_format(key: str) -> bool:
    """Five dash-separated groups of four uppercase alphanumerics."""
    return bool(KEY_PATTERN.match(key or ""))


def validate_checksum(key: str) -> bool:
    """Recompute the checksum over the first four groups and compare."""
    if not validate_format(key):
        return False
    groups = key.split("-")
    return calculate_checksum("".join(groups[:4])) == groups[4]


def is_valid_license_key(raw: str) -> bool:
    """Format and checksum check on the normalized key."""
    key = normalize_license_key(raw)
    return validate_format(key) and validate_checksum(key)


def generate_license_key() -> str:
    """
    Generate a license key in format: XXXX-XXXX-XXXX-XXXX-CCCC.

    Returns:
        Generated license key string
    """
    data = "".join(secrets.choice(ALPHABET) for _ in range(DATA_LENGTH))
    groups = [data[i : i + GROUP_LENGTH] for i in range(0, DATA_LENGTH, GROUP_LENGTH)]
    groups.append(calculate_checksum(data))
    return "-".join(groups)


async def generate_unique_license_key(
    exists: Callable[[str], Awaitable[bool]],
    max_attempts: int = MAX_GENERATION_ATTEMPTS,
) -> str:
    """
    Generate a key that ``exists`` reports as unused.

    Args:
        exists: Async lookup returning True when a key is taken
        max_attempts: Number of candidates to try

    Returns:
        An unused license key

    Raises:
        LicenseKeyGenerationError: If every candidate collided
    """
    for _ in range(max_attempts):
        key = generate_license_key()
        if not await exists(key):
            return key
    raise LicenseKeyGenerationError(
        f"Failed to generate a unique license key after {max_attempts} attempts"
    )


@dataclass(frozen=True)
class LicenseKey(ValueObject):
    """Validated, normalized license key."""

    value: str

    def __post_init__(self):
        """Validate key format and checksum."""
        if not validate_format(self.value) or not validate_checksum(self.value):
            raise InvalidLicenseKeyError()

    @classmethod
    def parse(cls, raw: str) -> "LicenseKey":
        """
        Normalize and validate a caller-supplied key.

        Raises:
            InvalidLicenseKeyError: If the key is malformed or the checksum is wrong
        """
        return cls(normalize_license_key(raw))

    def __str__(self) -> str:
        """Return key as string."""
        return self.value
