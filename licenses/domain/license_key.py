"""
License key generation.

Keys are four hyphen-joined groups of uppercase letters and digits,
e.g. ``7KQ2-M9XA-0B3Z-LP4T``. The generator only makes collisions
unlikely; uniqueness is enforced by the store.
"""

import re
import secrets
import string

LICENSE_KEY_ALPHABET = string.ascii_uppercase + string.digits
LICENSE_KEY_SEGMENTS = 4
ALLOWED_SEGMENT_LENGTHS = (4, 5)

KEY_PATTERN = re.compile(r"^[A-Z0-9]{4,5}(-[A-Z0-9]{4,5}){3}$")


def generate_license_key(segment_length: int = 4) -> str:
    """
    Generate a license key in format: XXXX-XXXX-XXXX-XXXX.

    Args:
        segment_length: Characters per group

    Returns:
        Generated license key string
    """
    parts = [
        "".join(secrets.choice(LICENSE_KEY_ALPHABET) for _ in range(segment_length))
        for _ in range(LICENSE_KEY_SEGMENTS)
    ]
    return "-".join(parts)


def normalize_license_key(raw_key: str) -> str:
    """Trim and upper-case a key typed by a user."""
    return (raw_key or "").strip().upper()


def is_well_formed_key(key: str) -> bool:
    """Whether a normalized key has the shape of a generated one."""
    return KEY_PATTERN.match(key) is not None


class LicenseKeyGenerator:
    """Domain service for license key generation."""

    def __init__(self, segment_length: int = 4):
        if segment_length not in ALLOWED_SEGMENT_LENGTHS:
            raise ValueError(
                f"License key segment length must be one of {ALLOWED_SEGMENT_LENGTHS}, "
                f"got {segment_length}"
            )
        self.segment_length = segment_length

    def generate(self) -> str:
        """
        Generate a license key.

        Returns:
            Generated license key string
        """
        return generate_license_key(self.segment_length)
