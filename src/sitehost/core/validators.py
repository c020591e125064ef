"""Subdomain validators."""

import re
from typing import Final

MAX_SUBDOMAIN_LENGTH: Final[int] = 63  # DNS label limit
SUBDOMAIN_REGEX: Final[str] = r"[a-z0-9-]+"

SUBDOMAIN_PATTERN: Final[re.Pattern[str]] = re.compile(SUBDOMAIN_REGEX)


def validate_subdomain_format(value: str) -> str:
    """Validate subdomain format.

    This validates **format only**. Length is enforced by Field(max_length=...).
    """
    if not SUBDOMAIN_PATTERN.fullmatch(value):
        raise ValueError("Subdomain must contain only lowercase letters, numbers, and hyphens")
    return value
