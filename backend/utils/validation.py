"""NPI input validation.

The 10-digit format check is the only required-input contract of the
lookup endpoints. It runs before any outbound request is made.
"""

from __future__ import annotations

import re

NPI_PATTERN = re.compile(r"^\d{10}$")

INVALID_NPI_MESSAGE = "Invalid NPI. Must be 10 digits."


class InvalidNPIError(ValueError):
    """Raised when an NPI does not match the 10-digit format."""

    def __init__(self, npi: str | None):
        super().__init__(INVALID_NPI_MESSAGE)
        self.npi = npi


def is_valid_npi(npi: str | None) -> bool:
    """Return True if ``npi`` is exactly ten ASCII digits."""
    if not npi or not isinstance(npi, str):
        return False
    # \d also matches non-ASCII digits; fullmatch rejects a trailing newline
    return npi.isascii() and NPI_PATTERN.fullmatch(npi) is not None


def require_valid_npi(npi: str | None) -> str:
    """Return ``npi`` unchanged or raise InvalidNPIError."""
    if not is_valid_npi(npi):
        raise InvalidNPIError(npi)
    return npi  # type: ignore[return-value]
