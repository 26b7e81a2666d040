"""Shared utility functions for the provider billing lookup backend."""

from .sanitization import sanitize_for_log
from .validation import (
    INVALID_NPI_MESSAGE,
    InvalidNPIError,
    is_valid_npi,
    require_valid_npi,
)

__all__ = [
    "INVALID_NPI_MESSAGE",
    "InvalidNPIError",
    "is_valid_npi",
    "require_valid_npi",
    "sanitize_for_log",
]
