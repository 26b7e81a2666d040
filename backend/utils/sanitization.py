"""Input sanitization utilities."""

import re


def sanitize_for_log(value: str | None, max_length: int = 200) -> str:
    """Sanitize an upstream or user-provided string for safe logging.

    Prevents:
    - Log injection (newlines, control characters)
    - Excessively long values flooding the log

    Args:
        value: The raw string (organization name, error text, etc.)
        max_length: Maximum length kept

    Returns:
        A log-safe string
    """
    if not value:
        return ""

    # Remove control characters and newlines (prevent log injection)
    safe_value = re.sub(r"[\x00-\x1f\x7f-\x9f\n\r]", "", str(value))

    if len(safe_value) > max_length:
        safe_value = safe_value[:max_length] + "..."

    return safe_value
