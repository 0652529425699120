"""Module-level sanitization helpers backed by the default configuration."""
from typing import Any

from ..core.sanitization.strategies import MarkupSanitizer

_sanitizer = MarkupSanitizer()


def sanitize_string(value: Any) -> Any:
    """Remove dangerous tags, URI schemes and event-handler attributes.

    Args:
        value: String to sanitize; non-strings are returned unchanged

    Returns:
        Sanitized string
    """
    return _sanitizer.sanitize(value)


def sanitize_value(value: Any) -> Any:
    """Recursively sanitize every string in a JSON-compatible value, keys included."""
    return _sanitizer.sanitize_value(value)
