"""Sanitization strategies."""

from .strategies import MarkupSanitizer, remove_enclosed_tag, remove_substring

__all__ = [
    'MarkupSanitizer',
    'remove_enclosed_tag',
    'remove_substring',
]
