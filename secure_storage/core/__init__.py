"""Core package containing fundamental interfaces, exceptions and sanitizers."""

from ..interfaces import ALLOWED_KEYS, Outcome, StorageKey
from ..exceptions import (
    SecureStorageError,
    RejectedKeyError,
    SerializationError,
    DeserializationError,
    SizeLimitExceededError,
    NestingDepthExceededError,
    MediumError,
)
from .sanitization import MarkupSanitizer
from .validation.validators import validate_nesting_depth, validate_storage_key

__all__ = [
    'ALLOWED_KEYS',
    'Outcome',
    'StorageKey',
    'SecureStorageError',
    'RejectedKeyError',
    'SerializationError',
    'DeserializationError',
    'SizeLimitExceededError',
    'NestingDepthExceededError',
    'MediumError',
    'MarkupSanitizer',
    'validate_nesting_depth',
    'validate_storage_key',
]
