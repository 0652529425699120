"""Sanitizing, allow-listed key-value storage."""

from .config import DEFAULT_CONFIG, StorageConfig
from .interfaces import ALLOWED_KEYS, StorageKey
from .storage import GuardedStore, InMemoryMedium, SQLiteMedium, StorageMedium
from .utils.sanitization import sanitize_string, sanitize_value

__version__ = "0.1.0"

__all__ = [
    'ALLOWED_KEYS',
    'DEFAULT_CONFIG',
    'GuardedStore',
    'InMemoryMedium',
    'SQLiteMedium',
    'StorageConfig',
    'StorageKey',
    'StorageMedium',
    'sanitize_string',
    'sanitize_value',
]
