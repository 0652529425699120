"""Exception hierarchy for secure storage.

These are raised by internal collaborators (validators, media, codec) and
caught at the GuardedStore boundary, which turns them into return values.
"""
from typing import Any, Optional


class SecureStorageError(Exception):
    """Base class for all secure storage errors."""


class ConfigurationError(SecureStorageError):
    """Raised when storage configuration cannot be loaded or validated."""


class RejectedKeyError(SecureStorageError):
    """Raised when a key is outside the allow-list."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"Key is not allow-listed: {key!r}")


class SerializationError(SecureStorageError):
    """Raised when a value cannot be encoded as JSON text."""


class DeserializationError(SecureStorageError):
    """Raised when a stored record is not valid JSON text."""

    def __init__(self, key: str, detail: Optional[str] = None):
        self.key = key
        message = f"Stored record for '{key}' could not be decoded"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SizeLimitExceededError(SecureStorageError):
    """Raised when a serialized value is larger than the configured bound."""

    def __init__(self, key: str, length: int, limit: int):
        self.key = key
        self.length = length
        self.limit = limit
        super().__init__(
            f"Serialized value for '{key}' is {length} characters, limit is {limit}"
        )


class MediumError(SecureStorageError):
    """Raised when the underlying storage medium fails."""


class QuotaExceededError(MediumError):
    """Raised when a write would exceed the medium's capacity."""

    def __init__(self, key: str, required: int, quota: int):
        self.key = key
        self.required = required
        self.quota = quota
        super().__init__(
            f"Writing '{key}' needs {required} characters, medium quota is {quota}"
        )


class MediumUnavailableError(MediumError):
    """Raised when the medium is disabled or has been closed."""


class NestingDepthExceededError(SerializationError):
    """Raised when a value nests containers deeper than the configured bound."""

    def __init__(self, depth: int, limit: int):
        self.depth = depth
        self.limit = limit
        super().__init__(f"Value nests at least {depth} containers deep, limit is {limit}")
