"""Allow-listed, sanitizing key-value store.

Every public operation is total: failures are logged (outside production) and
reported through the return value, never raised.
"""
import logging
import time
from typing import Any, Callable, List, Optional, Tuple

from .base import StorageMedium
from .memory import InMemoryMedium
from ..config import StorageConfig
from ..core.sanitization.strategies import MarkupSanitizer
from ..core.validation.validators import validate_nesting_depth, validate_storage_key
from ..exceptions import (
    DeserializationError,
    NestingDepthExceededError,
    RejectedKeyError,
    SerializationError,
    SizeLimitExceededError,
)
from ..interfaces import ALLOWED_KEYS, Outcome, StorageKey, Value
from ..monitoring.metrics import StoreMetrics
from ..utils.codec import decode_record, encode_record

logger = logging.getLogger(__name__)


class GuardedStore:
    """Sanitizes values on write and read, and only touches allow-listed keys."""

    def __init__(
        self,
        medium: Optional[StorageMedium] = None,
        config: Optional[StorageConfig] = None,
        sanitizer: Optional[MarkupSanitizer] = None,
        metrics: Optional[StoreMetrics] = None
    ):
        """
        Initialize the store.

        Args:
            medium: Underlying persistent medium, in-memory by default
            config: Store configuration, read from the environment by default
            sanitizer: Sanitizer to use, built from config by default
            metrics: Metrics collector, a fresh one by default
        """
        self.config = config if config is not None else StorageConfig.from_env()
        self.medium = medium if medium is not None else InMemoryMedium()
        self.sanitizer = sanitizer if sanitizer is not None else MarkupSanitizer(self.config)
        self.metrics = metrics if metrics is not None else StoreMetrics()

    @property
    def allowed_keys(self) -> Tuple[StorageKey, ...]:
        return ALLOWED_KEYS

    def get(self, key: Any) -> Optional[Value]:
        """Read and sanitize the value stored under key.

        Returns:
            The sanitized value, or None if the key is rejected, nothing is
            stored, or the record cannot be read or decoded
        """
        return self._run("get", self._get, key)

    def set(self, key: Any, value: Value) -> bool:
        """Sanitize and store value under key.

        Returns:
            True if the record was written
        """
        return self._run("set", self._set, key, value)

    def remove(self, key: Any) -> bool:
        """Delete the record under key.

        Returns:
            True if the key is allow-listed and the medium accepted the delete
        """
        return self._run("remove", self._remove, key)

    def clear(self) -> bool:
        """Delete every allow-listed record, leaving other keys untouched.

        Returns:
            False if any deletion failed
        """
        return self._run("clear", self._clear)

    def list_present_keys(self) -> List[StorageKey]:
        """Return allow-listed keys that currently hold a record, in allow-list order."""
        return self._run("list_present_keys", self._list_present_keys)

    def _run(self, operation: str, func: Callable[..., Tuple[Any, Outcome]], *args: Any) -> Any:
        start_time = time.perf_counter()
        result, outcome = func(*args)
        self.metrics.record(operation, outcome, time.perf_counter() - start_time)
        return result

    def _diagnose(self, level: int, message: str) -> None:
        if self.config.is_production:
            return
        logger.log(level, message)

    def _check_key(self, key: Any, action: str) -> Optional[StorageKey]:
        try:
            return validate_storage_key(key)
        except RejectedKeyError:
            self._diagnose(logging.WARNING, f"Attempted to {action} non-allow-listed storage key: {key!r}")
            return None

    def _get(self, key: Any) -> Tuple[Optional[Value], Outcome]:
        storage_key = self._check_key(key, "access")
        if storage_key is None:
            return None, Outcome.REJECTED_KEY

        try:
            raw = self.medium.get_item(storage_key.value)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._diagnose(logging.ERROR, f"Error reading from storage ({storage_key}): {e}")
            return None, Outcome.MEDIUM_FAILURE

        if not raw:
            return None, Outcome.ABSENT

        try:
            parsed = decode_record(storage_key.value, raw)
        except DeserializationError as e:
            self._diagnose(logging.ERROR, f"Error reading from storage ({storage_key}): {e}")
            return None, Outcome.DESERIALIZATION_FAILURE

        try:
            validate_nesting_depth(parsed, self.config.max_nesting_depth)
        except NestingDepthExceededError as e:
            self._diagnose(logging.ERROR, f"Error reading from storage ({storage_key}): {e}")
            return None, Outcome.DESERIALIZATION_FAILURE

        return self.sanitizer.sanitize_value(parsed), Outcome.OK

    def _set(self, key: Any, value: Value) -> Tuple[bool, Outcome]:
        storage_key = self._check_key(key, "set")
        if storage_key is None:
            return False, Outcome.REJECTED_KEY

        try:
            validate_nesting_depth(value, self.config.max_nesting_depth)
            serialized = encode_record(self.sanitizer.sanitize_value(value))
        except SerializationError as e:
            self._diagnose(logging.ERROR, f"Error serializing value for storage ({storage_key}): {e}")
            return False, Outcome.SERIALIZATION_FAILURE

        limit = self.config.max_serialized_length
        if len(serialized) > limit:
            error = SizeLimitExceededError(storage_key.value, len(serialized), limit)
            self._diagnose(logging.ERROR, f"Data too large for storage: {error}")
            return False, Outcome.SIZE_LIMIT_EXCEEDED

        try:
            self.medium.set_item(storage_key.value, serialized)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._diagnose(logging.ERROR, f"Error writing to storage ({storage_key}): {e}")
            return False, Outcome.MEDIUM_FAILURE

        return True, Outcome.OK

    def _remove(self, key: Any) -> Tuple[bool, Outcome]:
        storage_key = self._check_key(key, "remove")
        if storage_key is None:
            return False, Outcome.REJECTED_KEY

        try:
            self.medium.remove_item(storage_key.value)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._diagnose(logging.ERROR, f"Error removing from storage ({storage_key}): {e}")
            return False, Outcome.MEDIUM_FAILURE

        return True, Outcome.OK

    def _clear(self) -> Tuple[bool, Outcome]:
        succeeded = True
        for storage_key in ALLOWED_KEYS:
            try:
                self.medium.remove_item(storage_key.value)
            except Exception as e:  # pylint: disable=broad-exception-caught
                self._diagnose(logging.ERROR, f"Error clearing storage ({storage_key}): {e}")
                succeeded = False

        return succeeded, Outcome.OK if succeeded else Outcome.MEDIUM_FAILURE

    def _list_present_keys(self) -> Tuple[List[StorageKey], Outcome]:
        present = []
        outcome = Outcome.OK
        for storage_key in ALLOWED_KEYS:
            try:
                if self.medium.get_item(storage_key.value) is not None:
                    present.append(storage_key)
            except Exception as e:  # pylint: disable=broad-exception-caught
                self._diagnose(logging.ERROR, f"Error checking storage ({storage_key}): {e}")
                outcome = Outcome.MEDIUM_FAILURE

        return present, outcome
