"""Domain types shared across the package: allow-listed keys, values and outcomes."""
from enum import Enum
from typing import Any, Dict, List, Tuple, Union


class StorageKey(str, Enum):
    """Logical slots the guarded store is allowed to touch."""

    ROWS = "rows"
    DARK_MODE = "darkMode"
    PRESETS = "presets"
    SESSION_HISTORY = "sessionHistory"
    USER_SETTINGS = "userSettings"
    LAST_PRESET = "lastPreset"

    def __str__(self) -> str:
        return self.value


# Declaration order is the allow-list order used by list_present_keys()
ALLOWED_KEYS: Tuple[StorageKey, ...] = tuple(StorageKey)

# JSON-representable data accepted by the store
Value = Union[None, bool, int, float, str, List[Any], Tuple[Any, ...], Dict[str, Any]]


class Outcome(str, Enum):
    """Result classification recorded for every store operation."""

    OK = "ok"
    ABSENT = "absent"
    REJECTED_KEY = "rejected_key"
    SERIALIZATION_FAILURE = "serialization_failure"
    DESERIALIZATION_FAILURE = "deserialization_failure"
    SIZE_LIMIT_EXCEEDED = "size_limit_exceeded"
    MEDIUM_FAILURE = "medium_failure"
