"""In-process storage medium."""
from typing import Dict, List, Optional

from .base import StorageMedium
from ..exceptions import MediumUnavailableError, QuotaExceededError


class InMemoryMedium(StorageMedium):
    """Dict-backed medium with an optional character quota.

    The quota counts key plus value characters across all records, the way
    browser storage budgets are usually measured.
    """

    def __init__(self, quota: Optional[int] = None, disabled: bool = False):
        self._records: Dict[str, str] = {}
        self.quota = quota
        self.disabled = disabled

    def _ensure_available(self) -> None:
        if self.disabled:
            raise MediumUnavailableError("Storage medium is disabled")

    def _usage_without(self, key: str) -> int:
        return sum(len(k) + len(v) for k, v in self._records.items() if k != key)

    def get_item(self, key: str) -> Optional[str]:
        self._ensure_available()
        return self._records.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._ensure_available()
        if self.quota is not None:
            required = self._usage_without(key) + len(key) + len(value)
            if required > self.quota:
                raise QuotaExceededError(key, required, self.quota)
        self._records[key] = value

    def remove_item(self, key: str) -> None:
        self._ensure_available()
        self._records.pop(key, None)

    def keys(self) -> List[str]:
        self._ensure_available()
        return list(self._records)

    def clear(self) -> None:
        """Drop every record, including keys no guarded store owns."""
        self._records.clear()
