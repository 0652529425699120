"""Abstract interface for the raw text media a guarded store writes to."""
from abc import ABC, abstractmethod
from typing import List, Optional


class StorageMedium(ABC):
    """Abstract base class for the persistent medium behind a guarded store.

    Media hold raw text under string keys and may be shared with code that
    writes keys the guarded store never touches. Failures are raised as
    MediumError or one of its subclasses.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the text stored under key, or None."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous record."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete the record under key if it exists."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """List every key currently held by the medium."""
        pass

    def close(self) -> None:
        """Release resources held by the medium."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
