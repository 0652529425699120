from .base import StorageMedium
from .guarded import GuardedStore
from .memory import InMemoryMedium
from .sqlite import SQLiteMedium

__all__ = [
    'GuardedStore',
    'InMemoryMedium',
    'SQLiteMedium',
    'StorageMedium',
]
