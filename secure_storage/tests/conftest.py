"""Test configuration and fixtures for secure storage tests."""
from typing import Iterator

import pytest

from secure_storage.config import StorageConfig
from secure_storage.core.sanitization.strategies import MarkupSanitizer
from secure_storage.storage.guarded import GuardedStore
from secure_storage.storage.memory import InMemoryMedium
from secure_storage.storage.sqlite.manager import SQLiteMedium


@pytest.fixture
def dev_config() -> StorageConfig:
    """Non-production config so diagnostics are emitted."""
    return StorageConfig(environment="development")


@pytest.fixture
def prod_config() -> StorageConfig:
    return StorageConfig(environment="production")


@pytest.fixture
def sanitizer(dev_config: StorageConfig) -> MarkupSanitizer:
    return MarkupSanitizer(dev_config)


@pytest.fixture
def medium() -> InMemoryMedium:
    return InMemoryMedium()


@pytest.fixture
def store(medium: InMemoryMedium, dev_config: StorageConfig) -> GuardedStore:
    """Guarded store over a fresh in-memory medium."""
    return GuardedStore(medium, config=dev_config)


@pytest.fixture
def sqlite_medium(tmp_path) -> Iterator[SQLiteMedium]:
    """SQLite medium backed by a temporary database file."""
    medium = SQLiteMedium(str(tmp_path / "storage.db"))
    yield medium
    medium.close()


@pytest.fixture
def sqlite_store(sqlite_medium: SQLiteMedium, dev_config: StorageConfig) -> GuardedStore:
    return GuardedStore(sqlite_medium, config=dev_config)
