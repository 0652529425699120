"""Unit tests for the guarded store."""
import logging
from datetime import datetime

import orjson
import pytest

from secure_storage.config import MAX_NESTING_DEPTH, StorageConfig
from secure_storage.interfaces import ALLOWED_KEYS, StorageKey
from secure_storage.storage.guarded import GuardedStore
from secure_storage.storage.memory import InMemoryMedium

GUARDED_LOGGER = "secure_storage.storage.guarded"


def _store_warnings(caplog, level=logging.WARNING):
    return [r for r in caplog.records if r.name == GUARDED_LOGGER and r.levelno >= level]


def test_script_tag_is_stripped_end_to_end(store):
    assert store.set("rows", {"name": "<script>alert(1)</script>Normal Text"}) is True
    assert store.get("rows") == {"name": "Normal Text"}


def test_javascript_scheme_is_stripped_end_to_end(store):
    store.set("rows", {"link": "javascript:alert(1)"})
    assert store.get("rows") == {"link": "alert(1)"}


def test_event_handler_is_stripped_end_to_end(store):
    store.set("rows", {"html": '<div onclick="alert(1)">Click me</div>'})

    html = store.get("rows")["html"]

    assert "onclick=" not in html.lower()
    assert "Click me" in html


def test_present_keys_follow_set_and_remove(store):
    assert store.set("darkMode", True) is True
    assert "darkMode" in store.list_present_keys()

    assert store.remove("darkMode") is True
    assert "darkMode" not in store.list_present_keys()


def test_written_record_is_already_sanitized(store, medium):
    store.set("presets", [{"label": "<style>*{}</style>Fast"}])

    raw = medium.get_item("presets")

    assert orjson.loads(raw) == [{"label": "Fast"}]
    assert "<style" not in raw


def test_read_sanitizes_records_written_elsewhere(store, medium):
    """Test records that bypassed the store are still sanitized on read."""
    medium.set_item("userSettings", '{"<script>x</script>theme": "javascript:dark"}')

    assert store.get("userSettings") == {"theme": "dark"}


def test_accepts_enum_members(store):
    assert store.set(StorageKey.SESSION_HISTORY, [1, 2, 3]) is True
    assert store.get(StorageKey.SESSION_HISTORY) == [1, 2, 3]
    assert store.get("sessionHistory") == [1, 2, 3]


def test_scalar_values_round_trip(store):
    store.set("lastPreset", "warmup")
    store.set("darkMode", False)

    assert store.get("lastPreset") == "warmup"
    assert store.get("darkMode") is False


def test_set_rejects_unknown_key(store, medium, caplog):
    result = store.set("maliciousKey", {"data": "test"})

    assert result is False
    assert medium.get_item("maliciousKey") is None
    assert _store_warnings(caplog)


def test_get_rejects_unknown_key(store, medium, caplog):
    medium.set_item("maliciousKey", '{"data": "test"}')

    assert store.get("maliciousKey") is None
    assert _store_warnings(caplog)


def test_remove_rejects_unknown_key(store, medium, caplog):
    medium.set_item("maliciousKey", '{"data": "test"}')

    assert store.remove("maliciousKey") is False
    assert medium.get_item("maliciousKey") == '{"data": "test"}'
    assert _store_warnings(caplog)


@pytest.mark.parametrize("key", [None, 123, b"rows", "ROWS", " rows", ""])
def test_non_allow_listed_key_shapes_are_rejected(store, key):
    assert store.set(key, 1) is False
    assert store.get(key) is None
    assert store.remove(key) is False


def test_get_missing_key_returns_none(store):
    assert store.get("darkMode") is None


def test_get_empty_record_returns_none(store, medium):
    medium.set_item("rows", "")
    assert store.get("rows") is None


def test_corrupted_record_returns_none_and_is_kept(store, medium, caplog):
    medium.set_item("rows", "invalid json {{{")

    assert store.get("rows") is None
    assert medium.get_item("rows") == "invalid json {{{"
    assert _store_warnings(caplog, logging.ERROR)


def test_size_limit_keeps_previous_value(medium, caplog):
    store = GuardedStore(medium, config=StorageConfig(max_serialized_length=50))
    assert store.set("rows", {"name": "small"}) is True

    assert store.set("rows", {"name": "x" * 100}) is False
    assert store.get("rows") == {"name": "small"}
    assert _store_warnings(caplog, logging.ERROR)


def test_default_size_limit(store, medium):
    """Test values over five million serialized characters are refused."""
    assert store.set("rows", "x" * 6_000_000) is False
    assert medium.get_item("rows") is None


def test_size_limit_is_inclusive(medium):
    # '"xxxx"' is six characters
    store = GuardedStore(medium, config=StorageConfig(max_serialized_length=6))
    assert store.set("rows", "xxxx") is True
    assert store.set("rows", "xxxxx") is False


def test_size_is_measured_after_sanitization(medium):
    store = GuardedStore(medium, config=StorageConfig(max_serialized_length=10))
    assert store.set("rows", "<script>" + "x" * 50 + "</script>ok") is True
    assert store.get("rows") == "ok"


@pytest.mark.parametrize("value", [{1, 2}, {"when": datetime(2024, 1, 1)}, {1: "int key"}])
def test_unserializable_values_are_refused(store, medium, value):
    assert store.set("rows", value) is False
    assert medium.get_item("rows") is None


def test_self_referencing_value_is_refused(store):
    value = []
    value.append(value)
    assert store.set("rows", value) is False


def _nested_list(depth, leaf="leaf"):
    value = leaf
    for _ in range(depth):
        value = [value]
    return value


def test_value_at_max_nesting_depth_is_stored(store):
    """Test the deepest allowed value is sanitized, stored and read back."""
    value = _nested_list(MAX_NESTING_DEPTH, "<script>x</script>leaf")

    assert store.set("rows", value) is True
    assert store.get("rows") == _nested_list(MAX_NESTING_DEPTH)


def test_value_past_max_nesting_depth_is_refused(store, medium, caplog):
    assert store.set("rows", _nested_list(MAX_NESTING_DEPTH + 1)) is False
    assert medium.get_item("rows") is None
    assert _store_warnings(caplog, logging.ERROR)


def test_deeply_nested_dicts_are_refused(store):
    value = {}
    for _ in range(MAX_NESTING_DEPTH):
        value = {"k": value}

    assert store.set("rows", value) is False
    assert store.set("rows", value["k"]) is True


def test_configured_nesting_depth_is_honoured(medium):
    store = GuardedStore(medium, config=StorageConfig(max_nesting_depth=3))

    assert store.set("rows", _nested_list(3)) is True
    assert store.set("rows", _nested_list(4)) is False
    assert store.get("rows") == _nested_list(3)


def test_deep_record_written_elsewhere_reads_as_none(store, medium, caplog):
    depth = MAX_NESTING_DEPTH + 50
    medium.set_item("rows", "[" * depth + "]" * depth)

    assert store.get("rows") is None
    assert medium.get_item("rows") is not None
    assert _store_warnings(caplog, logging.ERROR)


def test_clear_removes_only_allow_listed_keys(store, medium):
    for key in ALLOWED_KEYS:
        assert store.set(key, {"k": key.value})
    medium.set_item("otherApp", "untouched")

    assert store.clear() is True

    assert store.list_present_keys() == []
    for key in ALLOWED_KEYS:
        assert medium.get_item(key.value) is None
    assert medium.get_item("otherApp") == "untouched"


def test_clear_on_empty_medium(store):
    assert store.clear() is True


def test_list_present_keys_uses_allow_list_order(store, medium):
    store.set("userSettings", {})
    store.set("rows", [])
    medium.set_item("otherApp", "{}")

    assert store.list_present_keys() == [StorageKey.ROWS, StorageKey.USER_SETTINGS]


def test_quota_failure_is_reported_as_false(dev_config, caplog):
    store = GuardedStore(InMemoryMedium(quota=20), config=dev_config)

    assert store.set("rows", "short") is True
    assert store.set("rows", "x" * 50) is False
    assert store.get("rows") == "short"
    assert _store_warnings(caplog, logging.ERROR)


def test_disabled_medium_never_raises(dev_config):
    store = GuardedStore(InMemoryMedium(disabled=True), config=dev_config)

    assert store.get("rows") is None
    assert store.set("rows", 1) is False
    assert store.remove("rows") is False
    assert store.clear() is False
    assert store.list_present_keys() == []


class _ExplodingMedium(InMemoryMedium):
    """Medium raising errors outside the MediumError hierarchy."""

    def __init__(self, failing_key):
        super().__init__()
        self.failing_key = failing_key

    def set_item(self, key, value):
        if key == self.failing_key:
            raise RuntimeError("security restriction")
        super().set_item(key, value)

    def remove_item(self, key):
        if key == self.failing_key:
            raise RuntimeError("security restriction")
        super().remove_item(key)


def test_arbitrary_medium_errors_are_caught(dev_config):
    medium = _ExplodingMedium("presets")
    store = GuardedStore(medium, config=dev_config)

    assert store.set("presets", []) is False
    assert store.remove("presets") is False
    assert store.set("rows", []) is True


def test_clear_attempts_every_key_after_failure(dev_config):
    medium = _ExplodingMedium("rows")
    store = GuardedStore(medium, config=dev_config)
    store.set("darkMode", True)
    store.set("lastPreset", "x")

    assert store.clear() is False
    assert medium.get_item("darkMode") is None
    assert medium.get_item("lastPreset") is None


def test_production_emits_no_diagnostics(medium, prod_config, caplog):
    caplog.set_level(logging.DEBUG)
    store = GuardedStore(medium, config=prod_config)
    medium.set_item("rows", "not json")

    assert store.set("maliciousKey", 1) is False
    assert store.get("rows") is None

    assert _store_warnings(caplog, logging.DEBUG) == []


def test_default_config_comes_from_environment(monkeypatch):
    monkeypatch.setenv("SECURE_STORAGE_ENV", "production")
    store = GuardedStore()
    assert store.config.is_production
    assert isinstance(store.medium, InMemoryMedium)


def test_operations_are_recorded_in_metrics(store, medium):
    medium.set_item("rows", "{{{")
    store.set("maliciousKey", 1)
    store.set("darkMode", True)
    store.get("rows")
    store.get("presets")

    metrics = store.metrics.get_metrics()

    assert metrics["set"]["count"] == 2
    assert metrics["set"]["outcomes"] == {"rejected_key": 1, "ok": 1}
    assert metrics["set"]["failures"] == 1
    assert metrics["get"]["outcomes"] == {"deserialization_failure": 1, "absent": 1}


def test_allowed_keys_exposed(store):
    assert store.allowed_keys == ALLOWED_KEYS
    assert [k.value for k in ALLOWED_KEYS] == [
        "rows", "darkMode", "presets", "sessionHistory", "userSettings", "lastPreset",
    ]
