"""JSON text encoding for stored records."""
from typing import Any

import orjson

from ..exceptions import DeserializationError, SerializationError

# Only plain JSON types are written; dataclasses and datetimes must not bypass
# the sanitizer by being expanded during encoding.
_DUMP_OPTIONS = orjson.OPT_PASSTHROUGH_DATACLASS | orjson.OPT_PASSTHROUGH_DATETIME


def encode_record(value: Any) -> str:
    """Serialize a sanitized value to JSON text.

    Raises:
        SerializationError: If the value is not JSON-representable
    """
    try:
        return orjson.dumps(value, option=_DUMP_OPTIONS).decode("utf-8")
    except orjson.JSONEncodeError as e:
        raise SerializationError(f"Value is not JSON-serializable: {e}") from e


def decode_record(key: str, raw: str) -> Any:
    """Parse a stored record.

    Raises:
        DeserializationError: If the text is not valid JSON
    """
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise DeserializationError(key, str(e)) from e
