"""Validation functions for storage keys and values."""
from typing import Any

from ...exceptions import NestingDepthExceededError, RejectedKeyError
from ...interfaces import StorageKey


def validate_storage_key(key: Any) -> StorageKey:
    """Validate a key against the allow-list.

    Args:
        key: A StorageKey member or its string value

    Returns:
        The matching StorageKey

    Raises:
        RejectedKeyError: If the key is not allow-listed
    """
    if isinstance(key, StorageKey):
        return key
    if not isinstance(key, str):
        raise RejectedKeyError(key)
    try:
        return StorageKey(key)
    except ValueError as e:
        raise RejectedKeyError(key) from e


def validate_nesting_depth(value: Any, limit: int) -> None:
    """Check that value nests lists, tuples and dicts at most limit deep.

    A scalar has depth 0 and [] has depth 1. The walk is iterative and stops
    as soon as the limit is passed, so self-referencing containers are
    rejected rather than looping.

    Raises:
        NestingDepthExceededError: If the value is nested too deeply
    """
    stack = [(value, 0)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, dict):
            children = current.values()
        elif isinstance(current, (list, tuple)):
            children = current
        else:
            continue
        depth += 1
        if depth > limit:
            raise NestingDepthExceededError(depth, limit)
        stack.extend((child, depth) for child in children)
