"""Markup sanitization without regular expressions.

All matching is done with explicit, index-based substring scans over an
ASCII-folded copy of the input. Folding only maps A-Z to a-z so offsets in the
folded copy line up with offsets in the original string.
"""
import string
import threading
from typing import Any, Dict, List, Tuple

from cachetools import LRUCache, cached

from ...config import DEFAULT_CONFIG, StorageConfig

_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _fold(text: str) -> str:
    return text.translate(_ASCII_FOLD)


def _match_across(kept: List[str], folded: str, pos: int, needle: str) -> int:
    """Find needle starting in the tail of kept and ending in folded[pos:].

    Returns the start index within kept, or -1.
    """
    tail = min(len(needle) - 1, len(kept))
    if tail == 0:
        return -1
    window = _fold("".join(kept[-tail:])) + folded[pos:pos + len(needle) - 1]
    index = window.find(needle)
    if index == -1 or index >= tail:
        return -1
    return len(kept) - tail + index


def remove_enclosed_tag(text: str, tag: str) -> str:
    """Remove every <tag ...>...</tag> span, truncating at malformed openings.

    The opening match is a raw prefix, so "<scriptx>" counts as "<script".
    Spans are removed left to right and an opening spliced together by a
    removal is matched too. The input is folded once and scanned forward; only
    the few characters around each removal are re-examined.
    """
    opening = f"<{tag}"
    closing = f"</{tag}>"
    folded = _fold(text)
    if folded.find(opening) == -1:
        return text

    kept: List[str] = []
    pos = 0
    while True:
        start = _match_across(kept, folded, pos, opening)
        if start != -1:
            # Tag names hold no '>', so the opening cannot end before pos
            search_from = pos
        else:
            match = folded.find(opening, pos)
            if match == -1:
                kept.extend(text[pos:])
                return "".join(kept)
            kept.extend(text[pos:match])
            start = len(kept)
            search_from = match

        opening_end = text.find(">", search_from)
        if opening_end == -1:
            return "".join(kept[:start])

        close_start = folded.find(closing, opening_end + 1)
        if close_start == -1:
            return "".join(kept[:start])

        del kept[start:]
        pos = close_start + len(closing)


def remove_substring(text: str, needle: str) -> str:
    """Delete case-insensitive occurrences of needle until none remain.

    Occurrences formed by joining the text around a deletion are deleted as
    well, in one forward scan.
    """
    folded = _fold(text)
    index = folded.find(needle)
    if index == -1:
        return text

    kept = list(text[:index])
    pos = index + len(needle)
    while True:
        start = _match_across(kept, folded, pos, needle)
        if start != -1:
            pos += start + len(needle) - len(kept)
            del kept[start:]
            continue

        index = folded.find(needle, pos)
        if index == -1:
            kept.extend(text[pos:])
            return "".join(kept)
        kept.extend(text[pos:index])
        pos = index + len(needle)


class MarkupSanitizer:
    """Strips dangerous tags, URI schemes and event-handler attributes."""

    def __init__(self, config: StorageConfig = DEFAULT_CONFIG):
        self.config = config
        self._tags: Tuple[str, ...] = config.dangerous_tags
        self._schemes: Tuple[str, ...] = config.dangerous_schemes
        self._attributes: Tuple[str, ...] = config.dangerous_attributes

        if config.sanitizer_cache_size > 0:
            self._cache = LRUCache(maxsize=config.sanitizer_cache_size)
            self._sanitize_cached = cached(self._cache, lock=threading.RLock())(self._scrub)
        else:
            self._cache = None
            self._sanitize_cached = self._scrub

    def sanitize(self, text: Any) -> Any:
        """Sanitize a single string; any other input is returned as is."""
        if not isinstance(text, str):
            return text
        if len(text) > self.config.sanitizer_cache_max_length:
            return self._scrub(text)
        return self._sanitize_cached(text)

    def sanitize_value(self, value: Any) -> Any:
        """Recursively sanitize a JSON-compatible value.

        Mapping keys are sanitized too. Entries are visited in insertion order,
        so when two keys sanitize to the same string the later one wins.
        """
        if value is None:
            return value
        if isinstance(value, str):
            return self.sanitize(value)
        if isinstance(value, (bool, int, float)):
            return value
        if isinstance(value, (list, tuple)):
            return [self.sanitize_value(item) for item in value]
        if isinstance(value, dict):
            sanitized: Dict[Any, Any] = {}
            for key, item in value.items():
                sanitized[self.sanitize(key)] = self.sanitize_value(item)
            return sanitized
        return value

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()

    def _scrub(self, text: str) -> str:
        # A later pass can splice together a pattern an earlier pass removes,
        # so run all passes until the text stops changing. Each changing round
        # strictly shortens the text.
        while True:
            scrubbed = self._single_round(text)
            if scrubbed == text:
                return scrubbed
            text = scrubbed

    def _single_round(self, text: str) -> str:
        for tag in self._tags:
            text = remove_enclosed_tag(text, tag)
        for scheme in self._schemes:
            text = remove_substring(text, scheme)
        for attribute in self._attributes:
            text = remove_substring(text, attribute)
        return text
