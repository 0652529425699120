"""Configuration for the guarded store and its sanitizer."""
import os
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

ENV_VAR_ENVIRONMENT = "SECURE_STORAGE_ENV"
ENV_VAR_MAX_LENGTH = "SECURE_STORAGE_MAX_LENGTH"

DEFAULT_MAX_SERIALIZED_LENGTH = 5_000_000

# orjson refuses to encode containers nested deeper than this
MAX_NESTING_DEPTH = 254

DANGEROUS_TAGS: Tuple[str, ...] = (
    "script",
    "iframe",
    "object",
    "embed",
    "style",
    "link",
    "meta",
)

DANGEROUS_SCHEMES: Tuple[str, ...] = (
    "javascript:",
    "data:",
    "vbscript:",
    "file:",
)

DANGEROUS_ATTRIBUTES: Tuple[str, ...] = (
    "onclick=",
    "onerror=",
    "onload=",
    "onmouseover=",
    "onfocus=",
    "onblur=",
    "onchange=",
    "onsubmit=",
    "oninput=",
    "onkeydown=",
    "onkeyup=",
    "onkeypress=",
)


class StorageConfig(BaseModel):
    """Immutable settings shared by the sanitizer and the guarded store.

    Attributes:
        environment: Deployment environment; diagnostics are silenced in "production".
        max_serialized_length: Largest JSON text, in characters, a single write may produce.
        max_nesting_depth: Deepest container nesting a stored value may have.
        dangerous_tags: Element names removed together with their content.
        dangerous_schemes: URI scheme prefixes removed from strings.
        dangerous_attributes: Inline event-handler prefixes removed from strings.
        sanitizer_cache_size: Number of sanitized strings kept in the LRU cache.
        sanitizer_cache_max_length: Strings longer than this bypass the cache.
    """

    model_config = ConfigDict(frozen=True)

    environment: str = "development"
    max_serialized_length: int = Field(default=DEFAULT_MAX_SERIALIZED_LENGTH, gt=0)
    max_nesting_depth: int = Field(default=MAX_NESTING_DEPTH, gt=0, le=MAX_NESTING_DEPTH)
    dangerous_tags: Tuple[str, ...] = DANGEROUS_TAGS
    dangerous_schemes: Tuple[str, ...] = DANGEROUS_SCHEMES
    dangerous_attributes: Tuple[str, ...] = DANGEROUS_ATTRIBUTES
    sanitizer_cache_size: int = Field(default=1024, ge=0)
    sanitizer_cache_max_length: int = Field(default=4096, ge=0)

    @field_validator("dangerous_tags", "dangerous_schemes", "dangerous_attributes")
    @classmethod
    def _normalize_patterns(cls, patterns: Tuple[str, ...]) -> Tuple[str, ...]:
        normalized = []
        for pattern in patterns:
            # An empty pattern matches everywhere and would never reach a fixed point
            if not pattern or not pattern.strip():
                raise ValueError("Sanitizer patterns cannot be empty")
            if not pattern.isascii():
                raise ValueError(f"Sanitizer pattern must be ASCII: {pattern!r}")
            normalized.append(pattern.lower())
        return tuple(normalized)

    @field_validator("dangerous_tags")
    @classmethod
    def _check_tag_names(cls, tags: Tuple[str, ...]) -> Tuple[str, ...]:
        for tag in tags:
            if any(char in tag for char in "<>/") or any(char.isspace() for char in tag):
                raise ValueError(f"Tag name cannot contain '<', '>', '/' or whitespace: {tag!r}")
        return tags

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StorageConfig":
        """Build a config from environment variables.

        Args:
            environ: Mapping to read from, defaults to os.environ

        Returns:
            StorageConfig with overrides applied

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        overrides = {}

        environment = environ.get(ENV_VAR_ENVIRONMENT)
        if environment:
            overrides["environment"] = environment

        max_length = environ.get(ENV_VAR_MAX_LENGTH)
        if max_length:
            try:
                overrides["max_serialized_length"] = int(max_length)
            except ValueError as e:
                raise ConfigurationError(
                    f"{ENV_VAR_MAX_LENGTH} must be an integer, got {max_length!r}"
                ) from e

        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid storage configuration: {e}") from e


DEFAULT_CONFIG = StorageConfig()
