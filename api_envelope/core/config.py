"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_CONFLICT_PATTERNS = ("A unique constraint would be violated",)
DEFAULT_INCLUDE_REQUEST_INFO = False
DEFAULT_LOG_ERROR_RESPONSES = True

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _get_patterns_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    patterns = tuple(part.strip() for part in raw.split("|") if part.strip())
    if not patterns:
        raise ValueError(f"{name} must list at least one pattern, got {raw!r}")
    return patterns


@dataclass(frozen=True)
class EnvelopeSettings:
    """Runtime settings for envelope construction and transmission."""

    conflict_patterns: tuple[str, ...] = DEFAULT_CONFLICT_PATTERNS
    include_request_info: bool = DEFAULT_INCLUDE_REQUEST_INFO
    log_error_responses: bool = DEFAULT_LOG_ERROR_RESPONSES


@lru_cache(maxsize=1)
def get_envelope_settings() -> EnvelopeSettings:
    """Load envelope settings from the environment."""
    return EnvelopeSettings(
        conflict_patterns=_get_patterns_env("ENVELOPE_CONFLICT_PATTERNS", DEFAULT_CONFLICT_PATTERNS),
        include_request_info=_get_bool_env("ENVELOPE_INCLUDE_REQUEST_INFO", DEFAULT_INCLUDE_REQUEST_INFO),
        log_error_responses=_get_bool_env("ENVELOPE_LOG_ERROR_RESPONSES", DEFAULT_LOG_ERROR_RESPONSES),
    )
