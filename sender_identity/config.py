"""Centralized configuration for sender identity resolution.

All environment variables are read here. Use get_config() to access
configuration values - it loads dotenv once and caches the result.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from sender_identity.headers import DEFAULT_HEADER_PRIORITY

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_int_env(name: str, default: int) -> int:
    """Parse an integer environment variable with fallback to default.

    Args:
        name: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_bool_env(name: str, default: bool) -> bool:
    """Parse a boolean environment variable with fallback to default.

    Accepts 1/0, true/false, yes/no, on/off (case-insensitive).
    """
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    print(f"Warning: Invalid boolean for {name}: {value!r}, using {default}")
    return default


def _parse_list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse a comma-separated environment variable.

    Returns default if the variable is unset or contains no items.
    """
    value = os.getenv(name, "")
    items = tuple(s.strip() for s in value.split(",") if s.strip())
    return items or default


def _get_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback to parent of the package directory
    return Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class Config:
    """Immutable configuration container."""

    # Header names searched for recipient hints, highest priority first
    header_priority: tuple[str, ...] = DEFAULT_HEADER_PRIORITY

    # Fall back to the account default identity instead of the first identity
    use_fallback_default: bool = False

    # Maximum compiled patterns kept in the process-wide cache (0 = unbounded)
    pattern_cache_size: int = 0


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and return configuration. Cached after first call."""
    project_root = _get_project_root()

    load_dotenv(project_root / ".env")

    cache_size = _parse_int_env("SENDER_IDENTITY_PATTERN_CACHE_SIZE", 0)
    if cache_size < 0:
        print(f"Warning: SENDER_IDENTITY_PATTERN_CACHE_SIZE must be >= 0, got {cache_size}")
        cache_size = 0

    return Config(
        header_priority=_parse_list_env("SENDER_IDENTITY_HEADER_PRIORITY", DEFAULT_HEADER_PRIORITY),
        use_fallback_default=_parse_bool_env("SENDER_IDENTITY_USE_FALLBACK_DEFAULT", False),
        pattern_cache_size=cache_size,
    )
