"""Catch-all address patterns.

A catch-all pattern is an address with ``*`` wildcards, e.g. ``*@example.com``
or ``user+*@example.com``. Each ``*`` matches one or more characters other
than ``@``; everything else is a literal compared case-insensitively.

Compiled patterns are immutable and shared through a process-wide cache.
Matching fails closed: empty (disabled) and malformed (invalid) patterns
match nothing and never raise.
"""

import re
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sender_identity.config import get_config

WILDCARD = "*"
_WILDCARD_REGEX = "[^@]+"


class PatternState(str, Enum):
    """Compilation outcome of a catch-all pattern."""

    DISABLED = "disabled"
    INVALID = "invalid"
    VALID = "valid"


@dataclass(frozen=True)
class CompiledPattern:
    """Result of compiling a catch-all pattern string."""

    pattern: str
    state: PatternState
    regex: re.Pattern[str] | None = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        """True if the pattern compiled to a matcher."""
        return self.state is PatternState.VALID

    def matches(self, address: Any) -> bool:
        """Check whether address fully matches this pattern.

        Args:
            address: Candidate address. Surrounding whitespace is ignored.

        Returns:
            True on a full, case-insensitive match. Always False for
            disabled or invalid patterns and for non-string input.
        """
        if self.regex is None or not isinstance(address, str):
            return False
        return self.regex.fullmatch(address.strip()) is not None


def _check_pattern(pattern: str) -> str | None:
    """Return an error message if pattern is malformed, else None."""
    at_count = pattern.count("@")
    if at_count != 1:
        return f"expected exactly one '@', found {at_count}"
    if any(char.isspace() for char in pattern):
        return "whitespace is not allowed"
    local, _, domain = pattern.partition("@")
    if not local:
        return "local part is empty"
    if not domain:
        return "domain part is empty"
    return None


def _to_regex(pattern: str) -> re.Pattern[str]:
    parts = [
        _WILDCARD_REGEX if char == WILDCARD else re.escape(char)
        for char in pattern
    ]
    return re.compile("".join(parts), re.IGNORECASE)


def compile_pattern(pattern: str | None) -> CompiledPattern:
    """Compile a catch-all pattern string.

    Args:
        pattern: Pattern such as "*@example.com". None or an empty
            (whitespace-only) string disables catch-all matching.

    Returns:
        CompiledPattern in the DISABLED, INVALID, or VALID state.
    """
    if pattern is None:
        return CompiledPattern(pattern="", state=PatternState.DISABLED)
    if not isinstance(pattern, str):
        return CompiledPattern(
            pattern=repr(pattern),
            state=PatternState.INVALID,
            error=f"pattern must be a string, got {type(pattern).__name__}",
        )

    stripped = pattern.strip()
    if not stripped:
        return CompiledPattern(pattern=pattern, state=PatternState.DISABLED)

    error = _check_pattern(stripped)
    if error is not None:
        return CompiledPattern(pattern=pattern, state=PatternState.INVALID, error=error)

    return CompiledPattern(
        pattern=pattern,
        state=PatternState.VALID,
        regex=_to_regex(stripped),
    )


def validate_catch_all(pattern: str | None) -> tuple[bool, str | None]:
    """Validate a catch-all pattern before it is saved on an identity.

    Returns (True, None) if valid or empty, or (False, error_message) if invalid.
    """
    compiled = compile_pattern(pattern)
    if compiled.state is PatternState.INVALID:
        return False, f"Invalid catch-all pattern '{pattern}': {compiled.error}"
    return True, None


class PatternCache:
    """Thread-safe memo of compiled patterns keyed by pattern string.

    Compilation runs outside the lock. Concurrent misses on the same key may
    compile twice, but only the first inserted entry is kept and returned, so
    every caller ends up sharing one CompiledPattern.
    """

    def __init__(self, max_size: int = 0):
        """Initialize the cache.

        Args:
            max_size: Maximum number of entries; 0 means unbounded. When the
                limit is reached the cache is emptied before inserting.
        """
        self.max_size = max(max_size, 0)
        self._entries: dict[str, CompiledPattern] = {}
        self._lock = threading.Lock()

    def get(self, pattern: str | None) -> CompiledPattern:
        """Return the compiled pattern, compiling and caching on a miss."""
        if not isinstance(pattern, str):
            return compile_pattern(pattern)

        with self._lock:
            cached = self._entries.get(pattern)
        if cached is not None:
            return cached

        compiled = compile_pattern(pattern)

        with self._lock:
            existing = self._entries.get(pattern)
            if existing is not None:
                return existing
            if self.max_size and len(self._entries) >= self.max_size:
                self._entries.clear()
            self._entries[pattern] = compiled
            return compiled

    def resize(self, max_size: int) -> None:
        """Change the entry limit, emptying the cache if it is over the new limit."""
        with self._lock:
            self.max_size = max(max_size, 0)
            if self.max_size and len(self._entries) > self.max_size:
                self._entries.clear()

    def clear(self) -> None:
        """Drop all cached entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, pattern: object) -> bool:
        with self._lock:
            return pattern in self._entries


# Process-wide cache used when callers do not pass their own.
# Created on first use, sized from get_config().
_pattern_cache: PatternCache | None = None
_pattern_cache_lock = threading.Lock()


def get_pattern_cache() -> PatternCache:
    """Get the process-wide pattern cache, creating it on first use."""
    global _pattern_cache
    with _pattern_cache_lock:
        if _pattern_cache is None:
            _pattern_cache = PatternCache(max_size=get_config().pattern_cache_size)
        return _pattern_cache


def configure_pattern_cache(max_size: int) -> None:
    """Set the entry limit of the process-wide cache.

    Args:
        max_size: Maximum number of entries; 0 means unbounded.
    """
    get_pattern_cache().resize(max_size)


def reset_pattern_cache() -> None:
    """Drop the process-wide cache so the next use rebuilds it from config.

    Intended for test isolation.
    """
    global _pattern_cache
    with _pattern_cache_lock:
        _pattern_cache = None


def get_compiled_pattern(pattern: str | None) -> CompiledPattern:
    """Compile pattern through the process-wide cache."""
    return get_pattern_cache().get(pattern)


def clear_pattern_cache() -> None:
    """Clear the process-wide cache. Intended for test isolation."""
    with _pattern_cache_lock:
        cache = _pattern_cache
    if cache is not None:
        cache.clear()


def matches(pattern: str | None, address: str) -> bool:
    """Check whether address matches a catch-all pattern.

    Args:
        pattern: Catch-all pattern string.
        address: Candidate email address.

    Returns:
        True on a full, case-insensitive match; False otherwise, including
        for empty or malformed patterns.
    """
    return get_compiled_pattern(pattern).matches(address)
