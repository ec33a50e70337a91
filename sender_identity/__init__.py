"""Sender identity resolution for replies and forwards."""

from sender_identity.headers import (
    DEFAULT_HEADER_PRIORITY,
    AddressHint,
    HeaderLookup,
    extract_addresses,
    extract_hints,
    mapping_header_lookup,
    message_header_lookup,
)
from sender_identity.identities import Identity
from sender_identity.matcher import MatchKind, MatchResult, match_catch_all, match_exact, match_identity
from sender_identity.patterns import (
    CompiledPattern,
    PatternCache,
    PatternState,
    clear_pattern_cache,
    compile_pattern,
    configure_pattern_cache,
    get_compiled_pattern,
    matches,
    validate_catch_all,
)
from sender_identity.resolver import resolve_reply_identity

__all__ = [
    "DEFAULT_HEADER_PRIORITY",
    "AddressHint",
    "CompiledPattern",
    "HeaderLookup",
    "Identity",
    "MatchKind",
    "MatchResult",
    "PatternCache",
    "PatternState",
    "clear_pattern_cache",
    "compile_pattern",
    "configure_pattern_cache",
    "extract_addresses",
    "extract_hints",
    "get_compiled_pattern",
    "mapping_header_lookup",
    "match_catch_all",
    "match_exact",
    "match_identity",
    "matches",
    "message_header_lookup",
    "resolve_reply_identity",
    "validate_catch_all",
]
