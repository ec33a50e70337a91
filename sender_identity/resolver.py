"""Resolve the From identity for a reply or forward of a message."""

from collections.abc import Mapping
from email.message import Message
from typing import Any, Sequence

from sender_identity.config import Config, get_config
from sender_identity.headers import (
    HeaderSource,
    extract_hints,
    mapping_header_lookup,
    message_header_lookup,
)
from sender_identity.identities import Identity
from sender_identity.matcher import MatchResult, match_identity


def _as_header_source(headers: Any) -> HeaderSource:
    if isinstance(headers, Message):
        return message_header_lookup(headers)
    if isinstance(headers, Mapping):
        return mapping_header_lookup(headers)
    return headers


def resolve_reply_identity(
    identities: Sequence[Identity],
    headers: Message | Mapping[str, Any] | HeaderSource,
    *,
    header_priority: Sequence[str] | None = None,
    use_fallback_default: bool | None = None,
    default_identity: Identity | None = None,
    config: Config | None = None,
) -> MatchResult:
    """Pick the identity to compose a reply or forward with.

    Args:
        identities: Identity snapshot from the identity store.
        headers: The original message, a {header: values} mapping, a
            HeaderLookup, or a callable returning a header's values.
        header_priority: Override for the configured header priority.
        use_fallback_default: Override for the configured fallback mode.
        default_identity: Account default identity for the fallback.
        config: Configuration to use instead of get_config().

    Returns:
        MatchResult. Use its from_address for the visible From address.
    """
    if config is None:
        config = get_config()
    if header_priority is None:
        header_priority = config.header_priority
    if use_fallback_default is None:
        use_fallback_default = config.use_fallback_default

    hints = extract_hints(header_priority, _as_header_source(headers))
    return match_identity(
        identities,
        hints,
        use_fallback_default=use_fallback_default,
        default_identity=default_identity,
    )
