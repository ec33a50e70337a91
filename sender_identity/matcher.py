"""Sender identity selection for replies and forwards.

Resolution runs in three phases:

1. Exact: for each hint (priority order), the first identity whose email
   equals it case-insensitively.
2. Catch-all: for each identity (list order), its first matching hint.
3. Fallback: the default identity or the first identity.

Exact matches always win over catch-all matches because phase 1 runs to
completion first. The nesting differs between the phases: hint order
decides exact matches, identity order decides catch-all matches.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from sender_identity.headers import AddressHint
from sender_identity.identities import Identity
from sender_identity.patterns import PatternCache, get_pattern_cache
from sender_identity.utils import normalize_email

Hint = str | AddressHint


class MatchKind(str, Enum):
    """How the identity in a MatchResult was chosen."""

    EXACT = "exact"
    CATCH_ALL = "catch_all"
    FALLBACK = "fallback"
    NONE = "none"


@dataclass(frozen=True)
class MatchResult:
    """Outcome of identity resolution."""

    identity: Identity | None
    matched_address: str | None
    kind: MatchKind

    @property
    def from_address(self) -> str | None:
        """Address to show in From.

        The matched address for catch-all matches, otherwise the identity's
        configured email.
        """
        if self.kind is MatchKind.CATCH_ALL:
            return self.matched_address
        if self.identity is None:
            return None
        return self.identity.email


NO_MATCH = MatchResult(identity=None, matched_address=None, kind=MatchKind.NONE)


def _hint_address(hint: Hint) -> str:
    if isinstance(hint, AddressHint):
        return hint.address
    return hint.strip() if isinstance(hint, str) else ""


def match_exact(identities: Sequence[Identity], hints: Sequence[Hint]) -> MatchResult | None:
    """Find the first exact email match, hint-major.

    Args:
        identities: Candidate identities in list order.
        hints: Address hints, highest priority first.

    Returns:
        EXACT MatchResult, or None if no identity email equals any hint.
    """
    for hint in hints:
        address = _hint_address(hint)
        normalized = normalize_email(address)
        if not normalized:
            continue
        for identity in identities:
            if identity.has_email and normalize_email(identity.email) == normalized:
                return MatchResult(identity=identity, matched_address=address, kind=MatchKind.EXACT)
    return None


def match_catch_all(
    identities: Sequence[Identity],
    hints: Sequence[Hint],
    cache: PatternCache | None = None,
) -> MatchResult | None:
    """Find the first catch-all match, identity-major.

    Args:
        identities: Candidate identities; list order breaks ties.
        hints: Address hints, highest priority first.
        cache: Pattern cache to compile through. Defaults to the
            process-wide cache.

    Returns:
        CATCH_ALL MatchResult with the identity's highest-priority matching
        hint, or None. Invalid patterns never match.
    """
    if cache is None:
        cache = get_pattern_cache()

    addresses = [_hint_address(hint) for hint in hints]
    for identity in identities:
        if not identity.has_catch_all:
            continue
        compiled = cache.get(identity.catch_all)
        if not compiled.is_valid:
            continue
        for address in addresses:
            if address and compiled.matches(address):
                return MatchResult(identity=identity, matched_address=address, kind=MatchKind.CATCH_ALL)
    return None


def match_identity(
    identities: Sequence[Identity],
    hints: Sequence[Hint],
    use_fallback_default: bool = False,
    default_identity: Identity | None = None,
    cache: PatternCache | None = None,
) -> MatchResult:
    """Choose the sender identity for a reply or forward.

    Args:
        identities: Configured identities in list order.
        hints: Recipient addresses from the original message, highest
            priority first.
        use_fallback_default: Fall back to default_identity instead of the
            first identity when nothing matches.
        default_identity: Identity used by the fallback when
            use_fallback_default is set. May be None.
        cache: Pattern cache override, mainly for tests.

    Returns:
        MatchResult. NONE only when identities is empty.
    """
    if not identities:
        return NO_MATCH

    if len(identities) == 1:
        return MatchResult(identity=identities[0], matched_address=None, kind=MatchKind.FALLBACK)

    result = match_exact(identities, hints)
    if result is not None:
        return result

    result = match_catch_all(identities, hints, cache=cache)
    if result is not None:
        return result

    if use_fallback_default:
        return MatchResult(identity=default_identity, matched_address=None, kind=MatchKind.FALLBACK)
    return MatchResult(identity=identities[0], matched_address=None, kind=MatchKind.FALLBACK)
