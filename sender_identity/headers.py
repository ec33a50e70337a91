"""Recipient address extraction from message headers.

Produces ordered address hints for identity matching: headers are visited
in priority order, repeated headers in encounter order, and each value is
parsed as an address list. Malformed entries are skipped.
"""

import email.utils
from dataclasses import dataclass
from email.message import Message
from typing import Any, Callable, Iterable, Mapping, Protocol, Sequence, runtime_checkable

from sender_identity.utils import normalize_email

DEFAULT_HEADER_PRIORITY: tuple[str, ...] = (
    "Delivered-To",
    "X-Envelope-To",
    "X-Original-To",
    "To",
    "Cc",
)


@runtime_checkable
class HeaderLookup(Protocol):
    """Read access to one message's headers."""

    def get_header_values(self, name: str) -> Sequence[str]:
        """Return every value of header name in encounter order, or [] if absent."""
        ...


HeaderSource = HeaderLookup | Callable[[str], Sequence[str] | None]


@dataclass(frozen=True)
class AddressHint:
    """A candidate recipient address found in a header."""

    address: str  # Trimmed, original case
    header: str  # Originating header, for diagnostics only

    @property
    def normalized(self) -> str:
        """Lower-cased address used for comparisons."""
        return normalize_email(self.address)

    def __str__(self) -> str:
        return self.address


class MessageHeaderLookup:
    """HeaderLookup over an email.message.Message."""

    def __init__(self, message: Message):
        self.message = message

    def get_header_values(self, name: str) -> list[str]:
        return [str(value) for value in self.message.get_all(name, []) or []]


class MappingHeaderLookup:
    """HeaderLookup over a {name: value(s)} mapping, case-insensitive on names."""

    def __init__(self, headers: Mapping[str, Any]):
        self._headers: dict[str, list[str]] = {}
        for name, values in headers.items():
            if isinstance(values, str):
                values = [values]
            elif values is None:
                values = []
            self._headers.setdefault(name.lower(), []).extend(str(v) for v in values)

    def get_header_values(self, name: str) -> list[str]:
        return list(self._headers.get(name.lower(), []))


def message_header_lookup(message: Message) -> MessageHeaderLookup:
    """Adapt an email.message.Message to HeaderLookup."""
    return MessageHeaderLookup(message)


def mapping_header_lookup(headers: Mapping[str, Any]) -> MappingHeaderLookup:
    """Adapt a mapping of header names to value lists to HeaderLookup."""
    return MappingHeaderLookup(headers)


def _lookup_values(source: HeaderSource, name: str) -> list[str]:
    if isinstance(source, HeaderLookup):
        values = source.get_header_values(name)
    else:
        values = source(name)
    if not values:
        return []
    if isinstance(values, str):
        return [values]
    return [str(value) for value in values if value is not None]


def _bare_address(address: str) -> str | None:
    """Return the trimmed address if it looks like local@domain, else None."""
    address = address.strip()
    if address.count("@") != 1 or "," in address:
        return None
    if any(char.isspace() for char in address):
        return None
    local, _, domain = address.partition("@")
    if not local or not domain:
        return None
    return address


def parse_address_entry(entry: str) -> str | None:
    """Extract the bare address from one address-list entry.

    Args:
        entry: A bare address or '"Display Name" <address>'.

    Returns:
        Trimmed address, or None if the entry is malformed.
    """
    _name, address = email.utils.parseaddr(entry)
    return _bare_address(address)


def parse_address_list(value: str) -> list[str]:
    """Parse a raw header value into bare addresses, skipping malformed entries."""
    addresses = []
    for _name, address in email.utils.getaddresses([value]):
        bare = _bare_address(address)
        if bare is not None:
            addresses.append(bare)
    return addresses


def extract_hints(
    header_names: Iterable[str] | None,
    header_lookup: HeaderSource,
) -> list[AddressHint]:
    """Extract address hints from headers in priority order.

    Args:
        header_names: Header names, highest priority first. None uses
            DEFAULT_HEADER_PRIORITY.
        header_lookup: HeaderLookup or callable returning the raw values of
            a header in encounter order.

    Returns:
        Hints in discovery order. Duplicates across headers are kept.
    """
    if header_names is None:
        header_names = DEFAULT_HEADER_PRIORITY

    hints = []
    for name in header_names:
        for raw_value in _lookup_values(header_lookup, name):
            for address in parse_address_list(raw_value):
                hints.append(AddressHint(address=address, header=name))
    return hints


def extract_addresses(
    header_names: Iterable[str] | None,
    header_lookup: HeaderSource,
) -> list[str]:
    """Like extract_hints, but returns the bare address strings."""
    return [hint.address for hint in extract_hints(header_names, header_lookup)]
