"""Sender identity snapshots.

Identities are owned by an external store; this module only describes the
immutable snapshot handed to the matcher for a single resolution.
"""

from dataclasses import dataclass
from typing import Any


def _optional_str(value: Any) -> str | None:
    """Return value if it is a string, else None."""
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class Identity:
    """A configured sender identity.

    Only ``email`` and ``catch_all`` take part in matching. ``name`` and
    ``identity_id`` are carried through untouched for the compose flow.
    """

    email: str | None = None
    catch_all: str | None = None  # Wildcard pattern, e.g. "*@example.com"
    name: str = ""
    identity_id: str | None = None

    @property
    def has_email(self) -> bool:
        """True if an exact email is configured."""
        return bool(self.email and self.email.strip())

    @property
    def has_catch_all(self) -> bool:
        """True if a catch-all pattern is configured."""
        return bool(self.catch_all and self.catch_all.strip())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "identity_id": self.identity_id,
            "email": self.email,
            "catch_all": self.catch_all,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Identity":
        """Create Identity from dictionary.

        Accepts both ``catch_all`` and ``catchAll`` keys. Non-string values
        for the match fields are treated as absent.

        Raises TypeError if data is not a dict.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Identity data must be a dict, got {type(data).__name__}")

        catch_all = data.get("catch_all")
        if catch_all is None:
            catch_all = data.get("catchAll")

        identity_id = data.get("identity_id", data.get("id"))

        return cls(
            email=_optional_str(data.get("email")),
            catch_all=_optional_str(catch_all),
            name=data.get("name") or "",
            identity_id=str(identity_id) if identity_id is not None else None,
        )
