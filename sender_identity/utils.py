"""Shared utility functions."""


def normalize_email(email: str | None) -> str:
    """Normalize email address for consistent comparison.

    Lowercases the email to handle case-insensitive matching.
    Note: While RFC 5321 allows case-sensitive local parts, in practice
    email providers treat addresses as case-insensitive.

    Args:
        email: Email address to normalize. None is treated as empty.

    Returns:
        Normalized (lowercase, stripped) email address.
    """
    return (email or "").strip().lower()
