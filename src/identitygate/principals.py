"""Name normalization helpers for principal lookup."""

from typing import Optional


def normalize_name(name: Optional[str]) -> Optional[str]:
    """Normalize role and user names for storage and lookup."""
    if name is None:
        return None
    return name.strip().upper()


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Normalize e-mail addresses for storage and lookup."""
    return normalize_name(email)
