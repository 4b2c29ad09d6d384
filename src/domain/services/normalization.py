"""Domain normalization helpers."""

import re
import uuid

_GUID_PATTERN = re.compile(r"^[0-9a-fA-F]{32}$")


def normalize_namespace(namespace: str | None) -> str | None:
    """Normalize commodity namespace values.

    Args:
        namespace: Raw namespace value from a repository or document.

    Returns:
        str | None: Normalized namespace value.
    """
    if not namespace:
        return None
    cleaned = namespace.strip()
    return cleaned.upper() if cleaned else None


def normalize_mnemonic(mnemonic: str | None) -> str | None:
    """Normalize commodity mnemonic values.

    Args:
        mnemonic: Raw mnemonic value from a repository or document.

    Returns:
        str | None: Normalized mnemonic value.
    """
    if not mnemonic:
        return None
    cleaned = mnemonic.strip()
    return cleaned.upper() if cleaned else None


def is_valid_guid(value) -> bool:
    """Return True for a 32-character hexadecimal GUID."""
    return isinstance(value, str) and bool(_GUID_PATTERN.match(value))


def normalize_guid(value: str | None) -> str | None:
    """Lower-case and strip a GUID, or return None when it is malformed.

    Args:
        value: Raw GUID text.

    Returns:
        str | None: Normalized GUID.
    """
    if not value:
        return None
    cleaned = value.strip().replace("-", "")
    if not is_valid_guid(cleaned):
        return None
    return cleaned.lower()


def generate_guid() -> str:
    return uuid.uuid4().hex


__all__ = [
    "normalize_namespace",
    "normalize_mnemonic",
    "is_valid_guid",
    "normalize_guid",
    "generate_guid",
]
