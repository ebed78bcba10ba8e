"""
Utility functions shared by the sync layer.

- Epoch-second to ISO-8601 conversion for storage timestamps
- Normalization of Stripe references that may arrive expanded or as bare ids
"""

from datetime import datetime, timezone
from typing import Any


def to_storage_date(seconds: int) -> str:
    """
    Convert a Stripe epoch timestamp (seconds) to an ISO-8601 UTC string.

    Args:
        seconds: Unix timestamp in seconds.

    Returns:
        str: ISO-8601 representation with an explicit ``+00:00`` offset.

    Examples:
        >>> to_storage_date(1700000000)
        '2023-11-14T22:13:20+00:00'
    """
    return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()


def to_optional_storage_date(seconds: int | None) -> str | None:
    """
    Convert an optional Stripe epoch timestamp to an ISO-8601 string.

    ``None`` and ``0`` both map to ``None``: Stripe never reports a real
    billing timestamp at the epoch, so zero is read as "not set".

    Args:
        seconds: Unix timestamp in seconds, or None.

    Returns:
        str | None: ISO-8601 string, or None when the input is absent or zero.
    """
    if not seconds:
        return None

    return to_storage_date(seconds)


def resolve_stripe_id(reference: Any) -> str | None:
    """
    Return the id of a Stripe reference that may be a bare id or an expanded object.

    Args:
        reference: A string id, an expanded object (dict or model with ``id``) or None.

    Returns:
        str | None: The referenced id, or None if the reference is empty.
    """
    if reference is None:
        return None
    if isinstance(reference, str):
        return reference or None
    if isinstance(reference, dict):
        return reference.get("id")
    return getattr(reference, "id", None)
