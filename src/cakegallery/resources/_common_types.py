"""Shared types and validation helpers for resources.

This module contains:
- Validation mode type (shared across resources and navigation)
- Public id and photo id normalizers
"""

from __future__ import annotations

from typing import Literal

# --- Shared Validation Mode --- #
ValidationMode = Literal["off", "warn", "strict"]


# --- Identifier Normalization --- #
def _normalize_public_id(value: object) -> str | None:
    """Return a stripped public id, or None when the value cannot be one.

    Parameters
    ----------
    value
        Candidate public id. Must be a non-empty string once surrounding
        whitespace and slashes are removed.

    Returns
    -------
    str | None
        The normalized public id, or ``None`` for unusable input.
    """
    if not isinstance(value, str):
        return None
    normalized = value.strip().strip("/")
    return normalized or None


def _normalize_photo_id(value: object, count: int | None = None) -> int | None:
    """Normalize a photo id taken from an address or a caller.

    Parameters
    ----------
    value
        Integer id, or a string of decimal digits as found in query strings.
    count
        Number of photos in the gallery when known; ids must fall below it.

    Returns
    -------
    int | None
        The photo id, or ``None`` if the value is not a usable id.

    Notes
    -----
    ``bool`` is rejected even though it is an ``int`` subclass.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            return None
        value = int(text)
    if not isinstance(value, int) or value < 0:
        return None
    if count is not None and value >= count:
        return None
    return value
