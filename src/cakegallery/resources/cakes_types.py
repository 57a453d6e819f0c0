"""Types and validation helpers for the cakes (tag storage) resource."""

from __future__ import annotations

from typing import Sequence, TypedDict
from typing_extensions import NotRequired, ReadOnly

from ..utils import unique_in_order


class Tag(TypedDict):
    """A tag on one photo; the literal doubles as its id."""
    id: ReadOnly[str]
    text: ReadOnly[str]


class Cake(TypedDict):
    """Tag record for one photo, as stored and as returned after an edit."""
    photo: ReadOnly[str]
    tags: ReadOnly[list[str]]


class Attribute(TypedDict, total=False):
    """One property of the cake schema."""
    title: ReadOnly[str]
    readOnly: ReadOnly[bool]
    type: ReadOnly[str]
    items: ReadOnly[dict[str, object]]


class Schema(TypedDict):
    """JSON schema describing the editable cake attributes."""
    title: ReadOnly[str]
    type: ReadOnly[str]
    properties: ReadOnly[dict[str, Attribute]]
    definitions: NotRequired[ReadOnly[dict[str, object]]]
    # "$schema" is not a valid identifier; it is read with .get() when present.


def _normalize_tags(tags: Sequence[object] | object) -> list[str] | None:
    """Normalize a tag list to unique, stripped, non-empty strings.

    Parameters
    ----------
    tags
        Sequence of tag strings.

    Returns
    -------
    list[str] | None
        Deduplicated tags in first-seen order, or ``None`` if ``tags`` is not
        a sequence of strings.
    """
    if isinstance(tags, (str, bytes)) or not isinstance(tags, Sequence):
        return None
    if not all(isinstance(tag, str) for tag in tags):
        return None
    stripped = [tag.strip() for tag in tags]  # type: ignore[union-attr]
    return unique_in_order(tag for tag in stripped if tag)


def _to_tags(tags: Sequence[str]) -> list[Tag]:
    """Map tag literals to ``{id, text}`` pairs, dropping repeats."""
    return [{"id": tag, "text": tag} for tag in unique_in_order(tags)]


def _parse_cake(payload: object) -> Cake | None:
    """Extract a cake from a bare or ``{"data": ...}`` wrapped payload."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    if not isinstance(payload, dict):
        return None
    photo = payload.get("photo")
    tags = _normalize_tags(payload.get("tags"))
    if not isinstance(photo, str) or tags is None:
        return None
    return {"photo": photo, "tags": tags}


__all__ = ["Attribute", "Cake", "Schema", "Tag"]
