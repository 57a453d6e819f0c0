"""Types and validation helpers for the media resource."""

from __future__ import annotations

from typing import Literal, TypedDict, get_args
from typing_extensions import NotRequired, ReadOnly

from .cakes_types import Tag


class MediaResource(TypedDict, total=False):
    """Readonly image descriptor returned by the search endpoint.

    Only the fields the gallery reads are listed; the service sends many more.
    """
    public_id: ReadOnly[str]
    width: ReadOnly[int | str]
    height: ReadOnly[int | str]
    format: ReadOnly[str]
    folder: ReadOnly[str]
    created_at: ReadOnly[str]


class ImageRecord(TypedDict):
    """One displayable photo, keyed the way the page consumes it."""
    id: ReadOnly[int]
    public_id: ReadOnly[str]
    width: ReadOnly[int | str]
    height: ReadOnly[int | str]
    format: ReadOnly[str]
    blurDataUrl: NotRequired[ReadOnly[str | None]]
    tags: NotRequired[ReadOnly[list[Tag]]]


# --- Search Definitions --- #
SortDirection = Literal["asc", "desc"]
SORT_DIRECTIONS: tuple[SortDirection, ...] = get_args(SortDirection)

# The search endpoint refuses pages larger than this.
MAX_RESULTS_LIMIT = 500

DISPLAY_TRANSFORMATION = "c_scale,w_720"
PLACEHOLDER_TRANSFORMATION = "w_8,q_70"


def _normalize_max_results(value: object) -> int:
    """Clamp a requested result count into the range the service accepts.

    Raises
    ------
    ValueError
        If the value is not a positive integer.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Invalid max_results: {value!r}")
    return min(value, MAX_RESULTS_LIMIT)


def _folder_expression(folder: str) -> str:
    """Build the search expression selecting everything under ``folder``."""
    folder = folder.strip().strip("/")
    if not folder:
        return "resource_type:image"
    return f"folder:{folder}/*"


def _to_record(index: int, resource: MediaResource) -> ImageRecord:
    """Reduce a search hit to the fields the gallery keeps."""
    return {
        "id": index,
        "public_id": resource["public_id"],
        "width": resource.get("width", ""),
        "height": resource.get("height", ""),
        "format": resource.get("format", ""),
    }


__all__ = [
    "DISPLAY_TRANSFORMATION",
    "ImageRecord",
    "MAX_RESULTS_LIMIT",
    "MediaResource",
    "PLACEHOLDER_TRANSFORMATION",
    "SORT_DIRECTIONS",
    "SortDirection",
]
