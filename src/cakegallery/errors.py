"""Error taxonomy for gallery assembly and tag handling."""

from __future__ import annotations

from typing import Optional


class GalleryError(Exception):
    """Base class for all gallery errors."""


class UpstreamUnavailable(GalleryError):
    """A backing service could not be reached; the whole build fails."""

    def __init__(self, service: str, detail: object = None) -> None:
        self.service = service
        self.detail = detail
        message = f"{service} is unavailable"
        if detail is not None:
            message = f"{message}: {detail}"
        super().__init__(message)


class RecordError(GalleryError):
    """Failure scoped to a single image record."""

    label = "record operation"

    def __init__(self, public_id: str, detail: object = None) -> None:
        self.public_id = public_id
        self.detail = detail
        message = f"{self.label} failed for {public_id!r}"
        if detail is not None:
            message = f"{message}: {detail}"
        super().__init__(message)


class TagLookupError(RecordError):
    """Tag storage answered, but not with a usable cake for this photo."""

    label = "tag lookup"


class PlaceholderGenerationError(RecordError):
    """The blur placeholder for this photo could not be produced."""

    label = "placeholder generation"


class RecordNotFound(GalleryError, LookupError):
    """No record in the gallery matches the given public id or photo id."""

    def __init__(self, key: object, detail: Optional[str] = None) -> None:
        self.key = key
        super().__init__(detail or f"No image matches {key!r}")


__all__ = [
    "GalleryError",
    "PlaceholderGenerationError",
    "RecordError",
    "RecordNotFound",
    "TagLookupError",
    "UpstreamUnavailable",
]
