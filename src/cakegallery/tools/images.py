"""Image list helper tools."""

from __future__ import annotations

import logging
from typing import Sequence

from cakegallery.resources.cakes_types import Cake, _to_tags
from cakegallery.resources.media_types import ImageRecord

_logger = logging.getLogger(__name__)


def find_by_public_id(images: Sequence[ImageRecord], public_id: str) -> int | None:
    """Return the list position of the record with ``public_id``, if any."""
    for position, image in enumerate(images):
        if image["public_id"] == public_id:
            return position
    return None


def find_by_id(images: Sequence[ImageRecord], photo_id: int) -> ImageRecord | None:
    """Return the record whose gallery id is ``photo_id``."""
    # Assembled ids match positions; fall back to a scan for other lists.
    if 0 <= photo_id < len(images) and images[photo_id]["id"] == photo_id:
        return images[photo_id]
    for image in images:
        if image["id"] == photo_id:
            return image
    return None


def apply_update(images: Sequence[ImageRecord], cake: Cake) -> list[ImageRecord]:
    """Return a new list with ``cake``'s tags written onto its photo.

    Parameters
    ----------
    images
        Current image list. Not modified.
    cake
        Tag update for one photo.

    Returns
    -------
    list[ImageRecord]
        New list in the same order. The updated record is a new dict; every
        other record is the same object as in ``images``. When no record
        matches ``cake["photo"]`` the result equals ``images``.
    """
    position = find_by_public_id(images, cake["photo"])
    updated = list(images)
    if position is None:
        _logger.debug("No image with public id %s; tag update ignored", cake["photo"])
        return updated
    updated[position] = {**images[position], "tags": _to_tags(cake["tags"])}
    return updated
