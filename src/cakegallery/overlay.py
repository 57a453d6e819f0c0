"""Single-photo overlay shown above the grid."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Union

from .errors import RecordNotFound
from .navigation import Navigator
from .resources.cakes import Cakes
from .resources.cakes_types import Attribute, Cake, Schema
from .resources.media_types import ImageRecord
from .tools.images import find_by_id

_logger = logging.getLogger(__name__)

ImageSource = Union[Sequence[ImageRecord], Callable[[], Sequence[ImageRecord]]]


class Overlay:
    """View model for the open photo.

    The overlay reads the image list but never changes it: tag edits are
    written to the cake store and the resulting cake is handed to
    ``on_update``, whose owner replaces its list. Pass ``images`` as a
    callable returning the owner's current list so the open overlay sees
    those replacements.
    """

    def __init__(
        self,
        images: ImageSource,
        navigator: Navigator,
        *,
        schema: Optional[Schema] = None,
        on_update: Optional[Callable[[Cake], object]] = None,
        cakes: Optional[Cakes] = None,
    ) -> None:
        self._images = images
        self.navigator = navigator
        self.schema = schema
        self.on_update = on_update
        self.cakes = cakes

    @property
    def images(self) -> Sequence[ImageRecord]:
        if callable(self._images):
            return self._images()
        return self._images

    @property
    def direction(self) -> int:
        return self.navigator.direction

    @property
    def index(self) -> int:
        photo_id = self.navigator.selected_photo_id
        if photo_id is None:
            raise LookupError("No photo is open")
        return photo_id

    @property
    def current(self) -> ImageRecord:
        image = find_by_id(self.images, self.index)
        if image is None:
            raise RecordNotFound(self.index)
        return image

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index + 1 < len(self.images)

    def previous(self) -> ImageRecord:
        if self.has_previous:
            self.navigator.change_photo(self.index - 1)
        return self.current

    def next(self) -> ImageRecord:
        if self.has_next:
            self.navigator.change_photo(self.index + 1)
        return self.current

    def close(self) -> None:
        self.navigator.close()

    def editable_attributes(self) -> dict[str, Attribute]:
        """Schema properties the form may edit, in schema order."""
        if not self.schema:
            return {}
        properties = self.schema.get("properties") or {}
        return {
            name: attribute
            for name, attribute in properties.items()
            if isinstance(attribute, dict) and not attribute.get("readOnly", False)
        }

    def save_tags(self, tags: Sequence[str]) -> Cake | None:
        """Store new tags for the open photo and report the result upward.

        Returns the stored cake, or ``None`` if the store rejected the edit;
        ``on_update`` is only called on success.
        """
        if self.cakes is None:
            raise RuntimeError("Overlay has no cake store to save tags to")
        public_id = self.current["public_id"]
        cake = self.cakes.update(public_id, tags)
        if cake is None:
            _logger.warning("Tags for %s were not saved", public_id)
            return None
        if self.on_update is not None:
            self.on_update(cake)
        return cake

    def render(self) -> dict[str, object]:
        """Payload the overlay template renders."""
        image = self.current
        return {
            "index": self.index,
            "currentPhoto": image,
            "navigation": True,
            "direction": self.direction,
            "hasPrevious": self.has_previous,
            "hasNext": self.has_next,
            "cakeSchema": self.schema,
            "editableAttributes": self.editable_attributes(),
        }
