"""Gallery page: owns the image list and renders the grid view model."""

from __future__ import annotations

from typing import Callable, MutableMapping, Optional, Sequence

from .client import CLOUDINARY_CLOUD_NAME, CLOUDINARY_DELIVERY_URL
from .navigation import NavigationState, Navigator, render_address
from .overlay import Overlay
from .resources.cakes import Cakes
from .resources.cakes_types import Cake, Schema
from .resources.media import delivery_path
from .resources.media_types import DISPLAY_TRANSFORMATION, ImageRecord
from .tools.images import apply_update


class GalleryPage:
    """Page-level owner of the assembled images.

    The image list is only ever replaced here, through
    :meth:`handle_cake_update`; the overlay reports edits through that callback.
    """

    def __init__(
        self,
        images: Sequence[ImageRecord],
        schema: Optional[Schema] = None,
        *,
        address: str = "/",
        session: Optional[MutableMapping[str, object]] = None,
        cakes: Optional[Cakes] = None,
        cloud_name: Optional[str] = None,
    ) -> None:
        self._images: list[ImageRecord] = list(images)
        self.schema = schema
        self.cakes = cakes
        self.cloud_name = cloud_name or CLOUDINARY_CLOUD_NAME
        self.navigator = Navigator(address, session=session, photo_count=len(self._images))

    @property
    def images(self) -> list[ImageRecord]:
        return self._images

    @property
    def overlay(self) -> Overlay | None:
        """Overlay for the open photo, or None on the grid."""
        if self.navigator.state.is_grid:
            return None
        return Overlay(
            lambda: self._images,
            self.navigator,
            schema=self.schema,
            on_update=self.handle_cake_update,
            cakes=self.cakes,
        )

    def handle_cake_update(self, cake: Cake) -> None:
        self._images = apply_update(self._images, cake)

    def image_url(self, image: ImageRecord, transformation: str = DISPLAY_TRANSFORMATION) -> str:
        path = delivery_path(image["public_id"], image["format"], transformation)
        return f"{CLOUDINARY_DELIVERY_URL}/{self.cloud_name}{path}"

    def grid_entry(self, image: ImageRecord) -> dict[str, object]:
        state = NavigationState(image["id"])
        blur = image.get("blurDataUrl")
        return {
            "id": image["id"],
            "public_id": image["public_id"],
            "href": render_address(state, "query"),
            "as": render_address(state, "path"),
            "src": self.image_url(image),
            "blurDataUrl": blur,
            # Without a blur placeholder the image loads over an empty box.
            "placeholder": "blur" if blur else "empty",
            "tags": list(image.get("tags") or []),
        }

    def render(self, scroll_into_view: Optional[Callable[[int], object]] = None) -> dict[str, object]:
        """Render the page and run the scroll restoration effect.

        Parameters
        ----------
        scroll_into_view
            Called with the id of the photo to center when returning from the
            overlay. Without it the pending restoration is left in place.
        """
        overlay = self.overlay
        scrolled = False
        if scroll_into_view is not None:
            scrolled = self.navigator.render(scroll_into_view)
        return {
            "address": self.navigator.address,
            "overlay": overlay.render() if overlay is not None else None,
            "grid": [self.grid_entry(image) for image in self._images],
            "restoredScroll": scrolled,
        }
