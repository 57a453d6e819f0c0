"""
CLI demo that assembles the gallery, opens a photo by deep link and walks the
overlay back to the grid.

Install the package before running the demo::

    pip install -e .

Set ``CLOUDINARY_CLOUD_NAME``, ``CLOUDINARY_API_KEY``, ``CLOUDINARY_API_SECRET``
and ``CLOUDINARY_FOLDER`` for the media host, and ``CAKE_STORE_URL`` if the
tag store is not available at the default (``http://localhost:8000``).
"""

import logging
import sys
from pprint import pprint

from cakegallery import Gallery, GalleryPage, UpstreamUnavailable

logging.basicConfig(level=logging.INFO)


def main() -> None:
    gallery = Gallery()

    try:
        props = gallery.build_props()
    except UpstreamUnavailable as exc:
        print(f"Gallery build failed: {exc}")
        sys.exit(1)

    images = props["images"]
    print(f"Assembled {len(images)} images")
    if not images:
        return

    # Deep link straight into the overlay of the last photo
    session: dict[str, object] = {}
    page = GalleryPage(
        images,
        props["cakeSchema"],
        address=f"/p/{len(images) - 1}",
        session=session,
        cakes=gallery.cakes,
        cloud_name=gallery.cloud_name,
    )
    view = page.render()
    print(f"\nOpened {view['address']}:")
    pprint(view["overlay"]["currentPhoto"])

    page.overlay.previous()
    print(f"Moved to {page.navigator.address}")
    page.overlay.close()

    # First grid render after closing scrolls back to the photo, once
    page.render(lambda photo_id: print(f"Scrolling photo {photo_id} into view"))
    view = page.render(lambda photo_id: print("unexpected second scroll"))
    print(f"Grid restored scroll again: {view['restoredScroll']}")

    for entry in view["grid"][:5]:
        tags = ", ".join(tag["text"] for tag in entry["tags"]) or "(no tags)"
        print(f"{entry['as']:>8}  {entry['public_id']}  [{tags}]")


if __name__ == "__main__":
    main()
