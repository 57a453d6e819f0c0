"""Blur placeholder generation."""

from __future__ import annotations

import base64
import threading
from io import BytesIO
from typing import Optional, TYPE_CHECKING

import requests
from PIL import Image, UnidentifiedImageError

from ..errors import PlaceholderGenerationError
from .base import Resource
from .media import delivery_path
from .media_types import PLACEHOLDER_TRANSFORMATION, MediaResource

if TYPE_CHECKING:  # pragma: no cover
    from ..client import ServiceClient

PLACEHOLDER_EDGE = 8
PLACEHOLDER_QUALITY = 70


class Placeholders(Resource):
    """Turn image descriptors into tiny base64 JPEG data URLs.

    Results are cached per ``(public_id, format)`` for the lifetime of the
    resource; the cache is shared by the assembler's worker threads.
    """

    def __init__(self, client: "ServiceClient") -> None:
        super().__init__(client)
        self._cache: dict[tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def generate(self, image: MediaResource, *, timeout: Optional[int] = None) -> str:
        """Return the blur data URL for ``image``.

        Parameters
        ----------
        image
            Descriptor with at least ``public_id`` and ``format``.
        timeout
            Request timeout in seconds.

        Returns
        -------
        str
            ``data:image/jpeg;base64,...`` string.

        Raises
        ------
        PlaceholderGenerationError
            If the preview cannot be downloaded or decoded.
        """
        public_id = image.get("public_id")
        if not isinstance(public_id, str) or not public_id:
            raise PlaceholderGenerationError(str(public_id), "descriptor has no public_id")
        image_format = str(image.get("format") or "")
        key = (public_id, image_format)

        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        path = delivery_path(public_id, image_format, PLACEHOLDER_TRANSFORMATION)
        try:
            content = self._fetch(path, timeout=timeout)
        except requests.RequestException as exc:
            raise PlaceholderGenerationError(public_id, exc) from exc
        if not content:
            raise PlaceholderGenerationError(public_id, "empty preview response")

        data_url = f"data:image/jpeg;base64,{encode_preview(content, public_id)}"
        with self._lock:
            self._cache[key] = data_url
        return data_url

    def clear(self) -> None:
        """Drop every cached placeholder."""
        with self._lock:
            self._cache.clear()


def encode_preview(content: bytes, public_id: str = "") -> str:
    """Shrink image bytes to a placeholder-sized JPEG and base64 encode it."""
    try:
        with Image.open(BytesIO(content)) as img:
            if img.mode not in {"RGB", "L"}:
                img = img.convert("RGB")
            img.thumbnail((PLACEHOLDER_EDGE, PLACEHOLDER_EDGE))
            buffer = BytesIO()
            img.save(buffer, format="JPEG", quality=PLACEHOLDER_QUALITY)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise PlaceholderGenerationError(public_id, exc) from exc
    return base64.b64encode(buffer.getvalue()).decode("ascii")
