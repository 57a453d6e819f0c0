import base64
import logging
import sys
import unittest
from io import BytesIO
from pathlib import Path
from unittest.mock import patch

import requests
from PIL import Image

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cakegallery.errors import PlaceholderGenerationError  # noqa: E402
from cakegallery.resources.placeholders import (  # noqa: E402
    PLACEHOLDER_EDGE,
    Placeholders,
    encode_preview,
)


def image_bytes(size=(64, 32), mode="RGB", format="JPEG"):
    buffer = BytesIO()
    Image.new(mode, size, "red" if mode == "RGB" else (255, 0, 0, 128)).save(buffer, format=format)
    return buffer.getvalue()


class DummyClient:
    def __init__(self, content=b"") -> None:
        self._logger = logging.getLogger("cakegallery.tests")
        self.content = content
        self.fetches: list[str] = []

    def fetch(self, path, params=None, timeout=None):
        self.fetches.append(path)
        return self.content


class EncodePreviewTests(unittest.TestCase):
    def test_shrinks_to_placeholder_size(self):
        encoded = encode_preview(image_bytes((64, 32)), "a")
        with Image.open(BytesIO(base64.b64decode(encoded))) as img:
            self.assertEqual(img.format, "JPEG")
            self.assertLessEqual(max(img.size), PLACEHOLDER_EDGE)

    def test_converts_alpha_images(self):
        encoded = encode_preview(image_bytes((16, 16), mode="RGBA", format="PNG"), "a")
        with Image.open(BytesIO(base64.b64decode(encoded))) as img:
            self.assertEqual(img.mode, "RGB")

    def test_rejects_non_images(self):
        with self.assertRaises(PlaceholderGenerationError) as ctx:
            encode_preview(b"<html>not an image</html>", "cakes/a")
        self.assertEqual(ctx.exception.public_id, "cakes/a")

    def test_oversized_image_is_a_record_failure(self):
        bomb = Image.DecompressionBombError("image too large")
        with patch("cakegallery.resources.placeholders.Image.open", side_effect=bomb):
            with self.assertRaises(PlaceholderGenerationError) as ctx:
                encode_preview(image_bytes((8, 8)), "cakes/huge")
        self.assertEqual(ctx.exception.public_id, "cakes/huge")
        self.assertIs(ctx.exception.detail, bomb)


class PlaceholdersTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = DummyClient(image_bytes())
        self.placeholders = Placeholders(self.client)  # type: ignore[arg-type]

    def test_generate_data_url(self):
        result = self.placeholders.generate({"public_id": "cakes/a", "format": "jpg"})
        self.assertTrue(result.startswith("data:image/jpeg;base64,"))
        self.assertEqual(self.client.fetches, ["/image/upload/w_8,q_70/cakes/a.jpg"])

    def test_generate_is_cached(self):
        first = self.placeholders.generate({"public_id": "cakes/a", "format": "jpg"})
        second = self.placeholders.generate({"public_id": "cakes/a", "format": "jpg"})
        self.assertEqual(first, second)
        self.assertEqual(len(self.client.fetches), 1)
        self.placeholders.clear()
        self.placeholders.generate({"public_id": "cakes/a", "format": "jpg"})
        self.assertEqual(len(self.client.fetches), 2)

    def test_generate_missing_public_id(self):
        with self.assertRaises(PlaceholderGenerationError):
            self.placeholders.generate({"format": "jpg"})

    def test_generate_empty_response(self):
        self.client.content = None
        with self.assertRaises(PlaceholderGenerationError):
            self.placeholders.generate({"public_id": "cakes/a", "format": "jpg"})

    def test_generate_request_failure(self):
        with patch.object(self.placeholders, "_fetch", side_effect=requests.ConnectionError("down")):
            with self.assertRaises(PlaceholderGenerationError):
                self.placeholders.generate({"public_id": "cakes/a", "format": "jpg"})


if __name__ == "__main__":
    unittest.main()
