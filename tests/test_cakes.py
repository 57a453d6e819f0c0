import logging
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import requests

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cakegallery.errors import TagLookupError, UpstreamUnavailable  # noqa: E402
from cakegallery.resources.cakes import Cakes  # noqa: E402


logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stdout,
    force=True,
)


class DummyClient:
    def __init__(self) -> None:
        self._logger = logging.getLogger("cakegallery.tests")
        self.request_calls: list[tuple[str, str, object, object, object]] = []

    def request(self, method, path, params=None, json=None, timeout=None):
        self.request_calls.append((method, path, params, json, timeout))
        return {}


class FakeErrorResponse:
    def __init__(self, status_code):
        self.status_code = status_code


def http_error(status_code):
    return requests.HTTPError(f"{status_code}", response=FakeErrorResponse(status_code))


class CakesLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = DummyClient()
        self.cakes = Cakes(self.client)  # type: ignore[arg-type]

    def test_get_by_photo_quotes_public_id(self):
        with patch.object(self.cakes, "_get", return_value={"photo": "cakes/a", "tags": ["sf"]}) as mocked:
            cake = self.cakes.get_by_photo("cakes/a")
        self.assertEqual(cake, {"photo": "cakes/a", "tags": ["sf"]})
        self.assertEqual(mocked.call_args.args[0], "/cakes/photo/cakes%2Fa")

    def test_get_by_photo_wrapped_payload(self):
        with patch.object(self.cakes, "_get", return_value={"data": {"photo": "a", "tags": ["x", "x"]}}):
            self.assertEqual(self.cakes.get_by_photo("a"), {"photo": "a", "tags": ["x"]})

    def test_get_by_photo_not_found(self):
        with patch.object(self.cakes, "_get", side_effect=http_error(404)):
            self.assertIsNone(self.cakes.get_by_photo("a"))

    def test_get_by_photo_empty_body(self):
        with patch.object(self.cakes, "_get", return_value=None):
            self.assertIsNone(self.cakes.get_by_photo("a"))

    def test_get_by_photo_server_error(self):
        with patch.object(self.cakes, "_get", side_effect=http_error(500)):
            with self.assertRaises(TagLookupError) as ctx:
                self.cakes.get_by_photo("a")
        self.assertEqual(ctx.exception.public_id, "a")

    def test_get_by_photo_unreachable(self):
        with patch.object(self.cakes, "_get", side_effect=requests.ConnectionError("down")):
            with self.assertRaises(UpstreamUnavailable):
                self.cakes.get_by_photo("a")
        with patch.object(self.cakes, "_get", side_effect=requests.Timeout("slow")):
            with self.assertRaises(UpstreamUnavailable):
                self.cakes.get_by_photo("a")

    def test_get_by_photo_bad_payload(self):
        with patch.object(self.cakes, "_get", return_value={"unexpected": True}):
            with self.assertRaises(TagLookupError):
                self.cakes.get_by_photo("a")

    def test_get_by_photo_invalid_id(self):
        with self.assertRaises(TagLookupError):
            self.cakes.get_by_photo("  ")

    def test_get_by_photo_mismatched_photo_warns(self):
        with patch.object(self.cakes, "_get", return_value={"photo": "b", "tags": []}):
            with self.assertLogs("cakegallery.tests", level="WARNING"):
                self.assertEqual(self.cakes.get_by_photo("a"), {"photo": "b", "tags": []})


class CakesUpdateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cakes = Cakes(DummyClient())  # type: ignore[arg-type]

    def test_update_success(self):
        response = {"photo": "cakes/a", "tags": ["sf", "nyc"]}
        with patch.object(self.cakes, "_put", return_value=response) as mocked:
            result = self.cakes.update("cakes/a", ["sf", " nyc", "sf"])
        self.assertEqual(result, response)
        self.assertEqual(mocked.call_args.args[0], "/cakes/photo/cakes%2Fa")
        self.assertEqual(mocked.call_args.kwargs["json"], {"photo": "cakes/a", "tags": ["sf", "nyc"]})

    def test_update_invalid_public_id_warn(self):
        with patch.object(self.cakes, "_put") as mocked:
            self.assertIsNone(self.cakes.update("", ["sf"]))
        mocked.assert_not_called()

    def test_update_invalid_public_id_strict(self):
        with self.assertRaises(ValueError):
            self.cakes.update("", ["sf"], validation="strict")

    def test_update_invalid_tags(self):
        self.assertIsNone(self.cakes.update("a", "sf", validation="warn"))  # type: ignore[arg-type]
        with self.assertRaises(ValueError):
            self.cakes.update("a", [1], validation="strict")  # type: ignore[list-item]

    def test_update_validation_off_sends_as_is(self):
        with patch.object(self.cakes, "_put", return_value={"photo": "a", "tags": ["x"]}) as mocked:
            self.cakes.update("a", ["x", "x"], validation="off")
        self.assertEqual(mocked.call_args.kwargs["json"], {"photo": "a", "tags": ["x", "x"]})

    def test_update_request_failure(self):
        with patch.object(self.cakes, "_put", side_effect=requests.HTTPError("409")):
            self.assertIsNone(self.cakes.update("a", ["x"]))

    def test_update_response_missing_data(self):
        with patch.object(self.cakes, "_put", return_value={"ok": True}):
            self.assertIsNone(self.cakes.update("a", ["x"]))


class CakesSchemaTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cakes = Cakes(DummyClient())  # type: ignore[arg-type]

    def test_schema_bare(self):
        schema = {"title": "Cake", "type": "object", "properties": {"tags": {"type": "array"}}}
        with patch.object(self.cakes, "_get", return_value=schema):
            self.assertEqual(self.cakes.schema(), schema)

    def test_schema_wrapped(self):
        schema = {"title": "Cake", "type": "object", "properties": {}}
        with patch.object(self.cakes, "_get", return_value={"data": schema}):
            self.assertEqual(self.cakes.schema(), schema)

    def test_schema_missing_properties(self):
        with patch.object(self.cakes, "_get", return_value={"title": "Cake"}):
            self.assertIsNone(self.cakes.schema())

    def test_schema_request_failure(self):
        with patch.object(self.cakes, "_get", side_effect=requests.ConnectionError("down")):
            self.assertIsNone(self.cakes.schema())


if __name__ == "__main__":
    unittest.main()
