"""Service clients and the resource-grouped gallery facade."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import requests

from .resources.cakes import Cakes
from .resources.cakes_types import Schema
from .resources.media import Media
from .resources.media_types import ImageRecord
from .resources.placeholders import Placeholders

CLOUDINARY_CLOUD_NAME = os.environ.get("CLOUDINARY_CLOUD_NAME", "")
CLOUDINARY_API_KEY = os.environ.get("CLOUDINARY_API_KEY", "")
CLOUDINARY_API_SECRET = os.environ.get("CLOUDINARY_API_SECRET", "")
CLOUDINARY_FOLDER = os.environ.get("CLOUDINARY_FOLDER", "")
CLOUDINARY_API_URL = os.environ.get("CLOUDINARY_API_URL", "https://api.cloudinary.com")
CLOUDINARY_DELIVERY_URL = os.environ.get("CLOUDINARY_DELIVERY_URL", "https://res.cloudinary.com")
CAKE_STORE_URL = os.environ.get("CAKE_STORE_URL", "http://localhost:8000")
GALLERY_MAX_RESULTS = int(os.environ.get("GALLERY_MAX_RESULTS", "400"))
GALLERY_MAX_WORKERS = int(os.environ.get("GALLERY_MAX_WORKERS", "8"))


class ServiceClient:
    """Raw JSON/bytes access to one HTTP service."""

    def __init__(
        self,
        base_url: str,
        *,
        auth: Optional[tuple[str, str]] = None,
        default_timeout: int = 20,
        session: Optional[requests.Session] = None,
        raise_on_error: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Create a client bound to a service root.

        Parameters
        ----------
        base_url
            Service root every request path is appended to.
        auth
            Optional HTTP basic auth pair.
        default_timeout
            Default request timeout in seconds.
        session
            Optional requests session to reuse connections.
        raise_on_error
            If True, raise request errors instead of returning None.
        logger
            Logger for request failures; defaults to this module's logger.
        """
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.default_timeout = default_timeout
        self.raise_on_error = raise_on_error
        self._logger = logger or logging.getLogger(__name__)
        self._session = session

    def url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[requests.Response]:
        url = self.url(path)
        requester = self._session or requests
        response = None
        try:
            response = requester.request(
                method,
                url,
                params=params,
                json=json,
                auth=self.auth,
                timeout=timeout or self.default_timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            if self.raise_on_error:
                raise
            # Extract error message from response body if available
            error_msg = str(exc)
            try:
                error_body = response.json() if response is not None else None
                if isinstance(error_body, dict):
                    # Cloudinary nests its message under "error"
                    error = error_body.get("error")
                    if isinstance(error, dict) and "message" in error:
                        error_msg = f"{exc}\nServer error: {error['message']}"
                    elif "message" in error_body:
                        error_msg = f"{exc}\nServer message: {error_body['message']}"
                    elif "error" in error_body:
                        error_msg = f"{exc}\nServer error: {error_body['error']}"
                    elif "detail" in error_body:
                        error_msg = f"{exc}\nDetails: {error_body['detail']}"
            except (ValueError, AttributeError, KeyError):
                pass  # Response wasn't JSON or didn't have expected fields
            self._logger.warning("Request failed for %s %s: %s", method, url, error_msg)
            return None
        except Exception as exc:  # noqa: BLE001 - surface request failures
            if self.raise_on_error:
                raise
            self._logger.warning("Request failed for %s %s: %s", method, url, exc)
            return None
        return response

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        """Send a raw request and decode the JSON body.

        Parameters
        ----------
        method
            HTTP method (GET, POST, PUT, DELETE).
        path
            Endpoint path relative to ``base_url``.
        params
            Query parameters for the request.
        json
            JSON payload for the request.
        timeout
            Timeout in seconds for this request.

        Returns
        -------
        dict | list | None
            Parsed JSON payload, or None if the response is empty or non-JSON.
        """
        response = self._send(method, path, params=params, json=json, timeout=timeout)
        if response is None or not response.content:
            return None
        try:
            payload = response.json()
        except ValueError:  # noqa: PERF203 - only attempt JSON when present
            self._logger.warning("Response from %s %s was not JSON", method, self.url(path))
            return None
        if isinstance(payload, (dict, list)):
            return payload
        return None

    def fetch(
        self,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[bytes]:
        """GET a path and return the raw body, or None when empty or failed."""
        response = self._send("GET", path, params=params, timeout=timeout)
        if response is None or not response.content:
            return None
        return response.content


class Gallery:
    """Resource-grouped client for the media host and the cake store."""

    media: Media
    cakes: Cakes
    placeholders: Placeholders

    def __init__(
        self,
        *,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: Optional[str] = None,
        cake_store_url: Optional[str] = None,
        max_results: Optional[int] = None,
        max_workers: Optional[int] = None,
        default_timeout: int = 20,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create a gallery client from explicit settings or the environment.

        Parameters
        ----------
        cloud_name
            Media host account name, used in API and delivery URLs.
        api_key, api_secret
            Media host credentials for the search API.
        folder
            Folder whose images make up the gallery.
        cake_store_url
            Root URL of the tag-storage service.
        max_results
            Upper bound on images fetched from the search API.
        max_workers
            Concurrent per-image fetches during assembly; ``0`` is sequential.
        default_timeout
            Default request timeout in seconds.
        session
            Optional requests session shared by every service client.
        """
        self.cloud_name = cloud_name or CLOUDINARY_CLOUD_NAME
        self.folder = folder if folder is not None else CLOUDINARY_FOLDER
        self.max_results = max_results or GALLERY_MAX_RESULTS
        self.max_workers = GALLERY_MAX_WORKERS if max_workers is None else max_workers
        self._logger = logging.getLogger(__name__)

        # Resources translate request exceptions into the gallery taxonomy.
        common: dict[str, Any] = {
            "default_timeout": default_timeout,
            "session": session,
            "raise_on_error": True,
            "logger": self._logger,
        }
        self.api = ServiceClient(
            f"{CLOUDINARY_API_URL}/v1_1/{self.cloud_name}",
            auth=(api_key or CLOUDINARY_API_KEY, api_secret or CLOUDINARY_API_SECRET),
            **common,
        )
        self.delivery = ServiceClient(f"{CLOUDINARY_DELIVERY_URL}/{self.cloud_name}", **common)
        self.store = ServiceClient(cake_store_url or CAKE_STORE_URL, **common)

        self.media: Media = Media(self.api, delivery=self.delivery)
        self.cakes: Cakes = Cakes(self.store)
        self.placeholders: Placeholders = Placeholders(self.delivery)

    def assemble(self) -> list[ImageRecord]:
        """Build the ordered, fully populated image list for the configured folder."""
        from .assembler import assemble

        return assemble(
            self.media,
            self.cakes,
            self.placeholders,
            folder=self.folder,
            max_results=self.max_results,
            max_workers=self.max_workers,
        )

    def build_props(self) -> dict[str, list[ImageRecord] | Schema | None]:
        """Return the page props: assembled images plus the cake schema."""
        images = self.assemble()
        schema = self.cakes.schema()
        return {"images": images, "cakeSchema": schema}
