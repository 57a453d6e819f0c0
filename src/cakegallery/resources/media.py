"""Media host search and delivery resource."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING, cast

import requests

from ..errors import UpstreamUnavailable
from ..utils import quote_segment
from .base import Resource
from .media_types import (
    DISPLAY_TRANSFORMATION,
    SORT_DIRECTIONS,
    MediaResource,
    SortDirection,
    _folder_expression,
    _normalize_max_results,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..client import ServiceClient


class Media(Resource):
    """Search the media host and build delivery URLs."""

    def __init__(self, client: "ServiceClient", *, delivery: Optional["ServiceClient"] = None) -> None:
        super().__init__(client)
        self._delivery = delivery

    def search(
        self,
        folder: str,
        *,
        sort_by: str = "public_id",
        direction: SortDirection = "desc",
        max_results: int = 400,
        timeout: Optional[int] = None,
    ) -> list[MediaResource]:
        """Search for every image under ``folder``, in a single page.

        Parameters
        ----------
        folder
            Folder whose images are returned (nested folders included).
        sort_by
            Resource field to sort on.
        direction
            ``"asc"`` or ``"desc"``.
        max_results
            Maximum number of resources; clamped to the service page limit.
        timeout
            Request timeout in seconds.

        Returns
        -------
        list[MediaResource]
            Resources in the order the service returned them. Entries without
            a ``public_id`` are dropped with a warning.

        Raises
        ------
        ValueError
            If ``direction`` or ``max_results`` is invalid.
        UpstreamUnavailable
            If the service cannot be reached or answers with an error.
        """
        if direction not in SORT_DIRECTIONS:
            raise ValueError(f"Invalid sort direction: {direction}")
        payload = {
            "expression": _folder_expression(folder),
            "sort_by": [{sort_by: direction}],
            "max_results": _normalize_max_results(max_results),
        }

        try:
            response = self._post("/resources/search", json=payload, timeout=timeout)
        except requests.RequestException as exc:
            raise UpstreamUnavailable("media search", exc) from exc
        if not isinstance(response, dict):
            raise UpstreamUnavailable("media search", "response was not a JSON object")

        resources = response.get("resources")
        if not isinstance(resources, list):
            raise UpstreamUnavailable("media search", "response missing resources list")
        if response.get("next_cursor"):
            self._logger.info(
                "Search for %r returned more than %s results; only the first page is used",
                folder,
                payload["max_results"],
            )

        results: list[MediaResource] = []
        for resource in resources:
            if isinstance(resource, dict) and isinstance(resource.get("public_id"), str):
                results.append(cast(MediaResource, resource))
            else:
                self._logger.warning("Skipping search result without public_id: %s", resource)
        return results

    def url(self, public_id: str, format: str, transformation: str = DISPLAY_TRANSFORMATION) -> str:
        """Return the delivery URL for an image under a transformation."""
        return self._delivery_client.url(delivery_path(public_id, format, transformation))

    @property
    def _delivery_client(self) -> "ServiceClient":
        if self._delivery is None:
            raise RuntimeError("Media resource has no delivery client configured")
        return self._delivery


def delivery_path(public_id: str, format: str, transformation: str = DISPLAY_TRANSFORMATION) -> str:
    """Path of an image on the delivery host, relative to the account root."""
    parts = [quote_segment(part) for part in public_id.split("/")]
    name = "/".join(parts)
    if format:
        name = f"{name}.{format}"
    if transformation:
        return f"/image/upload/{transformation}/{name}"
    return f"/image/upload/{name}"
