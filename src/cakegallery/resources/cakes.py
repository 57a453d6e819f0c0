"""Cake (tag storage) resource wrapper."""

from __future__ import annotations

from typing import Optional, Sequence, cast

import requests

from ..errors import TagLookupError, UpstreamUnavailable
from ..utils import quote_segment
from .base import Resource
from .cakes_types import Cake, Schema, _normalize_tags, _parse_cake
from ._common_types import ValidationMode, _normalize_public_id


class Cakes(Resource):
    """Per-photo tag records and the schema describing them."""

    def get_by_photo(self, public_id: str, *, timeout: Optional[int] = None) -> Cake | None:
        """Fetch the cake stored for one photo.

        Parameters
        ----------
        public_id
            Media host public id of the photo.
        timeout
            Request timeout in seconds.

        Returns
        -------
        Cake or None
            The stored cake, or ``None`` when the store has nothing for this
            photo.

        Raises
        ------
        UpstreamUnavailable
            If the store cannot be reached at all.
        TagLookupError
            If the store answers with an error or an unusable payload.
        """
        photo = _normalize_public_id(public_id)
        if photo is None:
            raise TagLookupError(str(public_id), "invalid public id")

        try:
            response = self._get(f"/cakes/photo/{quote_segment(photo)}", timeout=timeout)
        except requests.HTTPError as exc:
            status = getattr(exc.response, "status_code", None)
            if status == 404:
                return None
            raise TagLookupError(photo, exc) from exc
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise UpstreamUnavailable("cake store", exc) from exc
        except requests.RequestException as exc:
            raise TagLookupError(photo, exc) from exc

        if response is None:
            # Empty body: nothing stored for this photo.
            return None
        cake = _parse_cake(response)
        if cake is None:
            raise TagLookupError(photo, f"unexpected payload {response!r}")
        if cake["photo"] != photo:
            self._logger.warning("Cake for %s reported photo %s", photo, cake["photo"])
        return cake

    def update(
        self,
        public_id: str,
        tags: Sequence[str],
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> Cake | None:
        """Replace the tags stored for one photo.

        Parameters
        ----------
        public_id
            Media host public id of the photo.
        tags
            Full new tag list; duplicates and blank entries are dropped.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        Cake or None
            The cake as stored, or ``None`` on error.
        """
        if validation == "off":
            photo = public_id
            normalized = list(tags)
        else:
            photo = _normalize_public_id(public_id)
            if photo is None:
                if validation == "strict":
                    raise ValueError(f"Invalid public_id: {public_id}")
                self._logger.warning("Invalid public_id for update: %s", public_id)
                return None
            normalized = _normalize_tags(tags)
            if normalized is None:
                if validation == "strict":
                    raise ValueError(f"Invalid tags: {tags}")
                self._logger.warning("Invalid tags for update of %s: %s", photo, tags)
                return None

        payload = {"photo": photo, "tags": normalized}
        try:
            response = self._put(f"/cakes/photo/{quote_segment(photo)}", json=payload, timeout=timeout)
        except requests.RequestException as exc:
            self._logger.warning("Could not store tags for %s: %s", photo, exc)
            return None

        cake = _parse_cake(response)
        if cake is None:
            self._logger.warning("Update cake response missing expected data. Response was %s", response)
            return None
        return cake

    def schema(self, *, timeout: Optional[int] = None) -> Schema | None:
        """Fetch the JSON schema of editable cake attributes.

        Returns
        -------
        Schema or None
            Schema dict, or ``None`` on error.
        """
        try:
            response = self._get("/cakes/schema", timeout=timeout)
        except requests.RequestException as exc:
            self._logger.warning("Could not fetch cake schema: %s", exc)
            return None

        data = response.get("data") if isinstance(response, dict) else None
        if isinstance(data, dict) and "properties" in data:
            return cast(Schema, data)
        if isinstance(response, dict) and "properties" in response:
            return cast(Schema, response)
        self._logger.warning("Schema response missing expected properties.")
        return None
