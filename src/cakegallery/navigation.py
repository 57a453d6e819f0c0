"""Photo navigation: address parsing, overlay state and scroll restoration.

The page is either showing the grid or an overlay for one photo. That state
lives in the address (``/?photoId=3`` or its shareable form ``/p/3``), so it
can always be rebuilt from the address alone. Closing an overlay leaves the
photo id in a single-use slot that the next grid render consumes to scroll the
photo back into view.
"""

from __future__ import annotations

import logging
from typing import Callable, Literal, MutableMapping, NamedTuple, Optional
from urllib.parse import parse_qs, urlsplit

from .resources._common_types import ValidationMode, _normalize_photo_id

PHOTO_QUERY_PARAM = "photoId"
PHOTO_PATH_PREFIX = "/p/"
LAST_VIEWED_KEY = "lastViewedPhoto"

AddressForm = Literal["path", "query"]


class NavigationState(NamedTuple):
    """Which photo, if any, is open in the overlay."""

    selected_photo_id: Optional[int] = None

    @property
    def is_grid(self) -> bool:
        return self.selected_photo_id is None


GRID = NavigationState()


def parse_address(address: str) -> NavigationState:
    """Derive the navigation state from an address.

    Accepts absolute URLs or bare paths. ``/p/{id}`` takes precedence over the
    ``photoId`` query parameter; anything without a usable id is the grid.
    """
    parts = urlsplit(address or "/")
    path = parts.path or "/"
    if path.startswith(PHOTO_PATH_PREFIX):
        photo_id = _normalize_photo_id(path[len(PHOTO_PATH_PREFIX):].rstrip("/"))
        if photo_id is not None:
            return NavigationState(photo_id)
    values = parse_qs(parts.query).get(PHOTO_QUERY_PARAM)
    if values:
        photo_id = _normalize_photo_id(values[0])
        if photo_id is not None:
            return NavigationState(photo_id)
    return GRID


def render_address(state: NavigationState, form: AddressForm = "path") -> str:
    """Inverse of :func:`parse_address`: the address that encodes ``state``."""
    if state.selected_photo_id is None:
        return "/"
    if form == "query":
        return f"/?{PHOTO_QUERY_PARAM}={state.selected_photo_id}"
    return f"{PHOTO_PATH_PREFIX}{state.selected_photo_id}"


class LastViewedPhoto:
    """Single-slot, take-once holder for the photo closed most recently."""

    def __init__(self, store: Optional[MutableMapping[str, object]] = None, key: str = LAST_VIEWED_KEY) -> None:
        self._store: MutableMapping[str, object] = store if store is not None else {}
        self._key = key

    def set(self, photo_id: int) -> None:
        self._store[self._key] = photo_id

    def peek(self) -> int | None:
        return _normalize_photo_id(self._store.get(self._key))

    def take(self) -> int | None:
        """Return the stored id and clear the slot."""
        return _normalize_photo_id(self._store.pop(self._key, None))


class Navigator:
    """State machine syncing the address, the open overlay and scroll restoration."""

    def __init__(
        self,
        address: str = "/",
        *,
        session: Optional[MutableMapping[str, object]] = None,
        photo_count: Optional[int] = None,
        validation: ValidationMode = "warn",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Create a navigator whose initial state comes from ``address``.

        Parameters
        ----------
        address
            Current address; a deep link opens its overlay immediately.
        session
            Session-scoped store for the last viewed photo.
        photo_count
            Number of photos in the gallery, used to reject unknown ids.
        validation
            Validation mode for transitions: ``"off"`` applies them as-is,
            ``"warn"`` ignores invalid ones with a warning, and ``"strict"``
            raises ``ValueError``.
        logger
            Logger for rejected transitions.
        """
        self.photo_count = photo_count
        self.validation = validation
        self.last_viewed = LastViewedPhoto(session)
        self._logger = logger or logging.getLogger(__name__)
        self._history: list[str] = []
        self._state = GRID
        # +1 moving forward, -1 moving back, 0 otherwise; drives the slide animation.
        self.direction = 0
        self.navigate(address)

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def selected_photo_id(self) -> int | None:
        return self._state.selected_photo_id

    @property
    def address(self) -> str:
        """Visible address for the current state."""
        return render_address(self._state, "path")

    @property
    def href(self) -> str:
        """Routed address for the current state."""
        return render_address(self._state, "query")

    @property
    def history(self) -> list[str]:
        return list(self._history)

    def navigate(self, address: str) -> NavigationState:
        """Apply a routing event (deep link, refresh, external change).

        The state is rebuilt from ``address`` alone. Ids outside the gallery
        fall back to the grid.
        """
        state = parse_address(address)
        if state.selected_photo_id is not None and not self._known(state.selected_photo_id):
            self._logger.warning("Address %s names unknown photo %s; showing grid", address, state.selected_photo_id)
            state = GRID
        self._state = state
        self.direction = 0
        return state

    def select(self, photo_id: int) -> NavigationState:
        """Open the overlay for ``photo_id`` with a shallow push."""
        if not self._accept(photo_id, "select"):
            return self._state
        self._history.append(self.address)
        self._state = NavigationState(photo_id)
        self.direction = 0
        return self._state

    def change_photo(self, photo_id: int) -> NavigationState:
        """Switch the open overlay to another photo, replacing the address."""
        if not self._accept(photo_id, "change_photo"):
            return self._state
        if self._state.is_grid:
            return self.select(photo_id)
        current = self._state.selected_photo_id
        self.direction = (photo_id > current) - (photo_id < current)
        self._state = NavigationState(photo_id)
        return self._state

    def close(self) -> NavigationState:
        """Close the overlay and remember the photo for scroll restoration."""
        photo_id = self._state.selected_photo_id
        if photo_id is None:
            self._logger.debug("close() with no photo open")
            return self._state
        self.last_viewed.set(photo_id)
        self._history.append(self.address)
        self._state = GRID
        self.direction = 0
        return self._state

    def back(self) -> NavigationState:
        """Return to the previous address without recording a last viewed photo."""
        if not self._history:
            return self._state
        return self.navigate(self._history.pop())

    def render(self, scroll_into_view: Callable[[int], object]) -> bool:
        """Run the post-render effect.

        When the grid is showing and a photo was closed since the last render,
        ``scroll_into_view(photo_id)`` is called once (the caller centers that
        photo's element) and the slot is cleared. Returns whether it scrolled.
        """
        if not self._state.is_grid:
            return False
        photo_id = self.last_viewed.take()
        if photo_id is None:
            return False
        scroll_into_view(photo_id)
        return True

    def _known(self, photo_id: int) -> bool:
        return self.photo_count is None or photo_id < self.photo_count

    def _accept(self, photo_id: object, action: str) -> bool:
        if self.validation == "off":
            return True
        if _normalize_photo_id(photo_id, self.photo_count) is not None and isinstance(photo_id, int):
            return True
        if self.validation == "strict":
            raise ValueError(f"Invalid photo id for {action}: {photo_id}")
        self._logger.warning("Invalid photo id for %s: %s", action, photo_id)
        return False
