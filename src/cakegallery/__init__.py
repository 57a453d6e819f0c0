"""Public package surface for the cake gallery."""

from .client import Gallery, ServiceClient
from .errors import (
    GalleryError,
    PlaceholderGenerationError,
    RecordNotFound,
    TagLookupError,
    UpstreamUnavailable,
)
from .navigation import NavigationState, Navigator, parse_address, render_address
from .page import GalleryPage
from .tools.images import apply_update

__all__ = [
    "Gallery",
    "GalleryError",
    "GalleryPage",
    "NavigationState",
    "Navigator",
    "PlaceholderGenerationError",
    "RecordNotFound",
    "ServiceClient",
    "TagLookupError",
    "UpstreamUnavailable",
    "apply_update",
    "parse_address",
    "render_address",
]
