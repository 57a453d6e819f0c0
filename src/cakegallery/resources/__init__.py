"""Resource module exports."""

from .cakes import Cakes
from .media import Media
from .placeholders import Placeholders

__all__ = [
    "Cakes",
    "Media",
    "Placeholders",
]
