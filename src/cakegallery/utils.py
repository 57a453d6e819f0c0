"""Shared helpers for the gallery package."""

from __future__ import annotations

from typing import Hashable, Iterable, TypeVar
from urllib.parse import quote

T = TypeVar("T", bound=Hashable)


def unique_in_order(values: Iterable[T]) -> list[T]:
    """Return unique values preserving the original order."""
    seen: set[T] = set()
    output: list[T] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        output.append(value)
    return output


def quote_segment(value: str) -> str:
    """Quote a public id for use as a single URL path segment.

    Public ids carry their folder (``"cakes/2022/raspberry"``), so slashes are
    escaped as well.
    """
    return quote(value, safe="")
