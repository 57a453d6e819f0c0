"""Gallery assembly: search results, blur placeholders and tags in one list."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Literal, Optional

from tqdm import tqdm

from .errors import PlaceholderGenerationError, TagLookupError
from .resources.cakes import Cakes
from .resources.cakes_types import Tag, _to_tags
from .resources.media import Media
from .resources.media_types import ImageRecord, MediaResource, _to_record
from .resources.placeholders import Placeholders

_logger = logging.getLogger(__name__)

TaskKind = Literal["placeholder", "tags"]


def resolve_placeholder(
    placeholders: Placeholders,
    resource: MediaResource,
    *,
    timeout: Optional[int] = None,
) -> str | None:
    """Blur data URL for one image, or None if it could not be generated."""
    try:
        return placeholders.generate(resource, timeout=timeout)
    except PlaceholderGenerationError as exc:
        _logger.warning("Placeholder unavailable, rendering without blur: %s", exc)
        return None


def resolve_tags(cakes: Cakes, public_id: str, *, timeout: Optional[int] = None) -> list[Tag]:
    """Tags for one image; empty when none are stored or the lookup failed.

    ``UpstreamUnavailable`` is not caught: an unreachable store fails the build.
    """
    try:
        cake = cakes.get_by_photo(public_id, timeout=timeout)
    except TagLookupError as exc:
        _logger.warning("Tag lookup failed, showing no tags: %s", exc)
        return []
    if cake is None:
        return []
    return _to_tags(cake["tags"])


def assemble(
    media: Media,
    cakes: Cakes,
    placeholders: Placeholders,
    *,
    folder: str,
    max_results: int = 400,
    max_workers: int = 8,
    timeout: Optional[int] = None,
) -> list[ImageRecord]:
    """Build the ordered gallery for ``folder``.

    Parameters
    ----------
    media
        Search resource for the media host.
    cakes
        Tag storage resource.
    placeholders
        Blur placeholder generator.
    folder
        Media host folder holding the gallery.
    max_results
        Upper bound on the number of images.
    max_workers
        Threads used for per-image lookups; ``0`` runs them sequentially.
    timeout
        Request timeout in seconds for every call.

    Returns
    -------
    list[ImageRecord]
        One record per search result, ids ``0..N-1`` in search order
        (``public_id`` descending), each with ``blurDataUrl`` and ``tags`` set.

    Raises
    ------
    UpstreamUnavailable
        If the media search or the tag store cannot be reached.
    """
    resources = media.search(
        folder,
        sort_by="public_id",
        direction="desc",
        max_results=max_results,
        timeout=timeout,
    )
    records = [_to_record(index, resource) for index, resource in enumerate(resources)]
    if not records:
        _logger.info("No images found in folder %r", folder)
        return []

    # One slot per record and task kind; each task writes only its own slot.
    blur_slots: list[str | None] = [None] * len(records)
    tag_slots: list[list[Tag]] = [[] for _ in records]

    def run(index: int, kind: TaskKind) -> None:
        if kind == "placeholder":
            blur_slots[index] = resolve_placeholder(placeholders, resources[index], timeout=timeout)
        else:
            tag_slots[index] = resolve_tags(cakes, records[index]["public_id"], timeout=timeout)

    tasks: list[tuple[int, TaskKind]] = [
        (index, kind) for index in range(len(records)) for kind in ("placeholder", "tags")
    ]
    _run_tasks(run, tasks, max_workers=max_workers)

    assembled: list[ImageRecord] = [
        {**record, "blurDataUrl": blur_slots[index], "tags": tag_slots[index]}
        for index, record in enumerate(records)
    ]
    missing = sum(1 for slot in blur_slots if slot is None)
    _logger.info(
        "Assembled %s images from %r (%s without placeholder)",
        len(assembled),
        folder,
        missing,
    )
    return assembled


def _run_tasks(
    run: Callable[[int, TaskKind], None],
    tasks: list[tuple[int, TaskKind]],
    *,
    max_workers: int,
) -> None:
    """Run every task, returning only after all of them have settled."""
    if max_workers == 0:
        for index, kind in tqdm(tasks, desc="Assembling gallery", unit=" lookups"):
            run(index, kind)
        return

    executor = ThreadPoolExecutor(max_workers=max_workers)
    try:
        futures: dict[Future[None], tuple[int, TaskKind]] = {
            executor.submit(run, index, kind): (index, kind) for index, kind in tasks
        }
        with tqdm(total=len(futures), desc="Assembling gallery (parallel)", unit=" lookups") as pbar:
            for future in as_completed(futures):
                try:
                    future.result()
                except Exception:
                    index, kind = futures[future]
                    _logger.error("Gallery assembly aborted by %s lookup for image %s", kind, index)
                    executor.shutdown(wait=True, cancel_futures=True)
                    raise
                finally:
                    pbar.update(1)
    finally:
        executor.shutdown(wait=True)
