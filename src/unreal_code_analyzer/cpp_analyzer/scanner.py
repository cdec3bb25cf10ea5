"""
File enumeration and batched concurrent processing.

Batches run one after another; the files of one batch are processed
concurrently with asyncio.gather. The first failure inside a batch propagates
and aborts the whole scan (fail-fast), discarding the batch's other results.
Sibling workers of the failed batch are not cancelled: they run to
completion in the background and may still populate the analyzer caches.
"""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Iterator, Sequence, TypeVar

from ..errors import BatchIOError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

HEADER_PATTERN = "**/*.h"
SOURCE_PATTERN = "**/*.{h,cpp}"


def expand_braces(pattern: str) -> list[str]:
    """
    Expand a single `{a,b,...}` group in a glob pattern.

    `**/*.{h,cpp}` -> [`**/*.h`, `**/*.cpp`]. Patterns without braces are
    returned unchanged.
    """
    start = pattern.find("{")
    end = pattern.find("}", start + 1)
    if start < 0 or end < 0:
        return [pattern]
    prefix, body, suffix = pattern[:start], pattern[start + 1 : end], pattern[end + 1 :]
    return [f"{prefix}{alt.strip()}{suffix}" for alt in body.split(",") if alt.strip()]


def enumerate_files(root: str | Path, pattern: str) -> list[str]:
    """
    Enumerate regular files under `root` matching a glob pattern.

    Returns:
        Sorted, de-duplicated absolute paths. A missing root yields an empty list.
    """
    base = Path(root)
    if not base.is_dir():
        return []

    found: set[str] = set()
    for expanded in expand_braces(pattern):
        for path in base.glob(expanded):
            if path.is_file():
                found.add(str(path.resolve()))
    return sorted(found)


def iter_batches(items: Sequence[T], batch_size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive fixed-size slices of `items`."""
    if batch_size <= 0:
        raise ValueError(f"Batch size must be positive, got {batch_size}")
    for i in range(0, len(items), batch_size):
        yield items[i : i + batch_size]


async def run_in_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    batch_size: int,
    *,
    stop_when: Callable[[list[R]], bool] | None = None,
) -> list[R]:
    """
    Process items in sequential batches of concurrent workers.

    Args:
        items: Items to process (usually file paths)
        worker: Coroutine function applied to each item
        batch_size: Number of items processed concurrently
        stop_when: Optional predicate over the results collected so far;
            checked after each batch, a true value skips the remaining batches

    Returns:
        Worker results in item order.

    Raises:
        Whatever the first failing worker raised in the failing batch.
    """
    results: list[R] = []
    for index, batch in enumerate(iter_batches(items, batch_size)):
        batch_results = await asyncio.gather(*(worker(item) for item in batch))
        results.extend(batch_results)
        logger.debug("Batch %d done (%d items, %d total)", index, len(batch), len(results))
        if stop_when is not None and stop_when(results):
            break
    return results


async def read_source(file_path: str) -> str:
    """
    Read a source file off the event loop thread.

    Raises:
        BatchIOError: If the file cannot be read
    """
    try:
        return await asyncio.to_thread(
            Path(file_path).read_text, encoding="utf-8", errors="ignore"
        )
    except OSError as e:
        raise BatchIOError(file_path, str(e)) from e
