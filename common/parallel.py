"""Fixed-size worker pool for chunked data-parallel maps.

A ``ChunkedMap`` splits ``[0, total)`` into contiguous, disjoint ranges and
runs ``fn(start, stop)`` for each range on its own pool thread. Callers are
expected to write results into disjoint slices of a preallocated buffer, so
no locking is involved. The pool is created lazily and reused across calls
until ``close()``.
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Tuple

_LOG = logging.getLogger(__name__)

RangeFn = Callable[[int, int], None]


def default_workers() -> int:
    """Number of available hardware execution units, at least 1."""
    return max(1, os.cpu_count() or 1)


def partition_range(total: int, parts: int) -> List[Tuple[int, int]]:
    """Split ``[0, total)`` into ``parts`` contiguous ranges.

    Every range has ``total // parts`` items except the last one, which also
    takes the remainder. Empty ranges are returned when ``parts > total`` so
    the number of ranges always equals ``parts``.
    """
    if parts < 1:
        raise ValueError(f"parts must be >= 1 (got {parts})")
    if total < 0:
        raise ValueError(f"total must be >= 0 (got {total})")
    step = total // parts
    out: List[Tuple[int, int]] = []
    for i in range(parts):
        start = i * step
        stop = total if i == parts - 1 else start + step
        out.append((start, stop))
    return out


class ChunkedMap:
    def __init__(self, workers: Optional[int] = None) -> None:
        self.workers = max(1, int(workers)) if workers else default_workers()
        self._pool: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    def __enter__(self) -> ChunkedMap:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self.workers, thread_name_prefix="chunked-map"
                )
            return self._pool

    def run(self, total: int, fn: RangeFn) -> None:
        """Run ``fn`` over ``[0, total)`` in ``self.workers`` chunks and block until done.

        All chunks are joined before returning. If any chunk raised, the first
        exception (in chunk order) is re-raised.
        """
        ranges = partition_range(total, self.workers)
        if self.workers == 1:
            start, stop = ranges[0]
            fn(start, stop)
            return

        pool = self._executor()
        futures: List[Future] = [pool.submit(fn, start, stop) for start, stop in ranges]
        wait(futures)
        for fut in futures:
            exc = fut.exception()
            if exc is not None:
                raise exc
        _LOG.debug("chunked map finished: total=%d chunks=%d", total, len(ranges))

    def close(self) -> None:
        with self._lock:
            if self._pool is not None:
                self._pool.shutdown(wait=True)
                self._pool = None
