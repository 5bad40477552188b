"""Chunked, cooperative execution of per-slot work with progress reporting."""

from __future__ import annotations

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 256

ProgressCallback = Callable[[float], None]


def _yield_to_host() -> None:
    time.sleep(0)


class ChunkScheduler:
    """Drive ``step(i)`` for ``i`` in ``0..total-1`` in fixed-size chunks.

    After each chunk the completion fraction is reported and ``pause()`` is
    called so the host can do other work.  Suspension never happens in the
    middle of a step, and the next chunk resumes at the following index.

    Reported fractions are clamped to ``[0, 1]`` and never decrease, so a
    run made of several phases (see *start* / *end* on :meth:`run`) still
    produces a single monotone progress stream.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        on_progress: ProgressCallback | None = None,
        pause: Callable[[], None] | None = None,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        self._on_progress = on_progress
        self._pause = pause or _yield_to_host
        self._last = 0.0

    @property
    def last_reported(self) -> float:
        return self._last

    def reset(self) -> None:
        self._last = 0.0

    def report(self, fraction: float) -> None:
        fraction = min(1.0, max(self._last, fraction))
        self._last = fraction
        if self._on_progress is not None:
            self._on_progress(fraction)

    def run(
        self,
        total: int,
        step: Callable[[int], None],
        *,
        start: float = 0.0,
        end: float = 1.0,
    ) -> None:
        """Run *total* steps, mapping their progress onto ``[start, end]``."""
        if total <= 0:
            self.report(end)
            return

        span = end - start
        done = 0
        while done < total:
            stop = min(done + self.chunk_size, total)
            for i in range(done, stop):
                step(i)
            done = stop
            self.report(start + span * done / total)
            if done < total:
                logger.debug("Chunk done (%d/%d), yielding", done, total)
                self._pause()
