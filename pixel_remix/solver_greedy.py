"""Greedy windowed assignment (the heuristic solver)."""

from __future__ import annotations

import logging
import time

import numpy as np

from pixel_remix.color_utils import batch_color_distance
from pixel_remix.scheduler import ChunkScheduler

logger = logging.getLogger(__name__)

UNASSIGNED = -1


class GreedyAssigner:
    """Working set of one greedy run.

    Target slots are filled in index order.  For each slot the first
    ``window`` unused source pixels (in index order) are examined and the
    closest one wins; ties go to the lowest source index.

    Attributes:
        used:       (N,) bool - source pixels already placed.
        assignment: (N,) int - source index per target slot, ``-1`` while
                    unfilled or when the slot fell back to its own colour.
        costs:      (N,) int64 - squared RGB distance paid per slot.
    """

    def __init__(self, source: np.ndarray, target: np.ndarray, window: int) -> None:
        n = len(source)
        self.window = max(1, window)
        self._source = source
        self._target = target
        self.used = np.zeros(n, dtype=bool)
        self.assignment = np.full(n, UNASSIGNED, dtype=np.intp)
        self.costs = np.zeros(n, dtype=np.int64)
        self.fallbacks = 0
        # every source index below the cursor is used
        self._cursor = 0

    def assign_slot(self, i: int) -> None:
        base = self._cursor
        free = np.flatnonzero(~self.used[base:])
        if free.size == 0:
            self._fallback(i)
            return

        self._cursor = base + int(free[0])
        candidates = free[: self.window] + base
        dist = batch_color_distance(self._target[i], self._source[candidates])
        k = int(np.argmin(dist))
        self._take(i, int(candidates[k]), int(dist[k]))

    def _take(self, i: int, src: int, cost: int) -> None:
        self.assignment[i] = src
        self.costs[i] = cost
        self.used[src] = True

    def _fallback(self, i: int) -> None:
        free = np.flatnonzero(~self.used)
        if free.size:
            src = int(free[0])
            dist = batch_color_distance(self._target[i], self._source[src : src + 1])
            self._take(i, src, int(dist[0]))
            return

        # pool exhausted: the slot keeps its own colour, no source is reused
        self.fallbacks += 1
        logger.warning("Source pool exhausted at target slot %d", i)

    def compose(self) -> np.ndarray:
        """Build the (N, 4) output buffer from the current assignment."""
        out = self._target.copy()
        placed = self.assignment != UNASSIGNED
        out[placed] = self._source[self.assignment[placed]]
        return out


def solve_greedy(
    source: np.ndarray,
    target: np.ndarray,
    window: int,
    scheduler: ChunkScheduler | None = None,
) -> GreedyAssigner:
    """Run the greedy heuristic over every target slot.

    Args:
        source:    (N, 4) uint8 - pixels to draw from.
        target:    (N, 4) uint8 - slots to fill, row-major.
        window:    Unused candidates examined per slot (see
                   :func:`pixel_remix.window.candidate_window`).
        scheduler: Chunking / progress driver; a silent one is used if omitted.

    Returns:
        The finished :class:`GreedyAssigner` (assignment, costs, used flags).
    """
    n = len(target)
    scheduler = scheduler or ChunkScheduler()
    assigner = GreedyAssigner(source, target, window)

    logger.info("Greedy assignment: %d slots, window=%d", n, window)
    t0 = time.perf_counter()
    scheduler.run(n, assigner.assign_slot)
    logger.info(
        "Greedy done  | cost=%d  (%.1f s)",
        int(assigner.costs.sum()), time.perf_counter() - t0,
    )
    return assigner
