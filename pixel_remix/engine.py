"""Run context tying buffers, policy, solvers and progress together."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

import numpy as np

from pixel_remix.config import MODES, RemixConfig
from pixel_remix.errors import (
    AlreadyRunning,
    ExactModeTooLarge,
    ExactModeUnavailable,
    SizeMismatch,
)
from pixel_remix.pixels import as_pixel_buffer
from pixel_remix.scheduler import ChunkScheduler, ProgressCallback
from pixel_remix.solver_exact import ExactSolver, check_exact_feasible, scipy_solver, solve_exact
from pixel_remix.solver_greedy import solve_greedy
from pixel_remix.window import candidate_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemixResult:
    """Outcome of one run.

    Attributes:
        pixels:     (N, 4) uint8 - output buffer in target scan order.
        assignment: (N,) int - source index per target slot (-1 = own colour).
        costs:      (N,) int64 - squared RGB distance per slot.
        mode:       Algorithm that actually ran.
        window:     Candidate window used (0 for exact mode).
        elapsed:    Wall time in seconds.
    """

    pixels: np.ndarray
    assignment: np.ndarray
    costs: np.ndarray
    mode: str
    window: int
    elapsed: float

    @property
    def total_cost(self) -> int:
        return int(self.costs.sum())


class RemixEngine:
    """Owns the "one run at a time" rule; holds no state between runs.

    Args:
        config:      Defaults for quality, mode and the engine tunables.
        solver:      Exact-matching capability (``None`` disables exact mode).
        on_progress: Receives non-decreasing fractions ending at 1.0.
        pause:       Called between chunks to hand control back to the host.
    """

    def __init__(
        self,
        config: RemixConfig | None = None,
        solver: ExactSolver | None = scipy_solver,
        on_progress: ProgressCallback | None = None,
        pause: Callable[[], None] | None = None,
    ) -> None:
        self.config = config or RemixConfig()
        self.solver = solver
        self._on_progress = on_progress
        self._pause = pause
        self._active = False

    @property
    def running(self) -> bool:
        return self._active

    def run(
        self,
        source,
        target,
        quality: int | None = None,
        mode: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> RemixResult:
        """Rearrange *source* pixels to reproduce *target*.

        Raises:
            AlreadyRunning: another run on this engine has not finished.
            SizeMismatch:   the buffers differ in length.
            ExactModeUnavailable, ExactModeTooLarge, SolverFailure: exact mode.
            ValueError:     unknown mode, quality outside 0-100, bad shape.
        """
        if self._active:
            raise AlreadyRunning("a remix run is already in progress")

        self._active = True
        try:
            return self._run(source, target, quality, mode, on_progress)
        finally:
            self._active = False

    def _run(self, source, target, quality, mode, on_progress) -> RemixResult:
        cfg = self.config
        quality = cfg.quality if quality is None else quality
        mode = cfg.mode if mode is None else mode
        if mode not in MODES:
            raise ValueError(f"Unknown mode '{mode}'. Expected one of {MODES}.")

        src = as_pixel_buffer(source)
        tgt = as_pixel_buffer(target)
        if len(src) != len(tgt):
            raise SizeMismatch(len(src), len(tgt))

        n = len(tgt)
        window = candidate_window(quality, n, cfg.min_window)
        scheduler = ChunkScheduler(
            cfg.chunk_size, on_progress or self._on_progress, self._pause,
        )
        t0 = time.perf_counter()

        if n == 0:
            scheduler.report(1.0)
            empty = np.empty(0, dtype=np.intp)
            return RemixResult(tgt, empty, np.empty(0, dtype=np.int64), mode, 0, 0.0)

        if mode == "exact":
            try:
                check_exact_feasible(self.solver, n, cfg.exact_max_pixels)
            except (ExactModeUnavailable, ExactModeTooLarge) as exc:
                if not cfg.exact_fallback_to_greedy:
                    raise
                logger.warning("%s; falling back to heuristic mode", exc)
                mode = "heuristic"

        if mode == "exact":
            assignment, costs = solve_exact(
                src, tgt, self.solver, cfg.exact_max_pixels, scheduler,
            )
            pixels = src[assignment]
            window = 0
        else:
            assigner = solve_greedy(src, tgt, window, scheduler)
            assignment, costs = assigner.assignment, assigner.costs
            pixels = assigner.compose()

        elapsed = time.perf_counter() - t0
        logger.info(
            "Remix done  | mode=%s  N=%d  cost=%d  (%.1f s)",
            mode, n, int(costs.sum()), elapsed,
        )
        return RemixResult(pixels, assignment, costs, mode, window, elapsed)
