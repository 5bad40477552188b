"""Optimal assignment through an injected bipartite-matching solver."""

from __future__ import annotations

import logging
import time
from typing import Callable, Sequence

import numpy as np
from scipy.optimize import linear_sum_assignment

from pixel_remix.color_utils import compute_cost_matrix, fill_cost_rows
from pixel_remix.errors import ExactModeTooLarge, ExactModeUnavailable, SolverFailure
from pixel_remix.scheduler import ChunkScheduler

logger = logging.getLogger(__name__)

# perm[i] is the source index placed at target slot i
ExactSolver = Callable[[np.ndarray], Sequence[int]]

# share of the progress stream spent building the cost matrix
COST_MATRIX_SHARE = 0.5


def scipy_solver(cost: np.ndarray) -> np.ndarray:
    """Hungarian method via :func:`scipy.optimize.linear_sum_assignment`."""
    row_idx, col_idx = linear_sum_assignment(cost)
    perm = np.empty(len(cost), dtype=np.intp)
    perm[row_idx] = col_idx
    return perm


def check_exact_feasible(solver: ExactSolver | None, n: int, max_pixels: int) -> None:
    """Raise before any work if exact mode cannot or should not run."""
    if solver is None or not callable(solver):
        raise ExactModeUnavailable("exact mode requested but no solver is configured")
    if n > max_pixels:
        raise ExactModeTooLarge(n, max_pixels)


def validate_permutation(result, n: int) -> np.ndarray:
    """Coerce a solver result to an index array, or raise :class:`SolverFailure`."""
    try:
        perm = np.asarray(result)
    except Exception as exc:
        raise SolverFailure(f"solver returned an unusable result: {exc}") from exc

    if perm.shape != (n,):
        raise SolverFailure(f"solver returned shape {perm.shape}, expected ({n},)")
    if n == 0:
        return perm.astype(np.intp)
    if not np.issubdtype(perm.dtype, np.integer):
        raise SolverFailure(f"solver returned non-integer indices ({perm.dtype})")
    if perm.min() < 0 or perm.max() >= n:
        raise SolverFailure("solver returned out-of-range source indices")
    if np.unique(perm).size != n:
        raise SolverFailure("solver result is not a permutation (duplicate indices)")
    return perm.astype(np.intp)


def _invoke(solver: ExactSolver, cost: np.ndarray) -> np.ndarray:
    n = len(cost)
    logger.info("Running exact solver on %dx%d cost matrix …", n, n)
    t0 = time.perf_counter()
    try:
        result = solver(cost)
    except Exception as exc:
        raise SolverFailure(f"exact solver failed: {exc}") from exc
    perm = validate_permutation(result, n)
    logger.info("Assignment solved  (%.1f s)", time.perf_counter() - t0)
    return perm


def solve_exact(
    source: np.ndarray,
    target: np.ndarray,
    solver: ExactSolver | None = scipy_solver,
    max_pixels: int = 64 * 64,
    scheduler: ChunkScheduler | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Find the cost-minimising source → target permutation.

    The cost matrix is filled one target row per scheduler step so long
    builds still report progress; the solver call itself is a single step.

    Args:
        source:     (N, 4) uint8.
        target:     (N, 4) uint8 (row-major).
        solver:     Capability returning ``perm`` with ``perm[i]`` = source
                    index for target slot ``i``.
        max_pixels: Largest N attempted (cost is O(N²) memory, O(N³) time).
        scheduler:  Chunking / progress driver.

    Returns:
        ``(assignment, costs)`` - (N,) source indices and (N,) per-slot costs.
    """
    n = len(target)
    check_exact_feasible(solver, n, max_pixels)

    if scheduler is None:
        cost = compute_cost_matrix(target, source)
    else:
        logger.info("Building %dx%d cost matrix …", n, n)
        t0 = time.perf_counter()
        cost = np.empty((n, n), dtype=np.float64)
        scheduler.run(
            n,
            lambda i: fill_cost_rows(cost, target, source, i, i + 1),
            end=COST_MATRIX_SHARE,
        )
        logger.info("Cost matrix ready  (%.1f s)", time.perf_counter() - t0)

    perm = _invoke(solver, cost)
    costs = cost[np.arange(n), perm].astype(np.int64)
    if scheduler is not None:
        scheduler.report(1.0)
    return perm, costs
