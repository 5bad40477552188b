"""Quality → candidate window size."""

from __future__ import annotations

DEFAULT_MIN_WINDOW = 100


def candidate_window(quality: int, n: int, min_window: int = DEFAULT_MIN_WINDOW) -> int:
    """How many unused source pixels the heuristic examines per target slot.

    ``W = clamp(floor(n * quality / 100), max(1, min_window), n)``: never zero,
    never larger than the pool, non-decreasing in *quality*, and equal to *n*
    at ``quality == 100``.  An empty pool yields 0.
    """
    if not 0 <= quality <= 100:
        raise ValueError(f"quality must be within 0-100, got {quality}")
    if n <= 0:
        return 0
    window = n * quality // 100
    return min(max(window, max(1, min_window)), n)
