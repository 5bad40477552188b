"""Colour distance, cost-matrix computation and error diagnostics."""

from __future__ import annotations

import numpy as np
from skimage.color import deltaE_cie76, rgb2lab


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert flat (N, 3+) uint8 RGB(A) → (N, 3) float64 CIELAB."""
    rgb = np.asarray(rgb)[:, :3]
    return rgb2lab(rgb.astype(np.float64).reshape(1, -1, 3) / 255.0).reshape(-1, 3)


def color_distance(a, b) -> int:
    """Squared Euclidean distance over (r, g, b); alpha is ignored."""
    dr = int(a[0]) - int(b[0])
    dg = int(a[1]) - int(b[1])
    db = int(a[2]) - int(b[2])
    return dr * dr + dg * dg + db * db


def batch_color_distance(color: np.ndarray, pool: np.ndarray) -> np.ndarray:
    """Squared RGB distance from one colour to every row of *pool*.

    Args:
        color: (3+,) colour, alpha ignored.
        pool:  (M, 3+) colours, alpha ignored.

    Returns:
        (M,) int64 distances.
    """
    diff = pool[:, :3].astype(np.int64) - np.asarray(color[:3], dtype=np.int64)
    return np.einsum("ij,ij->i", diff, diff)


def compute_cost_matrix(
    target: np.ndarray,
    source: np.ndarray,
    chunk_size: int = 512,
) -> np.ndarray:
    """Pairwise squared RGB distance, ``cost[i, j] = d(target[i], source[j])``.

    Args:
        target: (N, 3+) uint8.
        source: (N, 3+) uint8.
        chunk_size: Rows computed per batch (controls peak RAM).

    Returns:
        (N, N) float64 cost matrix.
    """
    cost = np.empty((len(target), len(source)), dtype=np.float64)
    for i in range(0, len(target), chunk_size):
        fill_cost_rows(cost, target, source, i, min(i + chunk_size, len(target)))
    return cost


def fill_cost_rows(
    cost: np.ndarray,
    target: np.ndarray,
    source: np.ndarray,
    start: int,
    stop: int,
) -> None:
    """Fill ``cost[start:stop]`` in place."""
    t = target[start:stop, :3].astype(np.float64)
    s = source[:, :3].astype(np.float64)
    diff = t[:, np.newaxis, :] - s[np.newaxis, :, :]
    cost[start:stop] = np.sum(diff ** 2, axis=2)


def mean_error(target: np.ndarray, result: np.ndarray) -> float:
    """Mean Euclidean RGB distance between two images, in 0-255 units."""
    t = np.asarray(target)[..., :3].reshape(-1, 3).astype(np.float64)
    m = np.asarray(result)[..., :3].reshape(-1, 3).astype(np.float64)
    if len(t) == 0:
        return 0.0
    return float(np.mean(np.sqrt(np.sum((t - m) ** 2, axis=1))))


def perceptual_error(target: np.ndarray, result: np.ndarray) -> float:
    """Mean CIE76 ΔE between two images (CIELAB units)."""
    t = np.asarray(target)[..., :3].reshape(-1, 3)
    m = np.asarray(result)[..., :3].reshape(-1, 3)
    if len(t) == 0:
        return 0.0
    return float(np.mean(deltaE_cie76(rgb_to_lab(t), rgb_to_lab(m))))
