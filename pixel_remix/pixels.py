"""Flat RGBA pixel buffers exchanged with the engine."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np


class Color(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255


def as_pixel_buffer(pixels) -> np.ndarray:
    """Normalise image-like input to a flat (N, 4) uint8 RGBA buffer.

    Accepts (N, 3), (N, 4), (H, W, 3) or (H, W, 4) arrays, or a sequence of
    :class:`Color` values or plain colour tuples.  Three-channel input gets an
    opaque alpha channel.  The result is always a fresh array, never a view
    of the caller's data.

    Raises:
        ValueError: unsupported shape, or channel values that are not
            integers within 0-255.
    """
    arr = np.asarray(pixels)
    if arr.size == 0:
        return np.empty((0, 4), dtype=np.uint8)
    if arr.ndim == 3:
        arr = arr.reshape(-1, arr.shape[2])
    if arr.ndim != 2 or arr.shape[1] not in (3, 4):
        raise ValueError(
            f"Unsupported pixel array shape {arr.shape}; "
            "expected (N, 3), (N, 4), (H, W, 3) or (H, W, 4)."
        )
    if arr.dtype != np.uint8:
        _check_channel_range(arr)
    if arr.shape[1] == 3:
        alpha = np.full((len(arr), 1), 255, dtype=np.uint8)
        return np.hstack([arr.astype(np.uint8), alpha])
    return arr.astype(np.uint8, copy=True)


def _check_channel_range(arr: np.ndarray) -> None:
    if not (np.issubdtype(arr.dtype, np.number) or arr.dtype == np.bool_):
        raise ValueError(f"Pixel values must be numeric, got dtype {arr.dtype}")
    if np.issubdtype(arr.dtype, np.floating) and not np.array_equal(arr, np.round(arr)):
        raise ValueError("Pixel values must be whole numbers in 0-255, not 0-1 floats")
    if arr.min() < 0 or arr.max() > 255:
        raise ValueError(
            f"Pixel values must be within 0-255, got range {arr.min()}-{arr.max()}"
        )
