"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

MODES = ("heuristic", "exact")


@dataclass(frozen=True)
class RemixConfig:
    """All tuneable parameters for a remix run.

    Attributes:
        grid_size:      Longest side of the working grid (aspect ratio preserved).
        quality:        0-100 speed / fidelity trade-off for the heuristic.
        mode:           "heuristic" (greedy) or "exact" (optimal matching).
        min_window:     Smallest candidate window, regardless of quality.
        chunk_size:     Target slots processed between progress reports.
        exact_max_pixels: Largest pixel count exact mode will attempt.
        exact_fallback_to_greedy: Run the heuristic instead of failing when
                        exact mode is unavailable or too large.
        pixel_upscale:  Each logical pixel becomes n x n in the output image.
        output_format:  Image format for saved files.
        save_comparison: Generate a side-by-side comparison grid.
        input_dir:      Folder to scan for source images (batch mode).
        output_dir:     Folder for results.
    """

    # Grid
    grid_size: int = 64

    # Engine
    quality: int = 50
    mode: str = "heuristic"  # "heuristic" | "exact"
    min_window: int = 100
    chunk_size: int = 256
    exact_max_pixels: int = 64 * 64
    exact_fallback_to_greedy: bool = False

    # Output
    pixel_upscale: int = 8
    output_format: str = "png"
    save_comparison: bool = True

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif"}
    )
