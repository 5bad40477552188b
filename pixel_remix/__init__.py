"""
Pixel Remix
===========

Rearrange every pixel of a source image so that, seen from a distance,
they reproduce a target image. Only positions change; every output colour
is an actual source pixel. Ships two strategies:

- **Heuristic** (greedy, quality-tuneable candidate window)
- **Exact** (optimal matching through an injected solver, SciPy by default)
"""

__version__ = "1.0.0"

from pixel_remix.config import RemixConfig
from pixel_remix.engine import RemixEngine, RemixResult
from pixel_remix.errors import (
    AlreadyRunning,
    ExactModeTooLarge,
    ExactModeUnavailable,
    RemixError,
    SizeMismatch,
    SolverFailure,
)
from pixel_remix.image_io import (
    compute_target_size,
    load_and_resize,
    load_pair,
    make_comparison_grid,
    save_upscaled,
)
from pixel_remix.pixels import Color, as_pixel_buffer
from pixel_remix.scheduler import ChunkScheduler
from pixel_remix.solver_exact import scipy_solver, solve_exact
from pixel_remix.solver_greedy import solve_greedy
from pixel_remix.window import candidate_window

__all__ = [
    "AlreadyRunning",
    "ChunkScheduler",
    "Color",
    "ExactModeTooLarge",
    "ExactModeUnavailable",
    "RemixConfig",
    "RemixEngine",
    "RemixError",
    "RemixResult",
    "SizeMismatch",
    "SolverFailure",
    "as_pixel_buffer",
    "candidate_window",
    "compute_target_size",
    "load_and_resize",
    "load_pair",
    "make_comparison_grid",
    "save_upscaled",
    "scipy_solver",
    "solve_exact",
    "solve_greedy",
]
