"""Exceptions raised by the remix engine.

Every error is terminal for the run that raised it: no retries, no partial
output.  Invalid options (unknown mode, quality out of range) are plain
``ValueError``s and are not part of this hierarchy.
"""

from __future__ import annotations


class RemixError(Exception):
    """Base class for all engine errors."""


class SizeMismatch(RemixError):
    """Source and target buffers hold a different number of pixels."""

    def __init__(self, source_len: int, target_len: int) -> None:
        self.source_len = source_len
        self.target_len = target_len
        super().__init__(
            f"source has {source_len} pixels but target has {target_len}"
        )


class ExactModeUnavailable(RemixError):
    """Exact mode requested without a usable solver capability."""


class ExactModeTooLarge(RemixError):
    """Exact mode requested for more pixels than the configured ceiling."""

    def __init__(self, n: int, ceiling: int) -> None:
        self.n = n
        self.ceiling = ceiling
        super().__init__(
            f"exact mode is limited to {ceiling} pixels, got {n} "
            "(use a smaller grid or heuristic mode)"
        )


class SolverFailure(RemixError):
    """The exact solver raised or returned something other than a permutation."""


class AlreadyRunning(RemixError):
    """A run was requested while another run is still active."""
