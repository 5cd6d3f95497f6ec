from __future__ import annotations

"""
Error taxonomy for the fluid core.

- ConfigurationError: invalid parameters or initial layout. Raised while
  building params/state/simulation, never from a step.
- SimulationInstabilityError: a step produced NaN/Inf positions or velocities
  (usually dt too large for the stiffness constant). The step is rejected.
- StepInProgressError: a second step() was started while one is running.

Degenerate densities (rho == 0) are not errors; the affected pair terms are
skipped by the force solver.
"""

from typing import Sequence


class SimulationError(Exception):
    """Base class for all errors raised by sphfluid."""


class ConfigurationError(SimulationError, ValueError):
    """Invalid simulation parameters or particle layout."""


class SimulationInstabilityError(SimulationError, FloatingPointError):
    """Non-finite particle state detected after integration."""

    def __init__(self, step: int, indices: Sequence[int]):
        self.step = int(step)
        self.indices = [int(i) for i in indices]
        shown = self.indices[:8]
        more = "" if len(self.indices) <= 8 else f" (+{len(self.indices) - 8} more)"
        super().__init__(
            f"non-finite position/velocity at step {self.step} "
            f"for particles {shown}{more}; reduce dt or stiffness"
        )


class StepInProgressError(SimulationError, RuntimeError):
    """step() was called while another step() was still running."""
