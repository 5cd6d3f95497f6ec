from __future__ import annotations

"""
Observability: per-step diagnostics ("vital signs") for a fluid run.

What this module does:
- Defines a structured `StepDiagnostics` snapshot for one simulation step.
- Computes statistics for velocity, density, pressure, neighbor counts and
  kinetic energy.

Constraints:
- Strictly read-only: it never modifies the particle state.
- It implements no SPH equations; it reports rho/p already produced by the
  force solver, and counts neighbors within the smoothing length.
"""

from dataclasses import dataclass

import numpy as np

from sphfluid.core.state import ParticleState
from sphfluid.neighbors.search import NeighborSearch


@dataclass(frozen=True)
class StepDiagnostics:
    step: int
    dt: float
    n: int

    v_max: float
    kinetic_energy: float

    rho_min: float
    rho_mean: float
    rho_max: float
    rho_rel_err_mean: float

    p_min: float
    p_mean: float
    p_max: float

    neigh_min: int
    neigh_mean: float
    neigh_max: int

    def format_line(self) -> str:
        return (
            f"[STEP {self.step:04d}] dt={self.dt:.3e} "
            f"|v|max={self.v_max:.3e} "
            f"E_kin={self.kinetic_energy:.3e} "
            f"rho(min/avg/max)={self.rho_min:.2f}/{self.rho_mean:.2f}/{self.rho_max:.2f} "
            f"err% (avg)={100.0 * self.rho_rel_err_mean:.2f} "
            f"p(min/avg/max)={self.p_min:.2f}/{self.p_mean:.2f}/{self.p_max:.2f} "
            f"neigh(min/avg/max)={self.neigh_min}/{self.neigh_mean:.1f}/{self.neigh_max}"
        )


def compute_step_diagnostics(
    step: int,
    dt: float,
    state: ParticleState,
    rest_density: float,
    neighbor_search: NeighborSearch,
    radius: float | None = None,
) -> StepDiagnostics:
    """
    Compute diagnostics for a given step without mutating the simulation state.

    Args:
        step: 1-based step index for logging.
        dt: time step used in this step.
        state: particle state after the step (rho/p from that step's solve).
        rest_density: reference density, for the relative error.
        neighbor_search: search built on the current positions.
        radius: neighbor-count radius (defaults to the search's cutoff).
    """
    rest_density = float(rest_density)
    n = state.n

    if n == 0:
        return StepDiagnostics(
            step=int(step), dt=float(dt), n=0,
            v_max=0.0, kinetic_energy=0.0,
            rho_min=0.0, rho_mean=0.0, rho_max=0.0, rho_rel_err_mean=0.0,
            p_min=0.0, p_mean=0.0, p_max=0.0,
            neigh_min=0, neigh_mean=0.0, neigh_max=0,
        )

    speed2 = np.sum(state.vel * state.vel, axis=1)
    v_max = float(np.sqrt(np.max(speed2)))
    kinetic_energy = float(0.5 * np.sum(state.mass * speed2))

    rho = state.rho
    if rest_density > 0.0:
        rho_rel_err_mean = float(np.mean((rho - rest_density) / rest_density))
    else:
        rho_rel_err_mean = 0.0

    neigh_counts = np.array(
        [len(neighbor_search.query(i, state.pos, radius=radius)) for i in range(n)],
        dtype=np.int64,
    )

    return StepDiagnostics(
        step=int(step),
        dt=float(dt),
        n=n,
        v_max=v_max,
        kinetic_energy=kinetic_energy,
        rho_min=float(np.min(rho)),
        rho_mean=float(np.mean(rho)),
        rho_max=float(np.max(rho)),
        rho_rel_err_mean=rho_rel_err_mean,
        p_min=float(np.min(state.p)),
        p_mean=float(np.mean(state.p)),
        p_max=float(np.max(state.p)),
        neigh_min=int(np.min(neigh_counts)),
        neigh_mean=float(np.mean(neigh_counts)),
        neigh_max=int(np.max(neigh_counts)),
    )
