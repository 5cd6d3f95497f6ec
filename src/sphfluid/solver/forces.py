from __future__ import annotations

"""
Force solver: density -> pressure -> pairwise forces -> gravity.

Every function here reads a pre-step snapshot of the particle state and
writes only into freshly allocated per-particle arrays. No particle ever sees
another particle's updated position or velocity inside the same step, so the
result does not depend on the order particles are visited.
"""

from dataclasses import dataclass

import numpy as np

from sphfluid.core.params import SimParams
from sphfluid.core.state import ParticleState
from sphfluid.neighbors.search import NeighborSearch
from sphfluid.sph.density import compute_density_summation
from sphfluid.sph.kernels import SmoothingKernels
from sphfluid.sph.pressure import pressure_force_symmetric, pressure_state_equation
from sphfluid.sph.viscosity import viscosity_force_laplacian


@dataclass(frozen=True)
class ForceField:
    """Step-local solver output, one slot per particle."""

    rho: np.ndarray    # (N,)
    p: np.ndarray      # (N,)
    force: np.ndarray  # (N, 2)


def gravity_force(rho: np.ndarray, params: SimParams) -> np.ndarray:
    """
    Gravity as a force density, (0, g) * rho_i.

    The integrator divides the net force by rho_i, so gravity alone yields an
    acceleration of exactly (0, g) regardless of the local density.
    """
    return rho[:, None] * params.gravity_vector[None, :]


def compute_forces(
    state: ParticleState,
    params: SimParams,
    kernels: SmoothingKernels,
    neighbor_search: NeighborSearch,
) -> ForceField:
    """
    Evaluate density, pressure and net force for every particle.

    `neighbor_search` must already be built on `state.pos` with a support of
    at least params.interaction_radius.
    """
    rho = compute_density_summation(state=state, neighbor_search=neighbor_search, kernels=kernels)

    p = pressure_state_equation(
        rho,
        rest_density=params.rest_density,
        stiffness=params.stiffness,
        clamp_negative=params.clamp_negative_pressure,
    )

    f = pressure_force_symmetric(state=state, rho=rho, p=p, neighbor_search=neighbor_search, kernels=kernels)
    f += viscosity_force_laplacian(
        state=state,
        rho=rho,
        neighbor_search=neighbor_search,
        kernels=kernels,
        viscosity=params.viscosity,
    )
    f += gravity_force(rho, params)

    return ForceField(rho=rho, p=p, force=f)
