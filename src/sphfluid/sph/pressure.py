from __future__ import annotations

import numpy as np

from sphfluid.core.state import ParticleState
from sphfluid.neighbors.search import NeighborSearch
from sphfluid.sph.kernels import SmoothingKernels


def pressure_state_equation(
    rho: np.ndarray,
    rest_density: float,
    stiffness: float,
    clamp_negative: bool = True,
) -> np.ndarray:
    """
    Linear equation of state:

        p_i = k (rho_i - rho0)

    With clamp_negative, p_i = k max(rho_i - rho0, 0): under-dense regions
    (free surface, isolated particles) get zero pressure instead of a
    tension that pulls particles together.
    """
    p = float(stiffness) * (np.asarray(rho, dtype=np.float64) - float(rest_density))
    if clamp_negative:
        p = np.maximum(p, 0.0)
    return p


def pressure_force_symmetric(
    state: ParticleState,
    rho: np.ndarray,
    p: np.ndarray,
    neighbor_search: NeighborSearch,
    kernels: SmoothingKernels,
) -> np.ndarray:
    """
    Symmetric pressure force (force density) per particle:

        f_i = sum_j m_i (p_i + p_j) / (2 rho_j) |grad W(r_ij)| (x_i - x_j) / r_ij

    over j != i with r_ij < force radius. The direction (x_i - x_j)/r_ij
    points from the neighbor to the particle, so positive pressures repel.

    Pairs whose neighbor density rho_j is zero are skipped, as are exactly
    coincident pairs (no defined direction).
    """
    n = state.n
    f = np.zeros((n, 2), dtype=np.float64)
    pos = state.pos

    for i in range(n):
        acc = np.zeros((2,), dtype=np.float64)

        for j in neighbor_search.query(i, pos, radius=kernels.h_force):
            rhoj = rho[j]
            if rhoj == 0.0:
                continue

            xij = pos[i] - pos[j]
            r = float(np.sqrt(xij[0] * xij[0] + xij[1] * xij[1]))
            if r == 0.0:
                continue

            coeff = state.mass[i] * (p[i] + p[j]) / (2.0 * rhoj) * kernels.spiky_gradient(r)
            acc += coeff * (xij / r)

        f[i] = acc

    return f
