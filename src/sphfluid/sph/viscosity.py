from __future__ import annotations

import numpy as np

from sphfluid.core.state import ParticleState
from sphfluid.neighbors.search import NeighborSearch
from sphfluid.sph.kernels import SmoothingKernels


def viscosity_force_laplacian(
    state: ParticleState,
    rho: np.ndarray,
    neighbor_search: NeighborSearch,
    kernels: SmoothingKernels,
    viscosity: float,
) -> np.ndarray:
    """
    Viscosity force from the Laplacian kernel:

        f_i = mu sum_j m_i (v_j - v_i) / rho_j  lap W(r_ij)

    Diffuses relative velocity between neighbors (both components use the
    matching axis of v_j - v_i). Pairs with rho_j == 0 are skipped.
    """
    n = state.n
    f = np.zeros((n, 2), dtype=np.float64)
    mu = float(viscosity)
    if mu == 0.0:
        return f

    pos = state.pos
    vel = state.vel

    for i in range(n):
        acc = np.zeros((2,), dtype=np.float64)

        for j in neighbor_search.query(i, pos, radius=kernels.h_force):
            rhoj = rho[j]
            if rhoj == 0.0:
                continue

            xij = pos[i] - pos[j]
            r = float(np.sqrt(xij[0] * xij[0] + xij[1] * xij[1]))

            acc += mu * state.mass[i] * (vel[j] - vel[i]) / rhoj * kernels.viscosity_laplacian(r)

        f[i] = acc

    return f
