from __future__ import annotations

import numpy as np

from sphfluid.core.state import ParticleState
from sphfluid.neighbors.search import NeighborSearch
from sphfluid.sph.kernels import SmoothingKernels


def compute_density_summation(
    state: ParticleState,
    neighbor_search: NeighborSearch,
    kernels: SmoothingKernels,
) -> np.ndarray:
    """
    Density reconstruction via SPH summation:

        rho_i = sum_j m_j W(|x_j - x_i|)

    The sum runs over all j within the smoothing length H, including i itself
    (r = 0 < H, so the self term m_i W(0) is always positive). Density is
    rebuilt from positions every step; nothing is carried over.

    Reads `state` only; returns a new (N,) array.
    """
    n = state.n
    rho = np.zeros((n,), dtype=np.float64)

    w0 = kernels.self_density_weight
    pos = state.pos

    for i in range(n):
        rho_i = state.mass[i] * w0

        nbrs = neighbor_search.query(i, pos, radius=kernels.h)
        if nbrs:
            d = pos[nbrs] - pos[i]
            r2 = d[:, 0] * d[:, 0] + d[:, 1] * d[:, 1]
            rho_i += float(np.sum(state.mass[nbrs] * kernels.density_weight(r2)))

        rho[i] = rho_i

    return rho
