from __future__ import annotations

import numpy as np

from sphfluid.core.params import SimParams


def apply_boundary(pos: np.ndarray, vel: np.ndarray, params: SimParams) -> None:
    """
    Reflect particles off the domain walls, in place.

    Per axis, independently:
      - pos < R             -> pos = R,          vel *= damping
      - pos > extent - R    -> pos = extent - R, vel *= damping

    damping is negative (e.g. -0.5): the normal velocity is reversed and
    attenuated. A particle sitting exactly at the margin is not touched.
    """
    r = float(params.radius)
    damping = float(params.boundary_damping)
    extent = params.extent

    for d in range(2):
        lo = pos[:, d] < r
        if np.any(lo):
            pos[lo, d] = r
            vel[lo, d] *= damping

        hi = pos[:, d] > extent[d] - r
        if np.any(hi):
            pos[hi, d] = extent[d] - r
            vel[hi, d] *= damping
