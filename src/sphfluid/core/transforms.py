from __future__ import annotations

"""
Per-particle rendering transforms.

The renderer draws one instanced quad per particle. For each particle we hand
it a translation in normalized device coordinates ([-1, 1] on both axes), an
identity orientation and a scale equal to the particle radius in the same
coordinates. This module is a pure projection of ParticleState; it knows
nothing about the graphics pipeline beyond that layout.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from sphfluid.core.params import SimParams
from sphfluid.core.state import ParticleState


IDENTITY_ROTATION: Tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)  # (w, x, y, z)

INSTANCE_DTYPE = np.dtype([("model", np.float32, (4, 4)), ("scale", np.float32, (2,))])


@dataclass(frozen=True)
class Transform:
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float, float] = IDENTITY_ROTATION
    scale: Tuple[float, float] = (1.0, 1.0)

    def model_matrix(self) -> np.ndarray:
        """
        4x4 model matrix translation * rotation, laid out column by column
        (row k of the returned array is column k of the matrix), which is
        the order instance buffers are uploaded in.
        """
        w, x, y, z = self.rotation
        rot = np.array(
            [
                [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
                [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
                [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
            ],
            dtype=np.float64,
        )
        m = np.eye(4, dtype=np.float64)
        m[:3, :3] = rot
        m[:3, 3] = self.position
        return m.T.copy()


def to_render_coordinates(pos: np.ndarray, params: SimParams) -> np.ndarray:
    """Map domain coordinates [0, W] x [0, H] onto [-1, 1] x [-1, 1]."""
    return 2.0 * np.asarray(pos, dtype=np.float64) / params.extent[None, :] - 1.0


def particle_render_scale(params: SimParams) -> Tuple[float, float]:
    """Particle radius expressed in render coordinates, times render_scale."""
    s = 2.0 * float(params.radius) * float(params.render_scale)
    return s / float(params.width), s / float(params.height)


def export_transforms(state: ParticleState, params: SimParams) -> List[Transform]:
    """One Transform per particle, in particle index order."""
    ndc = to_render_coordinates(state.pos, params)
    scale = particle_render_scale(params)
    return [
        Transform(position=(float(x), float(y), 0.0), rotation=IDENTITY_ROTATION, scale=scale)
        for x, y in ndc
    ]


def pack_instances(transforms: Sequence[Transform]) -> np.ndarray:
    """Pack transforms into a float32 structured array ready for upload."""
    out = np.zeros((len(transforms),), dtype=INSTANCE_DTYPE)
    for k, t in enumerate(transforms):
        out["model"][k] = t.model_matrix()
        out["scale"][k] = t.scale
    return out
