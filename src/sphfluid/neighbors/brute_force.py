from __future__ import annotations

from typing import List

import numpy as np

from sphfluid.neighbors.spatial_hash import _within


class BruteForceSearch:
    """
    All-pairs neighbor search: each query scans every other particle.

    O(n) per query, O(n^2) per step. Fine for a few hundred particles and
    useful as a reference for SpatialHash.
    """

    def __init__(self, support_radius: float, dim: int = 2):
        if dim != 2:
            raise ValueError("BruteForceSearch supports only dim=2")
        self.h = float(support_radius)
        if self.h <= 0.0:
            raise ValueError("support_radius must be > 0")
        self.dim = dim
        self._n = 0

    def build(self, positions: np.ndarray) -> None:
        self._n = int(positions.shape[0])

    def query(self, i: int, positions: np.ndarray, radius: float | None = None) -> List[int]:
        radius = self.h if radius is None else float(radius)
        if radius > self.h:
            raise ValueError(f"query radius {radius} exceeds support radius {self.h}")

        others = np.arange(self._n, dtype=np.int64)
        others = others[others != i]
        return [int(j) for j in _within(positions, others, positions[i], radius)]
