from __future__ import annotations

import numpy as np
from collections import defaultdict
from typing import Dict, List, Tuple


def _within(positions: np.ndarray, candidates: np.ndarray, center: np.ndarray, radius: float) -> np.ndarray:
    """Filter candidate indices to those strictly closer than radius to center."""
    if candidates.size == 0:
        return candidates
    d = positions[candidates] - center
    r2 = d[:, 0] * d[:, 0] + d[:, 1] * d[:, 1]
    return candidates[r2 < radius * radius]


class SpatialHash:
    """
    Uniform grid spatial hash for neighbor search.

    Cell size equals the support radius, so every neighbor of a particle lies
    in its own cell or one of the 8 surrounding cells. Rebuilt from current
    positions once per step. Query results are sorted by index, which makes
    them identical to a brute-force scan.
    """

    def __init__(self, support_radius: float, dim: int = 2):
        if dim != 2:
            raise ValueError("SpatialHash supports only dim=2")
        self.h = float(support_radius)
        if self.h <= 0.0:
            raise ValueError("support_radius must be > 0")
        self.dim = dim
        self.cell_size = self.h
        self.grid: Dict[Tuple[int, int], List[int]] = defaultdict(list)

    def _cell_index(self, position: np.ndarray) -> Tuple[int, int]:
        c = np.floor(position / self.cell_size).astype(int)
        return int(c[0]), int(c[1])

    def build(self, positions: np.ndarray) -> None:
        self.grid.clear()

        for i, pos in enumerate(positions):
            cell = self._cell_index(pos)
            self.grid[cell].append(i)

    def query(self, i: int, positions: np.ndarray, radius: float | None = None) -> List[int]:
        radius = self.h if radius is None else float(radius)
        if radius > self.h:
            raise ValueError(f"query radius {radius} exceeds hash cell size {self.h}")

        pos = positions[i]
        cx, cy = self._cell_index(pos)

        candidates: List[int] = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for j in self.grid.get((cx + dx, cy + dy), ()):
                    if j != i:
                        candidates.append(j)

        found = _within(positions, np.array(candidates, dtype=np.int64), pos, radius)
        return sorted(int(j) for j in found)
