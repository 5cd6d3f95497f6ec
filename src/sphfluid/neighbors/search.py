from __future__ import annotations

from typing import List, Protocol

import numpy as np

from sphfluid.core.errors import ConfigurationError
from sphfluid.neighbors.brute_force import BruteForceSearch
from sphfluid.neighbors.spatial_hash import SpatialHash


class NeighborSearch(Protocol):
    h: float

    def build(self, positions: np.ndarray) -> None: ...

    def query(self, i: int, positions: np.ndarray, radius: float | None = None) -> List[int]: ...


def make_neighbor_search(kind: str, support_radius: float) -> NeighborSearch:
    """
    Build a neighbor search by name.

      "spatial_hash" -> SpatialHash (default, expected O(n) per step)
      "brute_force"  -> BruteForceSearch
    """
    kind = str(kind).lower()
    if kind == "spatial_hash":
        return SpatialHash(support_radius=support_radius, dim=2)
    if kind == "brute_force":
        return BruteForceSearch(support_radius=support_radius, dim=2)
    raise ConfigurationError(f"Unknown neighbor search type: {kind!r}")
