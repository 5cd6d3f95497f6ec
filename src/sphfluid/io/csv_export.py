from __future__ import annotations

"""
Observability export: CSV snapshots for particle data.

Writes one CSV file per call with per-particle attributes in a stable
column order, for offline analysis. Pure I/O: never modifies the state.
"""

from pathlib import Path

import numpy as np

from sphfluid.core.state import ParticleState


CSV_HEADER = "id,x,y,vx,vy,fx,fy,rho,p,m"


def export_particles_csv(path: str | Path, state: ParticleState) -> None:
    """
    Export a snapshot of all particles to CSV.

    Columns:
      id, x, y, vx, vy, fx, fy, rho, p, m
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    ids = np.arange(state.n, dtype=np.int64)
    table = np.column_stack(
        [
            ids,
            state.pos[:, 0],
            state.pos[:, 1],
            state.vel[:, 0],
            state.vel[:, 1],
            state.force[:, 0],
            state.force[:, 1],
            state.rho,
            state.p,
            state.mass,
        ]
    )
    fmt = "%d," + ",".join(["%.17g"] * 9)

    with path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(CSV_HEADER + "\n")
        np.savetxt(f, table, delimiter=",", fmt=fmt)
