from __future__ import annotations

"""
Observability export: VTK legacy ASCII PolyData for particle visualization.

Writes POINTS, one VERTEX per particle and POINT_DATA (rho, p, m scalars;
v and f vectors) for ParaView. 2-D data is padded with z = 0. No external
dependencies; pure I/O.
"""

from pathlib import Path

import numpy as np

from sphfluid.core.state import ParticleState


def _pad3(a: np.ndarray) -> np.ndarray:
    out = np.zeros((a.shape[0], 3), dtype=np.float64)
    out[:, 0:2] = a
    return out


def export_particles_vtk_legacy(path: str | Path, state: ParticleState) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    n = state.n
    pos3 = _pad3(state.pos)
    vel3 = _pad3(state.vel)
    f3 = _pad3(state.force)

    with path.open("w", encoding="utf-8", newline="\n") as f:
        f.write("# vtk DataFile Version 3.0\n")
        f.write("SPH particles (2D fluid) - legacy PolyData\n")
        f.write("ASCII\n")
        f.write("DATASET POLYDATA\n")

        f.write(f"POINTS {n} float\n")
        for x, y, z in pos3:
            f.write(f"{x:.17g} {y:.17g} {z:.17g}\n")

        # VERTICES (n cells, 2*n indices)
        f.write(f"VERTICES {n} {2*n}\n")
        for i in range(n):
            f.write(f"1 {i}\n")

        f.write(f"POINT_DATA {n}\n")

        for name, values in (("rho", state.rho), ("p", state.p), ("m", state.mass)):
            f.write(f"SCALARS {name} float 1\n")
            f.write("LOOKUP_TABLE default\n")
            for v in values:
                f.write(f"{float(v):.17g}\n")

        for name, vecs in (("v", vel3), ("f", f3)):
            f.write(f"VECTORS {name} float\n")
            for x, y, z in vecs:
                f.write(f"{x:.17g} {y:.17g} {z:.17g}\n")
