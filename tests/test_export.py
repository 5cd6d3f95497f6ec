import numpy as np

from sphfluid.core.params import SimParams
from sphfluid.core.simulator import Simulation
from sphfluid.core.state_builder import build_explicit_state
from sphfluid.io.csv_export import CSV_HEADER, export_particles_csv
from sphfluid.io.vtk_export import export_particles_vtk_legacy


def _stepped_state():
    params = SimParams()
    sim = Simulation(build_explicit_state(params, [[0.3, 0.5], [0.7, 0.5], [0.5, 0.8]]), params)
    sim.step()
    return sim.state


def test_csv_snapshot_round_trips_columns(tmp_path):
    state = _stepped_state()
    path = tmp_path / "nested" / "step.csv"

    export_particles_csv(path, state)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == CSV_HEADER
    assert len(lines) == 1 + state.n

    table = np.loadtxt(path, delimiter=",", skiprows=1)
    assert np.array_equal(table[:, 0], np.arange(state.n))
    assert np.array_equal(table[:, 1:3], state.pos)
    assert np.array_equal(table[:, 3:5], state.vel)
    assert np.array_equal(table[:, 5:7], state.force)
    assert np.array_equal(table[:, 7], state.rho)
    assert np.array_equal(table[:, 9], state.mass)


def test_vtk_snapshot_layout(tmp_path):
    state = _stepped_state()
    path = tmp_path / "step.vtk"

    export_particles_vtk_legacy(path, state)

    text = path.read_text(encoding="utf-8")
    lines = text.splitlines()
    assert lines[0] == "# vtk DataFile Version 3.0"
    assert "DATASET POLYDATA" in lines
    assert f"POINTS {state.n} float" in lines
    assert f"VERTICES {state.n} {2 * state.n}" in lines
    assert f"POINT_DATA {state.n}" in lines
    for name in ("SCALARS rho float 1", "SCALARS p float 1", "SCALARS m float 1", "VECTORS v float", "VECTORS f float"):
        assert name in lines

    i = lines.index(f"POINTS {state.n} float")
    x, y, z = (float(v) for v in lines[i + 1].split())
    assert (x, y, z) == (state.pos[0, 0], state.pos[0, 1], 0.0)
