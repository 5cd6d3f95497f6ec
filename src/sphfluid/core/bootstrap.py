"""
Bootstrap / CLI entry point for the 2-D SPH fluid core.

What this file does:
- Loads a JSON scene configuration.
- Builds SimParams and the initial particle layout.
- Runs the fixed-dt SPH loop (density -> forces -> integrate -> walls).
- Logs per-step diagnostics (rho/p/v/neighbors).
- Optionally exports CSV and VTK snapshots for ParaView/analysis.

It does no rendering; a renderer drives Simulation.step() and consumes
Simulation.export_transforms() itself.

Important constraint:
- This file must not change any solver math/physics. It only wires together
  existing components and adds observability/export around them.
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path

from sphfluid.core.diagnostics import compute_step_diagnostics
from sphfluid.core.errors import ConfigurationError, SimulationInstabilityError
from sphfluid.core.params import SimParams
from sphfluid.core.simulator import Simulation
from sphfluid.core.state_builder import build_scene_state
from sphfluid.io.csv_export import export_particles_csv
from sphfluid.io.vtk_export import export_particles_vtk_legacy
from sphfluid.neighbors.search import make_neighbor_search


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)

    if len(argv) < 1:
        print("Usage: python -m sphfluid.core.bootstrap <scene.json>")
        return 2

    scene_path = Path(argv[0]).resolve()
    if not scene_path.exists():
        print(f"[ERROR] scene file not found: {scene_path}")
        return 1

    try:
        with scene_path.open("r", encoding="utf-8") as f:
            scene = json.load(f)
    except json.JSONDecodeError as exc:
        print(f"[ERROR] scene file is not valid JSON: {scene_path}: {exc}")
        return 5

    if not isinstance(scene, dict):
        print(f"[ERROR] scene file must hold a JSON object: {scene_path}")
        return 5

    try:
        params = SimParams.from_scene(scene)
        state = build_scene_state(scene, params)
        sim = Simulation(state, params, debug=bool(scene.get("debug", False)))
    except ConfigurationError as exc:
        print(f"[ERROR] invalid configuration: {exc}")
        return 3

    name = scene.get("meta", {}).get("name", scene_path.stem)
    print(f"[BOOT] scene={name} particles={sim.n}")
    # Print params for reproducibility/observability (no physics impact).
    print(f"[BOOT] params={json.dumps(asdict(params), sort_keys=True)}")

    time_cfg = scene.get("time", {})
    steps = int(time_cfg.get("steps", 100))
    log_every = int(time_cfg.get("log_every", 10))

    # -------------------------------------------------------------------------
    # Optional exports controlled by scene:
    #   export.csv.enable/every/dir
    #   export.vtk.enable/every/dir
    # -------------------------------------------------------------------------
    export_cfg = scene.get("export", {})

    csv_cfg = export_cfg.get("csv", {})
    csv_enabled = bool(csv_cfg.get("enable", False))
    csv_every = int(csv_cfg.get("every", 10))
    csv_dir = Path(csv_cfg.get("dir", "out/csv"))

    vtk_cfg = export_cfg.get("vtk", {})
    vtk_enabled = bool(vtk_cfg.get("enable", False))
    vtk_every = int(vtk_cfg.get("every", 10))
    vtk_dir = Path(vtk_cfg.get("dir", "out/vtk"))

    # Export step 0000 if enabled (pre-step snapshot)
    if csv_enabled:
        export_particles_csv(csv_dir / "particles_step_0000.csv", sim.state)
    if vtk_enabled:
        export_particles_vtk_legacy(vtk_dir / "particles_step_0000.vtk", sim.state)

    # Diagnostics use their own search so the solver's stays untouched.
    diag_ns = make_neighbor_search(params.neighbor_search, params.interaction_radius)

    for s in range(steps):
        try:
            dt = sim.step()
        except SimulationInstabilityError as exc:
            print(f"[ERROR] {exc}")
            return 4

        if (s == 0) or ((s + 1) % max(1, log_every) == 0):
            state = sim.state
            diag_ns.build(state.pos)
            diag = compute_step_diagnostics(
                step=s + 1,
                dt=dt,
                state=state,
                rest_density=params.rest_density,
                neighbor_search=diag_ns,
                radius=params.smoothing_length,
            )
            print(diag.format_line())

        if csv_enabled and ((s + 1) % max(1, csv_every) == 0):
            export_particles_csv(csv_dir / f"particles_step_{s + 1:04d}.csv", sim.state)

        if vtk_enabled and ((s + 1) % max(1, vtk_every) == 0):
            export_particles_vtk_legacy(vtk_dir / f"particles_step_{s + 1:04d}.vtk", sim.state)

    print("[BOOT] done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
