from __future__ import annotations

import threading
from typing import Callable, List

import numpy as np

from sphfluid.core.errors import SimulationInstabilityError, StepInProgressError
from sphfluid.core.params import SimParams
from sphfluid.core.state import ParticleState
from sphfluid.core.transforms import Transform, export_transforms
from sphfluid.neighbors.search import NeighborSearch, make_neighbor_search
from sphfluid.solver.boundary import apply_boundary
from sphfluid.solver.forces import compute_forces
from sphfluid.solver.integrators import make_integrator
from sphfluid.sph.kernels import SmoothingKernels


class Simulation:
    """
    Owns the particle set and advances it one step at a time.

    Two buffers are kept. step() reads the front buffer as a frozen
    snapshot, writes the next state into the back buffer and swaps them only
    once the whole set has been integrated and checked. If the new state has
    NaN/Inf anywhere the step is rejected with SimulationInstabilityError and
    the front buffer is left as it was.

    Only one step may be in flight at a time. export_transforms() and the
    read accessors return copies, so callers can hold on to them across
    subsequent steps.
    """

    def __init__(self, state: ParticleState, params: SimParams, debug: bool = False):
        state.validate()

        self._params = params
        self._kernels = SmoothingKernels.from_params(params)
        self._ns = make_neighbor_search(params.neighbor_search, params.interaction_radius)
        self._integrator = make_integrator(params.integrator)
        self._debug = bool(debug)

        self._front = state.copy()
        self._back = state.copy()

        self._lock = threading.Lock()
        self._step_count = 0
        self._time = 0.0

    # ------------------------------------------------------------------ stepping

    def step(self) -> float:
        """Advance the simulation by params.dt; returns the dt used."""
        if not self._lock.acquire(blocking=False):
            raise StepInProgressError("step() called while another step is running")
        try:
            return self._step_locked()
        finally:
            self._lock.release()

    def _step_locked(self) -> float:
        params = self._params
        snapshot = self._front
        out = self._back

        # (1) neighbors + forces from the snapshot only
        self._ns.build(snapshot.pos)
        field = compute_forces(state=snapshot, params=params, kernels=self._kernels, neighbor_search=self._ns)

        # (2) integrate into the back buffer
        with np.errstate(over="ignore", invalid="ignore"):
            pos, vel = self._integrator.advance(snapshot, field, params)
        np.copyto(out.pos, pos)
        np.copyto(out.vel, vel)
        np.copyto(out.mass, snapshot.mass)
        np.copyto(out.rho, field.rho)
        np.copyto(out.p, field.p)
        np.copyto(out.force, field.force)

        # (3) reject non-finite results before the wall clamp can hide them
        bad = out.non_finite_indices()
        if bad.size:
            raise SimulationInstabilityError(step=self._step_count + 1, indices=bad.tolist())

        # (4) wall collisions
        apply_boundary(out.pos, out.vel, params)

        # (5) swap
        self._front, self._back = out, snapshot
        self._step_count += 1
        self._time += float(params.dt)

        if self._debug:
            rho = field.rho
            print(
                f"[SPH] step={self._step_count} dt={params.dt:.3e} "
                f"rho(min/avg/max)={rho.min():.2f}/{rho.mean():.2f}/{rho.max():.2f} "
                f"|v|max={float(np.max(np.linalg.norm(out.vel, axis=1))):.3e}"
            )

        return float(params.dt)

    def run(self, steps: int, callback: Callable[["Simulation"], None] | None = None) -> None:
        """Call step() `steps` times, invoking callback(sim) after each one."""
        for _ in range(int(steps)):
            self.step()
            if callback is not None:
                callback(self)

    # ------------------------------------------------------------------ reads

    def export_transforms(self) -> List[Transform]:
        return export_transforms(self._front, self._params)

    @property
    def state(self) -> ParticleState:
        return self._front.copy()

    def positions(self) -> np.ndarray:
        return self._front.pos.copy()

    def velocities(self) -> np.ndarray:
        return self._front.vel.copy()

    def densities(self) -> np.ndarray:
        return self._front.rho.copy()

    def pressures(self) -> np.ndarray:
        return self._front.p.copy()

    def forces(self) -> np.ndarray:
        return self._front.force.copy()

    @property
    def params(self) -> SimParams:
        return self._params

    @property
    def kernels(self) -> SmoothingKernels:
        return self._kernels

    @property
    def neighbor_search(self) -> NeighborSearch:
        return self._ns

    @property
    def n(self) -> int:
        return self._front.n

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def time(self) -> float:
        return self._time
