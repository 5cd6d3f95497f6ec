from __future__ import annotations

from typing import Protocol, Tuple

import numpy as np

from sphfluid.core.errors import ConfigurationError
from sphfluid.core.params import SimParams
from sphfluid.core.state import ParticleState
from sphfluid.solver.forces import ForceField


def acceleration(field: ForceField) -> np.ndarray:
    """
    a_i = f_i / rho_i, with a_i = 0 where rho_i <= 0.

    Force values are force densities, hence the division by rho.
    """
    a = np.zeros_like(field.force)
    ok = field.rho > 0.0
    a[ok] = field.force[ok] / field.rho[ok, None]
    return a


class Integrator(Protocol):
    name: str

    def advance(
        self, state: ParticleState, field: ForceField, params: SimParams
    ) -> Tuple[np.ndarray, np.ndarray]: ...


class SymplecticEuler:
    """
    Semi-implicit Euler:

        v(t+dt) = v(t) + dt a(t)
        x(t+dt) = x(t) + dt v(t+dt)
    """

    name = "symplectic_euler"

    def advance(self, state: ParticleState, field: ForceField, params: SimParams) -> Tuple[np.ndarray, np.ndarray]:
        dt = float(params.dt)
        vel = state.vel + dt * acceleration(field)
        pos = state.pos + dt * vel
        return pos, vel


class ExplicitEuler:
    """
    Forward Euler: position moves with the old velocity, then velocity updates.

        x(t+dt) = x(t) + dt v(t)
        v(t+dt) = v(t) + dt a(t)
    """

    name = "explicit_euler"

    def advance(self, state: ParticleState, field: ForceField, params: SimParams) -> Tuple[np.ndarray, np.ndarray]:
        dt = float(params.dt)
        pos = state.pos + dt * state.vel
        vel = state.vel + dt * acceleration(field)
        return pos, vel


def make_integrator(name: str) -> Integrator:
    """Select the timestep strategy by name."""
    name = str(name).lower()
    if name == SymplecticEuler.name:
        return SymplecticEuler()
    if name == ExplicitEuler.name:
        return ExplicitEuler()
    raise ConfigurationError(f"Unknown integrator: {name!r}")
