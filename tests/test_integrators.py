import numpy as np
import pytest

from sphfluid.core.errors import ConfigurationError
from sphfluid.core.params import SimParams
from sphfluid.core.state import ParticleState
from sphfluid.solver.forces import ForceField
from sphfluid.solver.integrators import ExplicitEuler, SymplecticEuler, acceleration, make_integrator


def _setup():
    params = SimParams(dt=0.01)
    state = ParticleState.from_positions([[0.5, 0.5], [0.2, 0.3]], mass=params.mass, vel=[[1.0, 0.0], [0.0, 2.0]])
    field = ForceField(
        rho=np.array([2.0, 4.0]),
        p=np.zeros(2),
        force=np.array([[4.0, 0.0], [0.0, -8.0]]),
    )
    return params, state, field


def test_acceleration_divides_by_density():
    _, _, field = _setup()
    assert np.allclose(acceleration(field), [[2.0, 0.0], [0.0, -2.0]])


def test_acceleration_guards_zero_density():
    field = ForceField(rho=np.array([0.0, 1.0]), p=np.zeros(2), force=np.array([[5.0, 5.0], [1.0, 0.0]]))
    a = acceleration(field)
    assert np.allclose(a[0], 0.0)
    assert np.allclose(a[1], [1.0, 0.0])


def test_symplectic_euler_uses_new_velocity_for_position():
    params, state, field = _setup()
    pos, vel = SymplecticEuler().advance(state, field, params)

    assert np.allclose(vel, [[1.02, 0.0], [0.0, 1.98]])
    assert np.allclose(pos, state.pos + 0.01 * vel)


def test_explicit_euler_uses_old_velocity_for_position():
    params, state, field = _setup()
    pos, vel = ExplicitEuler().advance(state, field, params)

    assert np.allclose(vel, [[1.02, 0.0], [0.0, 1.98]])
    assert np.allclose(pos, state.pos + 0.01 * state.vel)


def test_integrators_do_not_touch_input_state():
    params, state, field = _setup()
    before = state.copy()
    SymplecticEuler().advance(state, field, params)
    assert np.array_equal(state.pos, before.pos)
    assert np.array_equal(state.vel, before.vel)


def test_make_integrator():
    assert isinstance(make_integrator("symplectic_euler"), SymplecticEuler)
    assert isinstance(make_integrator("Explicit_Euler"), ExplicitEuler)
    with pytest.raises(ConfigurationError):
        make_integrator("rk4")
