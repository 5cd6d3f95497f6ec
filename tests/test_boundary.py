import numpy as np

from sphfluid.core.params import SimParams
from sphfluid.solver.boundary import apply_boundary


def test_bounce_reverses_and_halves_normal_velocity():
    params = SimParams(radius=0.005, boundary_damping=-0.5)
    pos = np.array([[0.002, 0.5]])
    vel = np.array([[-2.0, 0.7]])

    apply_boundary(pos, vel, params)

    assert pos[0, 0] == params.radius
    assert vel[0, 0] == 1.0
    # tangential component untouched
    assert vel[0, 1] == 0.7
    assert pos[0, 1] == 0.5


def test_upper_walls_clamp_to_extent_minus_radius():
    params = SimParams(radius=0.01, width=2.0, height=1.0, boundary_damping=-0.5)
    pos = np.array([[2.5, 0.999]])
    vel = np.array([[3.0, 4.0]])

    apply_boundary(pos, vel, params)

    assert np.allclose(pos, [[1.99, 0.99]])
    assert np.allclose(vel, [[-1.5, -2.0]])


def test_boundary_is_idempotent_at_the_margin():
    params = SimParams(radius=0.005)
    pos = np.array([[params.radius, 0.5], [1.0 - params.radius, params.radius]])
    vel = np.array([[0.0, 0.3], [0.0, 0.0]])
    pos0, vel0 = pos.copy(), vel.copy()

    apply_boundary(pos, vel, params)
    assert np.array_equal(pos, pos0)
    assert np.array_equal(vel, vel0)

    apply_boundary(pos, vel, params)
    assert np.array_equal(pos, pos0)
    assert np.array_equal(vel, vel0)


def test_interior_particles_untouched():
    params = SimParams()
    pos = np.array([[0.3, 0.4], [0.6, 0.9]])
    vel = np.array([[-5.0, 5.0], [1.0, -1.0]])
    pos0, vel0 = pos.copy(), vel.copy()

    apply_boundary(pos, vel, params)

    assert np.array_equal(pos, pos0)
    assert np.array_equal(vel, vel0)


def test_corner_hits_both_axes():
    params = SimParams(radius=0.005, boundary_damping=-0.25)
    pos = np.array([[-0.1, -0.1]])
    vel = np.array([[-4.0, -8.0]])

    apply_boundary(pos, vel, params)

    assert np.allclose(pos, [[0.005, 0.005]])
    assert np.allclose(vel, [[1.0, 2.0]])
