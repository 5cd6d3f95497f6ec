import numpy as np

from sphfluid.core.params import SimParams
from sphfluid.core.state import ParticleState
from sphfluid.neighbors.spatial_hash import SpatialHash
from sphfluid.sph.density import compute_density_summation
from sphfluid.sph.kernels import SmoothingKernels


def _density(pos, params, mass=None):
    state = ParticleState.from_positions(pos, mass=params.mass if mass is None else mass)
    kernels = SmoothingKernels.from_params(params)
    ns = SpatialHash(support_radius=params.interaction_radius)
    ns.build(state.pos)
    return compute_density_summation(state=state, neighbor_search=ns, kernels=kernels), kernels


def test_isolated_particle_density_is_self_term():
    params = SimParams()
    rho, kernels = _density([[0.5, 0.5]], params)

    assert rho[0] > 0.0
    assert np.isclose(rho[0], params.mass * kernels.self_density_weight, rtol=1e-14)


def test_far_apart_particles_do_not_see_each_other():
    params = SimParams()
    rho, kernels = _density([[0.375, 0.5], [0.525, 0.5]], params)
    assert np.allclose(rho, params.mass * kernels.self_density_weight, rtol=1e-14)


def test_density_summation_reasonable_in_block_interior():
    """
    For a square lattice with spacing s = 2R and mass rho0 s^2, an interior
    particle's summed density should be close to rho0.
    """
    params = SimParams(radius=0.005, rest_density=1000.0, mass=1000.0 * 0.01 ** 2)
    s = 0.01
    xs = 0.3 + s * np.arange(21)
    X, Y = np.meshgrid(xs, xs, indexing="ij")
    pos = np.stack([X.ravel(), Y.ravel()], axis=1)

    rho, _ = _density(pos, params)

    center = np.array([0.4, 0.4])
    i = int(np.argmin(np.linalg.norm(pos - center[None, :], axis=1)))

    assert np.isfinite(rho[i])
    assert np.isclose(rho[i], params.rest_density, rtol=0.05)


def test_density_uses_each_neighbor_mass():
    params = SimParams()
    pos = [[0.5, 0.5], [0.51, 0.5]]
    rho_a, kernels = _density(pos, params, mass=np.array([0.1, 0.1]))
    rho_b, _ = _density(pos, params, mass=np.array([0.1, 0.3]))

    w = kernels.density_weight(0.01 ** 2)
    assert np.isclose(rho_b[0] - rho_a[0], 0.2 * w, rtol=1e-9)


def test_density_does_not_modify_state():
    params = SimParams()
    state = ParticleState.from_positions([[0.5, 0.5], [0.51, 0.5]], mass=params.mass)
    before = state.copy()
    ns = SpatialHash(support_radius=params.interaction_radius)
    ns.build(state.pos)

    compute_density_summation(state, ns, SmoothingKernels.from_params(params))

    assert np.array_equal(state.pos, before.pos)
    assert np.array_equal(state.rho, before.rho)
