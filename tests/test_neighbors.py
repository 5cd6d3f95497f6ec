import numpy as np
import pytest

from sphfluid.core.errors import ConfigurationError
from sphfluid.neighbors.brute_force import BruteForceSearch
from sphfluid.neighbors.search import make_neighbor_search
from sphfluid.neighbors.spatial_hash import SpatialHash


def test_neighbor_query_only_returns_particles_within_support_radius():
    h = 1.0

    pos = np.array([
        [0.0, 0.0],
        [0.5, 0.0],
        [2.0, 0.0],
    ], dtype=np.float64)

    ns = SpatialHash(support_radius=h)
    ns.build(pos)

    nbs = ns.query(0, pos)
    assert 1 in nbs
    assert 2 not in nbs
    assert 0 not in nbs


def test_neighbor_exactly_at_cutoff_is_excluded():
    pos = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 0.75]], dtype=np.float64)

    for ns in (SpatialHash(support_radius=1.0), BruteForceSearch(support_radius=1.0)):
        ns.build(pos)
        assert ns.query(0, pos) == [2]


def test_smaller_query_radius_filters_further():
    pos = np.array([[0.0, 0.0], [0.3, 0.0], [0.8, 0.0]], dtype=np.float64)
    ns = SpatialHash(support_radius=1.0)
    ns.build(pos)

    assert ns.query(0, pos) == [1, 2]
    assert ns.query(0, pos, radius=0.5) == [1]


def test_query_radius_larger_than_cutoff_is_rejected():
    pos = np.zeros((2, 2))
    ns = SpatialHash(support_radius=1.0)
    ns.build(pos)
    with pytest.raises(ValueError):
        ns.query(0, pos, radius=2.0)


def test_neighbor_query_is_deterministic_for_same_positions():
    pos = np.array([
        [0.0, 0.0],
        [0.8, 0.0],
        [0.0, 0.8],
        [0.8, 0.8],
    ], dtype=np.float64)

    ns = SpatialHash(support_radius=1.0)
    ns.build(pos)
    nbs1 = ns.query(0, pos)

    ns.build(pos)
    nbs2 = ns.query(0, pos)

    assert nbs1 == nbs2


def test_spatial_hash_matches_brute_force():
    rng = np.random.default_rng(7)
    pos = rng.uniform(0.0, 0.2, size=(150, 2))
    h = 0.02

    grid = SpatialHash(support_radius=h)
    brute = BruteForceSearch(support_radius=h)
    grid.build(pos)
    brute.build(pos)

    for i in range(pos.shape[0]):
        assert grid.query(i, pos) == brute.query(i, pos)
        assert grid.query(i, pos, radius=0.5 * h) == brute.query(i, pos, radius=0.5 * h)


def test_spatial_hash_handles_negative_coordinates():
    pos = np.array([[-0.01, -0.01], [0.005, 0.005]], dtype=np.float64)
    ns = SpatialHash(support_radius=0.05)
    ns.build(pos)
    assert ns.query(0, pos) == [1]
    assert ns.query(1, pos) == [0]


def test_factory():
    assert isinstance(make_neighbor_search("spatial_hash", 0.1), SpatialHash)
    assert isinstance(make_neighbor_search("BRUTE_FORCE", 0.1), BruteForceSearch)
    with pytest.raises(ConfigurationError):
        make_neighbor_search("kd_tree", 0.1)
