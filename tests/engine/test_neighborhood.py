import numpy as np
import pytest

from compmoead.engine.algorithm.components.neighborhood import NeighborhoodBuilder, compute_neighbors
from compmoead.engine.algorithm.components.weight_vectors import simplex_lattice
from compmoead.foundation.exceptions import ConfigurationError


@pytest.mark.parametrize("T", [1, 2, 10, 20, 100])
def test_neighbor_table_shape_range_and_uniqueness(T):
    W = simplex_lattice(2, 99)
    B = compute_neighbors(W, T)
    assert B.shape == (100, T)
    assert B.min() >= 0 and B.max() < 100
    for row in B:
        assert len(set(row.tolist())) == T
    assert np.array_equal(B[:, 0], np.arange(100))


def test_self_comes_first_even_with_duplicate_points():
    X = np.array([[0.0, 0.0], [0.0, 0.0], [1.0, 1.0]])
    B = compute_neighbors(X, 2)
    assert list(B[:, 0]) == [0, 1, 2]
    assert list(B[0]) == [0, 1]
    assert list(B[1]) == [1, 0]


def test_neighbors_are_closest_weights():
    W = simplex_lattice(2, 10)
    B = compute_neighbors(W, 3)
    assert sorted(B[5].tolist()) == [4, 5, 6]


def test_builder_rejects_T_larger_than_population():
    with pytest.raises(ConfigurationError):
        NeighborhoodBuilder(("by_weight", {"T": 30}), pop_size=20)


def test_builder_rejects_invalid_delta():
    with pytest.raises(ConfigurationError):
        NeighborhoodBuilder(("by_weight", {"T": 5, "delta_p": 1.5}), pop_size=20)


def test_incumbent_neighborhood_uses_decision_space():
    builder = NeighborhoodBuilder(("by_incumbent", {"T": 2}), pop_size=3)
    assert not builder.static
    W = np.array([[1.0, 0.0], [0.5, 0.5], [0.0, 1.0]])
    X = np.array([[0.0], [10.0], [0.1]])
    B = builder.build(W, X)
    assert list(B[0]) == [0, 2]
    assert list(B[1]) == [1, 2]


def test_scope_and_pools_follow_delta_p():
    builder = NeighborhoodBuilder(("by_weight", {"T": 3, "delta_p": 1.0}), pop_size=6)
    rng = np.random.default_rng(1)
    assert builder.sample_scope(rng).all()

    builder = NeighborhoodBuilder(("by_weight", {"T": 3, "delta_p": 0.0}), pop_size=6)
    scope = builder.sample_scope(rng)
    assert not scope.any()
    B = compute_neighbors(simplex_lattice(2, 5), 3)
    pools = builder.pools(B, scope, rng)
    assert len(pools) == 6
    for pool in pools:
        assert sorted(pool.tolist()) == list(range(6))


def test_partial_scope_mixes_neighbors_and_population():
    builder = NeighborhoodBuilder(("by_weight", {"T": 3, "delta_p": 0.5}), pop_size=6)
    B = compute_neighbors(simplex_lattice(2, 5), 3)
    scope = np.array([True, False, True, False, True, False])
    pools = builder.pools(B, scope, np.random.default_rng(0))
    assert np.array_equal(pools[0], B[0])
    assert pools[1].size == 6
