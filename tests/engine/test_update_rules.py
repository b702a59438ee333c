import numpy as np
import pytest

from compmoead.engine.algorithm.components.aggregation import tchebycheff
from compmoead.engine.algorithm.components.constraint_handling import FeasibilityFirst
from compmoead.engine.algorithm.components.neighborhood import compute_neighbors
from compmoead.engine.algorithm.components.scaling import ObjectiveScaler
from compmoead.engine.algorithm.components.update import (
    BestSubproblemUpdate,
    RestrictedUpdate,
    StandardUpdate,
    build_update_rule,
)
from compmoead.engine.algorithm.components.weight_vectors import simplex_lattice
from compmoead.engine.algorithm.moead.state import MOEADState, Trial
from compmoead.foundation.exceptions import ConfigurationError


def _state(F, v=None, seed=0, T=3):
    N = F.shape[0]
    W = simplex_lattice(2, N - 1)
    return MOEADState(
        problem=None,
        X=np.tile(np.arange(N, dtype=float)[:, None], (1, 2)),
        F=F.copy(),
        C=np.zeros((N, 0)),
        V=np.zeros((N, 0)),
        v=np.zeros(N) if v is None else v.copy(),
        weights=W,
        neighbors=compute_neighbors(W, T),
        ideal=np.zeros(2),
        nadir=F.max(axis=0),
        rng=np.random.default_rng(seed),
        aggregator=tchebycheff,
        scaler=ObjectiveScaler("none"),
        constraint_handler=FeasibilityFirst(),
        update_rule=None,
        pipeline=None,
        neighborhood=None,
        stop=None,
    )


def _trial(f, v=0.0):
    return Trial(x=np.full(2, -1.0), f=np.asarray(f, dtype=float), c=np.zeros(0), V=np.zeros(0), v=v)


def _replaced(st):
    return np.flatnonzero(st.X[:, 0] == -1.0)


def test_standard_update_replaces_every_beaten_incumbent():
    st = _state(np.ones((10, 2)))
    rule = build_update_rule("standard")
    assert isinstance(rule, StandardUpdate)
    count = rule.apply(st, _trial([0.1, 0.1]), st.neighbors[4])
    assert count == 3
    assert sorted(_replaced(st).tolist()) == sorted(st.neighbors[4].tolist())
    np.testing.assert_allclose(st.F[_replaced(st)], 0.1)


def test_restricted_update_stops_after_nr_replacements():
    st = _state(np.ones((10, 2)))
    rule = build_update_rule(("restricted", {"nr": 2}))
    assert isinstance(rule, RestrictedUpdate)
    count = rule.apply(st, _trial([0.1, 0.1]), np.arange(10))
    assert count == 2
    assert _replaced(st).size == 2


def test_restricted_update_never_exceeds_nr():
    rng = np.random.default_rng(7)
    for nr in (1, 2, 3):
        st = _state(rng.random((12, 2)), seed=nr)
        rule = build_update_rule(("restricted", {"nr": nr}))
        for _ in range(50):
            before = st.X.copy()
            count = rule.apply(st, _trial(rng.random(2)), rng.permutation(12))
            assert count <= nr
            assert np.count_nonzero(np.any(st.X != before, axis=1)) <= nr
            st.X[:] = np.tile(np.arange(12, dtype=float)[:, None], (1, 2))


def test_best_update_targets_neighbors_of_best_subproblem():
    st = _state(np.ones((10, 2)))
    rule = build_update_rule(("best", {"nr": 1, "Tr": 3}))
    assert isinstance(rule, BestSubproblemUpdate)
    rule.prepare(st.weights)
    count = rule.apply(st, _trial([0.1, 0.1]), np.arange(10))
    assert count == 1
    scores = tchebycheff(np.tile([0.1, 0.1], (10, 1)), st.weights, st.ideal)
    region = compute_neighbors(st.weights, 3)[int(np.argmin(scores))]
    assert set(_replaced(st).tolist()) <= set(region.tolist())


def test_best_update_rejects_Tr_above_population():
    rule = build_update_rule(("best", {"nr": 1, "Tr": 11}))
    with pytest.raises(ConfigurationError):
        rule.prepare(simplex_lattice(2, 9))


def test_infeasible_trial_never_replaces_feasible_incumbents():
    st = _state(np.ones((10, 2)))
    rule = build_update_rule("standard")
    assert rule.apply(st, _trial([0.0, 0.0], v=0.5), np.arange(10)) == 0
    assert _replaced(st).size == 0


def test_equal_fitness_does_not_replace():
    st = _state(np.full((10, 2), 0.5))
    rule = build_update_rule("standard")
    assert rule.apply(st, _trial([0.5, 0.5]), np.arange(10)) == 0


def test_update_parameters_are_validated():
    with pytest.raises(ConfigurationError):
        build_update_rule(("restricted", {"nr": 0}))
    with pytest.raises(ConfigurationError):
        build_update_rule(("restricted", {"Tr": 2}))
