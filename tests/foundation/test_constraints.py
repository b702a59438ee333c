import numpy as np
from numpy.testing import assert_allclose

from compmoead.foundation.constraints import ConstraintEvaluation, compute_violation, is_feasible, violation_matrix


def test_violation_is_exactly_zero_for_feasible_points():
    rng = np.random.default_rng(0)
    G = -rng.random((50, 3))
    H = rng.uniform(-1e-4, 1e-4, size=(50, 2))
    cons = violation_matrix(G, H, n=50, epsilon=1e-4)
    assert np.all(cons.v == 0.0)
    assert is_feasible(cons.v).all()


def test_violation_sums_inequality_and_equality_excess():
    G = np.array([[0.5, -1.0], [-0.1, 2.0]])
    H = np.array([[0.3], [-0.05]])
    cons = violation_matrix(G, H, n=2, epsilon=0.1)
    assert_allclose(cons.C, np.hstack([G, H]))
    assert_allclose(cons.V, [[0.5, 0.0, 0.2], [0.0, 2.0, 0.0]])
    assert_allclose(cons.v, cons.V.sum(axis=1))


def test_missing_blocks_yield_unconstrained_evaluation():
    cons = violation_matrix(None, None, n=4)
    assert cons.n_constr == 0
    assert_allclose(cons.v, np.zeros(4))
    assert cons.C.shape == ConstraintEvaluation.unconstrained(4).C.shape


def test_compute_violation_and_feasibility_helpers():
    assert_allclose(compute_violation(None, n=3), np.zeros(3))
    assert_allclose(compute_violation(np.array([0.0, 1.5])), [0.0, 1.5])
    assert is_feasible(None, n=2).all()
    assert list(is_feasible(np.array([0.0, 1e-12]))) == [True, False]
