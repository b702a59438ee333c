"""Tests for real-valued recombination stages."""

import numpy as np
import pytest
from scipy import stats

from compmoead.operators.real import BinomialRecombination, SBXCrossover

LOWER = np.array([-5.0, -5.0, -5.0])
UPPER = np.array([5.0, 5.0, 5.0])

POPULATION = np.array(
    [
        [-1.0, 0.0, 1.5],
        [1.0, 2.5, 3.0],
        [-2.5, 1.0, 0.5],
        [2.0, -1.5, 4.0],
        [0.5, -0.5, 2.0],
    ],
    dtype=float,
)


def test_sbx_returns_one_child_per_subproblem_and_is_seeded(make_context):
    operator = SBXCrossover(prob_crossover=1.0, eta=15.0, lower=LOWER, upper=UPPER)
    out1 = operator(POPULATION, make_context(POPULATION, seed=2))
    out2 = operator(POPULATION, make_context(POPULATION, seed=2))
    assert out1.shape == POPULATION.shape
    assert np.array_equal(out1, out2)
    assert not np.array_equal(out1, POPULATION)


def test_sbx_without_crossover_copies_a_pool_member(make_context):
    operator = SBXCrossover(prob_crossover=0.0, eta=20.0, lower=LOWER, upper=UPPER)
    pools = [np.array([i, (i + 1) % 5]) for i in range(5)]
    out = operator(POPULATION, make_context(POPULATION, pools=pools))
    for i, row in enumerate(out):
        assert any(np.array_equal(row, POPULATION[j]) for j in pools[i])


def test_sbx_children_lie_between_bounds_for_in_bound_parents(make_context):
    rng = np.random.default_rng(4)
    X = rng.uniform(-5.0, 5.0, size=(40, 3))
    operator = SBXCrossover(prob_crossover=1.0, eta=5.0, lower=LOWER, upper=UPPER)
    out = operator(X, make_context(X, seed=1))
    assert np.all(out >= LOWER - 1e-9)
    assert np.all(out <= UPPER + 1e-9)


def test_sbx_identical_parents_are_inherited(make_context):
    X = np.tile([0.3, -0.2, 1.0], (4, 1))
    operator = SBXCrossover(prob_crossover=1.0, eta=20.0, lower=LOWER, upper=UPPER)
    np.testing.assert_allclose(operator(X, make_context(X)), X)


def test_binomial_recombination_extremes(make_context):
    trial = np.ones((6, 3))
    context = make_context(np.zeros((6, 3)))
    np.testing.assert_array_equal(BinomialRecombination(rho=1.0)(trial, context), trial)
    np.testing.assert_array_equal(BinomialRecombination(rho=0.0)(trial, context), np.zeros((6, 3)))


def test_chained_binomial_recombination_equals_product_rate(make_context):
    rho1, rho2 = 0.8, 0.6
    first, second, single = BinomialRecombination(rho1), BinomialRecombination(rho2), BinomialRecombination(rho1 * rho2)
    chained_kept = 0
    single_kept = 0
    n_genes = 0
    for trial in range(40):
        context = make_context(np.zeros((50, 20)), seed=trial)
        chained_kept += int(second(first(np.ones((50, 20)), context), context).sum())
        context = make_context(np.zeros((50, 20)), seed=1000 + trial)
        single_kept += int(single(np.ones((50, 20)), context).sum())
        n_genes += 50 * 20

    assert stats.binomtest(chained_kept, n_genes, rho1 * rho2).pvalue > 1e-3
    table = [[chained_kept, n_genes - chained_kept], [single_kept, n_genes - single_kept]]
    assert stats.chi2_contingency(table).pvalue > 1e-3
    assert chained_kept / n_genes == pytest.approx(rho1 * rho2, abs=0.01)
