import numpy as np

from compmoead import MOEAD, MOEADConfig, optimize


def _de_config():
    return (
        MOEADConfig()
        .decomposition("uniform", N=30)
        .neighborhood("by_incumbent", T=6, delta_p=0.8)
        .aggregation("pbi", theta=5.0)
        .stage("diffmut", basis="rand")
        .stage("binrec", rho=0.7)
        .stage("polymut")
        .stage("reflect")
        .update("restricted", nr=2)
        .constraint("stochastic_ranking", pf=0.4)
        .scaling("simple")
        .initializer("lhs")
        .fixed()
    )


def test_optimize_reproducible_with_seed(zdt1_problem):
    problem = zdt1_problem(8)
    res1 = optimize(problem, stop=("maxeval", {"n": 1500}), seed=42)
    res2 = optimize(problem, stop=("maxeval", {"n": 1500}), seed=42)
    np.testing.assert_array_equal(res1.X, res2.X)
    np.testing.assert_array_equal(res1.F, res2.F)


def test_every_random_component_follows_the_seed(zdt1_problem):
    problem = zdt1_problem(8, constraints=lambda X, context: {"g": 0.1 - X[:, 0]})
    runs = [MOEAD(_de_config()).run(problem, ("maxiter", {"n": 10}), seed=seed) for seed in (7, 7, 8)]
    np.testing.assert_array_equal(runs[0].weights, runs[1].weights)
    np.testing.assert_array_equal(runs[0].X, runs[1].X)
    np.testing.assert_array_equal(runs[0].F, runs[1].F)
    assert not np.array_equal(runs[0].X, runs[2].X)
