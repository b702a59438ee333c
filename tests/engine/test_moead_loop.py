import logging
import time

import numpy as np
import pytest

from compmoead import MOEAD, MOEADConfig, Problem, optimize
from compmoead.engine.algorithm.components.constraint_handling import FeasibilityFirst
from compmoead.foundation.exceptions import ConfigurationError, EvaluationError, ProblemDimensionError
from compmoead.foundation.pareto import non_dominated_mask
from compmoead.foundation.problem import evaluate_batch


def zdt1(X, context):
    f1 = X[:, 0]
    g = 1.0 + 9.0 * X[:, 1:].mean(axis=1)
    return np.column_stack([f1, g * (1.0 - np.sqrt(f1 / g))])


def _small_config(**overrides):
    builder = (
        MOEADConfig()
        .decomposition("sld", H=19)
        .neighborhood("by_weight", T=5, delta_p=0.9)
        .aggregation("wt")
        .stage("sbx", eta=20)
        .stage("polymut")
        .stage("truncate")
        .update("restricted", nr=2)
    )
    for key, value in overrides.items():
        method, params = value if isinstance(value, tuple) else (value, {})
        getattr(builder, key)(method, **params)
    return builder.fixed()


def test_evaluation_budget_maps_to_generations(zdt1_problem):
    cfg = (
        MOEADConfig()
        .decomposition("sld", H=99)
        .neighborhood("by_weight", T=20)
        .aggregation("wt")
        .stage("sbx")
        .stage("truncate")
        .update("standard")
        .fixed()
    )
    result = MOEAD(cfg).run(zdt1_problem(10), [("maxeval", {"n": 10000})], seed=3)
    assert result.X.shape == (100, 10)
    assert result.F.shape == (100, 2)
    assert result.n_eval == 10000
    assert result.n_iter == 99
    assert result.n_eval == result.X.shape[0] * (result.n_iter + 1)
    assert result.termination_reason == "maxeval"


def test_default_config_converges_on_zdt1(zdt1_problem):
    result = optimize(zdt1_problem(10), stop=("maxeval", {"n": 10000}), seed=1)
    assert np.all(result.X >= 0.0) and np.all(result.X <= 1.0)
    g = 1.0 + 9.0 * result.X[:, 1:].mean(axis=1)
    assert g.mean() < 2.0


def test_maxiter_and_first_criterion_wins(zdt1_problem):
    result = MOEAD(_small_config()).run(
        zdt1_problem(6), [("maxiter", {"n": 7}), ("maxeval", {"n": 10**6})], seed=0
    )
    assert result.n_iter == 7
    assert result.termination_reason == "maxiter"


def test_stop_checked_before_first_generation(zdt1_problem):
    stop = ("target", {"value": 0.1, "reference_point": (11.0, 11.0)})
    result = MOEAD(_small_config()).run(zdt1_problem(6), stop, seed=0)
    assert result.n_iter == 0
    assert result.n_eval == 20
    assert result.termination_reason == "target"


def test_ask_tell_matches_run(zdt1_problem):
    problem = zdt1_problem(6)
    stop = ("maxiter", {"n": 5})
    expected = MOEAD(_small_config()).run(problem, stop, seed=11)

    moead = MOEAD(_small_config())
    moead.initialize(problem, stop, seed=11)
    while not moead.should_stop():
        X_off = moead.ask()
        moead.tell(zdt1(X_off, None))
    result = moead.result()
    np.testing.assert_array_equal(result.X, expected.X)
    np.testing.assert_array_equal(result.F, expected.F)
    assert result.n_eval == expected.n_eval


def test_ask_tell_protocol_errors(zdt1_problem):
    moead = MOEAD(_small_config())
    with pytest.raises(RuntimeError):
        moead.ask()
    moead.initialize(zdt1_problem(6), ("maxiter", {"n": 3}), seed=0)
    with pytest.raises(RuntimeError):
        moead.tell(np.zeros((20, 2)))
    moead.ask()
    with pytest.raises(RuntimeError):
        moead.ask()
    moead.tell(zdt1(moead.state.pending_offspring, None))
    assert moead.state.pending_offspring is None
    assert moead.state.pending_pools is None
    assert moead.state.generation == 1


def test_tell_rejects_wrong_shape(zdt1_problem):
    moead = MOEAD(_small_config())
    moead.initialize(zdt1_problem(6), ("maxiter", {"n": 3}), seed=0)
    moead.ask()
    with pytest.raises(EvaluationError) as excinfo:
        moead.tell(np.zeros((20, 3)))
    assert excinfo.value.generation == 0


def test_failing_objective_reports_generation():
    def flaky(X, context):
        if context.generation >= 3:
            raise FloatingPointError("overflow")
        return zdt1(X, context)

    problem = Problem(objective=flaky, xmin=np.zeros(6), xmax=np.ones(6), n_obj=2)
    with pytest.raises(EvaluationError) as excinfo:
        MOEAD(_small_config()).run(problem, ("maxiter", {"n": 10}), seed=0)
    assert excinfo.value.generation == 3
    assert isinstance(excinfo.value.__cause__, FloatingPointError)


def test_invalid_config_spends_no_evaluations():
    calls = []

    def counted(X, context):
        calls.append(X.shape[0])
        return zdt1(X, context)

    problem = Problem(objective=counted, xmin=np.zeros(4), xmax=np.ones(4), n_obj=2)
    cfg = _small_config().to_dict()
    cfg["aggregation"] = ("wt", {"theta": 1.0})
    with pytest.raises(ConfigurationError):
        MOEAD(cfg).run(problem, ("maxiter", {"n": 3}), seed=0)
    with pytest.raises(ConfigurationError):
        MOEAD(_small_config()).run(problem, ("maxiter", {}), seed=0)
    assert calls == []


def test_neighborhood_larger_than_population_rejected(zdt1_problem):
    cfg = _small_config(neighborhood=("by_weight", {"T": 50}))
    with pytest.raises(ConfigurationError, match="T=50"):
        MOEAD(cfg).run(zdt1_problem(4), ("maxiter", {"n": 3}), seed=0)


def test_objective_shape_mismatch_caught_by_probe():
    problem = Problem(objective=lambda X, context: X[:, :3], xmin=np.zeros(4), xmax=np.ones(4), n_obj=2)
    with pytest.raises(ProblemDimensionError):
        MOEAD(_small_config()).run(problem, ("maxiter", {"n": 3}), seed=0)


def test_feasibility_first_never_loses_feasible_slots(zdt1_problem):
    problem = zdt1_problem(6, constraints=lambda X, context: {"g": 0.3 - X[:, 0]})
    moead = MOEAD(_small_config(constraint="feasibility"))
    st = moead.initialize(problem, ("maxiter", {"n": 20}), seed=5)
    n_feasible = int(np.count_nonzero(st.v <= 0.0))
    while not moead.should_stop():
        X_off = moead.ask()
        F_off, cons = evaluate_batch(problem, X_off)
        moead.tell(F_off, cons)
        now = int(np.count_nonzero(st.v <= 0.0))
        assert now >= n_feasible
        n_feasible = now
    result = moead.result()
    assert result.summary()["n_feasible"] == n_feasible


def test_archive_holds_feasible_non_dominated_points(zdt1_problem):
    problem = zdt1_problem(6, constraints=lambda X, context: {"g": 0.2 - X[:, 0]})
    cfg = _small_config(constraint=("penalty", {"beta": 10.0}))
    result = optimize(problem, cfg, stop=("maxiter", {"n": 15}), seed=2, archive=True)
    X_arch, F_arch = result.archive
    assert X_arch.shape[0] == F_arch.shape[0] > 0
    assert np.all(X_arch[:, 0] >= 0.2)
    assert np.all(non_dominated_mask(F_arch))
    np.testing.assert_allclose(zdt1(X_arch, None), F_arch)


@pytest.mark.parametrize(
    "overrides",
    [
        {"neighborhood": ("by_incumbent", {"T": 6, "delta_p": 0.8})},
        {"aggregation": ("pbi", {"theta": 5.0}), "scaling": "simple"},
        {"aggregation": "awt", "update": ("best", {"nr": 2, "Tr": 4})},
        {"aggregation": ("ipbi", {"theta": 2.0}), "update": "standard"},
        {"aggregation": "mtch", "decomposition": ("msld", {"H": (12, 6), "tau": (1.0, 0.5)})},
        {"decomposition": ("uniform", {"N": 25}), "constraint": ("stochastic_ranking", {"pf": 0.45})},
    ],
)
def test_component_variants_run(zdt1_problem, overrides):
    result = MOEAD(_small_config(**overrides)).run(zdt1_problem(6), ("maxiter", {"n": 6}), seed=4)
    assert result.n_iter == 6
    assert result.n_eval == result.X.shape[0] * 7
    assert np.all(np.isfinite(result.F))
    assert np.all(result.X >= 0.0) and np.all(result.X <= 1.0)


def test_msld_population_size(zdt1_problem):
    cfg = _small_config(decomposition=("msld", {"H": (12, 6), "tau": (1.0, 0.5)}))
    result = MOEAD(cfg).run(zdt1_problem(6), ("maxiter", {"n": 1}), seed=0)
    assert result.weights.shape == (20, 2)


def test_de_stack_with_local_search(zdt1_problem):
    cfg = (
        MOEADConfig()
        .decomposition("sld", H=19)
        .neighborhood("by_weight", T=8, delta_p=0.9)
        .aggregation("wt")
        .stage("diffmut", basis="mean")
        .stage("binrec", rho=0.5)
        .stage("polymut", prob=0.2)
        .stage("localsearch", type="tpqa", tau_ls=3)
        .stage("reflect")
        .update("restricted", nr=1)
        .initializer("lhs")
        .fixed()
    )
    result = MOEAD(cfg).run(zdt1_problem(6), ("maxeval", {"n": 400}), seed=8)
    assert result.n_eval == 400
    assert np.all(result.X >= 0.0) and np.all(result.X <= 1.0)


def test_history_tracks_running_ideal(zdt1_problem):
    cfg = _small_config(track_history=True)
    result = MOEAD(cfg).run(zdt1_problem(6), ("maxiter", {"n": 8}), seed=6)
    assert len(result.history) == result.n_iter + 1
    generations = [gen for gen, _, _ in result.history]
    assert generations == list(range(9))
    ideals = np.array([ideal for _, _, ideal in result.history])
    assert np.all(np.diff(ideals, axis=0) <= 0.0)
    assert np.all(ideals[-1] <= result.F.min(axis=0))


def test_run_logs_setup_and_finish(zdt1_problem, caplog):
    with caplog.at_level(logging.INFO, logger="compmoead"):
        MOEAD(_small_config()).run(zdt1_problem(4), ("maxiter", {"n": 2}), seed=0)
    messages = [record.getMessage() for record in caplog.records]
    assert any("MOEA/D setup" in m for m in messages)
    assert any("reason=maxiter" in m for m in messages)


def test_default_config_keeps_feasible_slots(zdt1_problem):
    problem = zdt1_problem(6, constraints=lambda X, context: {"g": 0.5 - X[:, 0]})
    moead = MOEAD(MOEADConfig.default(H=19, T=5))
    st = moead.initialize(problem, ("maxiter", {"n": 30}), seed=0)
    assert isinstance(st.constraint_handler, FeasibilityFirst)
    n_feasible = int(np.count_nonzero(st.v <= 0.0))
    while not moead.should_stop():
        X_off = moead.ask()
        F_off, cons = evaluate_batch(problem, X_off, generation=st.generation)
        moead.tell(F_off, cons)
        now = int(np.count_nonzero(st.v <= 0.0))
        assert now >= n_feasible
        n_feasible = now


@pytest.mark.parametrize("seed", range(8))
def test_tell_applies_updates_one_after_another(zdt1_problem, seed):
    cfg = (
        MOEADConfig()
        .decomposition("sld", H=1)
        .neighborhood("by_weight", T=1)
        .aggregation("wsum")
        .stage("sbx")
        .stage("truncate")
        .update("standard")
        .fixed()
    )
    moead = MOEAD(cfg)
    st = moead.initialize(zdt1_problem(2), ("maxiter", {"n": 1}), seed=seed)
    st.F[0] = [0.5, 0.5]
    incumbent_other = (st.X[1].copy(), st.F[1].copy())
    moead.ask()
    # Both offspring compete for slot 0; either beats the incumbent, the first beats the second.
    x_first, x_second = np.full(2, 0.25), np.full(2, 0.75)
    st.pending_offspring = np.vstack([x_first, x_second])
    st.pending_pools = [np.array([0]), np.array([0])]
    moead.tell(np.array([[0.5, 0.1], [0.5, 0.3]]))
    np.testing.assert_array_equal(st.F[0], [0.5, 0.1])
    np.testing.assert_array_equal(st.X[0], x_first)
    np.testing.assert_array_equal(st.X[1], incumbent_other[0])
    np.testing.assert_array_equal(st.F[1], incumbent_other[1])


def test_archive_run_scales_to_full_budget(zdt1_problem):
    cfg = (
        MOEADConfig()
        .decomposition("sld", H=99)
        .neighborhood("by_weight", T=20)
        .aggregation("wt")
        .stage("sbx")
        .stage("truncate")
        .update("standard")
        .archive()
        .fixed()
    )
    started = time.perf_counter()
    result = MOEAD(cfg).run(zdt1_problem(10), ("maxeval", {"n": 10000}), seed=3)
    elapsed = time.perf_counter() - started
    assert result.n_eval == 10000
    X_arch, F_arch = result.archive
    assert len(F_arch) >= result.F.shape[0] // 2
    assert np.all(non_dominated_mask(F_arch))
    assert elapsed < 30.0
