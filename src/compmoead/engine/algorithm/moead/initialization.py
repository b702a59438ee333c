# algorithm/moead/initialization.py
"""
Setup for a MOEA/D run.

Everything that can be validated without spending evaluations is validated
first: configuration keys, component names and parameters, stop criteria and
neighborhood sizes. Then one probe evaluation checks the problem's output
shapes, and only afterwards is the initial population sampled and evaluated.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

import numpy as np

from compmoead.engine.algorithm.components.aggregation import build_aggregator
from compmoead.engine.algorithm.components.archive import UnboundedArchive
from compmoead.engine.algorithm.components.constraint_handling import build_constraint_handler
from compmoead.engine.algorithm.components.neighborhood import NeighborhoodBuilder
from compmoead.engine.algorithm.components.registry import resolve_components
from compmoead.engine.algorithm.components.scaling import ObjectiveScaler
from compmoead.engine.algorithm.components.termination import StopCriteria
from compmoead.engine.algorithm.components.update import build_update_rule
from compmoead.engine.algorithm.components.variation import VariationPipeline
from compmoead.engine.algorithm.components.weight_vectors import generate_weight_vectors
from compmoead.foundation.exceptions import EvaluationError
from compmoead.foundation.problem import Problem, evaluate_batch, probe_problem
from compmoead.operators.real.initialize import INITIALIZERS

from .state import MOEADState


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def initialize_moead_run(
    cfg: Mapping[str, Any],
    problem: Problem,
    stop: Any,
    seed: int | None,
) -> MOEADState:
    """Initialize all components for a MOEA/D run.

    Parameters
    ----------
    cfg : Mapping[str, Any]
        Algorithm configuration (see ``MOEADConfig``).
    problem : Problem
        The optimization problem.
    stop : Any
        One stop criterion or a list of them, e.g. ``[("maxeval", {"n": 10000})]``.
    seed : int | None
        Seed of the single generator that drives every random draw of the run.

    Returns
    -------
    MOEADState
        State holding the evaluated initial population (generation 0).

    Raises
    ------
    ConfigurationError
        If the configuration, the stop criteria or the problem are inconsistent.
    EvaluationError
        If the problem callables fail on the probe or the initial population.
    """
    components = resolve_components(cfg)
    stop_criteria = StopCriteria(stop)
    n_constr = probe_problem(problem)

    rng = np.random.default_rng(seed)
    n_obj = problem.n_obj
    weights = generate_weight_vectors(components.decomposition, n_obj, rng)
    pop_size = weights.shape[0]

    neighborhood = NeighborhoodBuilder(components.neighborhood, pop_size)
    update_rule = build_update_rule(components.update)
    update_rule.prepare(weights)
    pipeline = VariationPipeline(components.variation, problem.xmin, problem.xmax)

    stop_criteria.start()
    X = INITIALIZERS[components.initializer](pop_size, problem.xmin, problem.xmax, rng)()
    F, cons = evaluate_batch(problem, X, generation=0)
    if cons.n_constr != n_constr:
        raise EvaluationError(
            f"constraint callable returned {cons.n_constr} columns, the probe returned {n_constr}",
            0,
            (0, pop_size - 1),
        )

    archive = None
    if components.archive:
        archive = UnboundedArchive(problem.n_var, n_obj)
        archive.update(X, F, cons.v)

    state = MOEADState(
        problem=problem,
        X=X,
        F=F,
        C=cons.C.copy(),
        V=cons.V.copy(),
        v=cons.v.copy(),
        weights=weights,
        neighbors=neighborhood.build(weights, X),
        ideal=F.min(axis=0),
        nadir=F.max(axis=0),
        rng=rng,
        aggregator=build_aggregator(components.aggregation),
        scaler=ObjectiveScaler(components.scaling),
        constraint_handler=build_constraint_handler(components.constraint),
        update_rule=update_rule,
        pipeline=pipeline,
        neighborhood=neighborhood,
        stop=stop_criteria,
        archive=archive,
        n_eval=pop_size,
        generation=0,
        history=[] if components.track_history else None,
    )
    state.record_history()

    _logger().info(
        "MOEA/D setup on '%s': N=%d, n_var=%d, n_obj=%d, n_constr=%d, T=%d (%s), aggregation=%s, update=%s, variation=%s",
        problem.name,
        pop_size,
        problem.n_var,
        n_obj,
        n_constr,
        neighborhood.T,
        neighborhood.method,
        components.aggregation.name,
        components.update.name,
        "+".join(pipeline.names),
    )
    return state


__all__ = ["initialize_moead_run"]
