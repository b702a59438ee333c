# algorithm/moead/moead.py
"""
Component-based MOEA/D core.

This module contains the MOEAD class with the evolutionary loop (run/ask/tell).
- Setup logic: initialization.py
- State and results: state.py
- Components (decomposition, neighborhood, aggregation, variation, update,
  constraint handling, scaling, stop criteria): ``compmoead.engine.algorithm.components``

References:
    Q. Zhang and H. Li, "MOEA/D: A Multiobjective Evolutionary Algorithm Based on
    Decomposition," IEEE Trans. Evolutionary Computation, vol. 11, no. 6, 2007.

    F. Campelo, L. S. Batista and C. Aranha, "The MOEADr Package: A Component-Based
    Framework for Multiobjective Evolutionary Algorithms Based on Decomposition,"
    Journal of Statistical Software, vol. 92, no. 6, 2020.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import numpy as np

from compmoead.foundation.constraints import ConstraintEvaluation
from compmoead.foundation.exceptions import EvaluationError
from compmoead.foundation.problem import Problem, evaluate_batch
from compmoead.operators.real.utils import VariationContext

from .initialization import initialize_moead_run
from .state import MOEADResult, MOEADState, Trial, build_moead_result


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class MOEAD:
    """
    Multi-Objective Evolutionary Algorithm based on Decomposition.

    Every part of the algorithm is a configurable component selected by name:
    weight generation, neighborhood definition, aggregation, the ordered
    variation stack, the update rule, constraint handling and objective
    scaling. Subproblems are updated sequentially in a random order each
    generation, so each replacement is visible to the subproblems that follow.

    Parameters
    ----------
    config : Mapping or MOEADConfigData
        Algorithm configuration with keys:
        - decomposition (tuple): e.g. ("sld", {"H": 99})
        - neighborhood (tuple): e.g. ("by_weight", {"T": 20, "delta_p": 1.0})
        - aggregation (tuple): e.g. ("wt", {}) or ("pbi", {"theta": 5.0})
        - variation (list): ordered stages, e.g. [("sbx", {}), ("polymut", {}), ("truncate", {})]
        - update (tuple): e.g. ("restricted", {"nr": 2})
        - constraint (tuple, optional): e.g. ("penalty", {"beta": 1.0}); defaults to "feasibility"
        - scaling (str, optional): "none" or "simple"
        - initializer (str, optional): "uniform" or "lhs"
        - archive (bool, optional): keep an unbounded non-dominated archive
        - track_history (bool, optional): record the ideal point per generation

    Examples
    --------
    >>> from compmoead import MOEADConfig
    >>> config = MOEADConfig.default()
    >>> result = MOEAD(config).run(problem, [("maxeval", {"n": 10000})], seed=42)

    Using ask/tell for external evaluation:
    >>> moead = MOEAD(config)
    >>> moead.initialize(problem, ("maxiter", {"n": 50}), seed=42)
    >>> while not moead.should_stop():
    ...     X_off = moead.ask()
    ...     F_off = my_external_evaluator(X_off)
    ...     moead.tell(F_off)
    """

    def __init__(self, config: Mapping[str, Any] | Any) -> None:
        if hasattr(config, "to_dict"):
            config = config.to_dict()
        self.cfg = dict(config)
        self._st: MOEADState | None = None

    @property
    def state(self) -> MOEADState | None:
        return self._st

    def run(self, problem: Problem, stop: Any, seed: int | None = None) -> MOEADResult:
        """
        Run MOEA/D until one of the stop criteria fires.

        Parameters
        ----------
        problem : Problem
            The optimization problem to solve.
        stop : Any
            Stop criteria combined with logical OR, e.g.
            ``[("maxeval", {"n": 10000}), ("maxtime", {"seconds": 60})]``.
        seed : int | None
            Random seed for reproducibility.

        Returns
        -------
        MOEADResult
            Final population, objectives, optional archive and counters.
        """
        st = self.initialize(problem, stop, seed)

        while not self.should_stop():
            X_off = self.ask()
            F_off, cons = evaluate_batch(problem, X_off, generation=st.generation)
            self.tell(F_off, cons)

        _logger().info(
            "MOEA/D finished on '%s': reason=%s, generations=%d, evaluations=%d, elapsed=%.3fs",
            problem.name,
            st.stop.reason,
            st.generation,
            st.n_eval,
            st.stop.elapsed,
        )
        return build_moead_result(st)

    def initialize(self, problem: Problem, stop: Any, seed: int | None = None) -> MOEADState:
        """Validate the configuration and evaluate the initial population."""
        self._st = initialize_moead_run(self.cfg, problem, stop, seed)
        return self._st

    def should_stop(self) -> bool:
        """Check the stop criteria; only meaningful at generation boundaries."""
        st = self._require_state("should_stop")
        return st.stop.check(st) is not None

    def ask(self) -> np.ndarray:
        """
        Produce one trial vector per subproblem.

        Returns
        -------
        np.ndarray
            Offspring decision variables to evaluate, shape (pop_size, n_var).

        Raises
        ------
        RuntimeError
            If called before initialization or twice without ``tell``.
        """
        st = self._require_state("ask")
        if st.pending_offspring is not None:
            raise RuntimeError("ask() called again before tell().")

        if not st.neighborhood.static and st.generation > 0:
            st.neighbors = st.neighborhood.build(st.weights, st.X)
        scope = st.neighborhood.sample_scope(st.rng)
        pools = st.neighborhood.pools(st.neighbors, scope, st.rng)

        context = VariationContext(
            incumbents=st.X.copy(),
            F=st.F.copy(),
            pools=pools,
            weights=st.weights,
            ideal=st.ideal.copy(),
            nadir=st.nadir.copy(),
            aggregator=st.scaled_aggregate,
            lower=st.problem.xmin,
            upper=st.problem.xmax,
            rng=st.rng,
            generation=st.generation,
        )
        offspring = st.pipeline(context)

        st.pending_offspring = offspring
        st.pending_pools = pools
        return offspring.copy()

    def tell(self, F: np.ndarray, constraints: ConstraintEvaluation | None = None) -> None:
        """
        Receive the evaluated offspring and update the population.

        Parameters
        ----------
        F : np.ndarray
            Objective values of the offspring returned by ``ask``, shape (pop_size, n_obj).
        constraints : ConstraintEvaluation | None
            Constraint evaluation of the offspring; ``None`` for unconstrained problems.

        Raises
        ------
        RuntimeError
            If called before initialization or without a pending ``ask``.
        EvaluationError
            If the shapes disagree with the problem.
        """
        st = self._require_state("tell")
        children = st.pending_offspring
        pools = st.pending_pools
        if children is None or pools is None:
            raise RuntimeError("tell() called without a pending ask().")

        n = children.shape[0]
        rows = (0, n - 1)
        F = np.asarray(F, dtype=float)
        if F.shape != (n, st.problem.n_obj):
            raise EvaluationError(f"offspring objectives have shape {F.shape}, expected {(n, st.problem.n_obj)}", st.generation, rows)
        if constraints is None:
            constraints = ConstraintEvaluation.unconstrained(n)
        if constraints.C.shape != (n, st.C.shape[1]):
            raise EvaluationError(
                f"offspring constraints have shape {constraints.C.shape}, expected {(n, st.C.shape[1])}",
                st.generation,
                rows,
            )

        st.pending_offspring = None
        st.pending_pools = None
        st.n_eval += n

        st.ideal = np.minimum(st.ideal, F.min(axis=0))
        st.nadir = np.vstack([st.F, F]).max(axis=0)

        replaced = 0
        for i in st.rng.permutation(n):
            trial = Trial(
                x=children[i],
                f=F[i],
                c=constraints.C[i],
                V=constraints.V[i],
                v=float(constraints.v[i]),
            )
            replaced += st.update_rule.apply(st, trial, pools[i])

        if st.archive is not None:
            st.archive.update(children, F, constraints.v)

        st.generation += 1
        st.record_history()
        _logger().debug(
            "generation %d: evaluations=%d, replacements=%d, feasible=%d/%d, ideal=%s",
            st.generation,
            st.n_eval,
            replaced,
            int(np.count_nonzero(st.v <= 0.0)),
            st.pop_size,
            np.array2string(st.ideal, precision=4),
        )

    def result(self) -> MOEADResult:
        return build_moead_result(self._require_state("result"))

    def _require_state(self, caller: str) -> MOEADState:
        if self._st is None:
            raise RuntimeError(f"{caller}() called before initialization.")
        return self._st


__all__ = ["MOEAD"]
