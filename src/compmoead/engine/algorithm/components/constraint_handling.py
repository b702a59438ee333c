"""
Constraint handling: who wins when a trial solution meets an incumbent.

All handlers expose ``wins(f_trial, v_trial, f_inc, v_inc, rng)`` returning a
boolean array (True where the trial strictly beats the incumbent). ``f`` are
aggregated fitness values (lower is better) and ``v`` total violations
(0 means feasible). Ties never replace.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np

from .base import ComponentSpec, require, resolve_component


def constraint_dominance(
    f_trial: np.ndarray | float,
    v_trial: np.ndarray | float,
    f_inc: np.ndarray | float,
    v_inc: np.ndarray | float,
) -> np.ndarray:
    """Feasibility-first comparison.

    Both feasible: lower fitness wins. Exactly one feasible: it wins. Both
    infeasible: lower total violation wins.
    """
    f_trial = np.asarray(f_trial, dtype=float)
    f_inc = np.asarray(f_inc, dtype=float)
    v_trial = np.asarray(v_trial, dtype=float)
    v_inc = np.asarray(v_inc, dtype=float)
    feas_trial = v_trial <= 0.0
    feas_inc = v_inc <= 0.0
    both_feasible = feas_trial & feas_inc
    both_infeasible = ~feas_trial & ~feas_inc
    return (
        (both_feasible & (f_trial < f_inc))
        | (feas_trial & ~feas_inc)
        | (both_infeasible & (v_trial < v_inc))
    )


class ConstraintHandler(Protocol):
    def wins(
        self,
        f_trial: np.ndarray,
        v_trial: np.ndarray,
        f_inc: np.ndarray,
        v_inc: np.ndarray,
        rng: np.random.Generator,
    ) -> np.ndarray: ...


@dataclass(frozen=True)
class NoParams:
    pass


@dataclass(frozen=True)
class PenaltyParams:
    beta: float = 1.0

    def __post_init__(self) -> None:
        require(float(self.beta) >= 0.0, "constraint 'penalty'", f"beta must be >= 0, got {self.beta}")


@dataclass(frozen=True)
class StochasticRankingParams:
    pf: float = 0.4

    def __post_init__(self) -> None:
        require(0.0 <= float(self.pf) <= 1.0, "constraint 'stochastic_ranking'", f"pf must lie in [0, 1], got {self.pf}")


CONSTRAINT_PARAMS: dict[str, type] = {
    "none": NoParams,
    "feasibility": NoParams,
    "penalty": PenaltyParams,
    "stochastic_ranking": StochasticRankingParams,
}

CONSTRAINT_ALIASES = {
    "vbr": "feasibility",
    "constraint_dominance": "feasibility",
    "sr": "stochastic_ranking",
}


class IgnoreConstraints:
    """Fitness-only comparison; violations are ignored."""

    def wins(self, f_trial, v_trial, f_inc, v_inc, rng):  # pylint: disable=unused-argument
        return np.asarray(f_trial, dtype=float) < np.asarray(f_inc, dtype=float)


class FeasibilityFirst:
    def wins(self, f_trial, v_trial, f_inc, v_inc, rng):  # pylint: disable=unused-argument
        return constraint_dominance(f_trial, v_trial, f_inc, v_inc)


class PenaltyHandling:
    """Compare ``f + beta * v``."""

    def __init__(self, params: PenaltyParams) -> None:
        self.beta = float(params.beta)

    def wins(self, f_trial, v_trial, f_inc, v_inc, rng):  # pylint: disable=unused-argument
        trial = np.asarray(f_trial, dtype=float) + self.beta * np.asarray(v_trial, dtype=float)
        inc = np.asarray(f_inc, dtype=float) + self.beta * np.asarray(v_inc, dtype=float)
        return trial < inc


class StochasticRanking:
    """Compare fitness when both are feasible or with probability ``pf``, violation otherwise."""

    def __init__(self, params: StochasticRankingParams) -> None:
        self.pf = float(params.pf)

    def wins(self, f_trial, v_trial, f_inc, v_inc, rng):
        f_trial, f_inc = np.broadcast_arrays(np.asarray(f_trial, dtype=float), np.asarray(f_inc, dtype=float))
        v_trial, v_inc = np.broadcast_arrays(np.asarray(v_trial, dtype=float), np.asarray(v_inc, dtype=float))
        both_feasible = (v_trial <= 0.0) & (v_inc <= 0.0)
        by_fitness = both_feasible | (rng.random(f_trial.shape) < self.pf)
        return np.where(by_fitness, f_trial < f_inc, v_trial < v_inc)


def resolve_constraint_handling(spec: Any) -> ComponentSpec:
    return resolve_component("constraint", spec, CONSTRAINT_PARAMS, CONSTRAINT_ALIASES)


def build_constraint_handler(spec: Any) -> ConstraintHandler:
    resolved = spec if isinstance(spec, ComponentSpec) else resolve_constraint_handling(spec)
    if resolved.name == "none":
        return IgnoreConstraints()
    if resolved.name == "feasibility":
        return FeasibilityFirst()
    if resolved.name == "penalty":
        return PenaltyHandling(resolved.params)
    return StochasticRanking(resolved.params)


__all__ = [
    "CONSTRAINT_PARAMS",
    "ConstraintHandler",
    "FeasibilityFirst",
    "IgnoreConstraints",
    "PenaltyHandling",
    "StochasticRanking",
    "build_constraint_handler",
    "constraint_dominance",
    "resolve_constraint_handling",
]
