# algorithm/components/update.py
"""
Update rules: which incumbents a trial solution replaces.

A rule is applied once per subproblem and generation, in the (randomised)
order chosen by the main loop, and writes straight into the population arena
of the state through row indices. Comparisons go through the configured
constraint handler, so feasibility rules apply identically to every rule.

- ``standard``: every incumbent in the candidate pool that the trial beats is replaced.
- ``restricted``: scan the pool in random order, stop after ``nr`` replacements.
- ``best``: find the subproblem whose weight gives the trial its best
  aggregation value, then run the restricted scan over its ``Tr`` nearest
  (weight-space) neighbors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

from .base import ComponentSpec, require, resolve_component
from .neighborhood import compute_neighbors

if TYPE_CHECKING:
    from compmoead.engine.algorithm.moead.state import MOEADState, Trial


@dataclass(frozen=True)
class StandardParams:
    pass


@dataclass(frozen=True)
class RestrictedParams:
    nr: int = 2

    def __post_init__(self) -> None:
        require(int(self.nr) >= 1, "update 'restricted'", f"nr must be >= 1, got {self.nr}")


@dataclass(frozen=True)
class BestParams:
    nr: int = 1
    Tr: int = 1

    def __post_init__(self) -> None:
        require(int(self.nr) >= 1, "update 'best'", f"nr must be >= 1, got {self.nr}")
        require(int(self.Tr) >= 1, "update 'best'", f"Tr must be >= 1, got {self.Tr}")


UPDATE_PARAMS: dict[str, type] = {
    "standard": StandardParams,
    "restricted": RestrictedParams,
    "best": BestParams,
}


class UpdateRule(Protocol):
    def prepare(self, weights: np.ndarray) -> None: ...

    def apply(self, st: "MOEADState", trial: "Trial", pool: np.ndarray) -> int: ...


def _winners(st: "MOEADState", trial: "Trial", candidates: np.ndarray) -> np.ndarray:
    """Mask of ``candidates`` whose incumbent loses against ``trial``."""
    f_inc = st.fitness(st.F[candidates], candidates)
    f_trial = st.fitness(np.broadcast_to(trial.f, (candidates.size, trial.f.size)), candidates)
    return np.asarray(st.constraint_handler.wins(f_trial, trial.v, f_inc, st.v[candidates], st.rng), dtype=bool)


class StandardUpdate:
    def prepare(self, weights: np.ndarray) -> None:  # pylint: disable=unused-argument
        return None

    def apply(self, st: "MOEADState", trial: "Trial", pool: np.ndarray) -> int:
        pool = np.asarray(pool, dtype=int)
        if pool.size == 0:
            return 0
        targets = pool[_winners(st, trial, pool)]
        st.replace(targets, trial)
        return int(targets.size)


class RestrictedUpdate:
    def __init__(self, params: RestrictedParams) -> None:
        self.nr = int(params.nr)

    def prepare(self, weights: np.ndarray) -> None:  # pylint: disable=unused-argument
        return None

    def apply(self, st: "MOEADState", trial: "Trial", pool: np.ndarray) -> int:
        pool = np.asarray(pool, dtype=int)
        if pool.size == 0:
            return 0
        order = st.rng.permutation(pool)
        # Scanning the permuted pool and stopping after nr hits keeps the first nr winners.
        targets = order[_winners(st, trial, order)][: self.nr]
        st.replace(targets, trial)
        return int(targets.size)


class BestSubproblemUpdate:
    def __init__(self, params: BestParams) -> None:
        self.nr = int(params.nr)
        self.Tr = int(params.Tr)
        self._weight_neighbors: np.ndarray | None = None

    def prepare(self, weights: np.ndarray) -> None:
        require(
            self.Tr <= weights.shape[0],
            "update 'best'",
            f"Tr={self.Tr} exceeds the population size N={weights.shape[0]}",
        )
        self._weight_neighbors = compute_neighbors(weights, self.Tr)

    def apply(self, st: "MOEADState", trial: "Trial", pool: np.ndarray) -> int:  # pylint: disable=unused-argument
        if self._weight_neighbors is None:
            self.prepare(st.weights)
        all_idx = np.arange(st.pop_size)
        scores = st.fitness(np.broadcast_to(trial.f, (st.pop_size, trial.f.size)), all_idx)
        best = int(np.argmin(scores))
        order = st.rng.permutation(self._weight_neighbors[best])
        targets = order[_winners(st, trial, order)][: self.nr]
        st.replace(targets, trial)
        return int(targets.size)


def resolve_update(spec: Any) -> ComponentSpec:
    return resolve_component("update", spec, UPDATE_PARAMS)


def build_update_rule(spec: Any) -> UpdateRule:
    resolved = spec if isinstance(spec, ComponentSpec) else resolve_update(spec)
    if resolved.name == "standard":
        return StandardUpdate()
    if resolved.name == "restricted":
        return RestrictedUpdate(resolved.params)
    return BestSubproblemUpdate(resolved.params)


__all__ = [
    "BestSubproblemUpdate",
    "RestrictedUpdate",
    "StandardUpdate",
    "UPDATE_PARAMS",
    "UpdateRule",
    "build_update_rule",
    "resolve_update",
]
