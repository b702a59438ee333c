"""
MOEA/D state container and result building.

The population is an arena of contiguous arrays indexed by subproblem. Update
rules never copy or alias rows: they hand row indices to ``MOEADState.replace``,
which writes the trial into every target slot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

if TYPE_CHECKING:
    from compmoead.engine.algorithm.components.archive import UnboundedArchive
    from compmoead.engine.algorithm.components.constraint_handling import ConstraintHandler
    from compmoead.engine.algorithm.components.neighborhood import NeighborhoodBuilder
    from compmoead.engine.algorithm.components.scaling import ObjectiveScaler
    from compmoead.engine.algorithm.components.termination import StopCriteria
    from compmoead.engine.algorithm.components.update import UpdateRule
    from compmoead.engine.algorithm.components.variation import VariationPipeline
    from compmoead.foundation.problem import Problem


@dataclass(frozen=True)
class Trial:
    """One evaluated offspring: decision vector, objectives and constraint rows."""

    x: np.ndarray
    f: np.ndarray
    c: np.ndarray
    V: np.ndarray
    v: float


@dataclass
class MOEADState:
    """
    Mutable state container for one MOEA/D run.

    Attributes
    ----------
    X, F : np.ndarray
        Incumbent decision vectors (N, n_var) and objective values (N, n_obj).
    C, V : np.ndarray
        Raw constraint values and per-constraint violations (N, n_constr).
    v : np.ndarray
        Total constraint violation per incumbent, shape (N,).
    weights : np.ndarray
        Weight vectors, shape (N, n_obj).
    neighbors : np.ndarray
        Neighborhood table, shape (N, T).
    ideal, nadir : np.ndarray
        Running ideal point and current nadir estimate, shape (n_obj,).
    """

    problem: "Problem"
    X: np.ndarray
    F: np.ndarray
    C: np.ndarray
    V: np.ndarray
    v: np.ndarray
    weights: np.ndarray
    neighbors: np.ndarray
    ideal: np.ndarray
    nadir: np.ndarray
    rng: np.random.Generator
    aggregator: Callable[..., np.ndarray]
    scaler: "ObjectiveScaler"
    constraint_handler: "ConstraintHandler"
    update_rule: "UpdateRule"
    pipeline: "VariationPipeline"
    neighborhood: "NeighborhoodBuilder"
    stop: "StopCriteria"
    archive: "UnboundedArchive | None" = None
    n_eval: int = 0
    generation: int = 0
    history: list[tuple[int, int, np.ndarray]] | None = None

    # Pending offspring tracking for ask/tell
    pending_offspring: np.ndarray | None = None
    pending_pools: list[np.ndarray] | None = None

    @property
    def pop_size(self) -> int:
        return int(self.X.shape[0])

    def scaled_aggregate(
        self, F: np.ndarray, W: np.ndarray, ideal: np.ndarray, nadir: np.ndarray | None = None
    ) -> np.ndarray:
        """Aggregate ``F`` under weights ``W`` after the configured objective scaling."""
        if nadir is None:
            nadir = self.nadir
        F_s, ideal_s, nadir_s = self.scaler(np.asarray(F, dtype=float), ideal, nadir)
        return self.aggregator(F_s, W, ideal_s, nadir_s)

    def fitness(self, F_rows: np.ndarray, idx: np.ndarray) -> np.ndarray:
        """Fitness of objective rows ``F_rows`` under the subproblems ``idx`` (row-wise)."""
        return self.scaled_aggregate(F_rows, self.weights[idx], self.ideal, self.nadir)

    def replace(self, targets: np.ndarray, trial: Trial) -> None:
        """Write ``trial`` into the population slots ``targets``."""
        targets = np.asarray(targets, dtype=int)
        if targets.size == 0:
            return
        self.X[targets] = trial.x
        self.F[targets] = trial.f
        self.C[targets] = trial.c
        self.V[targets] = trial.V
        self.v[targets] = trial.v

    def record_history(self) -> None:
        if self.history is not None:
            self.history.append((self.generation, self.n_eval, self.ideal.copy()))


@dataclass(frozen=True)
class MOEADResult:
    """
    Outcome of a MOEA/D run.

    ``archive`` is an ``(X, F)`` tuple when the archive was enabled, otherwise
    ``None``. ``history`` holds ``(generation, n_eval, ideal)`` tuples when
    history tracking was enabled.
    """

    X: np.ndarray
    F: np.ndarray
    v: np.ndarray
    weights: np.ndarray
    archive: tuple[np.ndarray, np.ndarray] | None
    n_eval: int
    n_iter: int
    elapsed: float
    termination_reason: str | None
    history: tuple[tuple[int, int, np.ndarray], ...] = field(default_factory=tuple)

    @property
    def feasible(self) -> np.ndarray:
        return self.v <= 0.0

    def summary(self) -> dict[str, Any]:
        return {
            "n_eval": self.n_eval,
            "n_iter": self.n_iter,
            "elapsed": self.elapsed,
            "termination_reason": self.termination_reason,
            "n_feasible": int(np.count_nonzero(self.feasible)),
            "archive_size": None if self.archive is None else int(self.archive[1].shape[0]),
        }


def build_moead_result(state: MOEADState) -> MOEADResult:
    """
    Build the result object from MOEA/D state.

    Parameters
    ----------
    state : MOEADState
        Final algorithm state.

    Returns
    -------
    MOEADResult
        Copies of the population arrays plus counters and the stop reason.
    """
    archive = state.archive.contents() if state.archive is not None else None
    return MOEADResult(
        X=state.X.copy(),
        F=state.F.copy(),
        v=state.v.copy(),
        weights=state.weights.copy(),
        archive=archive,
        n_eval=int(state.n_eval),
        n_iter=int(state.generation),
        elapsed=float(state.stop.elapsed),
        termination_reason=state.stop.reason,
        history=tuple(state.history) if state.history is not None else (),
    )


__all__ = [
    "MOEADResult",
    "MOEADState",
    "Trial",
    "build_moead_result",
]
