"""
Problem descriptor and batch evaluation.

A :class:`Problem` wraps user-supplied callables that map a candidate matrix
``X`` (N x n_var) to objectives (N x n_obj) and, optionally, to constraint
blocks. Callables always receive the whole batch plus a structured
:class:`EvaluationContext`; there is no per-individual evaluation path.

Example:
    >>> import numpy as np
    >>> def zdt1(X, context):
    ...     f1 = X[:, 0]
    ...     g = 1.0 + 9.0 * X[:, 1:].mean(axis=1)
    ...     return np.column_stack([f1, g * (1.0 - np.sqrt(f1 / g))])
    >>> problem = Problem(objective=zdt1, xmin=np.zeros(10), xmax=np.ones(10), n_obj=2)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol

import numpy as np

from .constraints import ConstraintEvaluation, violation_matrix
from .exceptions import BoundsError, EvaluationError, ProblemDimensionError


@dataclass(frozen=True, eq=False)
class EvaluationContext:
    """Documented fields handed to every objective/constraint callable."""

    n_var: int
    n_obj: int
    epsilon: float
    generation: int
    xmin: np.ndarray
    xmax: np.ndarray


class ObjectiveFunction(Protocol):
    def __call__(self, X: np.ndarray, context: EvaluationContext) -> np.ndarray: ...


class ConstraintFunction(Protocol):
    def __call__(self, X: np.ndarray, context: EvaluationContext) -> Mapping[str, np.ndarray]: ...


@dataclass(frozen=True, eq=False)
class Problem:
    """
    Immutable multi-objective problem descriptor.

    Attributes:
        objective: Batch objective callable ``(X, context) -> F``.
        xmin: Lower bounds, one per decision variable.
        xmax: Upper bounds, one per decision variable.
        n_obj: Number of objectives (must be > 1).
        constraints: Optional batch callable returning a mapping with ``"g"``
            (inequalities, ``g <= 0``) and/or ``"h"`` (equalities).
        epsilon: Tolerance for equality constraints.
        name: Label used in log messages and results.
    """

    objective: ObjectiveFunction
    xmin: np.ndarray
    xmax: np.ndarray
    n_obj: int
    constraints: ConstraintFunction | None = None
    epsilon: float = 1e-4
    name: str = "problem"

    def __post_init__(self) -> None:
        xmin = np.atleast_1d(np.asarray(self.xmin, dtype=float))
        xmax = np.atleast_1d(np.asarray(self.xmax, dtype=float))
        if xmin.ndim != 1 or xmax.ndim != 1:
            raise BoundsError("xmin and xmax must be one-dimensional.")
        if xmin.shape != xmax.shape:
            raise BoundsError(f"xmin has {xmin.size} entries but xmax has {xmax.size}.")
        if xmin.size == 0:
            raise ProblemDimensionError("A problem needs at least one decision variable.", n_var=0)
        if not (np.all(np.isfinite(xmin)) and np.all(np.isfinite(xmax))):
            raise BoundsError("Bounds must be finite.")
        if np.any(xmin > xmax):
            bad = np.flatnonzero(xmin > xmax).tolist()
            raise BoundsError(f"xmin > xmax for variables {bad}.")
        if int(self.n_obj) < 2:
            raise ProblemDimensionError(
                f"Decomposition needs at least two objectives, got n_obj={self.n_obj}.",
                n_var=int(xmin.size),
                n_obj=int(self.n_obj),
            )
        if float(self.epsilon) < 0.0:
            raise ProblemDimensionError("epsilon must be non-negative.")
        if not callable(self.objective):
            raise ProblemDimensionError("objective must be callable.")
        if self.constraints is not None and not callable(self.constraints):
            raise ProblemDimensionError("constraints must be callable or None.")
        xmin.setflags(write=False)
        xmax.setflags(write=False)
        object.__setattr__(self, "xmin", xmin)
        object.__setattr__(self, "xmax", xmax)
        object.__setattr__(self, "n_obj", int(self.n_obj))
        object.__setattr__(self, "epsilon", float(self.epsilon))

    @property
    def n_var(self) -> int:
        return int(self.xmin.size)

    @property
    def constrained(self) -> bool:
        return self.constraints is not None

    def context(self, generation: int = 0) -> EvaluationContext:
        return EvaluationContext(
            n_var=self.n_var,
            n_obj=self.n_obj,
            epsilon=self.epsilon,
            generation=int(generation),
            xmin=self.xmin,
            xmax=self.xmax,
        )


def _call(
    fn: Callable[..., Any],
    X: np.ndarray,
    ctx: EvaluationContext,
    what: str,
    generation: int | None,
    rows: tuple[int, int],
) -> Any:
    try:
        return fn(X, context=ctx)
    except EvaluationError:
        raise
    except Exception as exc:
        raise EvaluationError(f"{what} callable raised {type(exc).__name__}: {exc}", generation, rows) from exc


def evaluate_batch(
    problem: Problem,
    X: np.ndarray,
    *,
    generation: int | None = None,
) -> tuple[np.ndarray, ConstraintEvaluation]:
    """
    Evaluate a whole candidate matrix in one call per callable.

    Returns:
        (F, constraint evaluation) with ``F`` of shape (N, n_obj).

    Raises:
        EvaluationError: If a callable raises or returns a malformed array.
    """
    X = np.asarray(X, dtype=float)
    n = X.shape[0]
    rows = (0, max(n - 1, 0))
    ctx = problem.context(generation or 0)

    F = np.asarray(_call(problem.objective, X, ctx, "objective", generation, rows), dtype=float)
    if F.ndim == 1 and n == 1:
        F = F.reshape(1, -1)
    if F.shape != (n, problem.n_obj):
        raise EvaluationError(
            f"objective returned shape {F.shape}, expected {(n, problem.n_obj)}", generation, rows
        )

    if problem.constraints is None:
        return F, ConstraintEvaluation.unconstrained(n)

    raw = _call(problem.constraints, X, ctx, "constraint", generation, rows)
    if not isinstance(raw, Mapping) or not ({"g", "h"} & set(raw)):
        raise EvaluationError("constraint callable must return a mapping with 'g' and/or 'h'", generation, rows)
    blocks = {}
    for key in ("g", "h"):
        block = raw.get(key)
        if block is None:
            continue
        arr = np.asarray(block, dtype=float)
        if arr.ndim == 1:
            arr = arr[:, None] if arr.shape[0] == n else arr[None, :]
        if arr.ndim != 2 or arr.shape[0] != n:
            raise EvaluationError(f"constraint block '{key}' has shape {np.shape(block)}, expected ({n}, k)", generation, rows)
        blocks[key] = arr
    return F, violation_matrix(blocks.get("g"), blocks.get("h"), n=n, epsilon=problem.epsilon)


def probe_problem(problem: Problem) -> int:
    """Evaluate the bounds midpoint once and check output shapes.

    Returns the number of constraint columns reported by the probe.

    Raises:
        ProblemDimensionError: If outputs disagree with the declared dimensions.
        EvaluationError: If a callable raises during the probe.
    """
    x_mid = (0.5 * (problem.xmin + problem.xmax)).reshape(1, -1)
    try:
        _, cons = evaluate_batch(problem, x_mid, generation=None)
    except EvaluationError as exc:
        if exc.__cause__ is None:
            raise ProblemDimensionError(
                f"Probe evaluation of '{problem.name}' failed: {exc.message}",
                n_var=problem.n_var,
                n_obj=problem.n_obj,
            ) from exc
        raise
    return cons.n_constr


__all__ = [
    "ConstraintFunction",
    "EvaluationContext",
    "ObjectiveFunction",
    "Problem",
    "evaluate_batch",
    "probe_problem",
]
