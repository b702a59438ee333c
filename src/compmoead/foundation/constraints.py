"""
Constraint violation helpers.

Inequality constraints follow the ``g(x) <= 0`` convention, equality constraints
``h(x) = 0`` are satisfied within ``|h(x)| <= epsilon``.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ConstraintEvaluation:
    """Raw constraint values ``C``, per-constraint violations ``V`` and total violation ``v``."""

    C: np.ndarray
    V: np.ndarray
    v: np.ndarray

    @classmethod
    def unconstrained(cls, n: int) -> "ConstraintEvaluation":
        empty = np.zeros((n, 0), dtype=float)
        return cls(C=empty, V=empty.copy(), v=np.zeros(n, dtype=float))

    @property
    def n_constr(self) -> int:
        return int(self.C.shape[1])


def violation_matrix(
    G: np.ndarray | None,
    H: np.ndarray | None,
    *,
    n: int,
    epsilon: float = 0.0,
) -> ConstraintEvaluation:
    """Build ``C = [g | h]`` and ``V = [max(g, 0) | max(|h| - epsilon, 0)]``.

    Both blocks are optional; missing blocks contribute zero columns.
    """
    blocks_c = []
    blocks_v = []
    if G is not None:
        G = np.asarray(G, dtype=float).reshape(n, -1)
        blocks_c.append(G)
        blocks_v.append(np.maximum(G, 0.0))
    if H is not None:
        H = np.asarray(H, dtype=float).reshape(n, -1)
        blocks_c.append(H)
        blocks_v.append(np.maximum(np.abs(H) - float(epsilon), 0.0))
    if not blocks_c:
        return ConstraintEvaluation.unconstrained(n)
    C = np.hstack(blocks_c)
    V = np.hstack(blocks_v)
    return ConstraintEvaluation(C=C, V=V, v=compute_violation(V))


def compute_violation(V: np.ndarray | None, *, n: int | None = None) -> np.ndarray:
    """Row sums of a non-negative violation matrix.

    When *V* is ``None`` (unconstrained) an array of ``n`` zeros is returned.
    """
    if V is None:
        return np.zeros(n or 0, dtype=float)
    V = np.asarray(V, dtype=float)
    if V.ndim == 1:
        V = V[:, None]
    return np.asarray(np.sum(V, axis=1), dtype=float)


def is_feasible(v: np.ndarray | None, *, n: int | None = None) -> np.ndarray:
    """Boolean feasibility mask from total violations (``v == 0``)."""
    if v is None:
        return np.ones(n or 0, dtype=bool)
    return np.asarray(v, dtype=float) <= 0.0


__all__ = ["ConstraintEvaluation", "compute_violation", "is_feasible", "violation_matrix"]
