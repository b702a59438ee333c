from __future__ import annotations

from typing import Literal, overload

import numpy as np


def dominates(a: np.ndarray, b: np.ndarray) -> bool:
    """Return True when objective vector ``a`` Pareto-dominates ``b`` (minimization)."""
    return bool(np.all(a <= b) and np.any(a < b))


def non_dominated_mask(F: np.ndarray) -> np.ndarray:
    """
    Boolean mask of the rows of ``F`` that no other row dominates.

    Duplicated rows are all kept; callers deduplicate if needed.
    """
    F = np.asarray(F, dtype=float)
    n = F.shape[0]
    if n == 0:
        return np.zeros(0, dtype=bool)
    leq = np.all(F[:, None, :] <= F[None, :, :], axis=2)
    lt = np.any(F[:, None, :] < F[None, :, :], axis=2)
    dominated_by = leq & lt  # [i, j]: i dominates j
    return ~np.any(dominated_by, axis=0)


@overload
def pareto_filter(F: np.ndarray, *, return_indices: Literal[False] = False) -> np.ndarray: ...


@overload
def pareto_filter(F: np.ndarray, *, return_indices: Literal[True]) -> tuple[np.ndarray, np.ndarray]: ...


def pareto_filter(F: np.ndarray, *, return_indices: bool = False) -> np.ndarray | tuple[np.ndarray, np.ndarray]:
    """
    Return the non-dominated subset of points (first Pareto front).

    Args:
        F: Objective values array (n_solutions, n_objectives).
        return_indices: When True, also return indices of the front in F.

    Returns:
        Front array, or (front, indices) when return_indices is True.
    """
    F = np.asarray(F, dtype=float)
    if F.ndim != 2 or F.shape[0] == 0:
        idx = np.arange(F.shape[0] if F.ndim else 0, dtype=int)
        return (F, idx) if return_indices else F
    idx = np.flatnonzero(non_dominated_mask(F))
    front = F[idx]
    return (front, idx) if return_indices else front


__all__ = ["dominates", "non_dominated_mask", "pareto_filter"]
