"""
External archive of non-dominated solutions.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from compmoead.foundation.pareto import non_dominated_mask


class UnboundedArchive:
    """
    Archive that keeps all non-dominated feasible solutions seen, without size limit.

    The archive is independent of the population: replacements in the
    population never remove archive members, only newly dominating solutions do.
    Rows whose objective vectors coincide (within ``objective_tolerance``) are
    stored once.
    """

    def __init__(self, n_var: int, n_obj: int, dtype: Any = float, *, objective_tolerance: float = 1e-10) -> None:
        if objective_tolerance < 0.0:
            raise ValueError("objective_tolerance must be >= 0.")
        self._n_var = int(n_var)
        self._n_obj = int(n_obj)
        self._dtype = np.dtype(dtype)
        self._objective_tolerance = float(objective_tolerance)
        self._X = np.empty((0, self._n_var), dtype=self._dtype)
        self._F = np.empty((0, self._n_obj), dtype=float)

    def __len__(self) -> int:
        return int(self._F.shape[0])

    def update(self, X: np.ndarray, F: np.ndarray, v: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray]:
        X = np.asarray(X, dtype=self._dtype)
        F = np.asarray(F, dtype=float)
        if X.ndim != 2 or F.ndim != 2 or X.shape[0] != F.shape[0]:
            raise ValueError("X and F must be 2D arrays with the same number of rows.")
        if X.shape[1] != self._n_var:
            raise ValueError(f"X has {X.shape[1]} columns, expected {self._n_var}.")
        if F.shape[1] != self._n_obj:
            raise ValueError(f"F has {F.shape[1]} columns, expected {self._n_obj}.")
        if v is not None:
            feasible = np.asarray(v, dtype=float) <= 0.0
            X, F = X[feasible], F[feasible]
        if X.shape[0] == 0:
            return self.contents()

        # Only the incoming rows are screened; archive members are mutually non-dominated already.
        front = np.flatnonzero(non_dominated_mask(F))
        front = front[self._first_unique(F[front])]
        X, F = X[front], F[front]

        if len(self):
            A = self._F
            dominated = _dominance(A, F)
            close = np.all(np.abs(A[:, None, :] - F[None, :, :]) <= self._objective_tolerance, axis=2)
            fresh = ~np.any(dominated | close, axis=0)
            X, F = X[fresh], F[fresh]
            if F.shape[0] == 0:
                return self.contents()
            survivors = ~np.any(_dominance(F, A), axis=0)
            self._X = np.vstack([self._X[survivors], X])
            self._F = np.vstack([A[survivors], F])
        else:
            self._X = X.copy()
            self._F = F.copy()
        return self.contents()

    def _first_unique(self, F: np.ndarray) -> np.ndarray:
        """Indices of the first occurrence of every distinct objective row, in input order."""
        if F.shape[0] < 2:
            return np.arange(F.shape[0])
        order = np.lexsort(F.T[::-1])
        repeat = np.all(np.abs(np.diff(F[order], axis=0)) <= self._objective_tolerance, axis=1)
        keep = np.ones(F.shape[0], dtype=bool)
        keep[order[1:][repeat]] = False
        return np.flatnonzero(keep)

    def contents(self) -> tuple[np.ndarray, np.ndarray]:
        return self._X.copy(), self._F.copy()


def _dominance(P: np.ndarray, Q: np.ndarray) -> np.ndarray:
    """``[i, j]`` is True when row ``P[i]`` dominates row ``Q[j]``."""
    leq = np.all(P[:, None, :] <= Q[None, :, :], axis=2)
    lt = np.any(P[:, None, :] < Q[None, :, :], axis=2)
    return leq & lt


__all__ = ["UnboundedArchive"]
