"""Shared utilities for real-valued variation operators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, Tuple

import numpy as np

ArrayLike = np.ndarray


@dataclass
class VariationContext:
    """
    Read-only view of the generation handed to every variation stage.

    Attributes:
        incumbents: Population at the start of the generation (N x n_var).
        F: Incumbent objective values (N x n_obj).
        pools: Mating pool (subproblem indices) per subproblem.
        weights: Weight matrix (N x n_obj).
        ideal: Current reference point.
        nadir: Current nadir estimate.
        aggregator: Scalarization ``(F, W, ideal, nadir) -> values``.
        lower: Lower bounds.
        upper: Upper bounds.
        rng: Generator shared by every stochastic stage of the run.
        generation: Index of the generation being produced.
    """

    incumbents: np.ndarray
    F: np.ndarray
    pools: Sequence[np.ndarray]
    weights: np.ndarray
    ideal: np.ndarray
    nadir: np.ndarray
    aggregator: Callable[..., np.ndarray]
    lower: np.ndarray
    upper: np.ndarray
    rng: np.random.Generator
    generation: int = 0

    @property
    def pop_size(self) -> int:
        return int(self.incumbents.shape[0])

    def pool(self, i: int, min_size: int, exclude_self: bool = False) -> np.ndarray:
        """Mating pool of ``i``; the whole population when the pool is too small."""
        candidates = np.asarray(self.pools[i], dtype=int)
        if exclude_self:
            candidates = candidates[candidates != i]
        if candidates.size < min_size:
            candidates = np.arange(self.pop_size)
            if exclude_self:
                candidates = candidates[candidates != i]
        return candidates

    def scalar_fitness(self, rows: np.ndarray, i: int) -> np.ndarray:
        """Fitness of incumbents ``rows`` measured under subproblem ``i``."""
        return self.aggregator(self.F[rows], self.weights[i], self.ideal, self.nadir)


def _ensure_bounds(lower: ArrayLike, upper: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
    """Validate bounds and return float arrays of identical shape."""
    lower_arr = np.asarray(lower, dtype=float)
    upper_arr = np.asarray(upper, dtype=float)
    if lower_arr.shape != upper_arr.shape:
        raise ValueError("lower and upper bounds must have the same shape.")
    if lower_arr.ndim != 1:
        raise ValueError("Bounds must be one-dimensional arrays.")
    if np.any(lower_arr > upper_arr):
        raise ValueError("Each lower bound must be <= corresponding upper bound.")
    return lower_arr, upper_arr


def _clip_population(x: ArrayLike, lower: ArrayLike, upper: ArrayLike) -> np.ndarray:
    """Return a clipped copy of x inside [lower, upper]."""
    return np.clip(x, lower, upper)


class RealOperator:
    """Common validation utilities shared by all real-coded stages."""

    @staticmethod
    def _as_population(
        values: ArrayLike,
        *,
        name: str,
        copy: bool = True,
    ) -> np.ndarray:
        arr = np.asarray(values, dtype=float)
        if arr.ndim != 2:
            raise ValueError(f"{name} must have shape (n_individuals, n_vars).")
        return arr.copy() if copy else arr

    @staticmethod
    def _check_matches_context(X: np.ndarray, context: VariationContext) -> None:
        if X.shape != context.incumbents.shape:
            raise ValueError(
                f"Stage input has shape {X.shape}, expected {context.incumbents.shape} (one row per subproblem)."
            )


__all__ = [
    "ArrayLike",
    "RealOperator",
    "VariationContext",
    "_clip_population",
    "_ensure_bounds",
]
