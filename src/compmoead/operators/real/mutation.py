"""Real-valued mutation stages."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .utils import ArrayLike, RealOperator, VariationContext, _ensure_bounds


class Mutation(RealOperator, ABC):
    """Base class for real-coded mutation stages."""

    @abstractmethod
    def __call__(self, X: ArrayLike, context: VariationContext) -> ArrayLike:
        raise NotImplementedError


class PolynomialMutation(Mutation):
    """Standard polynomial mutation; each gene mutates with probability ``prob``."""

    def __init__(
        self,
        prob_mutation: float,
        eta: float = 20.0,
        *,
        lower: ArrayLike,
        upper: ArrayLike,
    ) -> None:
        self.prob = float(prob_mutation)
        self.eta = float(eta)
        self.lower, self.upper = _ensure_bounds(lower, upper)
        self.span = self.upper - self.lower
        self._span_safe = np.where(self.span == 0.0, 1.0, self.span)

    def __call__(self, X: ArrayLike, context: VariationContext) -> ArrayLike:
        X = self._as_population(X, name="X")
        self._check_matches_context(X, context)
        rng = context.rng
        mask = rng.random(X.shape) <= self.prob
        rows, cols = np.nonzero(mask)
        if rows.size == 0:
            return X

        yl = self.lower[cols]
        yu = self.upper[cols]
        values = np.clip(X[rows, cols], yl, yu)
        span_vals = self.span[cols]
        span_safe = self._span_safe[cols]
        delta1 = (values - yl) / span_safe
        delta2 = (yu - values) / span_safe
        rnd = rng.random(rows.size)
        mut_pow = 1.0 / (self.eta + 1.0)
        deltaq = np.zeros(rows.size, dtype=float)

        idx_lower = rnd <= 0.5
        idx_upper = ~idx_lower
        if np.any(idx_lower):
            xy = 1.0 - delta1[idx_lower]
            val = 2.0 * rnd[idx_lower] + (1.0 - 2.0 * rnd[idx_lower]) * np.power(xy, self.eta + 1.0)
            deltaq[idx_lower] = np.power(val, mut_pow) - 1.0
        if np.any(idx_upper):
            xy = 1.0 - delta2[idx_upper]
            val = 2.0 * (1.0 - rnd[idx_upper]) + 2.0 * (rnd[idx_upper] - 0.5) * np.power(xy, self.eta + 1.0)
            deltaq[idx_upper] = 1.0 - np.power(val, mut_pow)

        values = np.clip(values + deltaq * span_vals, yl, yu)
        X[rows, cols] = values
        return X


class DifferentialMutation(Mutation):
    """Differential mutation ``basis + phi * (x_r1 - x_r2)`` over the mating pool.

    Bases:
        - ``rand``: a random pool member (``x_r3``), distinct from the difference pair.
        - ``mean``: centroid of the pool.
        - ``wgi``: weighted global intermediate, pool members weighted by how good
          they are under the subproblem's own weight vector.

    ``phi=None`` draws a fresh scale factor from U(0, 1) for every subproblem.
    Results are not clipped; a repair stage downstream handles the box.
    """

    BASES = ("rand", "mean", "wgi")

    def __init__(self, basis: str = "rand", phi: float | None = None) -> None:
        basis = basis.lower()
        if basis not in self.BASES:
            raise ValueError(f"Unsupported differential mutation basis '{basis}'.")
        self.basis = basis
        self.phi = None if phi is None else float(phi)

    def __call__(self, X: ArrayLike, context: VariationContext) -> ArrayLike:
        X = self._as_population(X, name="X", copy=False)
        self._check_matches_context(X, context)
        rng = context.rng
        out = np.empty_like(X)
        for i in range(X.shape[0]):
            phi = rng.random() if self.phi is None else self.phi
            if self.basis == "rand":
                pool = context.pool(i, 3)
                r1, r2, r3 = rng.choice(pool, size=3, replace=False)
                basis = X[r3]
            else:
                pool = context.pool(i, 2)
                r1, r2 = rng.choice(pool, size=2, replace=False)
                basis = self._intermediate(X, pool, i, context)
            out[i] = basis + phi * (X[r1] - X[r2])
        return out

    def _intermediate(self, X: np.ndarray, pool: np.ndarray, i: int, context: VariationContext) -> np.ndarray:
        if self.basis == "mean":
            return X[pool].mean(axis=0)
        fitness = context.scalar_fitness(pool, i)
        spread = fitness.max() - fitness
        total = spread.sum()
        if not np.isfinite(total) or total <= 0.0:
            return X[pool].mean(axis=0)
        return (spread / total) @ X[pool]


__all__ = ["DifferentialMutation", "Mutation", "PolynomialMutation"]
