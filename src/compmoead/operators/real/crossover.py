"""Real-valued recombination stages."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .utils import ArrayLike, RealOperator, VariationContext, _ensure_bounds


class Crossover(RealOperator, ABC):
    """Base class for real-coded recombination stages."""

    @abstractmethod
    def __call__(self, X: ArrayLike, context: VariationContext) -> ArrayLike:
        raise NotImplementedError


class SBXCrossover(Crossover):
    """Simulated Binary Crossover (SBX).

    For each subproblem two distinct parents are drawn from its mating pool
    (rows of the stage input); one of the two SBX children is kept.
    """

    def __init__(
        self,
        prob_crossover: float = 1.0,
        eta: float = 20.0,
        *,
        lower: ArrayLike,
        upper: ArrayLike,
    ) -> None:
        self.prob = float(prob_crossover)
        self.eta = float(eta)
        self.lower, self.upper = _ensure_bounds(lower, upper)

    def select_parents(self, context: VariationContext) -> np.ndarray:
        rng = context.rng
        pairs = np.empty((context.pop_size, 2), dtype=int)
        for i in range(context.pop_size):
            pool = context.pool(i, 2)
            pairs[i] = rng.choice(pool, size=2, replace=False)
        return pairs

    def __call__(self, X: ArrayLike, context: VariationContext) -> ArrayLike:
        X = self._as_population(X, name="X", copy=False)
        self._check_matches_context(X, context)
        rng = context.rng
        pairs = self.select_parents(context)
        parent1 = X[pairs[:, 0]].copy()
        parent2 = X[pairs[:, 1]].copy()
        c1, c2 = self._sbx(parent1, parent2, rng)

        apply_mask = rng.random(X.shape[0]) <= self.prob
        keep_first = rng.random(X.shape[0]) < 0.5
        child = np.where(keep_first[:, None], c1, c2)
        return np.where(apply_mask[:, None], child, parent1)

    def _sbx(self, parent1: np.ndarray, parent2: np.ndarray, rng: np.random.Generator) -> tuple[np.ndarray, np.ndarray]:
        eps = 1.0e-14
        y1 = np.minimum(parent1, parent2)
        y2 = np.maximum(parent1, parent2)
        diff = y2 - y1
        safe_diff = diff.clip(min=eps)

        xl = self.lower.reshape(1, -1)
        xu = self.upper.reshape(1, -1)
        rand = rng.random(parent1.shape)
        betaq = np.empty_like(parent1)
        inv_eta = 1.0 / (self.eta + 1.0)

        # Parents may sit outside the box after earlier stages; keep beta positive.
        beta = np.maximum(1.0 + (2.0 * (y1 - xl) / safe_diff), eps)
        alpha = np.maximum(2.0 - np.power(beta, -(self.eta + 1.0)), eps)
        term = rand <= (1.0 / alpha)
        betaq[term] = np.power(rand[term] * alpha[term], inv_eta)
        betaq[~term] = np.power(1.0 / (2.0 - rand[~term] * alpha[~term]), inv_eta)
        c1 = 0.5 * ((y1 + y2) - betaq * diff)

        beta = np.maximum(1.0 + (2.0 * (xu - y2) / safe_diff), eps)
        alpha = np.maximum(2.0 - np.power(beta, -(self.eta + 1.0)), eps)
        term = rand <= (1.0 / alpha)
        betaq[term] = np.power(rand[term] * alpha[term], inv_eta)
        betaq[~term] = np.power(1.0 / (2.0 - rand[~term] * alpha[~term]), inv_eta)
        c2 = 0.5 * ((y1 + y2) + betaq * diff)

        # Genes where the parents coincide are inherited unchanged.
        same = diff <= eps
        c1 = np.where(same, parent1, c1)
        c2 = np.where(same, parent2, c2)
        swap = rng.random(parent1.shape) <= 0.5
        return np.where(swap, c2, c1), np.where(swap, c1, c2)


class BinomialRecombination(Crossover):
    """Per-gene mix of the stage input with the incumbents.

    Each gene of the stage input survives with probability ``rho``; otherwise
    the incumbent's gene is restored. No gene is forced, so chaining stages
    with rates ``rho1`` and ``rho2`` equals one stage with ``rho1 * rho2``.
    """

    def __init__(self, rho: float = 0.9) -> None:
        self.rho = float(rho)

    def __call__(self, X: ArrayLike, context: VariationContext) -> ArrayLike:
        X = self._as_population(X, name="X", copy=False)
        self._check_matches_context(X, context)
        keep = context.rng.random(X.shape) < self.rho
        return np.where(keep, X, context.incumbents)


__all__ = ["BinomialRecombination", "Crossover", "SBXCrossover"]
