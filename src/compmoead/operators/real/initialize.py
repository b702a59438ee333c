from __future__ import annotations

import numpy as np


class UniformInitializer:
    """Independent uniform samples inside ``[lower, upper]``."""

    def __init__(self, n_solutions: int, lower: np.ndarray, upper: np.ndarray, rng: np.random.Generator):
        self.n_solutions = int(n_solutions)
        if self.n_solutions <= 0:
            raise ValueError("n_solutions must be positive.")
        self.lower = np.asarray(lower, dtype=float)
        self.upper = np.asarray(upper, dtype=float)
        if self.lower.shape != self.upper.shape:
            raise ValueError("lower and upper must have the same shape.")
        self.rng = rng

    def __call__(self) -> np.ndarray:
        return self.rng.uniform(self.lower, self.upper, size=(self.n_solutions, self.lower.shape[0]))


class LatinHypercubeInitializer:
    """
    Latin Hypercube Sampling initializer for real-valued variables.
    Generates n_solutions points inside [lower, upper], one per stratum and axis.
    """

    def __init__(self, n_solutions: int, lower: np.ndarray, upper: np.ndarray, rng: np.random.Generator):
        self.n_solutions = int(n_solutions)
        if self.n_solutions <= 0:
            raise ValueError("n_solutions must be positive.")
        self.lower = np.asarray(lower, dtype=float)
        self.upper = np.asarray(upper, dtype=float)
        if self.lower.shape != self.upper.shape:
            raise ValueError("lower and upper must have the same shape.")
        if self.lower.ndim != 1:
            raise ValueError("Bounds must be one-dimensional.")
        self.n_var = self.lower.shape[0]
        self.rng = rng

    def __call__(self) -> np.ndarray:
        n = self.n_solutions
        samples = np.empty((n, self.n_var), dtype=float)
        for j in range(self.n_var):
            strata = (np.arange(n, dtype=float) + self.rng.random(n)) / n
            self.rng.shuffle(strata)
            samples[:, j] = strata
        return self.lower + samples * (self.upper - self.lower)


INITIALIZERS = {
    "uniform": UniformInitializer,
    "lhs": LatinHypercubeInitializer,
    "latin_hypercube": LatinHypercubeInitializer,
}


__all__ = ["INITIALIZERS", "LatinHypercubeInitializer", "UniformInitializer"]
