"""Local search stages."""

from __future__ import annotations

import numpy as np

from .utils import ArrayLike, RealOperator, VariationContext

_EPS = 1e-12


class ThreePointQuadraticSearch(RealOperator):
    """Three-point quadratic approximation (TPQA) along each coordinate.

    For a selected subproblem ``i`` the incumbent and two other pool members
    are scored under ``w_i``; per coordinate a parabola is fitted through the
    three (value, fitness) pairs and its vertex becomes the candidate gene.
    Coordinates where the points coincide or the parabola is not convex keep
    the incumbent's value. Unselected subproblems pass the stage input through.

    Selection: every subproblem on generations that are multiples of
    ``tau_ls``, or each subproblem independently with probability ``gamma_ls``.
    """

    def __init__(self, tau_ls: int | None = None, gamma_ls: float | None = None) -> None:
        if (tau_ls is None) == (gamma_ls is None):
            raise ValueError("Exactly one of tau_ls or gamma_ls must be given.")
        self.tau_ls = None if tau_ls is None else int(tau_ls)
        self.gamma_ls = None if gamma_ls is None else float(gamma_ls)

    def selected(self, context: VariationContext) -> np.ndarray:
        n = context.pop_size
        if self.tau_ls is not None:
            active = context.generation > 0 and context.generation % self.tau_ls == 0
            return np.full(n, active, dtype=bool)
        return context.rng.random(n) < self.gamma_ls

    def __call__(self, X: ArrayLike, context: VariationContext) -> ArrayLike:
        X = self._as_population(X, name="X")
        self._check_matches_context(X, context)
        for i in np.flatnonzero(self.selected(context)):
            pool = context.pool(i, 2, exclude_self=True)
            a, b = context.rng.choice(pool, size=2, replace=False)
            rows = np.array([i, a, b])
            pts = context.incumbents[rows]
            fit = context.scalar_fitness(rows, i)
            X[i] = quadratic_vertex(pts, fit)
        return X


def quadratic_vertex(points: np.ndarray, fitness: np.ndarray) -> np.ndarray:
    """Coordinate-wise vertex of the parabola through three ``(x, f)`` pairs.

    ``points`` has shape (3, n_var) with the reference point in row 0; the
    result falls back to row 0 wherever the fit is degenerate or concave.
    """
    x0, x1, x2 = points
    f0, f1, f2 = (float(v) for v in fitness)
    d01 = x0 - x1
    d02 = x0 - x2
    d12 = x1 - x2
    ok = (np.abs(d01) > _EPS) & (np.abs(d02) > _EPS) & (np.abs(d12) > _EPS)
    s01 = np.where(ok, d01, 1.0)
    s02 = np.where(ok, d02, 1.0)
    s12 = np.where(ok, d12, 1.0)
    curvature = f0 / (s01 * s02) - f1 / (s01 * s12) + f2 / (s02 * s12)
    num = (x1**2 - x2**2) * f0 + (x2**2 - x0**2) * f1 + (x0**2 - x1**2) * f2
    den = 2.0 * (d12 * f0 + (x2 - x0) * f1 + d01 * f2)
    ok &= (curvature > 0.0) & (np.abs(den) > _EPS)
    vertex = num / np.where(ok, den, 1.0)
    ok &= np.isfinite(vertex)
    return np.where(ok, vertex, x0)


__all__ = ["ThreePointQuadraticSearch", "quadratic_vertex"]
