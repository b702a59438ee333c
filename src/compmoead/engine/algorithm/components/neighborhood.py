"""
Neighborhood construction for MOEA/D subproblems.

``by_weight`` neighborhoods are computed once from the weight matrix;
``by_incumbent`` neighborhoods are rebuilt every generation from the current
population in decision space. In both cases row ``i`` lists the ``T`` indices
closest to subproblem ``i`` (Euclidean distance, ties broken by index) and
``i`` itself is always entry 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from .base import ComponentSpec, require, resolve_component


@dataclass(frozen=True)
class NeighborhoodParams:
    T: int = 20
    delta_p: float = 1.0

    def __post_init__(self) -> None:
        require(int(self.T) >= 1, "neighborhood", f"T must be >= 1, got {self.T}")
        require(0.0 <= float(self.delta_p) <= 1.0, "neighborhood", f"delta_p must lie in [0, 1], got {self.delta_p}")


NEIGHBORHOOD_PARAMS: dict[str, type] = {
    "by_weight": NeighborhoodParams,
    "by_incumbent": NeighborhoodParams,
}

NEIGHBORHOOD_ALIASES = {
    "lambda": "by_weight",
    "weights": "by_weight",
    "x": "by_incumbent",
    "incumbent": "by_incumbent",
}


def resolve_neighborhood(spec: Any) -> ComponentSpec:
    return resolve_component("neighborhood", spec, NEIGHBORHOOD_PARAMS, NEIGHBORHOOD_ALIASES)


def compute_neighbors(points: np.ndarray, neighbor_size: int) -> np.ndarray:
    """Compute neighborhood indices based on Euclidean distances between rows.

    Parameters
    ----------
    points : np.ndarray
        Weight vectors or decision vectors, shape (pop_size, dim).
    neighbor_size : int
        Neighborhood size (T parameter), ``1 <= T <= pop_size``.

    Returns
    -------
    np.ndarray
        Neighborhood indices, shape (pop_size, neighbor_size), self first.
    """
    points = np.asarray(points, dtype=float)
    n = points.shape[0]
    if not 1 <= neighbor_size <= n:
        raise ValueError(f"neighbor_size must lie in [1, {n}], got {neighbor_size}.")
    dist = np.linalg.norm(points[:, None, :] - points[None, :, :], axis=2)
    # Duplicated points sit at distance 0 too; pin self in front.
    np.fill_diagonal(dist, -1.0)
    order = np.argsort(dist, axis=1, kind="stable")
    return order[:, :neighbor_size]


class NeighborhoodBuilder:
    """Builds the neighborhood table and draws the per-subproblem mating scope."""

    def __init__(self, spec: Any, pop_size: int) -> None:
        resolved = spec if isinstance(spec, ComponentSpec) else resolve_neighborhood(spec)
        self.method = resolved.name
        self.T = int(resolved.params.T)
        self.delta_p = float(resolved.params.delta_p)
        require(
            self.T <= pop_size,
            "neighborhood",
            f"T={self.T} exceeds the population size N={pop_size}",
        )
        self.pop_size = int(pop_size)

    @property
    def static(self) -> bool:
        return self.method == "by_weight"

    def build(self, weights: np.ndarray, X: np.ndarray) -> np.ndarray:
        source = weights if self.static else X
        return compute_neighbors(source, self.T)

    def sample_scope(self, rng: np.random.Generator) -> np.ndarray:
        """Boolean mask: True where subproblem ``i`` mates/replaces within its neighborhood."""
        if self.delta_p >= 1.0:
            return np.ones(self.pop_size, dtype=bool)
        return rng.random(self.pop_size) < self.delta_p

    def pools(self, neighbors: np.ndarray, use_neighbors: np.ndarray, rng: np.random.Generator) -> list[np.ndarray]:
        """Candidate index pool per subproblem: its neighbors or a permutation of everyone."""
        pools = []
        for i in range(self.pop_size):
            if use_neighbors[i]:
                pools.append(neighbors[i])
            else:
                pools.append(rng.permutation(self.pop_size))
        return pools


__all__ = [
    "NEIGHBORHOOD_PARAMS",
    "NeighborhoodBuilder",
    "NeighborhoodParams",
    "compute_neighbors",
    "resolve_neighborhood",
]
