"""
Decomposition: weight vector generation.

Three methods are available:

- ``sld``: simplex-lattice design with ``H`` divisions, ``C(H+m-1, m-1)`` vectors.
- ``msld``: multiple-layer SLD, one shrunken lattice per ``(H[k], tau[k])`` layer.
- ``uniform``: ``N`` vectors sampled uniformly on the unit simplex.

All methods return non-negative rows summing to 1. The row count becomes the
population size of the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import comb
from typing import Any, Protocol

import numpy as np

from .base import ComponentSpec, require, resolve_component


@dataclass(frozen=True)
class SLDParams:
    H: int | None = None

    def __post_init__(self) -> None:
        require(self.H is not None, "decomposition 'sld'", "parameter 'H' is required")
        require(int(self.H) >= 1, "decomposition 'sld'", f"H must be >= 1, got {self.H}")


@dataclass(frozen=True)
class MSLDParams:
    H: tuple[int, ...] | None = None
    tau: tuple[float, ...] | None = None

    def __post_init__(self) -> None:
        kind = "decomposition 'msld'"
        require(self.H is not None and self.tau is not None, kind, "parameters 'H' and 'tau' are required")
        H = tuple(int(h) for h in np.atleast_1d(self.H))
        tau = tuple(float(t) for t in np.atleast_1d(self.tau))
        require(len(H) == len(tau) and len(H) > 0, kind, "'H' and 'tau' need one entry per layer")
        require(all(h >= 1 for h in H), kind, "every H must be >= 1")
        require(all(0.0 < t <= 1.0 for t in tau), kind, "every tau must lie in (0, 1]")
        object.__setattr__(self, "H", H)
        object.__setattr__(self, "tau", tau)


@dataclass(frozen=True)
class UniformParams:
    N: int | None = None

    def __post_init__(self) -> None:
        require(self.N is not None, "decomposition 'uniform'", "parameter 'N' is required")
        require(int(self.N) >= 2, "decomposition 'uniform'", f"N must be >= 2, got {self.N}")


DECOMPOSITION_PARAMS: dict[str, type] = {
    "sld": SLDParams,
    "msld": MSLDParams,
    "uniform": UniformParams,
}

DECOMPOSITION_ALIASES = {
    "simplex_lattice": "sld",
    "simplex-lattice": "sld",
    "multilayer_sld": "msld",
    "random": "uniform",
}


class Decomposer(Protocol):
    def count(self, n_obj: int) -> int: ...

    def generate(self, n_obj: int, rng: np.random.Generator) -> np.ndarray: ...


class SimplexLatticeDesign:
    """Das-Dennis lattice ``{k/H : sum(k) = H}``."""

    def __init__(self, params: SLDParams) -> None:
        self.H = int(params.H)

    def count(self, n_obj: int) -> int:
        return count_lattice_points(n_obj, self.H)

    def generate(self, n_obj: int, rng: np.random.Generator) -> np.ndarray:  # pylint: disable=unused-argument
        return simplex_lattice(n_obj, self.H)


class MultipleLayerSLD:
    """Stack of lattices, layer ``k`` shrunk toward the centroid by ``tau[k]``."""

    def __init__(self, params: MSLDParams) -> None:
        self.H = params.H
        self.tau = params.tau

    def count(self, n_obj: int) -> int:
        return sum(count_lattice_points(n_obj, h) for h in self.H)

    def generate(self, n_obj: int, rng: np.random.Generator) -> np.ndarray:  # pylint: disable=unused-argument
        layers = []
        for h, tau in zip(self.H, self.tau):
            layer = simplex_lattice(n_obj, h)
            layers.append(tau * layer + (1.0 - tau) / n_obj)
        return np.vstack(layers)


class UniformDecomposition:
    """Uniform sampling on the simplex via sorted-uniform spacings."""

    def __init__(self, params: UniformParams) -> None:
        self.N = int(params.N)

    def count(self, n_obj: int) -> int:  # pylint: disable=unused-argument
        return self.N

    def generate(self, n_obj: int, rng: np.random.Generator) -> np.ndarray:
        cuts = np.sort(rng.random((self.N, n_obj - 1)), axis=1)
        edges = np.hstack([np.zeros((self.N, 1)), cuts, np.ones((self.N, 1))])
        weights = np.diff(edges, axis=1)
        return weights / weights.sum(axis=1, keepdims=True)


_BUILDERS = {
    "sld": SimplexLatticeDesign,
    "msld": MultipleLayerSLD,
    "uniform": UniformDecomposition,
}


def resolve_decomposition(spec: Any) -> ComponentSpec:
    return resolve_component("decomposition", spec, DECOMPOSITION_PARAMS, DECOMPOSITION_ALIASES)


def build_decomposition(spec: Any) -> Decomposer:
    resolved = spec if isinstance(spec, ComponentSpec) else resolve_decomposition(spec)
    return _BUILDERS[resolved.name](resolved.params)


def count_weight_vectors(spec: Any, n_obj: int) -> int:
    """Number of weight vectors (population size) a decomposition yields for ``n_obj``."""
    return build_decomposition(spec).count(n_obj)


def generate_weight_vectors(spec: Any, n_obj: int, rng: np.random.Generator) -> np.ndarray:
    """Generate the weight matrix (N x n_obj) for the configured decomposition."""
    require(int(n_obj) >= 2, "decomposition", f"needs at least two objectives, got {n_obj}")
    weights = build_decomposition(spec).generate(int(n_obj), rng)
    assert_valid_weights(weights, int(n_obj))
    return weights


def assert_valid_weights(weights: np.ndarray, n_obj: int) -> None:
    require(weights.ndim == 2, "decomposition", "weight matrix must be 2D")
    require(weights.shape[1] == n_obj, "decomposition", f"expected {n_obj} columns, got {weights.shape[1]}")
    require(weights.shape[0] >= 2, "decomposition", f"needs at least two weight vectors, got {weights.shape[0]}")
    require(bool(np.all(weights >= 0.0)), "decomposition", "weight vectors must be non-negative")
    # Allow very small numerical drift
    require(bool(np.all(np.abs(weights.sum(axis=1) - 1.0) <= 1e-6)), "decomposition", "each weight vector must sum to 1")


def count_lattice_points(n_obj: int, divisions: int) -> int:
    if divisions < 1:
        raise ValueError("divisions must be >= 1")
    return comb(divisions + n_obj - 1, n_obj - 1)


def simplex_lattice(n_obj: int, divisions: int) -> np.ndarray:
    coords: list[tuple[int, ...]] = []

    def rec(remaining: int, depth: int, current: list[int]) -> None:
        if depth == n_obj - 1:
            current.append(remaining)
            coords.append(tuple(current))
            current.pop()
            return
        for value in range(remaining + 1):
            current.append(value)
            rec(remaining - value, depth + 1, current)
            current.pop()

    rec(divisions, 0, [])
    arr = np.asarray(coords, dtype=float) / divisions
    # Numerical guard to keep rows summing to exactly 1
    arr /= arr.sum(axis=1, keepdims=True)
    return arr


__all__ = [
    "DECOMPOSITION_PARAMS",
    "Decomposer",
    "MSLDParams",
    "MultipleLayerSLD",
    "SLDParams",
    "SimplexLatticeDesign",
    "UniformDecomposition",
    "UniformParams",
    "assert_valid_weights",
    "build_decomposition",
    "count_lattice_points",
    "count_weight_vectors",
    "generate_weight_vectors",
    "resolve_decomposition",
    "simplex_lattice",
]
