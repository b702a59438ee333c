# algorithm/components/aggregation.py
"""
Scalarization (aggregation) functions for decomposition-based optimization.

Every function maps objective rows ``F`` and weight rows ``W`` (broadcast
row-wise) plus the ideal and nadir points to one scalar per row. Lower values
are better. Degenerate weights are guarded locally so no function divides by
zero or projects onto a zero-length direction.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

from .base import ComponentSpec, require, resolve_component

# Stand-in for zero weight components in Tchebycheff-type functions.
WEIGHT_FLOOR = 1e-6

Aggregator = Callable[[np.ndarray, np.ndarray, np.ndarray, np.ndarray], np.ndarray]


def _floor_weights(weights: np.ndarray) -> np.ndarray:
    return np.where(weights > WEIGHT_FLOOR, weights, WEIGHT_FLOOR)


def _unit_directions(weights: np.ndarray) -> np.ndarray:
    norm_w = np.linalg.norm(weights, axis=-1, keepdims=True)
    n_obj = weights.shape[-1]
    uniform = np.full(weights.shape, 1.0 / np.sqrt(n_obj))
    safe = np.where(norm_w > 0.0, norm_w, 1.0)
    return np.where(norm_w > 0.0, weights / safe, uniform)


# =============================================================================
# Aggregation / Scalarization Functions
# =============================================================================

def tchebycheff(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray | None = None) -> np.ndarray:
    """Weighted Tchebycheff aggregation: max(w * |f - z*|).

    Parameters
    ----------
    fvals : np.ndarray
        Objective values, shape (N, n_obj) or (n_obj,).
    weights : np.ndarray
        Weight vectors, shape (N, n_obj) or (n_obj,).
    ideal : np.ndarray
        Ideal point (minimum objectives seen), shape (n_obj,).
    nadir : np.ndarray | None
        Unused; accepted for a uniform signature.

    Returns
    -------
    np.ndarray
        Aggregated scalar values, shape (N,) or scalar.
    """
    diff = np.abs(fvals - ideal)
    return np.max(_floor_weights(weights) * diff, axis=-1)


def adjusted_tchebycheff(
    fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray | None = None
) -> np.ndarray:
    """Adjusted weighted Tchebycheff: Tchebycheff with inverted, renormalised weights.

    The inversion makes the optimum of subproblem ``i`` lie on the ray through
    ``w_i`` instead of through ``1 / w_i``.
    """
    inv = 1.0 / _floor_weights(weights)
    inv = inv / np.sum(inv, axis=-1, keepdims=True)
    return np.max(inv * np.abs(fvals - ideal), axis=-1)


def weighted_sum(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray | None = None) -> np.ndarray:
    """Weighted sum aggregation: sum(w * (f - z*))."""
    shifted = fvals - ideal
    return np.sum(weights * shifted, axis=-1)


def pbi(
    fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray | None = None, theta: float = 5.0
) -> np.ndarray:
    """Penalty boundary intersection (PBI) aggregation.

    Parameters
    ----------
    fvals : np.ndarray
        Objective values.
    weights : np.ndarray
        Weight vectors.
    ideal : np.ndarray
        Ideal point.
    nadir : np.ndarray | None
        Unused.
    theta : float
        Penalty on the perpendicular distance (default 5.0).

    Returns
    -------
    np.ndarray
        ``d1 + theta * d2``.
    """
    diff = fvals - ideal
    w_unit = _unit_directions(np.broadcast_to(weights, np.broadcast_shapes(weights.shape, diff.shape)))
    d1 = np.abs(np.sum(diff * w_unit, axis=-1))
    proj = d1[..., None] * w_unit
    d2 = np.linalg.norm(diff - proj, axis=-1)
    return d1 + theta * d2


def inverted_pbi(
    fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray | None = None, theta: float = 5.0
) -> np.ndarray:
    """Inverted PBI measured from the nadir point: ``theta * d2 - d1``.

    Falls back to the worst objective value per column when no nadir is known.
    """
    if nadir is None:
        nadir = np.max(np.atleast_2d(fvals), axis=0)
    diff = nadir - fvals
    w_unit = _unit_directions(np.broadcast_to(weights, np.broadcast_shapes(weights.shape, diff.shape)))
    d1 = np.abs(np.sum(diff * w_unit, axis=-1))
    d2 = np.linalg.norm(diff - d1[..., None] * w_unit, axis=-1)
    return theta * d2 - d1


def modified_tchebycheff(
    fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, nadir: np.ndarray | None = None, rho: float = 0.001
) -> np.ndarray:
    """Modified Tchebycheff: max component plus weighted L1 term."""
    weighted = _floor_weights(weights) * np.abs(fvals - ideal)
    return np.max(weighted, axis=-1) + rho * np.sum(weighted, axis=-1)


# =============================================================================
# Registry
# =============================================================================

@dataclass(frozen=True)
class NoParams:
    pass


@dataclass(frozen=True)
class PBIParams:
    theta: float = 5.0

    def __post_init__(self) -> None:
        require(float(self.theta) >= 0.0, "aggregation", f"theta must be >= 0, got {self.theta}")


@dataclass(frozen=True)
class ModifiedTchebycheffParams:
    rho: float = 0.001

    def __post_init__(self) -> None:
        require(float(self.rho) >= 0.0, "aggregation", f"rho must be >= 0, got {self.rho}")


AGGREGATION_PARAMS: dict[str, type] = {
    "wt": NoParams,
    "awt": NoParams,
    "wsum": NoParams,
    "pbi": PBIParams,
    "ipbi": PBIParams,
    "mtch": ModifiedTchebycheffParams,
}

AGGREGATION_ALIASES = {
    "tchebycheff": "wt",
    "tchebychef": "wt",
    "weighted_tchebycheff": "wt",
    "adjusted_tchebycheff": "awt",
    "weighted_sum": "wsum",
    "penalty_boundary_intersection": "pbi",
    "inverted_pbi": "ipbi",
    "modified_tchebycheff": "mtch",
}


def resolve_aggregation(spec: Any) -> ComponentSpec:
    return resolve_component("aggregation", spec, AGGREGATION_PARAMS, AGGREGATION_ALIASES)


def build_aggregator(spec: Any) -> Aggregator:
    """Build aggregation function from a ``(name, params)`` specification.

    Returns
    -------
    Callable
        Aggregation function with signature (fvals, weights, ideal, nadir) -> values.

    Raises
    ------
    InvalidComponentError
        If the aggregation method is not supported.
    """
    resolved = spec if isinstance(spec, ComponentSpec) else resolve_aggregation(spec)
    method = resolved.name
    if method == "wt":
        return tchebycheff
    if method == "awt":
        return adjusted_tchebycheff
    if method == "wsum":
        return weighted_sum
    if method == "pbi":
        theta = float(resolved.params.theta)
        return lambda fvals, weights, ideal, nadir=None: pbi(fvals, weights, ideal, nadir, theta)
    if method == "ipbi":
        theta = float(resolved.params.theta)
        return lambda fvals, weights, ideal, nadir=None: inverted_pbi(fvals, weights, ideal, nadir, theta)
    rho = float(resolved.params.rho)
    return lambda fvals, weights, ideal, nadir=None: modified_tchebycheff(fvals, weights, ideal, nadir, rho)


__all__ = [
    "AGGREGATION_PARAMS",
    "Aggregator",
    "WEIGHT_FLOOR",
    "adjusted_tchebycheff",
    "build_aggregator",
    "inverted_pbi",
    "modified_tchebycheff",
    "pbi",
    "resolve_aggregation",
    "tchebycheff",
    "weighted_sum",
]
