"""
VariationPipeline: an ordered stack of variation stages.

Stages are configured as ``(name, params)`` pairs and compose strictly left
to right: the first stage receives a copy of the incumbents, every later
stage the previous stage's output. Each stage returns one candidate row per
subproblem.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import numpy as np

from compmoead.engine.algorithm.components.base import ComponentSpec, require, resolve_component
from compmoead.foundation.exceptions import ConfigurationError
from compmoead.operators.real import (
    BinomialRecombination,
    DifferentialMutation,
    PolynomialMutation,
    ReflectRepair,
    SBXCrossover,
    ThreePointQuadraticSearch,
    TruncateRepair,
    VariationContext,
)


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


# =============================================================================
# Stage parameters
# =============================================================================


@dataclass(frozen=True)
class SBXParams:
    prob: float = 1.0
    eta: float = 20.0

    def __post_init__(self) -> None:
        require(0.0 <= float(self.prob) <= 1.0, "variation 'sbx'", f"prob must lie in [0, 1], got {self.prob}")
        require(float(self.eta) >= 0.0, "variation 'sbx'", f"eta must be >= 0, got {self.eta}")


@dataclass(frozen=True)
class PolymutParams:
    prob: float | str = "1/n"
    eta: float = 20.0

    def __post_init__(self) -> None:
        if isinstance(self.prob, str):
            require(self.prob.replace(" ", "") == "1/n", "variation 'polymut'", f"unsupported prob expression '{self.prob}'")
        else:
            require(0.0 <= float(self.prob) <= 1.0, "variation 'polymut'", f"prob must lie in [0, 1], got {self.prob}")
        require(float(self.eta) >= 0.0, "variation 'polymut'", f"eta must be >= 0, got {self.eta}")

    def resolve_prob(self, n_var: int) -> float:
        if isinstance(self.prob, str):
            return 1.0 / max(1, n_var)
        return float(self.prob)


@dataclass(frozen=True)
class DiffmutParams:
    basis: str = "rand"
    phi: float | None = None

    def __post_init__(self) -> None:
        require(
            str(self.basis).lower() in DifferentialMutation.BASES,
            "variation 'diffmut'",
            f"basis must be one of {DifferentialMutation.BASES}, got '{self.basis}'",
        )
        if self.phi is not None:
            require(float(self.phi) > 0.0, "variation 'diffmut'", f"phi must be positive, got {self.phi}")


@dataclass(frozen=True)
class BinrecParams:
    rho: float = 0.9

    def __post_init__(self) -> None:
        require(0.0 <= float(self.rho) <= 1.0, "variation 'binrec'", f"rho must lie in [0, 1], got {self.rho}")


@dataclass(frozen=True)
class LocalSearchParams:
    type: str = "tpqa"
    tau_ls: int | None = None
    gamma_ls: float | None = None

    def __post_init__(self) -> None:
        kind = "variation 'localsearch'"
        require(str(self.type).lower() == "tpqa", kind, f"unsupported local search type '{self.type}'")
        require((self.tau_ls is None) != (self.gamma_ls is None), kind, "set exactly one of tau_ls or gamma_ls")
        if self.tau_ls is not None:
            require(int(self.tau_ls) >= 1, kind, f"tau_ls must be >= 1, got {self.tau_ls}")
        if self.gamma_ls is not None:
            require(0.0 <= float(self.gamma_ls) <= 1.0, kind, f"gamma_ls must lie in [0, 1], got {self.gamma_ls}")


@dataclass(frozen=True)
class NoParams:
    pass


STAGE_PARAMS: dict[str, type] = {
    "sbx": SBXParams,
    "polymut": PolymutParams,
    "diffmut": DiffmutParams,
    "binrec": BinrecParams,
    "localsearch": LocalSearchParams,
    "truncate": NoParams,
    "reflect": NoParams,
    "none": NoParams,
}

STAGE_ALIASES = {
    "pm": "polymut",
    "polynomial": "polymut",
    "de": "diffmut",
    "differential": "diffmut",
    "binomial": "binrec",
    "local_search": "localsearch",
    "clamp": "truncate",
    "clip": "truncate",
    "identity": "none",
}

REPAIR_STAGES = frozenset({"truncate", "reflect"})


def resolve_stage(spec: Any) -> ComponentSpec:
    return resolve_component("variation", spec, STAGE_PARAMS, STAGE_ALIASES)


def resolve_stages(specs: Sequence[Any]) -> list[ComponentSpec]:
    if isinstance(specs, (str, dict)) or (isinstance(specs, tuple) and len(specs) == 2 and isinstance(specs[0], str)):
        specs = [specs]
    stages = [resolve_stage(spec) for spec in specs]
    if not stages:
        raise ConfigurationError(
            "The variation stack needs at least one stage.",
            suggestion="For example: [('sbx', {}), ('polymut', {}), ('truncate', {})]",
        )
    return stages


def _identity(X: np.ndarray, context: VariationContext) -> np.ndarray:  # pylint: disable=unused-argument
    return X


def build_stage(spec: ComponentSpec, lower: np.ndarray, upper: np.ndarray) -> Callable[[np.ndarray, VariationContext], np.ndarray]:
    """Instantiate the operator behind a resolved stage."""
    p = spec.params
    if spec.name == "sbx":
        return SBXCrossover(prob_crossover=p.prob, eta=p.eta, lower=lower, upper=upper)
    if spec.name == "polymut":
        return PolynomialMutation(prob_mutation=p.resolve_prob(lower.shape[0]), eta=p.eta, lower=lower, upper=upper)
    if spec.name == "diffmut":
        return DifferentialMutation(basis=str(p.basis).lower(), phi=p.phi)
    if spec.name == "binrec":
        return BinomialRecombination(rho=p.rho)
    if spec.name == "localsearch":
        return ThreePointQuadraticSearch(tau_ls=p.tau_ls, gamma_ls=p.gamma_ls)
    if spec.name == "truncate":
        return TruncateRepair(lower=lower, upper=upper)
    if spec.name == "reflect":
        return ReflectRepair(lower=lower, upper=upper)
    return _identity


class VariationPipeline:
    """
    Ordered variation stack producing one trial vector per subproblem.

    Parameters
    ----------
    stages : Sequence
        Stage specifications, e.g. ``[("sbx", {"eta": 20}), ("polymut", {}), ("truncate", {})]``.
    lower, upper : np.ndarray
        Box bounds of the problem.
    """

    def __init__(self, stages: Sequence[Any], lower: np.ndarray, upper: np.ndarray) -> None:
        self.lower = np.asarray(lower, dtype=float)
        self.upper = np.asarray(upper, dtype=float)
        self.specs = resolve_stages(stages)
        self.operators = [build_stage(spec, self.lower, self.upper) for spec in self.specs]
        self.names = [spec.name for spec in self.specs]
        if self.names[-1] not in REPAIR_STAGES:
            _logger().warning(
                "Variation stack %s does not end with a repair stage; offspring may leave the box.",
                self.names,
            )

    def __len__(self) -> int:
        return len(self.operators)

    def __call__(self, context: VariationContext) -> np.ndarray:
        X = context.incumbents.copy()
        for name, op in zip(self.names, self.operators):
            X = np.asarray(op(X, context), dtype=float)
            if X.shape != context.incumbents.shape:
                raise RuntimeError(f"Variation stage '{name}' returned shape {X.shape}, expected {context.incumbents.shape}.")
        return X


__all__ = [
    "REPAIR_STAGES",
    "STAGE_PARAMS",
    "VariationPipeline",
    "build_stage",
    "resolve_stage",
    "resolve_stages",
]
