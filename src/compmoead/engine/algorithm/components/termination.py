"""
Stop criteria, checked at generation boundaries and combined with logical OR.

- ``maxeval``: total function evaluations reached ``n``.
- ``maxiter``: generations completed reached ``n``.
- ``maxtime``: wall-clock seconds since the run started reached ``seconds``.
- ``target``: hypervolume of the feasible non-dominated population reached
  ``value`` with respect to ``reference_point``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

from compmoead.foundation.exceptions import ConfigurationError, StopCriterionError
from compmoead.foundation.hypervolume import hypervolume
from compmoead.foundation.pareto import pareto_filter

from .base import ComponentSpec, require, resolve_component

if TYPE_CHECKING:
    from compmoead.engine.algorithm.moead.state import MOEADState


@dataclass(frozen=True)
class CountParams:
    n: int | None = None

    def __post_init__(self) -> None:
        require(self.n is not None, "stop criterion", "parameter 'n' is required")
        require(int(self.n) >= 1, "stop criterion", f"n must be >= 1, got {self.n}")


@dataclass(frozen=True)
class TimeParams:
    seconds: float | None = None

    def __post_init__(self) -> None:
        require(self.seconds is not None, "stop criterion 'maxtime'", "parameter 'seconds' is required")
        require(float(self.seconds) > 0.0, "stop criterion 'maxtime'", "seconds must be positive")


@dataclass(frozen=True)
class TargetParams:
    value: float | None = None
    reference_point: tuple[float, ...] | None = None

    def __post_init__(self) -> None:
        require(
            self.value is not None and self.reference_point is not None,
            "stop criterion 'target'",
            "parameters 'value' and 'reference_point' are required",
        )
        object.__setattr__(self, "reference_point", tuple(float(r) for r in self.reference_point))


STOP_PARAMS: dict[str, type] = {
    "maxeval": CountParams,
    "maxiter": CountParams,
    "maxtime": TimeParams,
    "target": TargetParams,
}

STOP_ALIASES = {"n_eval": "maxeval", "max_evaluations": "maxeval", "n_gen": "maxiter", "hv": "target"}


class HVTracker:
    """Hypervolume target check on the feasible non-dominated population."""

    def __init__(self, params: TargetParams) -> None:
        self.target = float(params.value)
        self.ref_point = np.asarray(params.reference_point, dtype=float)
        self.last_value: float | None = None

    def reached(self, F: np.ndarray, v: np.ndarray) -> bool:
        feasible = F[v <= 0.0]
        hv_val = hypervolume(pareto_filter(feasible), self.ref_point) if feasible.size else 0.0
        self.last_value = hv_val
        return hv_val >= self.target


class StopCriteria:
    """OR-combination of stop criteria; remembers the first one that fired."""

    def __init__(self, specs: Sequence[Any]) -> None:
        single = isinstance(specs, (str, dict)) or (
            isinstance(specs, tuple) and len(specs) == 2 and isinstance(specs[0], str)
        )
        if single:
            specs = [specs]
        if not specs:
            raise ConfigurationError(
                "At least one stop criterion is required.",
                suggestion="Pass e.g. stop=[('maxeval', {'n': 10000})].",
            )
        self.criteria = [resolve_stop_criterion(spec) for spec in specs]
        self._hv = {
            i: HVTracker(c.params) for i, c in enumerate(self.criteria) if c.name == "target"
        }
        self._started: float | None = None
        self.reason: str | None = None

    def start(self) -> None:
        self._started = time.perf_counter()
        self.reason = None

    @property
    def elapsed(self) -> float:
        return 0.0 if self._started is None else time.perf_counter() - self._started

    def check(self, st: "MOEADState") -> str | None:
        for i, criterion in enumerate(self.criteria):
            try:
                fired = self._fired(i, criterion, st)
            except Exception as exc:
                raise StopCriterionError(criterion.name, exc) from exc
            if fired:
                self.reason = criterion.name
                return self.reason
        return None

    def _fired(self, i: int, criterion: ComponentSpec, st: "MOEADState") -> bool:
        if criterion.name == "maxeval":
            return st.n_eval >= int(criterion.params.n)
        if criterion.name == "maxiter":
            return st.generation >= int(criterion.params.n)
        if criterion.name == "maxtime":
            return self.elapsed >= float(criterion.params.seconds)
        return self._hv[i].reached(st.F, st.v)

    @property
    def hv_value(self) -> float | None:
        values = [t.last_value for t in self._hv.values() if t.last_value is not None]
        return values[-1] if values else None


def resolve_stop_criterion(spec: Any) -> ComponentSpec:
    return resolve_component("stop criterion", spec, STOP_PARAMS, STOP_ALIASES)


__all__ = ["HVTracker", "STOP_PARAMS", "StopCriteria", "resolve_stop_criterion"]
