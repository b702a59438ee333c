"""
Objective scaling applied before aggregation.

``none`` leaves objectives untouched. ``simple`` maps them linearly onto
[0, 1] using the current ideal and nadir estimates, so the reference point
becomes the origin. Zero ranges are treated as unit ranges.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from .base import ComponentSpec, resolve_component


@dataclass(frozen=True)
class ScalingParams:
    pass


SCALING_PARAMS: dict[str, type] = {"none": ScalingParams, "simple": ScalingParams}


def resolve_scaling(spec: Any) -> ComponentSpec:
    return resolve_component("scaling", spec, SCALING_PARAMS)


class ObjectiveScaler:
    def __init__(self, spec: Any = "none") -> None:
        resolved = spec if isinstance(spec, ComponentSpec) else resolve_scaling(spec)
        self.method = resolved.name

    def __call__(
        self, F: np.ndarray, ideal: np.ndarray, nadir: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return scaled ``(F, ideal, nadir)``."""
        if self.method == "none":
            return F, ideal, nadir
        span = nadir - ideal
        span = np.where(span > 0.0, span, 1.0)
        return (F - ideal) / span, np.zeros_like(ideal), (nadir - ideal) / span


__all__ = ["ObjectiveScaler", "SCALING_PARAMS", "resolve_scaling"]
