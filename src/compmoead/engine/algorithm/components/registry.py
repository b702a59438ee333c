"""
Resolution of a complete MOEA/D configuration mapping into typed components.

All validation happens here, before any evaluation is spent: unknown
top-level keys, unknown component names and unknown parameters are rejected
with a ConfigurationError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from compmoead.foundation.exceptions import ConfigurationError, InvalidComponentError
from compmoead.operators.real.initialize import INITIALIZERS

from .aggregation import resolve_aggregation
from .base import ComponentSpec
from .constraint_handling import resolve_constraint_handling
from .neighborhood import resolve_neighborhood
from .scaling import resolve_scaling
from .update import resolve_update
from .variation import resolve_stages
from .weight_vectors import resolve_decomposition

CONFIG_KEYS = (
    "decomposition",
    "neighborhood",
    "aggregation",
    "variation",
    "update",
    "constraint",
    "scaling",
    "initializer",
    "archive",
    "track_history",
)

REQUIRED_KEYS = ("decomposition", "neighborhood", "aggregation", "variation", "update")


@dataclass(frozen=True)
class ResolvedComponents:
    decomposition: ComponentSpec
    neighborhood: ComponentSpec
    aggregation: ComponentSpec
    variation: tuple[ComponentSpec, ...]
    update: ComponentSpec
    constraint: ComponentSpec
    scaling: ComponentSpec
    initializer: str
    archive: bool
    track_history: bool


def resolve_components(cfg: Mapping[str, Any]) -> ResolvedComponents:
    """Validate ``cfg`` and resolve every component specification it names."""
    unknown = sorted(set(cfg) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigurationError(
            f"Unknown MOEA/D configuration key(s): {unknown}.",
            suggestion=f"Valid keys: {', '.join(CONFIG_KEYS)}",
        )
    missing = [key for key in REQUIRED_KEYS if cfg.get(key) is None]
    if missing:
        raise ConfigurationError(
            f"MOEA/D configuration is missing required key(s): {missing}.",
            suggestion="Start from MOEADConfig.default() and override what you need.",
        )

    initializer = str(cfg.get("initializer") or "uniform").lower()
    if initializer not in INITIALIZERS:
        raise InvalidComponentError("initializer", initializer, list(INITIALIZERS))

    return ResolvedComponents(
        decomposition=resolve_decomposition(cfg["decomposition"]),
        neighborhood=resolve_neighborhood(cfg["neighborhood"]),
        aggregation=resolve_aggregation(cfg["aggregation"]),
        variation=tuple(resolve_stages(cfg["variation"])),
        update=resolve_update(cfg["update"]),
        constraint=resolve_constraint_handling(cfg.get("constraint") or "feasibility"),
        scaling=resolve_scaling(cfg.get("scaling") or "none"),
        initializer=initializer,
        archive=bool(cfg.get("archive", False)),
        track_history=bool(cfg.get("track_history", False)),
    )


__all__ = ["CONFIG_KEYS", "REQUIRED_KEYS", "ResolvedComponents", "resolve_components"]
