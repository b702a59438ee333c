"""MOEA/D configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from compmoead.engine.algorithm.components.base import normalize_spec
from compmoead.engine.algorithm.components.registry import CONFIG_KEYS, resolve_components
from compmoead.foundation.exceptions import ConfigurationError

from .base import _as_spec, _require_fields, _SerializableConfig

ComponentTuple = Tuple[str, Dict[str, Any]]


@dataclass(frozen=True)
class MOEADConfigData(_SerializableConfig):
    decomposition: ComponentTuple
    neighborhood: ComponentTuple
    aggregation: ComponentTuple
    variation: Tuple[ComponentTuple, ...]
    update: ComponentTuple
    constraint: ComponentTuple = field(default_factory=lambda: ("feasibility", {}))
    scaling: ComponentTuple = field(default_factory=lambda: ("none", {}))
    initializer: str = "uniform"
    archive: bool = False
    track_history: bool = False


class MOEADConfig:
    """
    Declarative configuration holder for MOEA/D settings.

    Every component is given as a name plus keyword parameters; the variation
    stack is built by calling ``stage`` once per operator, in order.

    Examples:
        # Fluent builder
        cfg = (
            MOEADConfig()
            .decomposition("sld", H=99)
            .neighborhood("by_weight", T=20, delta_p=0.9)
            .aggregation("pbi", theta=5.0)
            .stage("sbx", eta=20).stage("polymut").stage("truncate")
            .update("restricted", nr=2)
            .fixed()
        )

        # Quick default configuration
        cfg = MOEADConfig.default()

        # From dictionary
        cfg = MOEADConfig.from_dict({"decomposition": ("sld", {"H": 99}), ...})
    """

    REQUIRED = ("decomposition", "neighborhood", "aggregation", "variation", "update")

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls, H: int = 99, T: int = 20) -> MOEADConfigData:
        """Original MOEA/D: simplex lattice, weight neighborhoods, Tchebycheff, SBX + polynomial mutation."""
        return (
            cls()
            .decomposition("sld", H=H)
            .neighborhood("by_weight", T=T, delta_p=1.0)
            .aggregation("wt")
            .stage("sbx", prob=1.0, eta=20.0)
            .stage("polymut", prob="1/n", eta=20.0)
            .stage("truncate")
            .update("restricted", nr=2)
            .constraint("feasibility")
            .fixed()
        )

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> MOEADConfigData:
        """Create configuration from a dictionary; unknown keys are rejected."""
        unknown = sorted(set(config) - set(CONFIG_KEYS))
        if unknown:
            raise ConfigurationError(
                f"Unknown MOEA/D configuration key(s): {unknown}.",
                suggestion=f"Valid keys: {', '.join(CONFIG_KEYS)}",
            )
        builder = cls()
        for key in ("decomposition", "neighborhood", "aggregation", "update", "constraint", "scaling"):
            if config.get(key) is not None:
                method, params = normalize_spec(key, config[key])
                getattr(builder, key)(method, **params)
        if config.get("variation") is not None:
            builder.variation(config["variation"])
        if config.get("initializer") is not None:
            builder.initializer(config["initializer"])
        if "archive" in config:
            builder.archive(bool(config["archive"]))
        if "track_history" in config:
            builder.track_history(bool(config["track_history"]))
        return builder.fixed()

    def decomposition(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["decomposition"] = _as_spec(method, kwargs)
        return self

    def neighborhood(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["neighborhood"] = _as_spec(method, kwargs)
        return self

    def aggregation(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["aggregation"] = _as_spec(method, kwargs)
        return self

    def stage(self, method: str, **kwargs) -> "MOEADConfig":
        """Append one operator to the variation stack."""
        self._cfg.setdefault("variation", []).append(_as_spec(method, kwargs))
        return self

    def variation(self, stages: Any) -> "MOEADConfig":
        """Replace the whole variation stack."""
        if isinstance(stages, (str, Mapping)) or (isinstance(stages, tuple) and len(stages) == 2 and isinstance(stages[0], str)):
            stages = [stages]
        self._cfg["variation"] = [_as_spec(*normalize_spec("variation", s)) for s in stages]
        return self

    def update(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["update"] = _as_spec(method, kwargs)
        return self

    def constraint(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["constraint"] = _as_spec(method, kwargs)
        return self

    def scaling(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["scaling"] = _as_spec(method, kwargs)
        return self

    def initializer(self, method: str) -> "MOEADConfig":
        self._cfg["initializer"] = str(method)
        return self

    def archive(self, enabled: bool = True) -> "MOEADConfig":
        self._cfg["archive"] = bool(enabled)
        return self

    def track_history(self, enabled: bool = True) -> "MOEADConfig":
        self._cfg["track_history"] = bool(enabled)
        return self

    def fixed(self) -> MOEADConfigData:
        _require_fields(self._cfg, self.REQUIRED, "MOEADConfig")
        data = MOEADConfigData(
            decomposition=self._cfg["decomposition"],
            neighborhood=self._cfg["neighborhood"],
            aggregation=self._cfg["aggregation"],
            variation=tuple(self._cfg["variation"]),
            update=self._cfg["update"],
            constraint=self._cfg.get("constraint", ("feasibility", {})),
            scaling=self._cfg.get("scaling", ("none", {})),
            initializer=self._cfg.get("initializer", "uniform"),
            archive=bool(self._cfg.get("archive", False)),
            track_history=bool(self._cfg.get("track_history", False)),
        )
        # Names and parameters are checked here so a bad config never reaches a run.
        resolve_components(data.to_dict())
        return data


__all__ = ["MOEADConfig", "MOEADConfigData"]
