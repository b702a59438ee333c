"""
Shared plumbing for name-dispatched components.

Every configurable component (decomposition, neighborhood, aggregation,
variation stage, update rule, constraint handling, scaling, stop criterion)
is selected by a name plus a parameter mapping. The name picks a frozen
parameter dataclass; the mapping must match its fields exactly, so unknown
keys are rejected at setup instead of being ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from compmoead.foundation.exceptions import ConfigurationError, InvalidComponentError


@dataclass(frozen=True)
class ComponentSpec:
    """A resolved component: canonical name plus validated parameters."""

    kind: str
    name: str
    params: Any


def normalize_spec(kind: str, spec: Any) -> tuple[str, dict[str, Any]]:
    """Accept ``"name"``, ``(name, params)`` or ``{"name": ..., **params}``."""
    if isinstance(spec, ComponentSpec):
        return spec.name, _params_as_dict(spec.params)
    if isinstance(spec, str):
        return spec, {}
    if isinstance(spec, Mapping):
        raw = dict(spec)
        name = raw.pop("name", None)
        if name is None:
            raise ConfigurationError(f"{kind} mapping needs a 'name' key.", details={"spec": raw})
        return str(name), raw
    if isinstance(spec, (tuple, list)) and len(spec) == 2 and isinstance(spec[0], str):
        params = spec[1] if spec[1] is not None else {}
        if not isinstance(params, Mapping):
            raise ConfigurationError(f"{kind} parameters for '{spec[0]}' must be a mapping.")
        return spec[0], dict(params)
    raise ConfigurationError(
        f"Cannot interpret {kind} specification {spec!r}.",
        suggestion="Use a name string, a (name, params) tuple or a mapping with a 'name' key.",
    )


def resolve_component(
    kind: str,
    spec: Any,
    param_types: Mapping[str, type],
    aliases: Mapping[str, str] | None = None,
) -> ComponentSpec:
    """Validate ``spec`` against the registered parameter dataclasses for ``kind``."""
    name, raw = normalize_spec(kind, spec)
    key = name.lower()
    if aliases:
        key = aliases.get(key, key)
    params_cls = param_types.get(key)
    if params_cls is None:
        raise InvalidComponentError(kind, name, list(param_types))

    allowed = {f.name for f in fields(params_cls)}
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise ConfigurationError(
            f"Unknown parameter(s) {unknown} for {kind} '{key}'.",
            suggestion=f"Accepted parameters: {', '.join(sorted(allowed)) or '(none)'}",
            details={"kind": kind, "name": key, "unknown": unknown},
        )
    try:
        params = params_cls(**raw)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid parameters for {kind} '{key}': {exc}") from exc
    return ComponentSpec(kind=kind, name=key, params=params)


def _params_as_dict(params: Any) -> dict[str, Any]:
    return {f.name: getattr(params, f.name) for f in fields(params)}


def require(condition: bool, kind: str, message: str) -> None:
    """Raise ConfigurationError tagged with the component kind unless ``condition``."""
    if not condition:
        raise ConfigurationError(f"{kind}: {message}")


__all__ = ["ComponentSpec", "normalize_spec", "require", "resolve_component"]
