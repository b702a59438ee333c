"""Base utilities for algorithm configuration."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, Tuple

from compmoead.foundation.exceptions import MissingConfigError


class _SerializableConfig:
    """Mixin to serialize dataclass configs."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


def _require_fields(cfg: Dict[str, Any], fields: Tuple[str, ...], name: str) -> None:
    """Raise MissingConfigError for the first required field absent from ``cfg``."""
    for field in fields:
        if cfg.get(field) is None:
            raise MissingConfigError(field, name)


def _as_spec(method: str, params: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Normalise a builder call into the ``(name, params)`` form stored in configs."""
    return str(method), dict(params)
