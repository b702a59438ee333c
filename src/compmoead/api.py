from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any

from compmoead.engine.algorithm.moead import MOEAD, MOEADResult
from compmoead.engine.config import MOEADConfig
from compmoead.foundation.problem import Problem


def optimize(
    problem: Problem,
    config: Any = None,
    stop: Any = ("maxeval", {"n": 10000}),
    seed: int | None = None,
    archive: bool | None = None,
) -> MOEADResult:
    """
    Run a single MOEA/D optimization for the provided problem/config pair.

    Args:
        problem: The problem to solve.
        config: ``MOEADConfigData``, builder-produced config or plain mapping;
            ``None`` uses ``MOEADConfig.default()``.
        stop: Stop criterion or list of criteria, e.g. ``[("maxeval", {"n": 10000})]``.
        seed: RNG seed; the same seed and config reproduce the run exactly.
        archive: Overrides the config's archive flag when not ``None``.
    """
    if config is None:
        config = MOEADConfig.default()
    if hasattr(config, "to_dict"):
        cfg_dict = config.to_dict()
    elif is_dataclass(config):
        cfg_dict = asdict(config)
    else:
        cfg_dict = dict(config)
    if archive is not None:
        cfg_dict["archive"] = bool(archive)
    return MOEAD(cfg_dict).run(problem, stop, seed)


__all__ = ["optimize"]
