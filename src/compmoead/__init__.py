"""Component-based MOEA/D: decomposition, neighborhoods, aggregation and variation as interchangeable parts."""

from .api import optimize
from .engine.algorithm.moead import MOEAD, MOEADResult
from .engine.config import MOEADConfig, MOEADConfigData
from .foundation import (
    BoundsError,
    CompMOEADError,
    ConfigurationError,
    EvaluationContext,
    EvaluationError,
    InvalidComponentError,
    MissingConfigError,
    OptimizationError,
    Problem,
    ProblemDimensionError,
    ProblemError,
    StopCriterionError,
    configure_logging,
)

__version__ = "0.1.0"

__all__ = [
    "optimize",
    "MOEAD",
    "MOEADResult",
    "MOEADConfig",
    "MOEADConfigData",
    "Problem",
    "EvaluationContext",
    "configure_logging",
    # errors
    "CompMOEADError",
    "ConfigurationError",
    "InvalidComponentError",
    "MissingConfigError",
    "ProblemError",
    "ProblemDimensionError",
    "BoundsError",
    "OptimizationError",
    "EvaluationError",
    "StopCriterionError",
]
