"""Problem definition, constraint bookkeeping and shared numerical helpers."""

from .constraints import ConstraintEvaluation, compute_violation, is_feasible, violation_matrix
from .exceptions import (
    BoundsError,
    CompMOEADError,
    ConfigurationError,
    EvaluationError,
    InvalidComponentError,
    MissingConfigError,
    OptimizationError,
    ProblemDimensionError,
    ProblemError,
    StopCriterionError,
)
from .hypervolume import hypervolume
from .logging import configure_logging
from .pareto import dominates, non_dominated_mask, pareto_filter
from .problem import EvaluationContext, Problem, evaluate_batch, probe_problem

__all__ = [
    "BoundsError",
    "CompMOEADError",
    "ConfigurationError",
    "ConstraintEvaluation",
    "EvaluationContext",
    "EvaluationError",
    "InvalidComponentError",
    "MissingConfigError",
    "OptimizationError",
    "Problem",
    "ProblemDimensionError",
    "ProblemError",
    "StopCriterionError",
    "compute_violation",
    "configure_logging",
    "dominates",
    "evaluate_batch",
    "hypervolume",
    "is_feasible",
    "non_dominated_mask",
    "pareto_filter",
    "probe_problem",
    "violation_matrix",
]
