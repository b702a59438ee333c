"""
compmoead exception hierarchy.

Provides user-friendly exceptions with helpful error messages and suggestions.
All compmoead-specific exceptions inherit from CompMOEADError for easy catching.

Example:
    try:
        result = optimize(problem, config, stop=[("maxeval", {"n": 10000})])
    except CompMOEADError as e:
        print(f"Optimization failed: {e}")
        print(f"Suggestion: {e.suggestion}")
"""

from __future__ import annotations

from typing import Any, Sequence


class CompMOEADError(Exception):
    """
    Base exception for all compmoead errors.

    Attributes:
        message: Human-readable error description
        suggestion: Optional suggestion for fixing the error
        details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with suggestion."""
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(CompMOEADError):
    """Raised when configuration is invalid or incomplete. Fatal at setup."""

    pass


class InvalidComponentError(ConfigurationError):
    """Raised when an unknown component name is specified."""

    def __init__(self, kind: str, name: str, available: Sequence[str] | None = None) -> None:
        message = f"Unknown {kind} '{name}'."
        suggestion = f"Available {kind} methods: {', '.join(sorted(available))}" if available else None
        super().__init__(message, suggestion, {"kind": kind, "name": name})


class MissingConfigError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, field: str, owner: str | None = None) -> None:
        message = f"Missing required configuration: '{field}'."
        suggestion = f"Add '{field}' to your configuration"
        if owner:
            suggestion += f" or use {owner}.default() for sensible defaults"
        super().__init__(message, suggestion, {"field": field})


# =============================================================================
# Problem Errors
# =============================================================================


class ProblemError(ConfigurationError):
    """Base class for problem-related errors."""

    pass


class ProblemDimensionError(ProblemError):
    """Raised when problem dimensions are invalid or disagree with the callables."""

    def __init__(
        self,
        message: str,
        n_var: int | None = None,
        n_obj: int | None = None,
    ) -> None:
        suggestion = "Check problem dimensions: len(xmin) (variables), n_obj (objectives)"
        super().__init__(message, suggestion, {"n_var": n_var, "n_obj": n_obj})


class BoundsError(ProblemError):
    """Raised when bounds are invalid or inconsistent."""

    def __init__(self, message: str) -> None:
        suggestion = "Ensure xmin <= xmax for all variables and bounds have the same shape"
        super().__init__(message, suggestion)


# =============================================================================
# Runtime Errors
# =============================================================================


class OptimizationError(CompMOEADError):
    """Raised when optimization fails during execution."""

    pass


class EvaluationError(OptimizationError):
    """Raised when an objective or constraint callable fails or returns a wrong shape."""

    def __init__(
        self,
        message: str,
        generation: int | None = None,
        subproblems: tuple[int, int] | None = None,
    ) -> None:
        self.generation = generation
        self.subproblems = subproblems
        where = []
        if generation is not None:
            where.append(f"generation {generation}")
        if subproblems is not None:
            where.append(f"subproblems {subproblems[0]}..{subproblems[1]}")
        if where:
            message = f"{message} ({', '.join(where)})"
        suggestion = "Check your objective/constraint callables for errors and output shapes"
        super().__init__(message, suggestion, {"generation": generation, "subproblems": subproblems})


class StopCriterionError(OptimizationError):
    """Raised when a stop criterion fails to evaluate."""

    def __init__(self, criterion: str, cause: BaseException) -> None:
        message = f"Stop criterion '{criterion}' failed: {cause}"
        super().__init__(message, None, {"criterion": criterion})


__all__ = [
    # Base
    "CompMOEADError",
    # Configuration
    "ConfigurationError",
    "InvalidComponentError",
    "MissingConfigError",
    # Problem
    "ProblemError",
    "ProblemDimensionError",
    "BoundsError",
    # Runtime
    "OptimizationError",
    "EvaluationError",
    "StopCriterionError",
]
