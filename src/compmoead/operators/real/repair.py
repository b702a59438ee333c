"""Box-constraint repair stages for real-encoded individuals."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .utils import ArrayLike, RealOperator, VariationContext, _clip_population, _ensure_bounds


class Repair(RealOperator, ABC):
    """Base class for repair stages; output always lies inside ``[lower, upper]``."""

    def __init__(self, *, lower: ArrayLike, upper: ArrayLike) -> None:
        self.lower, self.upper = _ensure_bounds(lower, upper)

    @abstractmethod
    def repair(self, x: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __call__(self, X: ArrayLike, context: VariationContext | None = None) -> ArrayLike:  # pylint: disable=unused-argument
        values = self._as_population(X, name="X")
        if values.shape[1] != self.lower.shape[0]:
            raise ValueError("Bounds dimensionality does not match the individual size.")
        return self.repair(values)


class TruncateRepair(Repair):
    """Clamp every variable into its bounds."""

    def repair(self, x: np.ndarray) -> np.ndarray:
        # Non-finite genes cannot be clamped meaningfully; park them on the lower bound.
        x = np.where(np.isnan(x), self.lower, x)
        return _clip_population(x, self.lower, self.upper)


class ReflectRepair(Repair):
    """Reflect out-of-bounds values back into range."""

    def repair(self, x: np.ndarray) -> np.ndarray:
        result = np.where(np.isfinite(x), x, self.lower)
        for j in range(self.lower.shape[0]):
            low = self.lower[j]
            width = self.upper[j] - low
            if width <= 0.0:
                result[:, j] = low
                continue
            period = 2.0 * width
            val = np.mod(result[:, j] - low, period)
            over = val > width
            val[over] = period - val[over]
            result[:, j] = val + low
        return result


__all__ = ["ReflectRepair", "Repair", "TruncateRepair"]
