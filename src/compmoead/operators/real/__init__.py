"""Real-valued variation stages, repair and initialisation."""

from __future__ import annotations

from .crossover import BinomialRecombination, Crossover, SBXCrossover
from .initialize import INITIALIZERS, LatinHypercubeInitializer, UniformInitializer
from .local_search import ThreePointQuadraticSearch, quadratic_vertex
from .mutation import DifferentialMutation, Mutation, PolynomialMutation
from .repair import ReflectRepair, Repair, TruncateRepair
from .utils import ArrayLike, RealOperator, VariationContext

__all__ = [
    "ArrayLike",
    "BinomialRecombination",
    "Crossover",
    "DifferentialMutation",
    "INITIALIZERS",
    "LatinHypercubeInitializer",
    "Mutation",
    "PolynomialMutation",
    "RealOperator",
    "ReflectRepair",
    "Repair",
    "SBXCrossover",
    "ThreePointQuadraticSearch",
    "TruncateRepair",
    "UniformInitializer",
    "VariationContext",
    "quadratic_vertex",
]
