"""
MOEA/D algorithm module.

- `moead.py`: main MOEAD class (run/ask/tell loop)
- `initialization.py`: validation, probe and initial population
- `state.py`: MOEADState arena, Trial and MOEADResult

References:
    Q. Zhang and H. Li, "MOEA/D: A Multiobjective Evolutionary Algorithm Based on
    Decomposition," IEEE Trans. Evolutionary Computation, vol. 11, no. 6, 2007.
"""

from .initialization import initialize_moead_run
from .moead import MOEAD
from .state import MOEADResult, MOEADState, Trial, build_moead_result

__all__ = [
    "MOEAD",
    # Setup
    "initialize_moead_run",
    # State
    "MOEADResult",
    "MOEADState",
    "Trial",
    "build_moead_result",
]
