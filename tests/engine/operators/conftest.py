import numpy as np
import pytest

from compmoead.engine.algorithm.components.aggregation import tchebycheff
from compmoead.engine.algorithm.components.weight_vectors import simplex_lattice
from compmoead.operators.real import VariationContext


@pytest.fixture
def make_context():
    """Factory for a variation context over the given incumbents."""

    def _make(X, *, seed=0, pools=None, F=None, lower=None, upper=None, aggregator=tchebycheff, generation=0):
        X = np.asarray(X, dtype=float)
        n, n_var = X.shape
        if F is None:
            F = np.column_stack([X.sum(axis=1), (X**2).sum(axis=1)])
        if pools is None:
            pools = [np.arange(n) for _ in range(n)]
        return VariationContext(
            incumbents=X,
            F=F,
            pools=pools,
            weights=simplex_lattice(2, n - 1),
            ideal=F.min(axis=0),
            nadir=F.max(axis=0),
            aggregator=aggregator,
            lower=np.full(n_var, -5.0) if lower is None else lower,
            upper=np.full(n_var, 5.0) if upper is None else upper,
            rng=np.random.default_rng(seed),
            generation=generation,
        )

    return _make
