import numpy as np
import pytest

from compmoead import Problem


def zdt1(X, context):
    f1 = X[:, 0]
    g = 1.0 + 9.0 * X[:, 1:].mean(axis=1)
    return np.column_stack([f1, g * (1.0 - np.sqrt(f1 / g))])


@pytest.fixture
def zdt1_problem():
    def _make(n_var=10, **kwargs):
        return Problem(objective=zdt1, xmin=np.zeros(n_var), xmax=np.ones(n_var), n_obj=2, name="zdt1", **kwargs)

    return _make
