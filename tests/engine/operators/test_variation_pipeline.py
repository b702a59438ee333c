import logging

import numpy as np
import pytest

from compmoead.engine.algorithm.components.variation import VariationPipeline, resolve_stages
from compmoead.foundation.exceptions import ConfigurationError, InvalidComponentError
from compmoead.operators.real import PolynomialMutation

LOWER = np.zeros(4)
UPPER = np.ones(4)


def test_stages_run_left_to_right_and_end_in_bounds(make_context):
    rng = np.random.default_rng(0)
    X = rng.random((12, 4))
    pipeline = VariationPipeline(
        [("diffmut", {"basis": "rand", "phi": 2.0}), ("binrec", {"rho": 0.9}), ("polymut", {}), ("truncate", {})],
        LOWER,
        UPPER,
    )
    assert pipeline.names == ["diffmut", "binrec", "polymut", "truncate"]
    out = pipeline(make_context(X, lower=LOWER, upper=UPPER, seed=4))
    assert out.shape == X.shape
    assert np.all(out >= LOWER) and np.all(out <= UPPER)


def test_pipeline_is_seeded_and_leaves_incumbents_alone(make_context):
    X = np.random.default_rng(1).random((10, 4))
    original = X.copy()
    pipeline = VariationPipeline([("sbx", {"eta": 10}), ("polymut", {"prob": 0.5}), ("reflect", {})], LOWER, UPPER)
    out1 = pipeline(make_context(X, lower=LOWER, upper=UPPER, seed=7))
    out2 = pipeline(make_context(X, lower=LOWER, upper=UPPER, seed=7))
    np.testing.assert_array_equal(out1, out2)
    np.testing.assert_array_equal(X, original)


def test_none_stage_is_identity(make_context):
    X = np.random.default_rng(2).random((5, 4))
    pipeline = VariationPipeline(["none", "truncate"], LOWER, UPPER)
    np.testing.assert_array_equal(pipeline(make_context(X, lower=LOWER, upper=UPPER)), X)


def test_polymut_default_probability_is_one_over_n():
    pipeline = VariationPipeline([("polymut", {}), ("truncate", {})], LOWER, UPPER)
    mutation = pipeline.operators[0]
    assert isinstance(mutation, PolynomialMutation)
    assert mutation.prob == pytest.approx(0.25)


def test_missing_final_repair_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="compmoead"):
        VariationPipeline([("sbx", {})], LOWER, UPPER)
    assert any("repair" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize(
    "stages, error",
    [
        ([], ConfigurationError),
        ([("blx", {})], InvalidComponentError),
        ([("sbx", {"alpha": 0.5})], ConfigurationError),
        ([("polymut", {"prob": "2/n"})], ConfigurationError),
        ([("diffmut", {"basis": "best"})], ConfigurationError),
        ([("binrec", {"rho": 1.5})], ConfigurationError),
        ([("localsearch", {"type": "tpqa"})], ConfigurationError),
        ([("localsearch", {"type": "dvls", "tau_ls": 5})], ConfigurationError),
    ],
)
def test_invalid_stages_are_rejected(stages, error):
    with pytest.raises(error):
        resolve_stages(stages)


def test_localsearch_stage_with_period():
    (spec,) = resolve_stages([("localsearch", {"type": "tpqa", "tau_ls": 10})])
    assert spec.name == "localsearch"
    assert spec.params.tau_ls == 10
