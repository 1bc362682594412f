"""
===================================================================
Tests for the Config Module
===================================================================

Checks the configuration singleton, its reset and the context manager used
for temporary overrides.
"""

import pytest

from buckleyAHPy.config import configure_parameters, ConfigurationContextManager
from buckleyAHPy.weight_derivation import derive_weights


def test_defaults():
    assert configure_parameters.FLOAT_TOLERANCE == 1e-9
    assert configure_parameters.DEFUZZIFICATION_METHOD == "centroid"
    assert configure_parameters.WARN_ON_DEGENERATE is True
    assert configure_parameters.MIN_TERMS == 2
    assert len(configure_parameters.DEFAULT_LINGUISTIC_TERMS) == 9
    assert len(configure_parameters.DEFAULT_CRITERIA_NAMES) == 5
    assert len(configure_parameters.DEFAULT_ALTERNATIVE_NAMES) == 3
    assert len(configure_parameters.DEFAULT_ALTERNATIVE_JUDGMENTS) == 5

def test_absolutely_important_is_crisp():
    ai = next(t for t in configure_parameters.DEFAULT_LINGUISTIC_TERMS if t[2] == "AI")
    assert ai[3] == 9
    assert ai[4] == (9, 9, 9)

def test_reset_to_defaults():
    configure_parameters.DEFUZZIFICATION_METHOD = "graded_mean"
    configure_parameters.MIN_TERMS = 5
    configure_parameters.reset_to_defaults()
    assert configure_parameters.DEFUZZIFICATION_METHOD == "centroid"
    assert configure_parameters.MIN_TERMS == 2

def test_context_manager_restores_values():
    with ConfigurationContextManager(DEFUZZIFICATION_METHOD="graded_mean", MIN_TERMS=3) as config:
        assert config.DEFUZZIFICATION_METHOD == "graded_mean"
        assert configure_parameters.MIN_TERMS == 3
    assert configure_parameters.DEFUZZIFICATION_METHOD == "centroid"
    assert configure_parameters.MIN_TERMS == 2

def test_context_manager_restores_after_exception():
    with pytest.raises(RuntimeError):
        with ConfigurationContextManager(WARN_ON_DEGENERATE=False):
            raise RuntimeError("boom")
    assert configure_parameters.WARN_ON_DEGENERATE is True

def test_context_manager_rejects_unknown_keys_without_partial_changes():
    with pytest.raises(AttributeError):
        with ConfigurationContextManager(MIN_TERMS=4, NOT_A_SETTING=1):
            pass
    assert configure_parameters.MIN_TERMS == 2

def test_configured_defuzzification_drives_weight_derivation(three_item_matrix):
    centroid_result = derive_weights(three_item_matrix)
    with ConfigurationContextManager(DEFUZZIFICATION_METHOD="pessimistic"):
        pessimistic_result = derive_weights(three_item_matrix)
    assert pessimistic_result.crisp_weights == pytest.approx([w.l for w in centroid_result.fuzzy_weights])
    assert centroid_result.crisp_weights != pytest.approx(pessimistic_result.crisp_weights)
