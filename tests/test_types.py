"""
===================================================================
Tests for the Types Module
===================================================================

This script contains unit tests for the TFN class and the elementary fuzzy
operations used by Buckley's method (inverse, product, sum, geometric mean,
centroid), including the degenerate 1/0 -> 0 policy.
"""

import pytest
import numpy as np

from buckleyAHPy.types import (
    TFN, DegenerateArithmeticWarning,
    fuzzy_inverse, fuzzy_multiply, fuzzy_sum, geometric_mean, centroid
)
from buckleyAHPy.config import ConfigurationContextManager

# --- Test Data Fixtures ---

@pytest.fixture
def tfn1() -> TFN:
    return TFN(1, 2, 3)

@pytest.fixture
def tfn2() -> TFN:
    return TFN(2, 4, 6)

# ==============================================================================
# Construction and arithmetic
# ==============================================================================

def test_tfn_initialization():
    """Test that invalid TFN values raise an error."""
    with pytest.raises(ValueError, match="TFN values must satisfy l <= m <= u"):
        TFN(5, 2, 3)

def test_tfn_components_are_floats():
    tfn = TFN(1, 2, 3)
    assert isinstance(tfn.l, float)
    assert tfn.to_tuple() == (1.0, 2.0, 3.0)
    assert list(tfn) == [1.0, 2.0, 3.0]

def test_tfn_addition(tfn1, tfn2):
    result = tfn1 + tfn2
    assert result == TFN(3, 6, 9)
    assert isinstance(result, TFN)

    # Test with scalar
    assert tfn1 + 10 == TFN(11, 12, 13)
    assert 10 + tfn1 == TFN(11, 12, 13)

def test_tfn_multiplication(tfn1, tfn2):
    assert tfn1 * tfn2 == TFN(2, 8, 18)
    assert fuzzy_multiply(tfn1, tfn2) == TFN(2, 8, 18)
    assert tfn1 * 2 == TFN(2, 4, 6)
    assert 2 * tfn1 == TFN(2, 4, 6)

def test_tfn_power(tfn2):
    assert tfn2 ** 2 == TFN(4, 16, 36)
    squared_root = tfn2.power(0.5)
    assert squared_root.to_tuple() == pytest.approx((np.sqrt(2), 2.0, np.sqrt(6)))

def test_tfn_comparison_uses_centroid():
    assert TFN(1, 2, 3) < TFN(2, 3, 4)
    assert TFN(1, 2, 3) > 1.5
    assert max([TFN(1, 1, 1), TFN(2, 3, 4), TFN(1, 2, 3)]) == TFN(2, 3, 4)

def test_tfn_is_hashable():
    assert len({TFN(1, 2, 3), TFN(1, 2, 3), TFN(2, 3, 4)}) == 2

# ==============================================================================
# Inverse
# ==============================================================================

def test_tfn_inverse(tfn1):
    inv = tfn1.inverse()
    assert inv.to_tuple() == pytest.approx((1/3, 1/2, 1.0))
    assert fuzzy_inverse(tfn1) == inv

def test_inverse_of_inverse_is_identity():
    for tfn in [TFN(2, 3, 4), TFN(1, 1, 1), TFN(9, 9, 9), TFN(0.5, 1.5, 7)]:
        assert tfn.inverse().inverse().is_close(tfn, 1e-12)

def test_inverse_of_crisp_identity():
    assert TFN(1, 1, 1).inverse() == TFN(1, 1, 1)

def test_inverse_with_zero_component_returns_zero_and_warns():
    with pytest.warns(DegenerateArithmeticWarning):
        inv = TFN(0, 0, 0).inverse()
    assert inv.to_tuple() == (0.0, 0.0, 0.0)

def test_inverse_with_zero_lower_bound_does_not_raise():
    with pytest.warns(DegenerateArithmeticWarning):
        inv = TFN(0, 1, 2).inverse()
    # 1/u, 1/m, and 1/0 -> 0 in the upper slot
    assert inv.to_tuple() == pytest.approx((0.5, 1.0, 0.0))

def test_degenerate_inverse_propagates_through_multiply():
    with pytest.warns(DegenerateArithmeticWarning):
        inv = TFN(0, 1, 2).inverse()
    product = fuzzy_multiply(inv, TFN(1, 1, 1))
    assert product.to_tuple() == pytest.approx((0.5, 1.0, 0.0))
    assert (inv + TFN(1, 1, 1)).to_tuple() == pytest.approx((1.5, 2.0, 1.0))

def test_degenerate_inverse_propagates_through_geometric_mean():
    with pytest.warns(DegenerateArithmeticWarning):
        inv = TFN(0, 1, 2).inverse()
    result = geometric_mean([inv, TFN(1, 1, 1)])
    assert result.to_tuple() == pytest.approx((np.sqrt(0.5), 1.0, 0.0))

def test_geometric_mean_with_zero_lower_bound():
    result = geometric_mean([TFN(0, 1, 2), TFN(2, 3, 4)])
    assert result.l == 0.0
    assert result.to_tuple() == pytest.approx((0.0, np.sqrt(3), np.sqrt(8)))

def test_degenerate_warning_can_be_silenced(recwarn):
    with ConfigurationContextManager(WARN_ON_DEGENERATE=False):
        TFN(0, 0, 0).inverse()
    assert not any(issubclass(w.category, DegenerateArithmeticWarning) for w in recwarn)

# ==============================================================================
# Aggregates
# ==============================================================================

def test_fuzzy_sum():
    assert fuzzy_sum([TFN(1, 2, 3), TFN(1, 1, 1), TFN(0.5, 0.5, 0.5)]) == TFN(2.5, 3.5, 4.5)
    assert fuzzy_sum([]) == TFN(0, 0, 0)

def test_geometric_mean_of_row():
    result = geometric_mean([TFN(1, 1, 1), TFN(2, 3, 4)])
    assert result.to_tuple() == pytest.approx((np.sqrt(2), np.sqrt(3), 2.0))

def test_geometric_mean_of_crisp_values():
    result = geometric_mean([TFN(2, 2, 2), TFN(8, 8, 8)])
    assert result.to_tuple() == pytest.approx((4.0, 4.0, 4.0))

def test_geometric_mean_requires_input():
    with pytest.raises(ValueError):
        geometric_mean([])

def test_centroid_of_crisp_tfn():
    assert centroid(TFN(5, 5, 5)) == pytest.approx(5.0)
    assert centroid(TFN(1, 2, 6)) == pytest.approx(3.0)

# ==============================================================================
# Membership and defuzzification
# ==============================================================================

def test_membership_function():
    tfn = TFN(2, 3, 4)
    assert tfn.membership(3) == 1.0
    assert tfn.membership(2.5) == pytest.approx(0.5)
    assert tfn.membership(3.75) == pytest.approx(0.25)
    assert tfn.membership(1) == 0.0
    assert tfn.membership(5) == 0.0

def test_tfn_defuzzify_methods():
    tfn = TFN(1, 2, 6)
    assert tfn.defuzzify() == pytest.approx(3.0)
    assert tfn.defuzzify('graded_mean') == pytest.approx(15 / 6)
    assert tfn.defuzzify('pessimistic') == 1.0
    assert tfn.defuzzify('optimistic') == 6.0

def test_tfn_defuzzify_unknown_method():
    with pytest.raises(ValueError, match="not implemented for TFN"):
        TFN(1, 2, 3).defuzzify('does_not_exist')
