"""
===================================================================
Tests for the Validation Module
===================================================================

This script contains unit tests for the validation functionalities: the
linguistic term-set validator, the comparison matrix checks and the
hierarchy dimension checks.
"""

import pytest
import numpy as np

from buckleyAHPy.validation import (
    Validation, validate_term_set, ValidationResult,
    TermSetValidationError, StructuralInconsistencyError
)
from buckleyAHPy.scale import LinguisticTerm
from buckleyAHPy.matrix import ReciprocalMatrix
from buckleyAHPy.types import TFN

# --- Test Fixtures: Reusable valid and invalid components ---

@pytest.fixture
def valid_terms():
    return [
        LinguisticTerm("a", "Equal", "EQ", 1, (1, 1, 1)),
        LinguisticTerm("b", "Moderate", "MO", 3, (2, 3, 4)),
        LinguisticTerm("c", "Strong", "ST", 5, (4, 5, 6)),
    ]

@pytest.fixture
def valid_tfn_matrix() -> np.ndarray:
    """A valid, 2x2 reciprocal TFN matrix."""
    return np.array([
        [TFN(1, 1, 1), TFN(2, 3, 4)],
        [TFN(1/4, 1/3, 1/2), TFN(1, 1, 1)]
    ], dtype=object)

# ==============================================================================
# Term set validation
# ==============================================================================

def test_valid_term_set(valid_terms):
    result = validate_term_set(valid_terms)
    assert result.is_valid
    assert bool(result)
    assert result.field_errors == {}
    assert result.global_errors == []

def test_empty_short_name_is_required(valid_terms):
    valid_terms[1] = valid_terms[1].replace(short_name="   ")
    result = validate_term_set(valid_terms)
    assert not result.is_valid
    assert result.errors_for("b") == {"short_name": "Required"}

def test_duplicate_short_name_after_strip(valid_terms):
    valid_terms[2] = valid_terms[2].replace(short_name=" MO ")
    result = validate_term_set(valid_terms)
    assert result.errors_for("c") == {"short_name": "Duplicate"}
    assert result.errors_for("b") == {}

def test_duplicate_value(valid_terms):
    valid_terms[2] = valid_terms[2].replace(value=3)
    result = validate_term_set(valid_terms)
    assert result.errors_for("c")["value"] == "Duplicate"

def test_value_must_be_positive_integer(valid_terms):
    valid_terms[1] = valid_terms[1].replace(value=0)
    valid_terms[2] = valid_terms[2].replace(value=2.5)
    result = validate_term_set(valid_terms)
    assert result.errors_for("b")["value"] == "Must be a positive integer"
    assert result.errors_for("c")["value"] == "Must be a positive integer"

def test_bounds_order_errors(valid_terms):
    valid_terms[1] = valid_terms[1].replace(tri=(5, 3, 4))
    valid_terms[2] = valid_terms[2].replace(tri=(4, 7, 6))
    result = validate_term_set(valid_terms)
    assert result.errors_for("b") == {"l": "l <= m"}
    assert result.errors_for("c") == {"m": "m <= u"}

def test_bounds_must_be_positive(valid_terms):
    valid_terms[1] = valid_terms[1].replace(tri=(0, 3, 4))
    result = validate_term_set(valid_terms)
    assert result.errors_for("b") == {"l": "Must be positive"}

def test_minimum_number_of_terms(valid_terms):
    result = validate_term_set(valid_terms[:1])
    assert not result.is_valid
    assert result.field_errors == {}
    assert "At least 2 terms are required, got 1." in result.global_errors

    assert not validate_term_set(valid_terms, min_terms=4).is_valid

def test_duplicate_term_id(valid_terms):
    valid_terms[2] = valid_terms[2].replace(term_id="a")
    result = validate_term_set(valid_terms)
    assert any("Duplicate term id 'a'" in e for e in result.global_errors)

def test_raise_if_invalid(valid_terms):
    valid_terms[0] = valid_terms[0].replace(short_name="")
    result = validate_term_set(valid_terms)
    with pytest.raises(TermSetValidationError) as excinfo:
        result.raise_if_invalid()
    assert excinfo.value.result is result
    assert "short_name: Required" in str(excinfo.value)

def test_validation_result_summary():
    result = ValidationResult({"x": {"l": "l <= m"}}, ["At least 2 terms are required, got 1."])
    assert result.summary() == "At least 2 terms are required, got 1.; term 'x' l: l <= m"

# ==============================================================================
# Matrix validation
# ==============================================================================

def test_validate_matrix_properties_success(valid_tfn_matrix):
    assert Validation.validate_matrix_properties(valid_tfn_matrix) == []

def test_validate_matrix_properties_accepts_reciprocal_matrix(three_item_matrix):
    assert Validation.validate_matrix_properties(three_item_matrix) == []

def test_validate_matrix_non_square():
    matrix = np.array([[TFN(1, 1, 1), TFN(1, 1, 1)]], dtype=object)
    errors = Validation.validate_matrix_properties(matrix)
    assert errors == ["Matrix must be a 2D square NumPy array."]

def test_validate_matrix_bad_diagonal(valid_tfn_matrix):
    valid_tfn_matrix[1, 1] = TFN(1, 2, 3)
    errors = Validation.validate_matrix_properties(valid_tfn_matrix)
    assert any("Diagonal element at (1,1)" in e for e in errors)

def test_validate_matrix_not_reciprocal(valid_tfn_matrix):
    valid_tfn_matrix[1, 0] = TFN(1, 2, 3)
    errors = Validation.validate_matrix_properties(valid_tfn_matrix)
    assert len(errors) == 1
    assert "Reciprocity failed between (0,1) and (1,0)" in errors[0]

# ==============================================================================
# Hierarchy dimensions
# ==============================================================================

def test_validate_hierarchy_dimensions_success():
    crit = ReciprocalMatrix.create(2)
    alts = [ReciprocalMatrix.create(3), ReciprocalMatrix.create(3)]
    assert Validation.validate_hierarchy_dimensions(crit, alts, 2, 3) == []

def test_validate_hierarchy_dimensions_reports_every_mismatch():
    crit = ReciprocalMatrix.create(3)
    alts = [ReciprocalMatrix.create(3), ReciprocalMatrix.create(2)]
    errors = Validation.validate_hierarchy_dimensions(crit, alts, 2, 3)
    assert len(errors) == 2
    assert "Criteria matrix has size 3 but there are 2 criteria." in errors
    assert "Alternative matrix 1 has size 2 but there are 3 alternatives." in errors

def test_validate_hierarchy_dimensions_wrong_matrix_count():
    errors = Validation.validate_hierarchy_dimensions(ReciprocalMatrix.create(2), [ReciprocalMatrix.create(3)], 2, 3)
    assert errors == ["There are 1 alternative matrices but 2 criteria."]

def test_validate_hierarchy_requires_items():
    errors = Validation.validate_hierarchy_dimensions(ReciprocalMatrix.create(0), [], 0, 3)
    assert len(errors) == 1
    assert "At least one criterion and one alternative" in errors[0]

def test_structural_inconsistency_error_message():
    error = StructuralInconsistencyError(["first", "second"])
    assert error.errors == ["first", "second"]
    assert str(error) == "No result available: first; second"
