from __future__ import annotations
from typing import List, Dict, Sequence, TYPE_CHECKING
import numpy as np

if TYPE_CHECKING:
    from buckleyAHPy.scale import LinguisticTerm
    from buckleyAHPy.matrix import ReciprocalMatrix


class TermSetValidationError(ValueError):
    """A linguistic term set was rejected. The full report is in `.result`."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(f"Invalid linguistic term set: {result.summary()}")


class StructuralInconsistencyError(RuntimeError):
    """Matrix dimensions do not match the declared numbers of criteria and alternatives."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("No result available: " + "; ".join(self.errors))


class ValidationResult:
    """
    Outcome of validating a linguistic term set.

    Attributes:
        field_errors: {term_id: {field_name: message}} for every offending field.
        global_errors: Errors that concern the term set as a whole.
    """
    def __init__(self, field_errors: Dict[str, Dict[str, str]] | None = None,
                 global_errors: List[str] | None = None):
        self.field_errors = field_errors or {}
        self.global_errors = global_errors or []

    def __repr__(self) -> str:
        return f"ValidationResult(is_valid={self.is_valid}, field_errors={self.field_errors}, global_errors={self.global_errors})"

    @property
    def is_valid(self) -> bool:
        return not self.field_errors and not self.global_errors

    def __bool__(self) -> bool:
        return self.is_valid

    def errors_for(self, term_id: str) -> Dict[str, str]:
        return self.field_errors.get(term_id, {})

    def summary(self) -> str:
        parts = list(self.global_errors)
        for term_id, errors in self.field_errors.items():
            for field, message in errors.items():
                parts.append(f"term '{term_id}' {field}: {message}")
        return "; ".join(parts)

    def raise_if_invalid(self):
        if not self.is_valid:
            raise TermSetValidationError(self)


def validate_term_set(terms: Sequence[LinguisticTerm], min_terms: int | None = None) -> ValidationResult:
    """
    Validates a linguistic term set without raising.

    Checks, per term: empty or duplicate short name, duplicate or non-positive
    intensity value, l > m, m > u and non-positive bounds. Globally: fewer
    than `min_terms` terms and duplicate term ids. For duplicates, the error
    is attached to the later occurrence.

    Args:
        terms: The candidate terms, in editing order.
        min_terms: Minimum number of terms. Defaults to configure_parameters.MIN_TERMS.

    Returns:
        A ValidationResult; `is_valid` is True only if there is no error at all.
    """
    from .config import configure_parameters
    final_min_terms = min_terms if min_terms is not None else configure_parameters.MIN_TERMS

    field_errors: Dict[str, Dict[str, str]] = {}
    global_errors: List[str] = []
    short_names = set()
    values = set()
    ids = set()

    for term in terms:
        term_errors: Dict[str, str] = {}

        short_name = (term.short_name or "").strip()
        if short_name == "":
            term_errors["short_name"] = "Required"
        elif short_name in short_names:
            term_errors["short_name"] = "Duplicate"
        short_names.add(short_name)

        value = term.value
        if not _is_positive_integer(value):
            term_errors["value"] = "Must be a positive integer"
        elif value in values:
            term_errors["value"] = "Duplicate"
        values.add(value)

        l, m, u = term.bounds
        if l > m:
            term_errors["l"] = "l <= m"
        elif not l > 0:
            term_errors["l"] = "Must be positive"
        if m > u:
            term_errors["m"] = "m <= u"
        elif not m > 0:
            term_errors["m"] = "Must be positive"
        if not u > 0:
            term_errors["u"] = "Must be positive"

        if term.term_id in ids:
            global_errors.append(f"Duplicate term id '{term.term_id}'.")
        ids.add(term.term_id)

        if term_errors:
            field_errors.setdefault(term.term_id, {}).update(term_errors)

    if len(terms) < final_min_terms:
        global_errors.append(f"At least {final_min_terms} terms are required, got {len(terms)}.")

    return ValidationResult(field_errors, global_errors)


def _is_positive_integer(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return False
    return as_float > 0 and as_float.is_integer()


class Validation:
    """
    A class containing static methods to validate comparison matrices and the
    dimensions of a criteria/alternatives hierarchy.
    """

    @staticmethod
    def validate_matrix_properties(matrix: ReciprocalMatrix | np.ndarray, tolerance: float = 1e-6) -> List[str]:
        """
        Validates a single comparison matrix for dimensions, diagonal, and reciprocity.

        Args:
            matrix: The comparison matrix to validate, either a ReciprocalMatrix
                    or a square object array of TFNs.
            tolerance: Tolerance for floating-point reciprocity checks.

        Returns:
            A list of error strings. An empty list means the matrix is valid.
        """
        errors = []

        if hasattr(matrix, "tfn_array"):
            matrix = matrix.tfn_array()

        # 1. Validate Dimensions
        if not isinstance(matrix, np.ndarray) or matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            errors.append("Matrix must be a 2D square NumPy array.")
            return errors

        n = matrix.shape[0]

        # 2. Validate Diagonal (componentwise, not only the centroid)
        for i in range(n):
            cell = matrix[i, i]
            if not np.allclose(cell.to_array(), 1.0, rtol=0.0, atol=tolerance):
                errors.append(f"Diagonal element at ({i},{i}) is not (1,1,1). Found: {cell}")

        # 3. Validate Reciprocity
        for i in range(n):
            for j in range(i + 1, n):
                val = matrix[i, j]
                inverse_val = matrix[j, i].inverse()
                if not val.is_close(inverse_val, tolerance):
                    errors.append(f"Reciprocity failed between ({i},{j}) and ({j},{i}). "
                                  f"Value: {val}, Inverse of counterpart: {inverse_val}")

        return errors

    @staticmethod
    def validate_hierarchy_dimensions(
        criteria_matrix: ReciprocalMatrix,
        alternative_matrices: Sequence[ReciprocalMatrix],
        num_criteria: int,
        num_alternatives: int
    ) -> List[str]:
        """
        Checks that the criteria matrix is nC x nC and that there are exactly
        nC alternative matrices, each nA x nA.

        Returns:
            A list of error strings describing every mismatch.
        """
        errors = []
        if num_criteria < 1 or num_alternatives < 1:
            errors.append(f"At least one criterion and one alternative are required, got {num_criteria} and {num_alternatives}.")
        if criteria_matrix.size != num_criteria:
            errors.append(f"Criteria matrix has size {criteria_matrix.size} but there are {num_criteria} criteria.")
        if len(alternative_matrices) != num_criteria:
            errors.append(f"There are {len(alternative_matrices)} alternative matrices but {num_criteria} criteria.")
        for c, matrix in enumerate(alternative_matrices):
            if matrix.size != num_alternatives:
                errors.append(f"Alternative matrix {c} has size {matrix.size} but there are {num_alternatives} alternatives.")
        return errors
