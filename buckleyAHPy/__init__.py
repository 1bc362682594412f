__version__ = "0.1.0"

from buckleyAHPy import defuzzification
from .config import configure_parameters, ConfigurationContextManager
from .types import TFN, DegenerateArithmeticWarning
from .scale import LinguisticTerm, LinguisticScale
from .matrix import MatrixCell, ReciprocalMatrix
from .model import Hierarchy
from .validation import (
    validate_term_set, ValidationResult, TermSetValidationError, StructuralInconsistencyError
)

from .weight_derivation import derive_weights, register_weight_method
from .aggregation import synthesize, AHPResult
