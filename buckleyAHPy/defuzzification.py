from __future__ import annotations
import warnings
import numpy as np
from .types import TFN, DegenerateArithmeticWarning, centroid


def available_methods() -> dict:
    """
    Get a dictionary containing list of available defuzzification methods.

    Returns:
    --------
    dict
        List of method names for each fuzzy number type
    """
    return {
        "TFN": TFN.get_available_defuzzify_methods(),
    }

def normalize_crisp_weights(crisp_weights: np.ndarray) -> np.ndarray:
    """
    Normalize crisp weights to sum to 1.

    If the weights sum to zero there is nothing to normalize against; every
    normalized weight is then 0 (the degenerate guard of Buckley's method
    as implemented here) and a DegenerateArithmeticWarning is emitted.

    Parameters:
    -----------
    crisp_weights : np.ndarray
        Array of crisp weights

    Returns:
    --------
    np.ndarray
        Normalized crisp weights
    """
    from .config import configure_parameters

    crisp_weights = np.asarray(crisp_weights, dtype=float)
    weight_sum = np.sum(crisp_weights)
    if weight_sum == 0:
        if configure_parameters.WARN_ON_DEGENERATE:
            warnings.warn("Sum of crisp weights is zero; all normalized weights are set to 0.",
                          DegenerateArithmeticWarning, stacklevel=2)
        return np.zeros_like(crisp_weights)
    return crisp_weights / weight_sum

def centroid_method(fuzzy_number: TFN) -> float:
    """
    Defuzzify a triangular fuzzy number using the centroid (center of area) method.
    This method returns the x-coordinate of the center of gravity of the fuzzy number.

    Parameters:
    -----------
    fuzzy_number : TFN
        The triangular fuzzy number

    Returns:
    --------
    float
        The defuzzified value (l + m + u) / 3
    """
    return centroid(fuzzy_number)

def graded_mean_integration(fuzzy_number: TFN) -> float:
    """
    Defuzzify a triangular fuzzy number using the graded mean integration method.
    This method gives more weight to the middle value compared to the lower and upper bounds.

    Parameters:
    -----------
    fuzzy_number : TFN
        The triangular fuzzy number

    Returns:
    --------
    float
        The defuzzified value
    """
    # The formula for triangular fuzzy numbers is
    # (l + 4m + u) / 6
    return (fuzzy_number.l + 4 * fuzzy_number.m + fuzzy_number.u) / 6.0

# ==============================================================================
# REGISTRATION
# ==============================================================================

TFN.register_defuzzify_method('centroid', centroid_method)
TFN.register_defuzzify_method('graded_mean', graded_mean_integration)
TFN.register_defuzzify_method('pessimistic', lambda tfn: tfn.l)
TFN.register_defuzzify_method('optimistic', lambda tfn: tfn.u)
