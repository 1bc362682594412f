from __future__ import annotations
from typing import List, Dict, Any, Callable, TYPE_CHECKING
import numpy as np
from .types import TFN, geometric_mean, fuzzy_sum
from .defuzzification import normalize_crisp_weights

if TYPE_CHECKING:
    from .matrix import ReciprocalMatrix


# ==============================================================================
# 1. REGISTRY FOR CUSTOMIZATION
# ==============================================================================

WEIGHT_DERIVATION_REGISTRY: Dict[str, Callable] = {}

def register_weight_method(method_name: str):
    """A decorator to register a new weight derivation method."""
    def decorator(func):
        if method_name in WEIGHT_DERIVATION_REGISTRY:
            print(f"Warning: Overwriting existing weight method '{method_name}'")
        WEIGHT_DERIVATION_REGISTRY[method_name] = func
        return func
    return decorator


class WeightDerivationResult:
    """
    The normalized weights of one comparison matrix together with every
    intermediate artifact of their derivation.

    Attributes:
        geo_means: Row geometric means r_i (TFNs).
        sum_vector: Sum of the row geometric means (TFN).
        inverse_sum: Inverse of the sum vector (TFN).
        fuzzy_weights: Fuzzy weights w_i = r_i * inverse_sum (TFNs), a.k.a. synthetic extents.
        crisp_weights: Defuzzified fuzzy weights.
        normalized_weights: crisp_weights scaled to sum to 1.
        degenerate: True if normalization hit a zero denominator.
    """
    def __init__(
        self,
        geo_means: List[TFN],
        sum_vector: TFN,
        inverse_sum: TFN,
        fuzzy_weights: List[TFN],
        crisp_weights: np.ndarray,
        normalized_weights: np.ndarray,
        degenerate: bool = False,
        method: str = "geometric_mean"
    ):
        self.geo_means = geo_means
        self.sum_vector = sum_vector
        self.inverse_sum = inverse_sum
        self.fuzzy_weights = fuzzy_weights
        self.crisp_weights = crisp_weights
        self.normalized_weights = normalized_weights
        self.degenerate = degenerate
        self.method = method

    def __repr__(self) -> str:
        w_str = ", ".join(f"{w:.4f}" for w in self.normalized_weights)
        return f"WeightDerivationResult(method='{self.method}', normalized_weights=[{w_str}], degenerate={self.degenerate})"

    def __len__(self) -> int:
        return len(self.normalized_weights)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "geo_means": [g.to_tuple() for g in self.geo_means],
            "sum_vector": self.sum_vector.to_tuple(),
            "inverse_sum": self.inverse_sum.to_tuple(),
            "fuzzy_weights": [w.to_tuple() for w in self.fuzzy_weights],
            "crisp_weights": self.crisp_weights.tolist(),
            "normalized_weights": self.normalized_weights.tolist(),
            "degenerate": self.degenerate,
        }


# ==============================================================================
# 2. BUCKLEY'S FUZZY GEOMETRIC MEAN
# ==============================================================================

@register_weight_method('geometric_mean')
def geometric_mean_method(matrix: np.ndarray, defuzzification_method: str = "centroid") -> WeightDerivationResult:
    """
    Derives weights using Buckley's fuzzy geometric mean method.

    .. note::
        **Academic Note:** Buckley (1985) extends the geometric mean of
        classical AHP to fuzzy judgments. The row geometric means are
        normalized by the inverted sum vector, which keeps the fuzzy weights
        triangular, and are then collapsed to crisp values. Unlike Chang's
        extent analysis it never assigns a zero weight to a criterion that
        was judged at all.

    Steps:
        1. r_i = geometric mean of row i
        2. sr = r_1 + ... + r_n
        3. isr = sr^-1 = (1/u, 1/m, 1/l)
        4. w_i = r_i * isr
        5. crisp_i = defuzzify(w_i)
        6. normalized_i = crisp_i / sum(crisp)

    Args:
        matrix: The (n x n) comparison matrix of TFNs.
        defuzzification_method: Registered TFN defuzzification for step 5.

    Returns:
        A WeightDerivationResult.
    """
    n = matrix.shape[0]

    row_geo_means = [geometric_mean(matrix[i, :]) for i in range(n)]
    sum_vector = fuzzy_sum(row_geo_means)
    inverse_sum = sum_vector.inverse()
    fuzzy_weights = [geo_mean * inverse_sum for geo_mean in row_geo_means]

    crisp_weights = np.array([w.defuzzify(method=defuzzification_method) for w in fuzzy_weights], dtype=float)
    degenerate = bool(np.sum(crisp_weights) == 0)
    normalized_weights = normalize_crisp_weights(crisp_weights)

    return WeightDerivationResult(
        geo_means=row_geo_means,
        sum_vector=sum_vector,
        inverse_sum=inverse_sum,
        fuzzy_weights=fuzzy_weights,
        crisp_weights=crisp_weights,
        normalized_weights=normalized_weights,
        degenerate=degenerate,
        method='geometric_mean'
    )


def derive_weights(
    matrix: ReciprocalMatrix | np.ndarray,
    method: str = "geometric_mean",
    defuzzification_method: str | None = None
) -> WeightDerivationResult:
    """
    Derives weights from a comparison matrix using the specified method.
    This function acts as a dispatcher, selecting the registered algorithm.

    Each call is stateless: the criteria matrix and every alternative matrix
    are reduced independently and in any order.

    Args:
        matrix: A ReciprocalMatrix or a square object array of TFNs.
        method: The weight derivation method to use ("geometric_mean").
        defuzzification_method: Defuzzification for the fuzzy weights.
            Defaults to configure_parameters.DEFUZZIFICATION_METHOD.

    Returns:
        A WeightDerivationResult.
    """
    from .config import configure_parameters
    final_defuzz = defuzzification_method or configure_parameters.DEFUZZIFICATION_METHOD

    derivation_func = WEIGHT_DERIVATION_REGISTRY.get(method)
    if derivation_func is None:
        raise ValueError(
            f"Method '{method}' is not registered. Available methods: {list(WEIGHT_DERIVATION_REGISTRY.keys())}"
        )

    tfn_matrix = matrix.tfn_array() if hasattr(matrix, "tfn_array") else matrix
    if not isinstance(tfn_matrix, np.ndarray) or tfn_matrix.ndim != 2 or tfn_matrix.shape[0] != tfn_matrix.shape[1]:
        raise ValueError("Weight derivation requires a square comparison matrix.")
    if tfn_matrix.shape[0] == 0:
        raise ValueError("Weight derivation requires at least one item.")

    result = derivation_func(tfn_matrix, defuzzification_method=final_defuzz)
    if not isinstance(result, WeightDerivationResult):
        raise TypeError(f"Registered method {derivation_func.__name__} returned an unexpected type: {type(result)}")
    return result
