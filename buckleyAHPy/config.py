from typing import Dict, List, Tuple, Any


# (id, name, short_name, value, (l, m, u))
TermDefinition = Tuple[str, str, str, int, Tuple[float, float, float]]

# Keys are (row, column) pairs of the upper triangle.
JudgmentMap = Dict[Tuple[int, int], float]


class Configuration:
    """
    A singleton-like class to hold all configurable parameters for the buckleyAHPy library.

    Users can modify these attributes directly to customize the behavior of
    the weight derivation pipeline or the defaults a new session starts from.

    Example:
    >>> from buckleyAHPy.config import configure_parameters
    >>> # Defuzzify fuzzy weights with the graded mean instead of the centroid
    >>> configure_parameters.DEFUZZIFICATION_METHOD = 'graded_mean'
    >>> # Silence degenerate-arithmetic warnings
    >>> configure_parameters.WARN_ON_DEGENERATE = False
    """

    def __init__(self):
        self.reset_to_defaults()

    def reset_to_defaults(self):
        """Resets all configuration parameters to their original default values."""

        # --- General Numerical Parameters ---

        # Small tolerance value for float comparisons, reciprocity checks, etc.
        self.FLOAT_TOLERANCE: float = 1e-9

        # Defuzzification applied to fuzzy weights before normalization (step 5 of Buckley's method)
        self.DEFUZZIFICATION_METHOD: str = "centroid"

        # Emit a DegenerateArithmeticWarning when 1/0 is resolved to 0
        self.WARN_ON_DEGENERATE: bool = True

        # --- Linguistic Term Set ---

        self.MIN_TERMS: int = 2

        # Table 1 of the practical example: the 9-level scale with its TFNs.
        # Note that 'Absolutely important' is crisp (9, 9, 9).
        self.DEFAULT_LINGUISTIC_TERMS: List[TermDefinition] = [
            ("1", "Equally important", "EI", 1, (1, 1, 1)),
            ("2", "Intermediate value", "IV13", 2, (1, 2, 3)),
            ("3", "Weakly important", "WI", 3, (2, 3, 4)),
            ("4", "Intermediate value", "IV35", 4, (3, 4, 5)),
            ("5", "Fairly important", "FI", 5, (4, 5, 6)),
            ("6", "Intermediate value", "IV57", 6, (5, 6, 7)),
            ("7", "Strongly important", "SI", 7, (6, 7, 8)),
            ("8", "Intermediate value", "IV79", 8, (7, 8, 9)),
            ("9", "Absolutely important", "AI", 9, (9, 9, 9)),
        ]

        # --- Default Session (practical example: 5 criteria, 3 alternatives) ---

        self.DEFAULT_CRITERIA_NAMES: List[str] = [
            "C1 (cargo support)",
            "C2 (cargo insurance)",
            "C3 (vehicle monitoring)",
            "C4 (cargo safety)",
            "C5 (timeliness of delivery)",
        ]

        self.DEFAULT_ALTERNATIVE_NAMES: List[str] = [
            "A1 (Company A)",
            "A2 (Company B)",
            "A3 (Company C)",
        ]

        self.DEFAULT_CRITERIA_JUDGMENTS: JudgmentMap = {
            (0, 1): 3, (0, 2): 4, (0, 3): 1, (0, 4): 1/2,
            (1, 2): 2, (1, 3): 1/3, (1, 4): 1,
            (2, 3): 1/5, (2, 4): 1/3,
            (3, 4): 1/2,
        }

        # One judgment map per criterion, in criteria order.
        self.DEFAULT_ALTERNATIVE_JUDGMENTS: List[JudgmentMap] = [
            {(0, 1): 2, (0, 2): 4, (1, 2): 3},          # C1 cargo support
            {(0, 1): 1/3, (0, 2): 1/5, (1, 2): 1/3},    # C2 cargo insurance
            {(0, 1): 1/3, (0, 2): 2, (1, 2): 3},        # C3 vehicle monitoring
            {(0, 1): 1, (0, 2): 2, (1, 2): 2},          # C4 cargo safety
            {(0, 1): 2, (0, 2): 1/3, (1, 2): 1/4},      # C5 timeliness of delivery
        ]

configure_parameters = Configuration()



class ConfigurationContextManager:
    """
    A context manager to temporarily change configuration parameters.

    Usage:
    >>> with ConfigurationContextManager(DEFUZZIFICATION_METHOD='graded_mean'):
    >>>     # Code block runs with graded mean defuzzification
    >>>     ...
    >>> # Defuzzification reverts to its original value outside the block
    """
    def __init__(self, **kwargs: Any):
        self.changes = kwargs
        self.original_values = {}

    def __enter__(self):
        for key in self.changes:
            if not hasattr(configure_parameters, key):
                raise AttributeError(f"Configuration object has no attribute '{key}'")
        for key, value in self.changes.items():
            self.original_values[key] = getattr(configure_parameters, key)
            setattr(configure_parameters, key, value)
        return configure_parameters

    def __exit__(self, exc_type, exc_val, exc_tb):
        for key, value in self.original_values.items():
            setattr(configure_parameters, key, value)
