from __future__ import annotations
import warnings
import numpy as np
from typing import Union, Dict, List, Callable, Iterable, Tuple
from functools import total_ordering


class DegenerateArithmeticWarning(RuntimeWarning):
    """Raised through `warnings.warn` when a division by zero is resolved to 0."""


def _reciprocal(value: float) -> float:
    """1/x with the degenerate policy 1/0 -> 0."""
    return 1.0 / value if value != 0 else 0.0


def _warn_degenerate(message: str):
    from .config import configure_parameters
    if configure_parameters.WARN_ON_DEGENERATE:
        warnings.warn(message, DegenerateArithmeticWarning, stacklevel=3)


@total_ordering
class TFN:
    """
    Triangular Fuzzy Number (TFN) class.
    A TFN is represented as (l, m, u) where l ≤ m ≤ u.
    l: lower bound (most pessimistic), m: most likely value, u: upper bound (most optimistic)

    Instances are treated as immutable: every operation returns a new TFN.
    """
    __slots__ = ("l", "m", "u")
    _defuzzify_methods: Dict[str, Callable] = {}

    def __init__(self, l: float, m: float, u: float):
        """Initialize a triangular fuzzy number."""
        if not (l <= m <= u):
            raise ValueError(f"TFN values must satisfy l <= m <= u, but got l={l}, m={m}, u={u}")
        self.l = float(l)
        self.m = float(m)
        self.u = float(u)

    @classmethod
    def _unchecked(cls, l: float, m: float, u: float) -> TFN:
        """
        Builds a TFN without the ordering check. Arithmetic results go through
        here, so a degenerate operand (a reciprocal taken as 0) propagates
        instead of raising.
        """
        tfn = cls.__new__(cls)
        tfn.l, tfn.m, tfn.u = float(l), float(m), float(u)
        return tfn

    def __repr__(self):
        """String representation of the TFN."""
        return f"TFN({self.l:.4f}, {self.m:.4f}, {self.u:.4f})"

    def __iter__(self):
        return iter((self.l, self.m, self.u))

    def _get_other_as_tfn(self, other: Union[TFN, float]) -> TFN:
        if isinstance(other, TFN): return other
        val = float(other)
        return TFN(val, val, val)

    def __add__(self, other: Union[TFN, float]) -> TFN:
        o = self._get_other_as_tfn(other)
        return TFN._unchecked(self.l + o.l, self.m + o.m, self.u + o.u)

    def __radd__(self, other: float) -> TFN:
        return self.__add__(other)

    def __mul__(self, other: Union[TFN, float]) -> TFN:
        """
        Elementwise product (l1*l2, m1*m2, u1*u2).

        This is the usual approximation of fuzzy multiplication; it is exact
        in ordering only when both operands are non-negative, which holds for
        every judgment and weight in AHP.
        """
        if not isinstance(other, (TFN, int, float, np.number)):
            return NotImplemented
        o = self._get_other_as_tfn(other)
        return TFN._unchecked(self.l * o.l, self.m * o.m, self.u * o.u)

    def __rmul__(self, other: float) -> TFN:
        return self.__mul__(other)

    def __pow__(self, exponent: float) -> TFN:
        if not isinstance(exponent, (int, float)):
            return NotImplemented
        if exponent >= 0:
            return TFN._unchecked(self.l**exponent, self.m**exponent, self.u**exponent)
        return self.inverse().__pow__(-exponent)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TFN):
            return self.l == other.l and self.m == other.m and self.u == other.u
        return False

    def __hash__(self) -> int:
        return hash((self.l, self.m, self.u))

    def __lt__(self, other: Union[TFN, float]) -> bool:
        other_value = other.defuzzify() if isinstance(other, TFN) else float(other)
        return self.defuzzify() < other_value

    def inverse(self) -> TFN:
        """
        Return the inverse of the TFN, (1/u, 1/m, 1/l).

        A zero component has reciprocal 0 rather than raising. That result is
        mathematically undefined, so a DegenerateArithmeticWarning is emitted.
        """
        if self.l == 0 or self.m == 0 or self.u == 0:
            _warn_degenerate(f"Inverse of {self!r} has a zero component; its reciprocal is taken as 0.")
            l, m, u = _reciprocal(self.u), _reciprocal(self.m), _reciprocal(self.l)
            return TFN._unchecked(l, m, u)
        return TFN._unchecked(1.0 / self.u, 1.0 / self.m, 1.0 / self.l)

    @staticmethod
    def neutral_element() -> TFN:
        return TFN(0.0, 0.0, 0.0)

    @staticmethod
    def multiplicative_identity() -> TFN:
        return TFN(1.0, 1.0, 1.0)

    def power(self, exponent: float) -> TFN:
        return self.__pow__(exponent)

    def to_array(self) -> np.ndarray:
        """Convert to NumPy array."""
        return np.array([self.l, self.m, self.u])

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.l, self.m, self.u)

    def is_close(self, other: TFN, tolerance: float | None = None) -> bool:
        """Componentwise comparison within an absolute tolerance."""
        from .config import configure_parameters
        final_tolerance = tolerance if tolerance is not None else configure_parameters.FLOAT_TOLERANCE
        return bool(np.allclose(self.to_array(), other.to_array(), rtol=0.0, atol=final_tolerance))

    def membership(self, x: float) -> float:
        """Degree of membership of x, rising linearly from l to m and falling from m to u."""
        if x < self.l or x > self.u:
            return 0.0
        if x == self.m:
            return 1.0
        if x < self.m:
            return (x - self.l) / (self.m - self.l)
        return (self.u - x) / (self.u - self.m)

    def defuzzify(self, method: str = 'centroid', **kwargs) -> float:
        """
        Defuzzifies the TFN by dispatching to a registered method.

        .. note::
            Buckley's method as used here collapses fuzzy weights with the
            'centroid' (l+m+u)/3. 'graded_mean' (l+4m+u)/6 is available for
            comparison studies.
        """
        func = self.__class__._defuzzify_methods.get(method)
        if func is None:
            available = list(self.__class__._defuzzify_methods.keys())
            raise ValueError(f"Method '{method}' not implemented for TFN. Available: {available}")
        return func(self, **kwargs)

    @classmethod
    def get_available_defuzzify_methods(cls) -> List[str]:
        return list(cls._defuzzify_methods.keys())

    @classmethod
    def register_defuzzify_method(cls, name: str, func: Callable):
        """Registers a new defuzzification function for this number type."""
        if name in cls._defuzzify_methods:
            print(f"Warning: Overwriting defuzzify method '{name}' for {cls.__name__}")
        cls._defuzzify_methods[name] = func


# ==============================================================================
# ELEMENTARY OPERATIONS
# ==============================================================================

def fuzzy_inverse(tfn: TFN) -> TFN:
    """(1/u, 1/m, 1/l), with 1/0 taken as 0."""
    return tfn.inverse()


def fuzzy_multiply(first: TFN, second: TFN) -> TFN:
    """Elementwise product (l1*l2, m1*m2, u1*u2)."""
    return first * second


def fuzzy_sum(numbers: Iterable[TFN]) -> TFN:
    """Elementwise sum, starting from (0, 0, 0)."""
    return sum(numbers, TFN.neutral_element())


def geometric_mean(numbers: Iterable[TFN]) -> TFN:
    """
    Elementwise geometric mean ((prod l)^(1/n), (prod m)^(1/n), (prod u)^(1/n)).

    Raises:
        ValueError: If no numbers are given.
    """
    components = np.array([tfn.to_array() for tfn in numbers], dtype=float)
    if components.size == 0:
        raise ValueError("Geometric mean requires at least one TFN.")
    n = components.shape[0]
    l, m, u = np.prod(components, axis=0) ** (1.0 / n)
    return TFN._unchecked(l, m, u)


def centroid(tfn: TFN) -> float:
    """Center of area (l + m + u) / 3."""
    return (tfn.l + tfn.m + tfn.u) / 3.0
