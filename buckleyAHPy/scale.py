from __future__ import annotations
import math
import uuid
from typing import List, Dict, Any, Sequence, Tuple, TYPE_CHECKING
from .types import TFN
from .validation import validate_term_set, ValidationResult, TermSetValidationError

if TYPE_CHECKING:
    import pandas as pd


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class LinguisticTerm:
    """
    A linguistic comparison term (e.g. 'Weakly important') bound to a Saaty
    intensity value and the TFN that represents it.

    The raw (l, m, u) bounds are stored as given so that a term being edited
    may temporarily violate l <= m <= u; `tri` builds the TFN on access and
    raises ValueError for such a term. Terms are read-only once built; use
    `replace` to derive an edited copy.
    """
    def __init__(
        self,
        term_id: str,
        name: str,
        short_name: str,
        value: int,
        tri: TFN | Tuple[float, float, float]
    ):
        object.__setattr__(self, "term_id", str(term_id))
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "short_name", short_name)
        object.__setattr__(self, "value", value)
        l, m, u = tri
        object.__setattr__(self, "bounds", (float(l), float(m), float(u)))

    def __setattr__(self, key: str, value: Any):
        raise AttributeError(f"LinguisticTerm is read-only; use replace() to change '{key}'.")

    def __repr__(self) -> str:
        l, m, u = self.bounds
        return f"LinguisticTerm(id='{self.term_id}', short_name='{self.short_name}', value={self.value}, tri=({l:g}, {m:g}, {u:g}))"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinguisticTerm):
            return False
        return (self.term_id, self.name, self.short_name, self.value, self.bounds) == \
               (other.term_id, other.name, other.short_name, other.value, other.bounds)

    def __hash__(self) -> int:
        return hash((self.term_id, self.short_name, self.value, self.bounds))

    @property
    def tri(self) -> TFN:
        return TFN(*self.bounds)

    def replace(self, **changes: Any) -> LinguisticTerm:
        """Returns a copy with the given attributes changed (term_id, name, short_name, value, tri)."""
        data = {
            "term_id": self.term_id,
            "name": self.name,
            "short_name": self.short_name,
            "value": self.value,
            "tri": self.bounds,
        }
        unknown = set(changes) - set(data)
        if unknown:
            raise ValueError(f"Unknown LinguisticTerm attributes: {sorted(unknown)}")
        data.update(changes)
        return LinguisticTerm(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the term to a JSON-compatible dictionary."""
        l, m, u = self.bounds
        return {
            "id": self.term_id,
            "name": self.name,
            "short_name": self.short_name,
            "value": self.value,
            "tri": {"l": l, "m": m, "u": u},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LinguisticTerm:
        """Creates a term from a dictionary produced by `to_dict`."""
        tri = data["tri"]
        if isinstance(tri, dict):
            tri = (tri["l"], tri["m"], tri["u"])
        return cls(data["id"], data.get("name", ""), data["short_name"], data["value"], tri)


def term_to_tfn(value: float, terms: Sequence[LinguisticTerm]) -> TFN:
    """
    Translates a signed comparison intensity into a TFN.

    For value >= 1 the term whose value equals round(value) gives the TFN.
    For value < 1 the term for round(1/value) is looked up and its inverse is
    returned. An intensity with no matching term resolves to (1, 1, 1).

    Raises:
        ValueError: If value is not strictly positive.
    """
    value = float(value)
    if not value > 0:
        raise ValueError(f"Comparison intensity must be positive, got {value}.")

    if value >= 1:
        base_value = _round_half_up(value)
        is_reciprocal = False
    else:
        base_value = _round_half_up(1.0 / value)
        is_reciprocal = True

    term = next((t for t in terms if t.value == base_value), None)
    if term is None:
        return TFN.multiplicative_identity()
    return term.tri.inverse() if is_reciprocal else term.tri


class ScaleOption:
    """A selectable comparison: an intensity, its label and the TFN it resolves to."""
    def __init__(self, value: float, label: str, tri: TFN):
        self.value = value
        self.label = label
        self.tri = tri

    def __repr__(self) -> str:
        return f"ScaleOption(value={self.value:.4f}, label='{self.label}', tri={self.tri})"


class LinguisticScale:
    """
    A validated set of linguistic terms.

    The scale is the only process-wide input of the engine besides the
    comparisons themselves. It is immutable by convention: editing terms means
    building a new scale, which is refused if the term set has any error.
    """
    def __init__(self, terms: Sequence[LinguisticTerm]):
        """
        Raises:
            TermSetValidationError: If the term set fails `validate_term_set`.
        """
        terms = list(terms)
        result = validate_term_set(terms)
        if not result.is_valid:
            raise TermSetValidationError(result)
        self._terms: List[LinguisticTerm] = sorted(terms, key=lambda t: t.value)

    def __repr__(self) -> str:
        labels = ", ".join(f"{t.short_name}={t.value}" for t in self._terms)
        return f"LinguisticScale({labels})"

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self):
        return iter(self._terms)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LinguisticScale) and self._terms == other._terms

    @classmethod
    def default(cls) -> LinguisticScale:
        """The 9-level scale from configure_parameters.DEFAULT_LINGUISTIC_TERMS."""
        from .config import configure_parameters
        return cls([LinguisticTerm(*definition) for definition in configure_parameters.DEFAULT_LINGUISTIC_TERMS])

    @classmethod
    def from_dicts(cls, data: Sequence[Dict[str, Any]]) -> LinguisticScale:
        return cls([LinguisticTerm.from_dict(d) for d in data])

    @staticmethod
    def validate(terms: Sequence[LinguisticTerm]) -> ValidationResult:
        """Validates a candidate term set without building a scale."""
        return validate_term_set(list(terms))

    @property
    def terms(self) -> List[LinguisticTerm]:
        """The terms, sorted by value."""
        return list(self._terms)

    def get_term(self, value: int) -> LinguisticTerm | None:
        return next((t for t in self._terms if t.value == value), None)

    def term_to_tfn(self, value: float) -> TFN:
        return term_to_tfn(value, self._terms)

    def options(self) -> List[ScaleOption]:
        """
        Every intensity an editor may select: each term's value, followed by
        the reciprocal 1/value of every term with value > 1.
        """
        opts = [ScaleOption(t.value, t.short_name, t.tri) for t in self._terms]
        opts.extend(
            ScaleOption(1.0 / t.value, f"Inverse {t.short_name}", t.tri.inverse())
            for t in self._terms if t.value > 1
        )
        return opts

    def allowed_intensities(self) -> List[float]:
        return [opt.value for opt in self.options()]

    def new_term(self) -> LinguisticTerm:
        """A fresh term one step above the current maximum, ready to be edited."""
        next_value = max(t.value for t in self._terms) + 1
        return LinguisticTerm(
            term_id=str(uuid.uuid4()),
            name=f"New Term {next_value}",
            short_name=f"T{next_value}",
            value=next_value,
            tri=(next_value, next_value + 1, next_value + 2),
        )

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [t.to_dict() for t in self._terms]

    def to_dataframe(self) -> 'pd.DataFrame':
        """The term table (value, name, short name, l, m, u) as a DataFrame indexed by term id."""
        import pandas as pd
        rows = [
            {"value": t.value, "name": t.name, "short_name": t.short_name,
             "l": t.bounds[0], "m": t.bounds[1], "u": t.bounds[2]}
            for t in self._terms
        ]
        return pd.DataFrame(rows, index=pd.Index([t.term_id for t in self._terms], name="id"))
