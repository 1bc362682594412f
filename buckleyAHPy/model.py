from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Any, TYPE_CHECKING
from .scale import LinguisticScale, LinguisticTerm
from .matrix import ReciprocalMatrix
from .aggregation import synthesize, AHPResult
from .validation import Validation

if TYPE_CHECKING:
    import pandas as pd
    import matplotlib.pyplot as plt


def _check_names(names: Sequence[str], kind: str) -> List[str]:
    names = list(names)
    for name in names:
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"{kind} name cannot be empty.")
    if len(set(names)) != len(names):
        duplicates = sorted({n for n in names if names.count(n) > 1})
        raise ValueError(f"{kind} names must be unique. Duplicates: {duplicates}")
    return names


class Hierarchy:
    """
    The session aggregate of a two-level fuzzy AHP problem: one goal, a set of
    criteria and a set of alternatives.

    It owns, as one consistency domain, the linguistic scale, the criteria and
    alternative names, the criteria comparison matrix and one alternative
    comparison matrix per criterion. Every command returns a new Hierarchy and
    leaves the receiver untouched; derived weights are never stored and are
    recomputed from scratch by `compute()`.
    """
    def __init__(
        self,
        criteria_names: Sequence[str],
        alternative_names: Sequence[str],
        scale: Optional[LinguisticScale] = None,
        criteria_matrix: Optional[ReciprocalMatrix] = None,
        alternative_matrices: Optional[Sequence[ReciprocalMatrix]] = None
    ):
        """
        Args:
            criteria_names: Unique, non-empty criterion names (nC).
            alternative_names: Unique, non-empty alternative names (nA).
            scale: The linguistic scale. Defaults to LinguisticScale.default().
            criteria_matrix: Defaults to an (nC x nC) identity matrix.
            alternative_matrices: Defaults to nC identity matrices of size nA.

        Matrices passed in are not checked here; `compute()` refuses to run
        if their dimensions disagree with the names.
        """
        self.criteria_names = _check_names(criteria_names, "Criterion")
        self.alternative_names = _check_names(alternative_names, "Alternative")
        self.scale = scale if scale is not None else LinguisticScale.default()

        n_crit, n_alt = len(self.criteria_names), len(self.alternative_names)
        self.criteria_matrix = criteria_matrix if criteria_matrix is not None else ReciprocalMatrix.create(n_crit)
        if alternative_matrices is None:
            alternative_matrices = [ReciprocalMatrix.create(n_alt) for _ in range(n_crit)]
        self.alternative_matrices: List[ReciprocalMatrix] = list(alternative_matrices)

    def __repr__(self) -> str:
        return (f"Hierarchy(criteria={len(self.criteria_names)}, alternatives={len(self.alternative_names)}, "
                f"terms={len(self.scale)})")

    @classmethod
    def default(cls) -> Hierarchy:
        """
        The practical example from configure_parameters: 5 logistics criteria,
        3 companies and their pre-filled judgments.
        """
        from .config import configure_parameters
        scale = LinguisticScale.default()
        n_crit = len(configure_parameters.DEFAULT_CRITERIA_NAMES)
        n_alt = len(configure_parameters.DEFAULT_ALTERNATIVE_NAMES)
        criteria_matrix = ReciprocalMatrix.from_judgments(n_crit, configure_parameters.DEFAULT_CRITERIA_JUDGMENTS, scale)
        alternative_matrices = [
            ReciprocalMatrix.from_judgments(n_alt, judgments, scale)
            for judgments in configure_parameters.DEFAULT_ALTERNATIVE_JUDGMENTS
        ]
        return cls(
            configure_parameters.DEFAULT_CRITERIA_NAMES,
            configure_parameters.DEFAULT_ALTERNATIVE_NAMES,
            scale,
            criteria_matrix,
            alternative_matrices
        )

    def reset(self) -> Hierarchy:
        """Discards every edit and returns the default session."""
        return Hierarchy.default()

    def _replace(self, **changes: Any) -> Hierarchy:
        data = {
            "criteria_names": self.criteria_names,
            "alternative_names": self.alternative_names,
            "scale": self.scale,
            "criteria_matrix": self.criteria_matrix,
            "alternative_matrices": self.alternative_matrices,
        }
        data.update(changes)
        return Hierarchy(**data)

    @property
    def num_criteria(self) -> int:
        return len(self.criteria_names)

    @property
    def num_alternatives(self) -> int:
        return len(self.alternative_names)

    def _criterion_index(self, criterion: int | str) -> int:
        if isinstance(criterion, str):
            try:
                return self.criteria_names.index(criterion)
            except ValueError:
                raise ValueError(f"Criterion '{criterion}' not found.") from None
        if not (0 <= criterion < self.num_criteria):
            raise ValueError(f"Criterion index {criterion} out of range for {self.num_criteria} criteria.")
        return criterion

    def get_alternative_matrix(self, criterion: int | str) -> ReciprocalMatrix:
        return self.alternative_matrices[self._criterion_index(criterion)]

    # ------------------------------------------------------------------
    # Comparison commands
    # ------------------------------------------------------------------

    def set_criteria_judgment(self, i: int, j: int, intensity: float) -> Hierarchy:
        """Criterion i compared to criterion j, resolved against the current scale."""
        return self._replace(criteria_matrix=self.criteria_matrix.set_pairwise(i, j, intensity, self.scale))

    def set_alternative_judgment(self, criterion: int | str, i: int, j: int, intensity: float) -> Hierarchy:
        """Alternative i compared to alternative j with respect to `criterion` (index or name)."""
        c = self._criterion_index(criterion)
        matrices = list(self.alternative_matrices)
        matrices[c] = matrices[c].set_pairwise(i, j, intensity, self.scale)
        return self._replace(alternative_matrices=matrices)

    # ------------------------------------------------------------------
    # Structural commands
    # ------------------------------------------------------------------

    def resize_criteria(self, names: Sequence[str], mapping: Dict[int, Optional[int]]) -> Hierarchy:
        """
        Replaces the criteria with `names`, projecting the criteria matrix and
        the list of alternative matrices through the old->new `mapping`.
        Criteria without a preimage get identity judgments and a fresh
        identity alternative matrix.
        """
        names = _check_names(names, "Criterion")
        new_size = len(names)
        criteria_matrix = self.criteria_matrix.resize(new_size, mapping)

        alternative_matrices: List[Optional[ReciprocalMatrix]] = [None] * new_size
        for old, new in mapping.items():
            if new is not None and 0 <= old < len(self.alternative_matrices):
                alternative_matrices[new] = self.alternative_matrices[old]
        alternative_matrices = [
            m if m is not None else ReciprocalMatrix.create(self.num_alternatives)
            for m in alternative_matrices
        ]
        return self._replace(criteria_names=names, criteria_matrix=criteria_matrix,
                             alternative_matrices=alternative_matrices)

    def resize_alternatives(self, names: Sequence[str], mapping: Dict[int, Optional[int]]) -> Hierarchy:
        """
        Replaces the alternatives with `names`, projecting every alternative
        matrix through the same old->new `mapping`.
        """
        names = _check_names(names, "Alternative")
        new_size = len(names)
        alternative_matrices = [m.resize(new_size, mapping) for m in self.alternative_matrices]
        return self._replace(alternative_names=names, alternative_matrices=alternative_matrices)

    def add_criterion(self, name: str, index: Optional[int] = None) -> Hierarchy:
        """Inserts a criterion at `index` (default: last), with its own identity alternative matrix."""
        n = self.num_criteria
        index = n if index is None else index
        if not (0 <= index <= n):
            raise ValueError(f"Insertion index {index} out of range for {n} criteria.")
        names = self.criteria_names[:index] + [name] + self.criteria_names[index:]
        mapping = {old: (old if old < index else old + 1) for old in range(n)}
        return self.resize_criteria(names, mapping)

    def remove_criterion(self, criterion: int | str) -> Hierarchy:
        """Removes a criterion (index or name) and its alternative matrix."""
        index = self._criterion_index(criterion)
        names = self.criteria_names[:index] + self.criteria_names[index + 1:]
        mapping = {old: (None if old == index else (old if old < index else old - 1))
                   for old in range(self.num_criteria)}
        return self.resize_criteria(names, mapping)

    def add_alternative(self, name: str, index: Optional[int] = None) -> Hierarchy:
        """Inserts an alternative at `index` (default: last) in every alternative matrix."""
        n = self.num_alternatives
        index = n if index is None else index
        if not (0 <= index <= n):
            raise ValueError(f"Insertion index {index} out of range for {n} alternatives.")
        names = self.alternative_names[:index] + [name] + self.alternative_names[index:]
        mapping = {old: (old if old < index else old + 1) for old in range(n)}
        return self.resize_alternatives(names, mapping)

    def remove_alternative(self, alternative: int | str) -> Hierarchy:
        """Removes an alternative (index or name) from every alternative matrix."""
        if isinstance(alternative, str):
            if alternative not in self.alternative_names:
                raise ValueError(f"Alternative '{alternative}' not found.")
            index = self.alternative_names.index(alternative)
        else:
            index = alternative
            if not (0 <= index < self.num_alternatives):
                raise ValueError(f"Alternative index {index} out of range for {self.num_alternatives} alternatives.")
        names = self.alternative_names[:index] + self.alternative_names[index + 1:]
        mapping = {old: (None if old == index else (old if old < index else old - 1))
                   for old in range(self.num_alternatives)}
        return self.resize_alternatives(names, mapping)

    def rename_criterion(self, index: int, name: str) -> Hierarchy:
        index = self._criterion_index(index)
        names = list(self.criteria_names)
        names[index] = name
        return self._replace(criteria_names=names)

    def rename_alternative(self, index: int, name: str) -> Hierarchy:
        if not (0 <= index < self.num_alternatives):
            raise ValueError(f"Alternative index {index} out of range for {self.num_alternatives} alternatives.")
        names = list(self.alternative_names)
        names[index] = name
        return self._replace(alternative_names=names)

    # ------------------------------------------------------------------
    # Term set
    # ------------------------------------------------------------------

    def update_term_set(self, terms: LinguisticScale | Sequence[LinguisticTerm], reresolve: bool = False) -> Hierarchy:
        """
        Swaps the linguistic scale.

        By default the cells already entered keep the TFNs they were resolved
        to at entry time; only later judgments use the new terms. With
        `reresolve=True` every judged cell is rebuilt from its stored
        intensity against the new scale.

        Raises:
            TermSetValidationError: If the terms are invalid. The receiver is unchanged.
        """
        scale = terms if isinstance(terms, LinguisticScale) else LinguisticScale(terms)
        if not reresolve:
            return self._replace(scale=scale)
        return self._replace(
            scale=scale,
            criteria_matrix=self.criteria_matrix.reresolve(scale),
            alternative_matrices=[m.reresolve(scale) for m in self.alternative_matrices]
        )

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------

    def check_structure(self) -> List[str]:
        """Dimension errors between the names and the matrices; empty if consistent."""
        return Validation.validate_hierarchy_dimensions(
            self.criteria_matrix, self.alternative_matrices, self.num_criteria, self.num_alternatives
        )

    def check_matrices(self) -> Dict[str, List[str]]:
        """Diagonal and reciprocity errors of every matrix, keyed by matrix label."""
        report = {"criteria": self.criteria_matrix.validate()}
        for name, matrix in zip(self.criteria_names, self.alternative_matrices):
            report[name] = matrix.validate()
        return report

    def compute(self, method: str = "geometric_mean", defuzzification_method: str | None = None) -> AHPResult:
        """
        Recomputes every weight vector, the global scores and the ranking.

        Raises:
            StructuralInconsistencyError: If any matrix dimension disagrees with
                the number of criteria or alternatives.
        """
        return synthesize(
            self.criteria_matrix,
            self.alternative_matrices,
            self.criteria_names,
            self.alternative_names,
            method=method,
            defuzzification_method=defuzzification_method
        )

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def criteria_table(self, as_fractions: bool = True) -> 'pd.DataFrame':
        """The criteria comparison matrix as a table."""
        from .visualization import format_matrix_as_table
        return format_matrix_as_table(self.criteria_matrix, self.criteria_names, as_fractions=as_fractions)

    def alternative_table(self, criterion: int | str, as_fractions: bool = True) -> 'pd.DataFrame':
        """The alternative comparison matrix under `criterion` as a table."""
        from .visualization import format_matrix_as_table
        return format_matrix_as_table(self.get_alternative_matrix(criterion), self.alternative_names,
                                      as_fractions=as_fractions)

    def full_report(self, filename: str | None = None, **kwargs) -> str:
        """
        Generates and returns (or saves) a text report of every matrix, its
        intermediate artifacts and the final ranking.
        """
        from .visualization import generate_full_report
        return generate_full_report(self, filename=filename, **kwargs)

    def plot_terms(self, figsize=(10, 4)) -> 'plt.Figure':
        """Plots the membership functions of the linguistic terms."""
        from .visualization import plot_membership_functions
        return plot_membership_functions(self.scale, figsize)

    def plot_rankings(self, figsize=(10, 6)) -> 'plt.Figure':
        """Plots the final rankings of the alternatives."""
        from .visualization import plot_final_rankings
        return plot_final_rankings(self.compute(), figsize)
