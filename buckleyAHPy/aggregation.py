from __future__ import annotations
from typing import List, Dict, Any, Sequence, TYPE_CHECKING
import numpy as np
from scipy.stats import rankdata
from .weight_derivation import derive_weights, WeightDerivationResult
from .validation import Validation, StructuralInconsistencyError

if TYPE_CHECKING:
    from .matrix import ReciprocalMatrix


class RankedAlternative:
    """One line of the final ranking."""
    def __init__(self, name: str, score: float, rank: int, index: int):
        self.name = name
        self.score = float(score)
        self.rank = int(rank)
        self.index = int(index)

    def __repr__(self) -> str:
        return f"RankedAlternative(rank={self.rank}, name='{self.name}', score={self.score:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RankedAlternative):
            return False
        return (self.name, self.score, self.rank, self.index) == (other.name, other.score, other.rank, other.index)

    def to_tuple(self) -> tuple:
        return (self.name, self.score, self.rank)


class AHPResult:
    """
    The full result bundle of one computation.

    Attributes:
        criteria_names / alternative_names: Item names, in input order.
        criteria: WeightDerivationResult of the criteria matrix.
        alternatives: One WeightDerivationResult per criterion.
        global_scores: Score of every alternative, in input order.
        ranking: RankedAlternative list, best first.
    """
    def __init__(
        self,
        criteria_names: Sequence[str],
        alternative_names: Sequence[str],
        criteria: WeightDerivationResult,
        alternatives: List[WeightDerivationResult],
        global_scores: np.ndarray,
        ranking: List[RankedAlternative]
    ):
        self.criteria_names = list(criteria_names)
        self.alternative_names = list(alternative_names)
        self.criteria = criteria
        self.alternatives = alternatives
        self.global_scores = global_scores
        self.ranking = ranking

    def __repr__(self) -> str:
        best = self.ranking[0].name if self.ranking else "N/A"
        return f"AHPResult(criteria={len(self.criteria_names)}, alternatives={len(self.alternative_names)}, best='{best}')"

    @property
    def criteria_weights(self) -> np.ndarray:
        return self.criteria.normalized_weights

    @property
    def alternative_weights(self) -> np.ndarray:
        """Local alternative weights, shape (n_criteria, n_alternatives)."""
        n_alt = len(self.alternative_names)
        if not self.alternatives:
            return np.zeros((0, n_alt))
        return np.vstack([r.normalized_weights for r in self.alternatives])

    def get_rankings(self) -> List[tuple]:
        """(name, score) pairs, best first."""
        return [(r.name, r.score) for r in self.ranking]

    def score_of(self, alternative_name: str) -> float:
        try:
            return float(self.global_scores[self.alternative_names.index(alternative_name)])
        except ValueError:
            raise ValueError(f"Alternative '{alternative_name}' not found in the result.") from None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "criteria_names": self.criteria_names,
            "alternative_names": self.alternative_names,
            "criteria": self.criteria.to_dict(),
            "alternatives": {name: r.to_dict() for name, r in zip(self.criteria_names, self.alternatives)},
            "global_scores": self.global_scores.tolist(),
            "ranking": [{"name": r.name, "score": r.score, "rank": r.rank} for r in self.ranking],
        }


def aggregate_priorities(criteria_weights: Sequence[float], alternative_weights: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Standard AHP synthesis: global[a] = sum over c of critW[c] * altW[c][a].

    Args:
        criteria_weights: Normalized criteria weights, length nC.
        alternative_weights: Normalized local alternative weights, shape (nC, nA).

    Returns:
        The global score of every alternative.

    Raises:
        StructuralInconsistencyError: If the shapes do not line up.
    """
    crit_w = np.asarray(criteria_weights, dtype=float)
    alt_w = np.asarray(alternative_weights, dtype=float)
    if alt_w.ndim != 2 or alt_w.shape[0] != crit_w.shape[0]:
        raise StructuralInconsistencyError(
            [f"Got {crit_w.shape[0]} criteria weights but alternative weights of shape {alt_w.shape}."]
        )
    return crit_w @ alt_w


def rank_alternatives(names: Sequence[str], scores: Sequence[float]) -> List[RankedAlternative]:
    """
    Sorts alternatives by score, best first. Ties keep their input order.
    """
    scores = np.asarray(scores, dtype=float)
    if len(names) != len(scores):
        raise ValueError(f"Got {len(names)} names but {len(scores)} scores.")
    # 'ordinal' gives tied values distinct ranks in order of appearance
    ranks = rankdata(-scores, method="ordinal").astype(int)
    ranked = [RankedAlternative(names[i], scores[i], ranks[i], i) for i in range(len(names))]
    ranked.sort(key=lambda r: r.rank)
    return ranked


def synthesize(
    criteria_matrix: ReciprocalMatrix,
    alternative_matrices: Sequence[ReciprocalMatrix],
    criteria_names: Sequence[str],
    alternative_names: Sequence[str],
    method: str = "geometric_mean",
    defuzzification_method: str | None = None
) -> AHPResult:
    """
    Runs the full pipeline: one weight derivation for the criteria matrix,
    one per alternative matrix, then the global scores and ranking.

    Dimensions are checked before anything is computed.

    Raises:
        StructuralInconsistencyError: If a matrix does not match the number of
            criteria or alternatives; no partial result is produced.
    """
    errors = Validation.validate_hierarchy_dimensions(
        criteria_matrix, alternative_matrices, len(criteria_names), len(alternative_names)
    )
    if errors:
        raise StructuralInconsistencyError(errors)

    criteria_result = derive_weights(criteria_matrix, method=method, defuzzification_method=defuzzification_method)
    alternative_results = [
        derive_weights(matrix, method=method, defuzzification_method=defuzzification_method)
        for matrix in alternative_matrices
    ]

    alt_weights = np.vstack([r.normalized_weights for r in alternative_results])
    global_scores = aggregate_priorities(criteria_result.normalized_weights, alt_weights)
    ranking = rank_alternatives(list(alternative_names), global_scores)

    return AHPResult(criteria_names, alternative_names, criteria_result, alternative_results, global_scores, ranking)
