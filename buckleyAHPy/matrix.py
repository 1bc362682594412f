from __future__ import annotations
from typing import List, Dict, Sequence, Tuple, Iterator, TYPE_CHECKING
import math
import numpy as np
from .types import TFN

if TYPE_CHECKING:
    from .scale import LinguisticScale


class MatrixCell:
    """
    One cell of a pairwise comparison matrix.

    Attributes:
        tri: The TFN of the comparison.
        is_inverse: True if the cell holds a reciprocal (intensity < 1, or the mirrored half).
        intensity: The signed comparison value (>= 1 direct, < 1 reciprocal).
    """
    __slots__ = ("tri", "is_inverse", "intensity")

    def __init__(self, tri: TFN, is_inverse: bool = False, intensity: float = 1.0):
        self.tri = tri
        self.is_inverse = is_inverse
        self.intensity = float(intensity)

    def __repr__(self) -> str:
        return f"MatrixCell(tri={self.tri}, is_inverse={self.is_inverse}, intensity={self.intensity:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatrixCell):
            return False
        return self.tri == other.tri and self.is_inverse == other.is_inverse and self.intensity == other.intensity

    def __hash__(self) -> int:
        return hash((self.tri, self.is_inverse, self.intensity))

    @staticmethod
    def identity() -> MatrixCell:
        return MatrixCell(TFN.multiplicative_identity(), False, 1.0)


def _get_matrix_size_from_list_len(num_judgments: int) -> int:
    """
    Calculates the size 'n' of a square matrix given 'k' pairwise judgments
    from its upper triangle. Solves the equation n*(n-1)/2 = k.

    Raises:
        ValueError: If the number of judgments does not correspond to a valid matrix.
    """
    # n^2 - n - 2k = 0, positive root of the quadratic formula
    discriminant = 1 + 8 * num_judgments
    n = (1 + math.sqrt(discriminant)) / 2
    if n != int(n):
        raise ValueError(f"Invalid number of judgments ({num_judgments}). Does not correspond to a full upper-triangle matrix.")
    return int(n)


class ReciprocalMatrix:
    """
    A square pairwise comparison matrix of TFNs that is always reciprocal.

    The diagonal is (1, 1, 1) and cell[j][i] is the inverse of cell[i][j] for
    every i != j. Only `set_pairwise` writes judgments, and it writes both
    halves at once. Matrices are immutable by convention: `set_pairwise`,
    `resize` and friends return a new matrix and leave this one untouched.
    """
    def __init__(self, cells: np.ndarray):
        """Wraps an existing (n x n) object array of MatrixCells. Prefer the factory methods."""
        if not isinstance(cells, np.ndarray) or cells.ndim != 2 or cells.shape[0] != cells.shape[1]:
            raise ValueError("Cells must be a square 2D NumPy array.")
        self._cells = cells

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, size: int) -> ReciprocalMatrix:
        """An (n x n) matrix with every cell, diagonal included, equal to (1, 1, 1)."""
        if size < 0:
            raise ValueError(f"Matrix size must be non-negative, got {size}.")
        cells = np.empty((size, size), dtype=object)
        for i in range(size):
            for j in range(size):
                cells[i, j] = MatrixCell.identity()
        return cls(cells)

    @classmethod
    def from_judgments(
        cls,
        size: int,
        judgments: Dict[Tuple[int, int], float],
        scale: LinguisticScale
    ) -> ReciprocalMatrix:
        """
        Builds a matrix from a dictionary of {(i, j): intensity} judgments.
        Pairs without a judgment stay (1, 1, 1).
        """
        matrix = cls.create(size)
        for (i, j), intensity in judgments.items():
            matrix = matrix.set_pairwise(i, j, intensity, scale)
        return matrix

    @classmethod
    def from_upper_triangle(cls, judgments: Sequence[float], scale: LinguisticScale) -> ReciprocalMatrix:
        """
        Creates a matrix from a flattened list of upper-triangle judgments
        (read row by row).

        Example: For a 4x4 matrix, the list should contain 6 judgments for the
        pairs (1,2), (1,3), (1,4), (2,3), (2,4), (3,4) in that order.
        """
        size = _get_matrix_size_from_list_len(len(judgments))
        pairs = [(i, j) for i in range(size) for j in range(i + 1, size)]
        return cls.from_judgments(size, dict(zip(pairs, judgments)), scale)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._cells.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._cells.shape

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, index: Tuple[int, int]) -> MatrixCell:
        i, j = index
        return self._cells[i, j]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReciprocalMatrix) or other.size != self.size:
            return False
        return all(self._cells[i, j] == other._cells[i, j] for i in range(self.size) for j in range(self.size))

    def __repr__(self) -> str:
        return f"ReciprocalMatrix(size={self.size})"

    def rows(self) -> Iterator[List[TFN]]:
        """Yields each row as a list of TFNs."""
        for i in range(self.size):
            yield [cell.tri for cell in self._cells[i, :]]

    def tfn_array(self) -> np.ndarray:
        """The matrix as an (n x n) object array of TFNs."""
        result = np.empty(self.shape, dtype=object)
        for i in range(self.size):
            for j in range(self.size):
                result[i, j] = self._cells[i, j].tri
        return result

    def centroid_array(self) -> np.ndarray:
        """The matrix defuzzified cell by cell with the centroid."""
        return np.array([[cell.tri.defuzzify('centroid') for cell in row] for row in self._cells], dtype=float).reshape(self.shape)

    def intensity_array(self) -> np.ndarray:
        return np.array([[cell.intensity for cell in row] for row in self._cells], dtype=float).reshape(self.shape)

    def validate(self, tolerance: float = 1e-6) -> List[str]:
        """Checks the diagonal and reciprocity; an empty list means the matrix is valid."""
        from .validation import Validation
        return Validation.validate_matrix_properties(self, tolerance=tolerance)

    # ------------------------------------------------------------------
    # Mutation (returns new matrices)
    # ------------------------------------------------------------------

    def set_pairwise(self, i: int, j: int, intensity: float, scale: LinguisticScale) -> ReciprocalMatrix:
        """
        Records the judgment "item i compared to item j = intensity".

        cell[i][j] receives the TFN the scale assigns to the intensity, and
        cell[j][i] its inverse, in the same step.

        Args:
            i, j: Distinct item indices.
            intensity: Signed comparison value (> 0); values < 1 are reciprocal judgments.
            scale: The LinguisticScale in force when the judgment is entered.

        Returns:
            A new ReciprocalMatrix.

        Raises:
            ValueError: If i == j, an index is out of range or intensity <= 0.
        """
        n = self.size
        if not (0 <= i < n and 0 <= j < n):
            raise ValueError(f"Indices ({i}, {j}) out of range for a {n}x{n} matrix.")
        if i == j:
            raise ValueError(f"Cannot set a judgment on the diagonal ({i}, {j}); it is always (1,1,1).")
        intensity = float(intensity)
        if not intensity > 0:
            raise ValueError(f"Comparison intensity must be positive, got {intensity}.")

        tri = scale.term_to_tfn(intensity)
        cells = self._cells.copy()
        cells[i, j] = MatrixCell(tri, intensity < 1, intensity)
        cells[j, i] = MatrixCell(tri.inverse(), True, 1.0 / intensity)
        return ReciprocalMatrix(cells)

    def resize(self, new_size: int, mapping: Dict[int, int | None]) -> ReciprocalMatrix:
        """
        Projects this matrix onto a new index space.

        Every pair (i, j) whose old indices both map to new indices is copied
        to (mapping[i], mapping[j]); pairs touching an index without a
        preimage are initialized to (1, 1, 1). Old indices absent from the
        mapping, or mapped to None, are dropped.

        Raises:
            ValueError: If a target index is out of range or two old indices share one.
        """
        targets = [t for t in mapping.values() if t is not None]
        if any(not (0 <= t < new_size) for t in targets):
            raise ValueError(f"Mapping targets {targets} out of range for new size {new_size}.")
        if len(set(targets)) != len(targets):
            raise ValueError("Mapping must be injective: two old indices map to the same new index.")

        result = ReciprocalMatrix.create(new_size)
        cells = result._cells
        for old_i, new_i in mapping.items():
            if new_i is None or not (0 <= old_i < self.size):
                continue
            for old_j, new_j in mapping.items():
                if new_j is None or old_i == old_j or not (0 <= old_j < self.size):
                    continue
                cells[new_i, new_j] = self._cells[old_i, old_j]
        return result

    def insert_item(self, index: int | None = None) -> ReciprocalMatrix:
        """Inserts a new item at `index` (default: appended). Its relationships start at (1, 1, 1)."""
        n = self.size
        index = n if index is None else index
        if not (0 <= index <= n):
            raise ValueError(f"Insertion index {index} out of range for size {n}.")
        mapping = {old: (old if old < index else old + 1) for old in range(n)}
        return self.resize(n + 1, mapping)

    def remove_item(self, index: int) -> ReciprocalMatrix:
        """Removes the item at `index`, shifting later items down by one."""
        n = self.size
        if not (0 <= index < n):
            raise ValueError(f"Removal index {index} out of range for size {n}.")
        mapping = {old: (None if old == index else (old if old < index else old - 1)) for old in range(n)}
        return self.resize(n - 1, mapping)

    def reresolve(self, scale: LinguisticScale) -> ReciprocalMatrix:
        """
        Rebuilds every off-diagonal cell from its stored intensity against
        `scale`; unjudged pairs carry intensity 1 and resolve to the intensity-1
        term. The upper triangle drives the rebuild; the lower triangle is re-derived.
        """
        result = ReciprocalMatrix.create(self.size)
        for i in range(self.size):
            for j in range(i + 1, self.size):
                result = result.set_pairwise(i, j, self._cells[i, j].intensity, scale)
        return result
