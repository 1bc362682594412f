import matplotlib
matplotlib.use("Agg")

import pytest
import numpy as np
from buckleyAHPy.config import configure_parameters
from buckleyAHPy.scale import LinguisticScale
from buckleyAHPy.matrix import ReciprocalMatrix
from buckleyAHPy.model import Hierarchy
from buckleyAHPy.types import TFN


@pytest.fixture(autouse=True)
def restore_configuration():
    """Every test starts from, and leaves behind, the default configuration."""
    configure_parameters.reset_to_defaults()
    yield
    configure_parameters.reset_to_defaults()


@pytest.fixture
def default_scale() -> LinguisticScale:
    """The 9-level scale of the practical example."""
    return LinguisticScale.default()


@pytest.fixture
def two_item_matrix(default_scale) -> ReciprocalMatrix:
    """Item 0 is weakly more important (intensity 3 -> (2,3,4)) than item 1."""
    return ReciprocalMatrix.create(2).set_pairwise(0, 1, 3, default_scale)


@pytest.fixture
def three_item_matrix(default_scale) -> ReciprocalMatrix:
    return ReciprocalMatrix.from_judgments(3, {(0, 1): 3, (0, 2): 5, (1, 2): 7}, default_scale)


@pytest.fixture
def zero_tfn_matrix() -> np.ndarray:
    """A 2x2 matrix whose every cell is (0,0,0); only reachable through raw arrays."""
    matrix = np.empty((2, 2), dtype=object)
    for i in range(2):
        for j in range(2):
            matrix[i, j] = TFN(0, 0, 0)
    return matrix


@pytest.fixture
def small_hierarchy() -> Hierarchy:
    """
    Two criteria (Cost, Quality) and two alternatives (Option A, Option B).
    Cost is weakly more important than Quality; Option B wins on cost,
    Option A wins strongly on quality.
    """
    model = Hierarchy(["Cost", "Quality"], ["Option A", "Option B"])
    model = model.set_criteria_judgment(0, 1, 3)
    model = model.set_alternative_judgment("Cost", 0, 1, 1/3)
    model = model.set_alternative_judgment("Quality", 0, 1, 7)
    return model


@pytest.fixture
def default_hierarchy() -> Hierarchy:
    """The 5-criteria, 3-company practical example."""
    return Hierarchy.default()
