from __future__ import annotations
from typing import TYPE_CHECKING, List, Sequence
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from .types import TFN

if TYPE_CHECKING:
    from .model import Hierarchy
    from .matrix import ReciprocalMatrix
    from .scale import LinguisticScale
    from .weight_derivation import WeightDerivationResult
    from .aggregation import AHPResult


# ==============================================================================
# 1. FORMATTING HELPERS
# ==============================================================================

def format_tfn(tfn: TFN, decimals: int = 4) -> str:
    """'(l, m, u)' with a fixed number of decimals."""
    return f"({tfn.l:.{decimals}f}, {tfn.m:.{decimals}f}, {tfn.u:.{decimals}f})"


def format_fraction(intensity: float) -> str:
    """
    Renders a comparison intensity the way it is entered: '3' for a direct
    judgment, '1/3' for a reciprocal one. Other values fall back to decimals.
    """
    if intensity >= 1:
        rounded = round(intensity)
        return str(int(rounded)) if abs(intensity - rounded) < 1e-4 else f"{intensity:.3f}"
    inverse = 1.0 / intensity
    rounded = round(inverse)
    return f"1/{int(rounded)}" if abs(inverse - rounded) < 1e-4 else f"{intensity:.3f}"


# ==============================================================================
# 2. TABLES
# ==============================================================================

def format_matrix_as_table(
    matrix: ReciprocalMatrix | np.ndarray,
    item_names: List[str],
    as_fractions: bool = True,
    defuzzification_method: str | None = None
) -> 'pd.DataFrame':
    """
    Formats a single comparison matrix into a classic n x n table.

    Args:
        matrix: A ReciprocalMatrix, or a square object array of TFNs.
        item_names: A list of the names of the criteria/alternatives.
        as_fractions: Show the entered intensities ('3', '1/3') instead of TFNs.
            Ignored for plain TFN arrays, which carry no intensity.
        defuzzification_method (optional): If provided, shows crisp values instead.

    Returns:
        A pandas DataFrame representing the matrix.
    """
    has_cells = hasattr(matrix, "tfn_array")
    tfns = matrix.tfn_array() if has_cells else matrix
    n = len(item_names)
    if tfns.shape != (n, n):
        raise ValueError(f"Matrix of shape {tfns.shape} does not match {n} item names.")

    table_data = []
    for i in range(n):
        row_data = []
        for j in range(n):
            if defuzzification_method:
                row_data.append(round(tfns[i, j].defuzzify(method=defuzzification_method), 4))
            elif as_fractions and has_cells:
                row_data.append(format_fraction(matrix[i, j].intensity))
            else:
                row_data.append(format_tfn(tfns[i, j], decimals=3))
        table_data.append(row_data)

    return pd.DataFrame(table_data, index=item_names, columns=item_names)


def format_weight_table(derivation: WeightDerivationResult, item_names: List[str]) -> 'pd.DataFrame':
    """
    Every intermediate artifact of one derivation, one row per item: the row
    geometric mean, the fuzzy weight, the defuzzified and the normalized weight.
    """
    if len(item_names) != len(derivation):
        raise ValueError(f"Got {len(item_names)} item names for {len(derivation)} weights.")
    rows = []
    for i, name in enumerate(item_names):
        geo, weight = derivation.geo_means[i], derivation.fuzzy_weights[i]
        rows.append({
            "item": name,
            "geo_mean_l": geo.l, "geo_mean_m": geo.m, "geo_mean_u": geo.u,
            "fuzzy_weight_l": weight.l, "fuzzy_weight_m": weight.m, "fuzzy_weight_u": weight.u,
            "crisp_weight": float(derivation.crisp_weights[i]),
            "normalized_weight": float(derivation.normalized_weights[i]),
        })
    return pd.DataFrame(rows).set_index("item")


def format_global_scores_table(result: AHPResult) -> 'pd.DataFrame':
    """
    The synthesis table: one row per criterion with its weight and the local
    weight of every alternative, followed by a 'Global score' row.
    """
    df = pd.DataFrame(result.alternative_weights, index=result.criteria_names, columns=result.alternative_names)
    df.insert(0, "Criterion weight", result.criteria_weights)
    total = pd.DataFrame(
        [[float(np.sum(result.criteria_weights))] + list(result.global_scores)],
        index=["Global score"],
        columns=df.columns
    )
    return pd.concat([df, total])


def format_ranking_table(result: AHPResult) -> 'pd.DataFrame':
    return pd.DataFrame(
        [{"Rank": r.rank, "Alternative": r.name, "Score": r.score} for r in result.ranking]
    ).set_index("Rank")


# ==============================================================================
# 3. REPORTS
# ==============================================================================

def generate_matrix_report(
    matrix: ReciprocalMatrix,
    item_names: List[str],
    derivation: WeightDerivationResult
) -> str:
    """
    Generates a text report for a single pairwise comparison matrix: the
    matrix itself, every intermediate vector and the normalized weights.
    """
    report_lines = []
    col_width = max(12, max(len(name) for name in item_names) + 2)
    header = f"{'':<{col_width}}" + "".join([f"{item:<{col_width}}" for item in item_names])
    report_lines.append(header)
    report_lines.append("-" * len(header))

    for i, item in enumerate(item_names):
        row_str = f"{item:<{col_width}}"
        for j in range(len(item_names)):
            row_str += f"{format_fraction(matrix[i, j].intensity):<{col_width}}"
        report_lines.append(row_str)

    report_lines.append("-" * len(header))
    for name, geo, weight in zip(item_names, derivation.geo_means, derivation.fuzzy_weights):
        report_lines.append(f"{name}: geometric mean = {format_tfn(geo)}, fuzzy weight = {format_tfn(weight)}")
    report_lines.append(f"Sum vector = {format_tfn(derivation.sum_vector)}")
    report_lines.append(f"Inverse sum vector = {format_tfn(derivation.inverse_sum)}")
    report_lines.append("Crisp weights = { " + ", ".join(f"{w:.4f}" for w in derivation.crisp_weights) + " }")
    report_lines.append("Normalized weights = { " + ", ".join(f"{w:.4f}" for w in derivation.normalized_weights) + " }")
    if derivation.degenerate:
        report_lines.append("Note: normalization hit a zero sum; all weights were set to 0.")

    return "\n".join(report_lines)


def generate_full_report(
    hierarchy: Hierarchy,
    result: AHPResult | None = None,
    filename: str | None = None,
    method: str = "geometric_mean",
    defuzzification_method: str | None = None
) -> str:
    """
    Generates a comprehensive text report for all matrices in the hierarchy
    and the final ranking.

    Args:
        hierarchy: The Hierarchy to report on.
        result (optional): A result of `hierarchy.compute()`; computed if omitted.
        filename (optional): If provided, saves the report to a text file.

    Returns:
        The full report as a single string.
    """
    if result is None:
        result = hierarchy.compute(method=method, defuzzification_method=defuzzification_method)

    report_parts = []
    title = "Fuzzy AHP (Buckley) Analysis Report"
    report_parts.append("=" * len(title))
    report_parts.append(title)
    report_parts.append("=" * len(title) + "\n")

    report_parts.append("\n--- Criteria Matrix ---")
    report_parts.append(generate_matrix_report(hierarchy.criteria_matrix, hierarchy.criteria_names, result.criteria))

    for name, matrix, derivation in zip(hierarchy.criteria_names, hierarchy.alternative_matrices, result.alternatives):
        report_parts.append(f"\n--- Alternatives with respect to: {name} ---")
        report_parts.append(generate_matrix_report(matrix, hierarchy.alternative_names, derivation))

    report_parts.append("\n--- Global Scores ---")
    report_parts.append(format_global_scores_table(result).to_string(float_format=lambda v: f"{v:.4f}"))
    report_parts.append("\n--- Final Ranking ---")
    for r in result.ranking:
        report_parts.append(f"{r.rank}. {r.name}: {r.score:.4f}")

    full_report = "\n".join(report_parts)

    if filename:
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(full_report)

    return full_report


# ==============================================================================
# 4. MATPLOTLIB PLOTTING FUNCTIONS
# ==============================================================================

def plot_membership_functions(scale: LinguisticScale, figsize=(10, 4)) -> 'plt.Figure':
    """
    Plots the triangular membership function of every linguistic term.

    Returns:
        The matplotlib Figure object.
    """
    terms = scale.terms
    colors = sns.color_palette("viridis", len(terms))

    low = min(t.bounds[0] for t in terms)
    high = max(t.bounds[2] for t in terms)
    grid = np.linspace(low - 0.5, high + 0.5, 400)

    fig, ax = plt.subplots(figsize=figsize)
    for term, color in zip(terms, colors):
        tfn = term.tri
        # grid plus the term's own corners, so the peak at m is drawn exactly
        xs = np.union1d(grid, tfn.to_array())
        ys = [tfn.membership(x) for x in xs]
        ax.plot(xs, ys, color=color, label=f"{term.short_name} ({term.value})")
        ax.fill_between(xs, ys, color=color, alpha=0.15)

    ax.set_xlabel('Intensity')
    ax.set_ylabel('Membership degree')
    ax.set_ylim(0, 1.05)
    ax.set_title('Linguistic Terms')
    ax.legend(loc='upper left', bbox_to_anchor=(1.0, 1.0), fontsize='small')
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    return fig


def plot_weights(
    derivation: WeightDerivationResult,
    item_names: Sequence[str],
    title: str = 'Weight Distribution',
    figsize=(10, 6)
) -> 'plt.Figure':
    """
    Plots the normalized weights of one derivation, with the span of each
    fuzzy weight (scaled the same way) drawn as an error bar.

    Returns:
        The matplotlib Figure object.
    """
    labels = list(item_names)
    weights = np.asarray(derivation.normalized_weights, dtype=float)
    crisp_sum = float(np.sum(derivation.crisp_weights))
    scale_factor = 1.0 / crisp_sum if crisp_sum > 0 else 0.0
    lower = np.array([w.l for w in derivation.fuzzy_weights]) * scale_factor
    upper = np.array([w.u for w in derivation.fuzzy_weights]) * scale_factor
    yerr = np.vstack([np.clip(weights - lower, 0, None), np.clip(upper - weights, 0, None)])

    fig, ax = plt.subplots(figsize=figsize)
    bars = ax.bar(labels, weights, yerr=yerr, capsize=4,
                  color=plt.cm.viridis(np.linspace(0, 1, len(labels))))

    ax.set_ylabel('Normalized weight')
    ax.set_title(title)
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=45, ha="right")

    for bar in bars:
        yval = bar.get_height()
        ax.text(bar.get_x() + bar.get_width()/2.0, yval, f'{yval:.3f}', va='bottom', ha='center')

    fig.tight_layout()
    return fig


def plot_final_rankings(result: AHPResult, figsize=(10, 6)) -> 'plt.Figure':
    """
    Plots the final rankings of the alternatives with their global scores.

    Returns:
        The matplotlib Figure object.
    """
    rankings = result.get_rankings()

    alt_names = [r[0] for r in rankings]
    scores = [r[1] for r in rankings]

    fig, ax = plt.subplots(figsize=figsize)
    bars = ax.barh(alt_names, scores, color=plt.cm.plasma(np.linspace(0.4, 0.9, len(scores))))

    ax.set_xlabel('Global Score')
    ax.set_ylabel('Alternative')
    ax.set_title('Final Alternative Rankings')
    ax.grid(axis='x', linestyle='--', alpha=0.6)
    ax.invert_yaxis()

    for i, bar in enumerate(bars):
        ax.text(bar.get_width() + 0.005, bar.get_y() + bar.get_height()/2,
                f'{scores[i]:.4f}', va='center')

    fig.tight_layout()
    return fig


def plot_comparison_heatmap(
    matrix: ReciprocalMatrix,
    item_names: Sequence[str],
    title: str = 'Comparison Matrix (centroids)',
    figsize=(8, 6)
) -> 'plt.Figure':
    """
    Heatmap of the centroid of every cell of a comparison matrix.

    Returns:
        The matplotlib Figure object.
    """
    df = pd.DataFrame(matrix.centroid_array(), index=list(item_names), columns=list(item_names))

    fig, ax = plt.subplots(figsize=figsize)
    sns.heatmap(df, annot=True, fmt=".2f", cmap="viridis", square=True, cbar_kws={"label": "Centroid"}, ax=ax)
    ax.set_title(title)

    fig.tight_layout()
    return fig
