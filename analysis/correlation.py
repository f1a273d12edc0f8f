"""
Correlation of health measures and clustering-based reordering

compute_correlation turns a dense entity x measure matrix into a Pearson
correlation matrix. reorder_by_clustering permutes that matrix so that
measures which cluster together under (1 - r) / 2 distance sit next to
each other, which is what the heatmap displays.

Usage:
    from analysis.correlation import clustered_correlation

    ordered, ordering = clustered_correlation(wide, method='average')
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import leaves_list, linkage
from scipy.spatial.distance import squareform

from config.settings import DEFAULT_LINKAGE, LINKAGE_METHODS
from data_engineering.errors import InsufficientData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ordering:
    """
    Display order of the measures

    labels: measure names in display order
    positions: index of each displayed label in the original order
    """
    labels: Tuple[str, ...]
    positions: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.labels)

    def inverse(self) -> Tuple[int, ...]:
        """Permutation that maps the displayed order back to the original."""
        inv = [0] * len(self.positions)
        for display_idx, original_idx in enumerate(self.positions):
            inv[original_idx] = display_idx
        return tuple(inv)

    def apply(self, corr: pd.DataFrame) -> pd.DataFrame:
        """Reindex both axes of a matrix by this ordering."""
        labels = list(self.labels)
        return corr.loc[labels, labels]


def compute_correlation(matrix: pd.DataFrame) -> pd.DataFrame:
    """
    Pearson correlation between every pair of columns

    Args:
        matrix: Dense wide matrix (rows = entities, columns = measures)

    Returns:
        Symmetric DataFrame with 1.0 on the diagonal and entries in [-1, 1]

    Raises:
        InsufficientData: Fewer than 2 rows or columns, missing or infinite
            cells, or a zero-variance column (listed in the error's `columns`)
    """
    if matrix.shape[0] < 2:
        raise InsufficientData(f"Need at least 2 rows to correlate, got {matrix.shape[0]}")
    if matrix.shape[1] < 2:
        raise InsufficientData(f"Need at least 2 columns to correlate, got {matrix.shape[1]}")

    values = matrix.astype(float)
    incomplete = values.columns[values.isna().any()].tolist()
    if incomplete:
        raise InsufficientData(
            f"Matrix has missing cells in {incomplete}; drop incomplete rows first",
            columns=incomplete,
        )

    nonfinite = values.columns[~np.isfinite(values.to_numpy()).all(axis=0)].tolist()
    if nonfinite:
        raise InsufficientData(
            f"Correlation undefined for columns with infinite values: {nonfinite}",
            columns=nonfinite,
        )

    spread = values.max() - values.min()
    constant = spread.index[spread == 0].tolist()
    if constant:
        raise InsufficientData(
            f"Correlation undefined for zero-variance columns: {constant}",
            columns=constant,
        )

    corr = values.corr(method='pearson').to_numpy()

    # Floating point noise can break exact symmetry and the unit bounds
    corr = (corr + corr.T) / 2
    corr = np.clip(corr, -1.0, 1.0)
    np.fill_diagonal(corr, 1.0)

    labels = list(values.columns)
    result = pd.DataFrame(corr, index=labels, columns=labels)
    result.index.name = values.columns.name
    result.columns.name = values.columns.name
    return result


def correlation_distance(corr: pd.DataFrame) -> np.ndarray:
    """Map correlation to distance: (1 - r) / 2, in [0, 1] with a zero diagonal."""
    dist = (1.0 - corr.to_numpy(dtype=float)) / 2.0
    dist = (dist + dist.T) / 2
    dist = np.clip(dist, 0.0, 1.0)
    np.fill_diagonal(dist, 0.0)
    return dist


def reorder_by_clustering(
    corr: pd.DataFrame,
    method: str = DEFAULT_LINKAGE,
    optimal_ordering: bool = False,
) -> Tuple[pd.DataFrame, Ordering]:
    """
    Reorder a correlation matrix by agglomerative clustering of its labels

    Args:
        corr: Square correlation matrix
        method: Linkage method (average, complete, single, weighted)
        optimal_ordering: Let scipy minimise distances between adjacent leaves

    Returns:
        (reordered matrix, Ordering relative to the input label order)

    The labels are clustered in sorted order so that the result does not
    depend on the order the input arrived in.
    """
    if method not in LINKAGE_METHODS:
        raise ValueError(f"Unsupported linkage method {method!r}; choose from {LINKAGE_METHODS}")
    if list(corr.index) != list(corr.columns):
        raise ValueError("Correlation matrix must have identical row and column labels")

    original: List[str] = list(corr.columns)
    if len(original) < 2:
        return corr.copy(), Ordering(tuple(original), tuple(range(len(original))))

    canonical = sorted(original)
    sorted_corr = corr.loc[canonical, canonical]

    condensed = squareform(correlation_distance(sorted_corr), checks=False)
    tree = linkage(condensed, method=method, optimal_ordering=optimal_ordering)
    leaves = leaves_list(tree)

    labels = tuple(canonical[i] for i in leaves)
    position = {label: idx for idx, label in enumerate(original)}
    ordering = Ordering(labels, tuple(position[label] for label in labels))

    logger.debug("Clustered %d measures with %s linkage", len(labels), method)
    return ordering.apply(corr), ordering


def clustered_correlation(
    matrix: pd.DataFrame,
    method: str = DEFAULT_LINKAGE,
    optimal_ordering: bool = False,
) -> Tuple[pd.DataFrame, Ordering]:
    """Correlate a dense wide matrix and reorder it for display."""
    corr = compute_correlation(matrix)
    return reorder_by_clustering(corr, method=method, optimal_ordering=optimal_ordering)


def strongest_pairs(corr: pd.DataFrame, top_n: int = 10) -> pd.DataFrame:
    """
    Most strongly correlated distinct measure pairs by absolute r

    Returns a frame with columns measure_a, measure_b, r.
    """
    labels: Sequence[str] = list(corr.columns)
    rows = []
    for i in range(len(labels)):
        for j in range(i + 1, len(labels)):
            rows.append((labels[i], labels[j], float(corr.iat[i, j])))

    pairs = pd.DataFrame(rows, columns=['measure_a', 'measure_b', 'r'])
    order = pairs['r'].abs().sort_values(ascending=False, kind='stable').index
    return pairs.loc[order].head(top_n).reset_index(drop=True)
