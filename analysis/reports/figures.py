"""
Figure rendering for the health measures EDA

Every function takes data already prepared by the pipeline and returns a
matplotlib Figure. Saving is left to save_figure so callers decide where
figures go.
"""

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
import numpy as np
import pandas as pd
import seaborn as sns

from analysis.correlation import Ordering
from config.settings import CHART_COLORS, FIGURE_DPI, HEATMAP_CMAP, PLOT_STYLE

sns.set_style(PLOT_STYLE)


def plot_measure_boxplot(
    table: pd.DataFrame,
    measure_col: str = 'measure_short',
    value_field: str = 'value',
    title: str = 'Distribution of Health Measures',
) -> Figure:
    """Horizontal boxplot of each measure's values, ordered by median."""
    order = (
        table.groupby(measure_col)[value_field].median()
        .sort_values(ascending=False).index.tolist()
    )

    height = max(4, 0.35 * len(order))
    fig, ax = plt.subplots(figsize=(12, height))
    sns.boxplot(
        data=table, x=value_field, y=measure_col, order=order,
        color=CHART_COLORS[0], fliersize=1.5, linewidth=0.8, ax=ax
    )
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.set_xlabel('Prevalence (%)')
    ax.set_ylabel('')
    fig.tight_layout()
    return fig


def plot_correlation_heatmap(
    corr: pd.DataFrame,
    ordering: Optional[Ordering] = None,
    title: str = 'Correlation Between Health Measures',
    annot: bool = False,
) -> Figure:
    """Heatmap of a correlation matrix, in clustering order when given."""
    if ordering is not None:
        corr = ordering.apply(corr)

    size = max(6, 0.45 * len(corr))
    fig, ax = plt.subplots(figsize=(size + 2, size))
    sns.heatmap(
        corr, annot=annot, fmt='.2f', cmap=HEATMAP_CMAP, center=0,
        vmin=-1, vmax=1, square=True, linewidths=0.5,
        cbar_kws={"shrink": 0.8}, ax=ax
    )
    ax.set_title(title, fontsize=14, fontweight='bold', pad=20)
    ax.set_xlabel('')
    ax.set_ylabel('')
    fig.tight_layout()
    return fig


def plot_measure_histograms(
    matrix: pd.DataFrame,
    measures: Optional[Sequence[str]] = None,
    bins: int = 30,
    ncols: int = 3,
) -> Figure:
    """One histogram per measure column of a wide matrix."""
    measures = list(measures) if measures is not None else list(matrix.columns)
    nrows = max(1, int(np.ceil(len(measures) / ncols)))

    fig, axes = plt.subplots(nrows, ncols, figsize=(5 * ncols, 3.5 * nrows), squeeze=False)
    flat = axes.ravel()

    for i, measure in enumerate(measures):
        ax = flat[i]
        values = matrix[measure].dropna()
        ax.hist(values, bins=bins, color=CHART_COLORS[i % len(CHART_COLORS)], alpha=0.8, edgecolor='white')
        ax.axvline(values.median(), color='black', linestyle='--', linewidth=1, alpha=0.7)
        ax.set_title(measure, fontsize=11, fontweight='bold')
        ax.set_xlabel('Prevalence (%)')

    # Hide unused panels
    for ax in flat[len(measures):]:
        ax.set_visible(False)

    fig.tight_layout()
    return fig


def plot_ranked_bar(
    values: pd.Series,
    title: str,
    xlabel: str,
    top_n: Optional[int] = 15,
    color: str = CHART_COLORS[1],
    reference: Optional[float] = None,
) -> Figure:
    """Horizontal bar chart of the largest values, largest at the top."""
    ranked = values.sort_values(ascending=False)
    if top_n is not None:
        ranked = ranked.head(top_n)

    fig, ax = plt.subplots(figsize=(10, max(4, 0.4 * len(ranked))))
    ranked.sort_values().plot(kind='barh', ax=ax, color=color)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.set_xlabel(xlabel)
    ax.set_ylabel('')
    ax.grid(axis='x', alpha=0.3)
    if reference is not None:
        ax.axvline(x=reference, color='red', linestyle='--', alpha=0.5, label='Overall')
        ax.legend()
    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: Path, dpi: int = FIGURE_DPI) -> Path:
    """Write a figure to disk and close it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    return path
