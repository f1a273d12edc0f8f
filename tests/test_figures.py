"""Smoke tests for figure rendering."""

import pandas as pd
from matplotlib.figure import Figure

from analysis.correlation import clustered_correlation
from analysis.reports.figures import (
    plot_correlation_heatmap,
    plot_measure_boxplot,
    plot_measure_histograms,
    plot_ranked_bar,
    save_figure,
)
from analysis.summary import describe_measures, rank_entities
from data_engineering.reshape import drop_incomplete_rows, filter_rows, pivot_wide
from data_engineering.utils.data_loader import load_long_table


def _tracts(cities_csv):
    table = load_long_table(cities_csv).table
    return table, filter_rows(table, geographic_level='Census Tract')


def test_boxplot_and_heatmap(cities_csv, tmp_path):
    _, tracts = _tracts(cities_csv)
    ordered, ordering = clustered_correlation(drop_incomplete_rows(pivot_wide(tracts)))

    box = plot_measure_boxplot(tracts)
    heat = plot_correlation_heatmap(ordered, ordering, annot=True)

    assert isinstance(box, Figure) and isinstance(heat, Figure)
    assert save_figure(heat, tmp_path / 'heat.png').exists()
    assert save_figure(box, tmp_path / 'nested' / 'box.png').exists()


def test_histograms_hide_unused_panels(cities_csv):
    _, tracts = _tracts(cities_csv)
    wide = pivot_wide(tracts)

    fig = plot_measure_histograms(wide, ['Obesity', 'Diabetes'], ncols=3)

    visible = [ax for ax in fig.axes if ax.get_visible()]
    assert len(visible) == 2


def test_ranked_bar_limits_bars():
    values = pd.Series({'TX': 0.5, 'CA': 0.2, 'NY': 0.9, 'WA': 0.1})

    fig = plot_ranked_bar(values, 'Share', 'Share (%)', top_n=3, reference=0.4)

    assert len(fig.axes[0].patches) == 3


def test_summaries(cities_csv):
    table, tracts = _tracts(cities_csv)

    stats = describe_measures(tracts)
    assert set(stats.index) == {'Obesity', 'Diabetes', 'Health Insurance', 'Current Smoking'}
    assert (stats['missing_pct'] == 0).all()

    cities = filter_rows(table, geographic_level='City', data_value_type='Crude prevalence')
    top = rank_entities(cities, 'Obesity', top_n=2)
    assert list(top.index) == ['Albany', 'Fresno']
