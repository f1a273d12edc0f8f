#!/usr/bin/env python3
"""
Generate All EDA Figures

Runs the 500 Cities health measures walkthrough end to end:
1. Load the dataset (downloading it into the bronze layer if needed)
2. Validate the long table
3. Boxplot of every measure at the chosen level (census tracts by default)
4. Clustered correlation heatmap of the measures
5. Histograms of the most strongly correlated measures
6. Cities with the highest lack-of-insurance prevalence
7. Share of rows at the chosen level, per state, above an insurance threshold

Usage:
    python -m analysis.reports.generate_all_figures

    # Local file, complete linkage
    python -m analysis.reports.generate_all_figures --source data.csv --linkage complete
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
import pandera as pa

from analysis.correlation import clustered_correlation, strongest_pairs
from analysis.reports.figures import (
    plot_correlation_heatmap,
    plot_measure_boxplot,
    plot_measure_histograms,
    plot_ranked_bar,
    save_figure,
)
from analysis.summary import describe_measures, rank_entities
from config.paths import REPORTS, VISUALIZATIONS, ensure_directories
from config.settings import (
    DEFAULT_DUPLICATES,
    DEFAULT_LINKAGE,
    DEFAULT_TIMEOUT,
    DUPLICATE_POLICIES,
    GEOGRAPHIC_LEVELS,
    INSURANCE_MEASURE,
    LINKAGE_METHODS,
    LOG_LEVEL,
    VALUE_TYPES,
)
from data_engineering.aggregate import share_above
from data_engineering.download.download_500_cities import download_500_cities
from data_engineering.errors import HealthDataError, InsufficientData
from data_engineering.reshape import drop_incomplete_rows, filter_rows, pivot_wide
from data_engineering.utils.data_loader import load_long_table
from data_engineering.utils.validation import validate_long_table

logger = logging.getLogger(__name__)


def print_header(text):
    """Print a formatted header"""
    print('\n' + '=' * 80)
    print(text.center(80))
    print('=' * 80)


def value_type_filter(table: pd.DataFrame, value_type: str) -> Dict[str, str]:
    """Keyword filter on the prevalence type; empty when the extract has no such column."""
    if 'data_value_type' not in table.columns:
        return {}
    return {'data_value_type': value_type}


def load_step(source: Optional[str], timeout: float) -> pd.DataFrame:
    print_header('STEP 1: LOAD DATASET')
    if source is None:
        source = str(download_500_cities(timeout=timeout))

    result = load_long_table(source, timeout=timeout)
    print(f'  ✓ Loaded {len(result.table):,} records from {result.source}')
    if result.skipped_rows:
        print(f'  ⚠️  Skipped {result.skipped_rows:,} malformed rows')
    print(f'  Measures: {result.table["measure_short"].nunique()}')
    print(f'  Levels:   {result.table["geographic_level"].value_counts().to_dict()}')
    return result.table


def correlation_step(
    table: pd.DataFrame,
    duplicates: str,
    linkage_method: str,
    output_dir: Path,
    top_n: int,
) -> List[str]:
    """Pivot, correlate, reorder and plot; returns measures from the strongest pairs."""
    print_header('STEP 4: CLUSTERED CORRELATION HEATMAP')

    wide = pivot_wide(table, duplicates=duplicates)
    dense = drop_incomplete_rows(wide)
    print(f'  Wide matrix: {wide.shape[0]:,} entities x {wide.shape[1]} measures')
    print(f'  Complete rows kept for correlation: {len(dense):,}')

    ordered, ordering = clustered_correlation(dense, method=linkage_method)
    path = save_figure(
        plot_correlation_heatmap(ordered, title=f'Correlation Between Health Measures ({linkage_method} linkage)'),
        output_dir / '02_correlation_heatmap.png',
    )
    ordered.to_csv(output_dir / 'correlation_matrix.csv')
    print(f'  ✓ Saved {path.name}')

    pairs = strongest_pairs(ordered, top_n=top_n)
    print(f'\n  Strongest correlations:')
    for _, row in pairs.iterrows():
        print(f'    {row["measure_a"]:35s} ~ {row["measure_b"]:35s} r={row["r"]:+.3f}')

    measures: List[str] = []
    for _, row in pairs.iterrows():
        for m in (row['measure_a'], row['measure_b']):
            if m not in measures:
                measures.append(m)

    print_header('STEP 5: HISTOGRAMS OF STRONGLY CORRELATED MEASURES')
    shown = measures[:6]
    path = save_figure(plot_measure_histograms(dense, shown), output_dir / '03_measure_histograms.png')
    print(f'  ✓ Saved {path.name} ({", ".join(shown)})')
    return shown


def insurance_steps(
    table: pd.DataFrame,
    level_rows: pd.DataFrame,
    level: str,
    value_type: str,
    threshold: float,
    output_dir: Path,
    top_n: int,
) -> pd.Series:
    print_header('STEP 6: CITIES WITH THE HIGHEST LACK OF INSURANCE')
    cities = filter_rows(table, geographic_level='City', **value_type_filter(table, value_type))
    if 'city_name' in cities.columns and len(cities) > 0:
        top_cities = rank_entities(cities, INSURANCE_MEASURE, label_col='city_name', top_n=top_n)
        if 'state' in cities.columns:
            states = cities.drop_duplicates('city_name').set_index('city_name')['state']
            top_cities.index = [f'{c}, {states.get(c, "")}' for c in top_cities.index]
        path = save_figure(
            plot_ranked_bar(top_cities, f'Top {top_n} Cities: {INSURANCE_MEASURE}', 'Lack of insurance (%)', top_n=top_n),
            output_dir / '04_top_uninsured_cities.png',
        )
        print(f'  ✓ Saved {path.name}')
    else:
        print('  ⚠️  No city-level rows; skipping')

    print_header(f'STEP 7: STATE SHARE OF {level.upper()} ROWS ABOVE INSURANCE THRESHOLD')
    insurance = filter_rows(level_rows, measure_short=INSURANCE_MEASURE)
    shares = share_above(insurance, 'state', threshold)
    if len(shares) == 0:
        print(f'  ⚠️  No {level} insurance rows with a state; skipping')
        return shares

    overall = float((insurance['value'] > threshold).mean())
    path = save_figure(
        plot_ranked_bar(
            shares * 100,
            f'{level} Rows With > {threshold:g}% Uninsured, by State',
            f'Share of {level} rows (%)',
            top_n=top_n,
            reference=overall * 100,
        ),
        output_dir / '05_state_uninsured_share.png',
    )
    print(f'  ✓ Saved {path.name}')
    print(f'  Overall: {overall:.1%} of {level} rows above {threshold:g}%')
    for state, share in shares.head(5).items():
        print(f'    {state}: {share:.1%}')
    return shares


def run_eda(args) -> Dict[str, bool]:
    """Run every step; returns step name -> success."""
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    results: Dict[str, bool] = {}
    value_type = VALUE_TYPES[args.value_type]

    table = load_step(args.source, args.timeout)
    results['load'] = True

    if not args.skip_validation:
        print_header('STEP 2: VALIDATE')
        validate_long_table(table, 'long table')
        results['validate'] = True

    print_header('STEP 3: DISTRIBUTION OF MEASURES')
    level_rows = filter_rows(table, geographic_level=args.level, **value_type_filter(table, value_type))
    print(f'  {args.level} rows ({value_type}): {len(level_rows):,}')
    if len(level_rows) == 0:
        print(f'  ✗ No {args.level} rows to analyze')
        results['boxplot'] = False
        return results

    path = save_figure(plot_measure_boxplot(level_rows), output_dir / '01_measure_boxplot.png')
    describe_measures(level_rows).to_csv(output_dir / 'measure_summary.csv')
    print(f'  ✓ Saved {path.name} and measure_summary.csv')
    results['boxplot'] = True

    try:
        correlation_step(level_rows, args.duplicates, args.linkage, output_dir, args.top_n)
        results['correlation'] = True
    except InsufficientData as e:
        print(f'  ✗ Correlation skipped: {e}')
        results['correlation'] = False

    insurance_steps(table, level_rows, args.level, value_type, args.insurance_threshold, output_dir, args.top_n)
    results['insurance'] = True
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Generate the 500 Cities health measures EDA figures',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Download (cached) and generate everything
  python -m analysis.reports.generate_all_figures

  # City level, age-adjusted values
  python -m analysis.reports.generate_all_figures --level City --value-type age_adjusted

  # Fail on duplicate (entity, measure) pairs instead of keeping the last
  python -m analysis.reports.generate_all_figures --duplicates raise
        """
    )
    parser.add_argument('--source', help='CSV URL or path (default: download into data/bronze/cdc)')
    parser.add_argument('--level', choices=GEOGRAPHIC_LEVELS, default='Census Tract',
                        help='Geographic level to correlate (default: Census Tract)')
    parser.add_argument('--value-type', choices=sorted(VALUE_TYPES), default='crude',
                        help='Prevalence type (default: crude)')
    parser.add_argument('--linkage', choices=LINKAGE_METHODS, default=DEFAULT_LINKAGE,
                        help=f'Hierarchical clustering linkage (default: {DEFAULT_LINKAGE})')
    parser.add_argument('--duplicates', choices=DUPLICATE_POLICIES, default=DEFAULT_DUPLICATES,
                        help='Duplicate (entity, measure) handling when pivoting')
    parser.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT, help='Fetch timeout (seconds)')
    parser.add_argument('--top-n', type=int, default=15, help='Bars / pairs to show')
    parser.add_argument('--insurance-threshold', type=float, default=20.0,
                        help='Lack-of-insurance prevalence threshold (%%)')
    parser.add_argument('--output-dir', type=Path, default=VISUALIZATIONS, help='Figure directory')
    parser.add_argument('--skip-validation', action='store_true', help='Skip pandera validation')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if args.output_dir in (VISUALIZATIONS, REPORTS):
        ensure_directories()

    print('=' * 80)
    print('500 CITIES HEALTH MEASURES - EDA FIGURES')
    print('=' * 80)
    print(f'Output directory: {args.output_dir}')

    start = time.time()
    try:
        results = run_eda(args)
    except HealthDataError as e:
        print(f'\n✗ Pipeline failed: {e}')
        return 1
    except pa.errors.SchemaErrors as e:
        print(f'\n✗ Pipeline failed: {len(e.failure_cases)} schema check failures')
        return 1

    print_header('GENERATION SUMMARY')
    for step, ok in results.items():
        print(f'  {step:12s} {"✅ Success" if ok else "❌ Failed"}')
    print(f'\nTime elapsed: {time.time() - start:.1f}s')
    print(f'📁 Outputs saved to: {args.output_dir}/')

    return 0 if all(results.values()) else 1


if __name__ == '__main__':
    sys.exit(main())
