"""Tests for the long table schema and quality report."""

import pandas as pd
import pandera as pa
import pytest

from data_engineering.utils.data_loader import load_long_table
from data_engineering.utils.validation import check_data_quality, validate_long_table


def test_loaded_extract_passes_schema(cities_csv):
    table = load_long_table(cities_csv).table

    summary = validate_long_table(table, 'extract')

    assert summary['rows'] == len(table)
    # City rows carry crude and age-adjusted values for the same measure
    assert summary['duplicate_pairs'] == 12


def test_out_of_range_value_fails_schema(long_table):
    bad = long_table.assign(measure='m', value=[10.0, 150.0, 30.0, 40.0, 12.0])
    with pytest.raises(pa.errors.SchemaErrors):
        validate_long_table(bad, 'bad')


def test_unknown_geographic_level_fails_schema(long_table):
    bad = long_table.assign(measure='m', geographic_level='County')
    with pytest.raises(pa.errors.SchemaErrors):
        validate_long_table(bad, 'bad')


def test_quality_report_missing_share():
    table = pd.DataFrame({
        'entity_id': ['E1', 'E2', 'E1', 'E2'],
        'measure_short': ['M1', 'M1', 'M2', 'M2'],
        'value': [1.0, None, 2.0, 3.0],
    })

    summary = check_data_quality(table)

    assert summary['missing_pct'] == {'M1': 50.0, 'M2': 0.0}
    assert summary['duplicate_pairs'] == 0
