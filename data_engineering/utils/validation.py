#!/usr/bin/env python3
"""
Data Quality and Schema Validation

Uses pandera to validate the long table for:
- Schema compliance (correct data types, ranges)
- Data quality checks (missing values, duplicate entity/measure pairs)

Usage:
    from data_engineering.utils.validation import validate_long_table

    validate_long_table(table, 'census tracts')
"""

import pandera as pa
from pandera import Column, Check
import pandas as pd
from typing import Any, Dict

from config.settings import GEOGRAPHIC_LEVELS


# ============================================================================
# LONG TABLE SCHEMA
# ============================================================================

long_table_schema = pa.DataFrameSchema(
    {
        'entity_id': Column(str, nullable=False),
        'measure': Column(str, nullable=False),
        'measure_short': Column(str, nullable=False, required=False),

        # Prevalence is a percentage
        'value': Column(
            float,
            Check.in_range(0, 100),
            nullable=True,
            description='Crude or age-adjusted prevalence (%)'
        ),

        'geographic_level': Column(
            str,
            Check.isin(GEOGRAPHIC_LEVELS),
            nullable=False
        ),

        'state': Column(str, nullable=True, required=False),
        'population': Column(float, Check.greater_than_or_equal_to(0), nullable=True, required=False),
    },
    strict=False,  # Allow auxiliary columns not defined here
    coerce=True,   # Coerce types when possible
    description='500 Cities long-format measure table'
)


# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

def validate_long_table(df: pd.DataFrame, name: str = 'dataset') -> Dict[str, Any]:
    """
    Validate a long table against the schema and report quality issues

    Args:
        df: Long table to validate
        name: Label used in the printed report

    Returns:
        Quality summary from check_data_quality

    Raises:
        pandera.errors.SchemaErrors: If schema validation fails
    """
    print(f'\n{"="*70}')
    print(f'Validating {name} (long table)')
    print(f'{"="*70}')

    try:
        long_table_schema.validate(df, lazy=True)
        print(f'  ✓ Schema validation passed')
    except pa.errors.SchemaErrors as err:
        print(f'  ❌ Schema validation failed for {name}:')
        print(err.failure_cases)
        raise

    summary = check_data_quality(df, name)

    print(f'  ✓ All validations passed for {name}\n')
    return summary


def check_data_quality(df: pd.DataFrame, name: str = 'dataset') -> Dict[str, Any]:
    """
    Perform data quality checks beyond schema validation

    Checks:
    - Missing value percentage per measure
    - Duplicate (entity, measure) pairs, which pivoting resolves last-write-wins
    """
    summary: Dict[str, Any] = {'rows': len(df), 'missing_pct': {}, 'duplicate_pairs': 0}
    if len(df) == 0:
        print(f'  ⚠️  {name} is empty')
        return summary

    missing_pct = (
        df['value'].isna().groupby(df['measure_short']).mean() * 100
    ).sort_values(ascending=False)
    summary['missing_pct'] = missing_pct.to_dict()

    high_missing = missing_pct[missing_pct > 10]
    if len(high_missing) > 0:
        print(f'  ⚠️  High missing values (>10%):')
        for measure, pct in high_missing.items():
            print(f'     - {measure}: {pct:.1f}%')

    dup_count = int(df.duplicated(subset=['entity_id', 'measure_short']).sum())
    summary['duplicate_pairs'] = dup_count
    if dup_count > 0:
        print(f'  ⚠️  WARNING: {dup_count:,} duplicate (entity, measure) pairs found')
        print(f'     Filter by data_value_type or pivot with duplicates="raise"')

    return summary
