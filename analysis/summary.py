"""
Descriptive summaries of the long table
"""

import pandas as pd


def describe_measures(table: pd.DataFrame, measure_col: str = 'measure_short', value_field: str = 'value') -> pd.DataFrame:
    """Count, mean, std, quartiles and missing share of each measure, sorted by median."""
    grouped = table.groupby(measure_col)[value_field]
    stats = grouped.describe()
    stats['missing_pct'] = grouped.apply(lambda s: s.isna().mean() * 100)
    return stats.sort_values('50%', ascending=False)


def rank_entities(
    table: pd.DataFrame,
    measure: str,
    label_col: str = 'city_name',
    measure_col: str = 'measure_short',
    value_field: str = 'value',
    top_n: int = 10,
    ascending: bool = False,
) -> pd.Series:
    """
    Top (or bottom) entities for one measure

    Returns a Series of values indexed by `label_col`. Rows with no value
    are left out.
    """
    rows = table[(table[measure_col] == measure) & table[value_field].notna()]
    ranked = rows.sort_values(value_field, ascending=ascending, kind='stable').head(top_n)
    return ranked.set_index(label_col)[value_field]
