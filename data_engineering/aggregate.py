"""
Grouped counts and ratios used by the state-level insurance analysis.
"""

from typing import Iterable, Mapping, Union

import pandas as pd

TableLike = Union[pd.DataFrame, Iterable[Mapping]]
CountsLike = Union[pd.Series, Mapping]


def _as_frame(table: TableLike) -> pd.DataFrame:
    if isinstance(table, pd.DataFrame):
        return table
    return pd.DataFrame.from_records(list(table))


def _as_series(counts: CountsLike) -> pd.Series:
    if isinstance(counts, pd.Series):
        return counts
    return pd.Series(dict(counts), dtype=float)


def count_by(table: TableLike, key: str) -> pd.Series:
    """
    Count rows per value of `key`

    Rows with a missing key are not counted. The result is sorted by
    count (descending), then key.
    """
    df = _as_frame(table)
    if len(df) == 0 or key not in df.columns:
        return pd.Series(dtype='int64', name='count').rename_axis(key)

    counts = df.groupby(key, dropna=True).size()
    counts = counts.sort_index().sort_values(ascending=False, kind='stable')
    return counts.rename('count').astype('int64')


def ratio(numerator: CountsLike, denominator: CountsLike) -> pd.Series:
    """
    Divide two keyed mappings on their shared keys

    Keys present in only one side are excluded (inner join), as are keys
    whose denominator is zero or missing.
    """
    num = _as_series(numerator)
    den = _as_series(denominator)

    shared = num.index.intersection(den.index)
    den = den.loc[shared].astype(float)
    den = den[den.notna() & (den != 0)]

    result = num.loc[den.index].astype(float) / den
    return result.rename('ratio')


def share_above(
    table: pd.DataFrame,
    key: str,
    threshold: float,
    value_field: str = 'value',
) -> pd.Series:
    """
    Fraction of rows per `key` whose `value_field` exceeds `threshold`

    Keys with no row above the threshold get 0.0. Rows with a missing
    value count toward neither side.
    """
    observed = table[table[value_field].notna()]
    totals = count_by(observed, key)
    above = count_by(observed[observed[value_field] > threshold], key)
    above = above.reindex(totals.index, fill_value=0)
    return ratio(above, totals).sort_values(ascending=False)
