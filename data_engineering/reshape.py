"""
Reshaping between long and wide layouts

Long: one row per (entity, measure) observation.
Wide: one row per entity, one column per measure, NaN where no record exists.

All functions return new frames and leave their input untouched.
"""

import logging
from typing import Callable, Optional

import pandas as pd

from config.settings import DEFAULT_DUPLICATES, DUPLICATE_POLICIES
from data_engineering.errors import DuplicateKey

logger = logging.getLogger(__name__)

Predicate = Callable[[pd.DataFrame], pd.Series]


def filter_rows(table: pd.DataFrame, predicate: Optional[Predicate] = None, **equals) -> pd.DataFrame:
    """
    Return the records matching a predicate and/or column filters

    Args:
        table: Long table
        predicate: Callable taking the table and returning a boolean mask
        **equals: column=value equality filters; list/tuple/set values
            are membership tests

    Returns:
        New long table with the matching rows, original order kept

    Example:
        filter_rows(table, geographic_level='Census Tract',
                    data_value_type='Crude prevalence')
    """
    mask = pd.Series(True, index=table.index)

    if predicate is not None:
        mask &= pd.Series(predicate(table), index=table.index).astype(bool)

    for column, expected in equals.items():
        if column not in table.columns:
            raise KeyError(f"Unknown column for filter: {column}")
        if isinstance(expected, (list, tuple, set, frozenset)):
            mask &= table[column].isin(list(expected))
        else:
            mask &= table[column] == expected

    return table.loc[mask].copy()


def duplicate_pairs(table: pd.DataFrame, row_key: str = 'entity_id', col_key: str = 'measure_short') -> pd.DataFrame:
    """Distinct (row_key, col_key) pairs that occur more than once."""
    dupes = table.duplicated(subset=[row_key, col_key], keep=False)
    return table.loc[dupes, [row_key, col_key]].drop_duplicates()


def pivot_wide(
    table: pd.DataFrame,
    row_key: str = 'entity_id',
    col_key: str = 'measure_short',
    value_field: str = 'value',
    duplicates: str = DEFAULT_DUPLICATES,
) -> pd.DataFrame:
    """
    Pivot a long table into an entity x measure matrix

    Args:
        table: Long table
        row_key: Column whose distinct values become rows
        col_key: Column whose distinct values become columns
        value_field: Column holding the cell values
        duplicates: 'last' keeps the last record in table order for a
            repeated (row_key, col_key) pair; 'raise' raises DuplicateKey

    Returns:
        Wide DataFrame with sorted row and column labels; cells with no
        record are NaN
    """
    if duplicates not in DUPLICATE_POLICIES:
        raise ValueError(f"duplicates must be one of {DUPLICATE_POLICIES}, got {duplicates!r}")

    if len(table) == 0:
        empty = pd.DataFrame(dtype=float)
        empty.index.name = row_key
        empty.columns.name = col_key
        return empty

    dupes = duplicate_pairs(table, row_key, col_key)
    if len(dupes) > 0:
        if duplicates == 'raise':
            raise DuplicateKey(map(tuple, dupes.itertuples(index=False, name=None)))
        logger.warning(
            "%d duplicate (%s, %s) pairs; keeping the last record of each",
            len(dupes), row_key, col_key,
        )

    deduped = table.drop_duplicates(subset=[row_key, col_key], keep='last')
    wide = deduped.pivot(index=row_key, columns=col_key, values=value_field)
    wide = wide.sort_index(axis=0).sort_index(axis=1).astype(float)
    return wide


def drop_incomplete_rows(matrix: pd.DataFrame) -> pd.DataFrame:
    """Remove every row with at least one missing cell."""
    dense = matrix.dropna(axis=0, how='any')
    dropped = len(matrix) - len(dense)
    if dropped:
        logger.info("Dropped %d of %d rows with missing values", dropped, len(matrix))
    return dense.copy()


def flatten_long(
    matrix: pd.DataFrame,
    row_key: str = 'entity_id',
    col_key: str = 'measure_short',
    value_field: str = 'value',
) -> pd.DataFrame:
    """
    Flatten a wide matrix back to (row_key, col_key, value_field) triples

    Missing cells produce no row.
    """
    long = matrix.rename_axis(index=row_key, columns=None).reset_index()
    long = long.melt(id_vars=row_key, var_name=col_key, value_name=value_field)
    return long.dropna(subset=[value_field]).reset_index(drop=True)
