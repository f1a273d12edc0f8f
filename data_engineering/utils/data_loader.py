"""
Data loading utilities for the 500 Cities health measures

Reads delimited text from a URL or local path into a long-format DataFrame
with canonical column names. Rows with the wrong field count are skipped
and reported rather than aborting the load.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd
import requests

from config.settings import COLUMN_MAP, DEFAULT_TIMEOUT, NUMERIC_COLUMNS, REQUIRED_COLUMNS
from data_engineering.errors import MalformedRecord, MissingColumns, SourceUnavailable

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    table: pd.DataFrame
    source: str
    malformed: List[MalformedRecord] = field(default_factory=list)

    @property
    def skipped_rows(self) -> int:
        return len(self.malformed)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read_source(source: str, timeout: float, session: Optional[requests.Session]) -> str:
    """Return the raw text behind a URL or file path."""
    if _is_url(source):
        http = session or requests.Session()
        try:
            resp = http.get(source, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise SourceUnavailable(source, str(exc)) from exc
        logger.info("Fetched %s (%d bytes)", source, len(resp.content))
        return resp.text

    path = Path(source)
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise SourceUnavailable(source, str(exc)) from exc


def _read_columns(
    text: str,
    column_map: Dict[str, str],
    required: Iterable[str],
    strict: bool,
) -> Tuple[Dict[str, List], List[MalformedRecord]]:
    """
    Read delimited text column-wise, keeping only the mapped columns.

    Each row is checked against the header's field count, then reduced to the
    mapped fields under their canonical names; empty fields become NaN.
    Blank lines are ignored. With strict=True the first malformed row is raised.
    """
    reader = csv.reader(io.StringIO(text))
    header: List[str] = []
    for raw in reader:
        if raw:
            header = [col.strip() for col in raw]
            break

    missing = set(required) - set(header)
    if missing:
        raise MissingColumns(missing)

    keep = [(i, column_map[col]) for i, col in enumerate(header) if col in column_map]
    columns: Dict[str, List] = {name: [] for _, name in keep}
    malformed: List[MalformedRecord] = []

    for raw in reader:
        if not raw:
            continue
        if len(raw) != len(header):
            record = MalformedRecord(reader.line_num, len(header), len(raw), raw)
            if strict:
                raise record
            logger.warning("Skipping %s", record)
            malformed.append(record)
            continue
        for i, name in keep:
            columns[name].append(raw[i] if raw[i] != '' else np.nan)

    return columns, malformed


def parse_long_table(
    text: str,
    column_map: Optional[Dict[str, str]] = None,
    required: Optional[Iterable[str]] = None,
    numeric_columns: Optional[Iterable[str]] = None,
    strict: bool = False,
) -> Tuple[pd.DataFrame, List[MalformedRecord]]:
    """
    Parse delimited text into a typed long table

    Args:
        text: CSV text including a header row
        column_map: Source column -> canonical column (default: COLUMN_MAP)
        required: Source columns that must be present (default: REQUIRED_COLUMNS)
        numeric_columns: Canonical columns parsed to float, bad values -> NaN
        strict: Raise on the first malformed row instead of skipping it

    Returns:
        (table, malformed records)
    """
    column_map = COLUMN_MAP if column_map is None else column_map
    required = REQUIRED_COLUMNS if required is None else list(required)
    numeric_columns = NUMERIC_COLUMNS if numeric_columns is None else list(numeric_columns)

    columns, malformed = _read_columns(text, column_map, required, strict)
    df = pd.DataFrame(columns)

    for col in numeric_columns:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors='coerce').astype(float)

    if 'measure_short' not in df.columns and 'measure' in df.columns:
        df['measure_short'] = df['measure']

    return df, malformed


def load_long_table(
    source: Union[str, Path],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    column_map: Optional[Dict[str, str]] = None,
    required: Optional[Iterable[str]] = None,
    numeric_columns: Optional[Iterable[str]] = None,
    strict: bool = False,
    session: Optional[requests.Session] = None,
) -> LoadResult:
    """
    Load the dataset from a URL or local path

    Args:
        source: http(s) URL or file path to delimited text
        timeout: Seconds before a URL fetch is abandoned
        column_map: Source column -> canonical column
        required: Source columns that must be present
        numeric_columns: Canonical columns parsed to float
        strict: Raise MalformedRecord instead of skipping bad rows
        session: Optional requests session

    Returns:
        LoadResult with the long table and any skipped rows

    Raises:
        SourceUnavailable: If the source cannot be fetched or read
        MissingColumns: If the header lacks required columns
    """
    source = str(source)
    text = _read_source(source, timeout, session)
    table, malformed = parse_long_table(
        text,
        column_map=column_map,
        required=required,
        numeric_columns=numeric_columns,
        strict=strict,
    )

    logger.info("Loaded %d records from %s", len(table), source)
    if malformed:
        logger.warning("Skipped %d malformed rows from %s", len(malformed), source)

    return LoadResult(table=table, source=source, malformed=malformed)
