"""Tests for loading the dataset into a canonical long table."""

import logging
from unittest.mock import MagicMock

import numpy as np
import pytest
import requests

from data_engineering.errors import MalformedRecord, MissingColumns, SourceUnavailable
from data_engineering.utils.data_loader import load_long_table, parse_long_table

HEADER = 'UniqueID,Measure,Short_Question_Text,Data_Value,GeographicLevel,StateAbbr'


def test_load_local_csv_renames_and_types_columns(cities_csv, source_rows):
    result = load_long_table(cities_csv)

    table = result.table
    assert len(table) == len(source_rows)
    assert result.skipped_rows == 0
    assert {'entity_id', 'measure', 'measure_short', 'value', 'geographic_level', 'state'} <= set(table.columns)
    assert table['value'].dtype == float
    assert table['population'].dtype == float
    assert set(table['geographic_level']) == {'US', 'City', 'Census Tract'}


def test_unparsable_value_becomes_missing():
    text = '\n'.join([
        HEADER,
        'E1,Obesity,Obesity,31.2,City,TX',
        'E2,Obesity,Obesity,n/a,City,TX',
        'E3,Obesity,Obesity,,City,TX',
    ])
    table, malformed = parse_long_table(text)

    assert malformed == []
    assert table['value'].iloc[0] == pytest.approx(31.2)
    assert np.isnan(table['value'].iloc[1])
    assert np.isnan(table['value'].iloc[2])


def test_malformed_rows_are_skipped_and_logged(caplog):
    text = '\n'.join([
        HEADER,
        'E1,Obesity,Obesity,31.2,City,TX',
        'E2,Obesity,Obesity,28.0,City,TX,extra',
        'E3,Obesity,Obesity,27.5',
        '',
        'E4,Obesity,Obesity,25.0,City,CA',
    ])
    with caplog.at_level(logging.WARNING, logger='data_engineering.utils.data_loader'):
        table, malformed = parse_long_table(text)

    assert list(table['entity_id']) == ['E1', 'E4']
    assert len(malformed) == 2
    assert [m.line_number for m in malformed] == [3, 4]
    assert malformed[0].expected == 6 and malformed[0].found == 7
    assert 'Malformed record on line 3' in caplog.text


def test_only_mapped_columns_are_kept(cities_csv):
    table = load_long_table(cities_csv).table
    # Year and DataSource have no canonical name and are dropped while reading
    assert set(table.columns) == {
        'entity_id', 'measure', 'measure_short', 'measure_id', 'value', 'geographic_level',
        'state', 'city_name', 'category', 'data_value_type', 'population',
    }


def test_empty_extract_keeps_canonical_columns():
    table, malformed = parse_long_table(HEADER + '\n')
    assert len(table) == 0
    assert malformed == []
    assert {'entity_id', 'measure', 'value', 'geographic_level', 'state'} <= set(table.columns)
    assert table['value'].dtype == float


def test_strict_mode_raises_first_malformed_row():
    text = '\n'.join([HEADER, 'E1,Obesity,Obesity,31.2'])
    with pytest.raises(MalformedRecord) as exc_info:
        parse_long_table(text, strict=True)
    assert exc_info.value.line_number == 2


def test_missing_required_columns():
    text = 'UniqueID,Measure\nE1,Obesity\n'
    with pytest.raises(MissingColumns) as exc_info:
        parse_long_table(text)
    assert exc_info.value.missing == ['Data_Value', 'GeographicLevel']


def test_short_name_defaults_to_full_measure():
    text = 'UniqueID,Measure,Data_Value,GeographicLevel\nE1,Obesity,31.2,City\n'
    table, _ = parse_long_table(text)
    assert table['measure_short'].iloc[0] == 'Obesity'


def test_missing_file_is_source_unavailable(tmp_path):
    with pytest.raises(SourceUnavailable):
        load_long_table(tmp_path / 'nope.csv')


def test_url_source_uses_session_with_timeout():
    session = MagicMock()
    text = HEADER + '\nE1,Obesity,Obesity,31.2,City,TX\n'
    session.get.return_value.text = text
    session.get.return_value.content = text.encode()

    result = load_long_table('https://example.org/data.csv', timeout=5, session=session)

    session.get.assert_called_once_with('https://example.org/data.csv', timeout=5)
    assert result.table['entity_id'].tolist() == ['E1']
    assert result.source == 'https://example.org/data.csv'


@pytest.mark.parametrize('exc', [requests.Timeout('slow'), requests.ConnectionError('down')])
def test_url_failures_are_source_unavailable(exc):
    session = MagicMock()
    session.get.side_effect = exc

    with pytest.raises(SourceUnavailable) as exc_info:
        load_long_table('https://example.org/data.csv', timeout=1, session=session)
    assert exc_info.value.source == 'https://example.org/data.csv'


def test_http_error_status_is_source_unavailable():
    session = MagicMock()
    session.get.return_value.raise_for_status.side_effect = requests.HTTPError('404')

    with pytest.raises(SourceUnavailable):
        load_long_table('https://example.org/data.csv', session=session)
