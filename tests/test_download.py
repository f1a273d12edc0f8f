"""Tests for the bronze-layer download."""

from unittest.mock import MagicMock

import pytest
import requests

from data_engineering.download.download_500_cities import download_500_cities
from data_engineering.errors import SourceUnavailable


def _session_returning(chunks):
    response = MagicMock()
    response.__enter__.return_value = response
    response.iter_content.return_value = chunks
    session = MagicMock()
    session.get.return_value = response
    return session


def test_download_writes_file(tmp_path):
    session = _session_returning([b'a,b\n', b'1,2\n'])

    path = download_500_cities(tmp_path, url='https://example.org/x.csv', timeout=3, session=session)

    assert path.read_bytes() == b'a,b\n1,2\n'
    session.get.assert_called_once_with('https://example.org/x.csv', stream=True, timeout=3)
    assert not list(tmp_path.glob('*.part'))


def test_download_reuses_cached_file(tmp_path):
    first = download_500_cities(tmp_path, url='https://example.org/x.csv', session=_session_returning([b'old']))
    session = _session_returning([b'new'])

    again = download_500_cities(tmp_path, url='https://example.org/x.csv', session=session)

    assert again == first
    assert again.read_bytes() == b'old'
    session.get.assert_not_called()


def test_force_redownloads(tmp_path):
    download_500_cities(tmp_path, url='https://example.org/x.csv', session=_session_returning([b'old']))
    path = download_500_cities(tmp_path, url='https://example.org/x.csv', force=True, session=_session_returning([b'new']))
    assert path.read_bytes() == b'new'


def test_download_failure_leaves_no_partial_file(tmp_path):
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError('unreachable')

    with pytest.raises(SourceUnavailable):
        download_500_cities(tmp_path, url='https://example.org/x.csv', session=session)
    assert list(tmp_path.iterdir()) == []
