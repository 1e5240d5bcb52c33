"""Unit tests for helper utilities in helpers.py

Test coverage includes:

1. get_short_url()
   - Builds '<base url>/r/<code>' and falls back to the local default.

2. isoformat_utc()
   - Millisecond precision with a 'Z' suffix; naive and aware datetimes.

3. load_yaml()
   - Parses mappings, returns {} for empty files, raises for missing files.
"""

from datetime import datetime, timedelta, timezone, UTC
from pathlib import Path

import pytest
from freezegun import freeze_time

from shortlinks.utils.helpers import get_short_url, isoformat_utc, load_yaml


# -------------------------------
# 1. get_short_url()
# -------------------------------


@pytest.mark.parametrize(
    'base_url, expected',
    [
        ('https://sho.rt', 'https://sho.rt/r/ab12cd'),
        ('https://sho.rt/', 'https://sho.rt/r/ab12cd'),
        (None, 'http://localhost:3000/r/ab12cd'),
        ('', 'http://localhost:3000/r/ab12cd'),
    ],
)
def test_get_short_url(base_url, expected):
    assert get_short_url('ab12cd', base_url) == expected


# -------------------------------
# 2. isoformat_utc()
# -------------------------------


@freeze_time('2025-10-15 12:34:56.789')
def test_isoformat_utc_now():
    assert isoformat_utc() == '2025-10-15T12:34:56.789Z'


def test_isoformat_utc_naive_is_utc():
    assert isoformat_utc(datetime(2025, 10, 15)) == '2025-10-15T00:00:00.000Z'


def test_isoformat_utc_converts_offsets():
    moment = datetime(2025, 10, 15, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    assert isoformat_utc(moment) == '2025-10-15T00:00:00.000Z'


def test_isoformat_utc_aware():
    assert isoformat_utc(datetime(2025, 10, 15, 0, 0, 0, 123_456, tzinfo=UTC)) == '2025-10-15T00:00:00.123Z'


# -------------------------------
# 3. load_yaml()
# -------------------------------


def test_load_yaml(tmp_path):
    path = tmp_path / 'config.yml'
    path.write_text('active_backend: redis\nredis:\n  port: 6380\n', encoding='utf-8')

    assert load_yaml(path) == {'active_backend': 'redis', 'redis': {'port': 6380}}


def test_load_yaml_empty_file(tmp_path):
    path = tmp_path / 'empty.yml'
    path.write_text('', encoding='utf-8')

    assert load_yaml(path) == {}


def test_load_yaml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match='YAML not found'):
        load_yaml(Path(tmp_path / 'absent.yml'))
