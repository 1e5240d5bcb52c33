"""Unit tests for the shorten / resolve flows in shortener.py.

Test coverage includes:

1. shorten_url()
   - Already stored URLs return the existing record without generating codes.
   - New URLs get a fresh code.
   - Collisions detected before and during insert are retried.
   - The retry loop is bounded by max_attempts.

2. resolve_url()
   - Known codes return the original URL and register exactly one click.
   - Unknown codes return None and register nothing.

3. Data store failures
   - LockTimeoutError propagates to the caller.
"""

from itertools import cycle
from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest

from shortlinks.shortener import shorten_url, resolve_url
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.file import UrlRecordFileDAO
from shortlinks.dao.exceptions import CodeSpaceExhaustedError, LockTimeoutError, ShortcodeAlreadyExistsError


def scripted(*codes: str):
    """Code generator returning the given codes in order, forever."""
    iterator = cycle(codes)
    return lambda length: next(iterator)


@pytest.fixture
def dao(tmp_path):
    return UrlRecordFileDAO(data_path=tmp_path / 'urls.json', lock_timeout_ms=200).initialize()


# -------------------------------
# 1. shorten_url()
# -------------------------------


def test_shorten_new_url(dao):
    record = shorten_url(dao, 'https://example.com', generate=scripted('ab12cd'))

    assert record.code == 'ab12cd'
    assert record.short == 'http://localhost:3000/r/ab12cd'
    assert dao.find_by_code('ab12cd') == 'https://example.com'


def test_shorten_is_idempotent(dao):
    first = shorten_url(dao, 'https://example.com')
    generate = MagicMock()

    second = shorten_url(dao, 'https://example.com', generate=generate)

    assert second == first
    generate.assert_not_called()
    assert dao.store.with_exclusive_access(len) == 1


def test_shorten_default_codes_are_base36(dao):
    code = shorten_url(dao, 'https://example.com').code

    assert len(code) == 6
    assert set(code) <= set('0123456789abcdefghijklmnopqrstuvwxyz')


def test_shorten_custom_length(dao):
    assert len(shorten_url(dao, 'https://example.com', length=10).code) == 10


def test_shorten_retries_taken_codes(dao):
    shorten_url(dao, 'https://example.com', generate=scripted('ab12cd'))

    record = shorten_url(dao, 'https://example.org', generate=scripted('ab12cd', 'ab12cd', 'zz99yy'))

    assert record.code == 'zz99yy'
    assert dao.find_by_code('ab12cd') == 'https://example.com'


def test_shorten_retries_when_code_is_taken_before_insert():
    dao = MagicMock(spec=UrlRecordBaseDAO)
    dao.find_by_url.return_value = None
    dao.find_by_code.return_value = None
    stored = MagicMock()
    dao.insert.side_effect = [ShortcodeAlreadyExistsError('taken'), stored]

    assert shorten_url(dao, 'https://example.com', generate=scripted('aaaaaa', 'bbbbbb')) is stored
    assert [c.args[1] for c in dao.insert.call_args_list] == ['aaaaaa', 'bbbbbb']


def test_shorten_gives_up_after_max_attempts(dao):
    shorten_url(dao, 'https://example.com', generate=scripted('ab12cd'))

    with pytest.raises(CodeSpaceExhaustedError, match='after 5 attempts'):
        shorten_url(dao, 'https://example.org', max_attempts=5, generate=scripted('ab12cd'))

    assert dao.find_by_url('https://example.org') is None


def test_shorten_passes_creation_time(dao):
    record = shorten_url(dao, 'https://example.com', created_at=datetime(2025, 10, 15, tzinfo=UTC))

    assert record.created_at == '2025-10-15T00:00:00.000Z'


# -------------------------------
# 2. resolve_url()
# -------------------------------


def test_resolve_registers_one_click(dao):
    record = shorten_url(dao, 'https://example.com/article/123', generate=scripted('ab12cd'))

    for _ in range(3):
        assert resolve_url(dao, record.code) == 'https://example.com/article/123'

    assert dao.get('ab12cd').clicks == 3


def test_resolve_unknown_code(dao):
    shorten_url(dao, 'https://example.com', generate=scripted('ab12cd'))
    dao_spy = MagicMock(wraps=dao)

    assert resolve_url(dao_spy, 'zzzzzz') is None
    dao_spy.register_click.assert_not_called()
    assert dao.get('ab12cd').clicks == 0


# -------------------------------
# 3. Data store failures
# -------------------------------


def test_lock_timeout_propagates():
    dao = MagicMock(spec=UrlRecordBaseDAO)
    dao.find_by_url.side_effect = LockTimeoutError('busy')

    with pytest.raises(LockTimeoutError):
        shorten_url(dao, 'https://example.com')

    dao.find_by_code.side_effect = LockTimeoutError('busy')
    with pytest.raises(LockTimeoutError):
        resolve_url(dao, 'ab12cd')
