"""Unit tests for the UrlRecordModel dataclass in url_record_model.py.

Test coverage includes:

1. Model creation
   - Ensures instances can be created with valid data and clicks default to 0.

2. Immutability
   - Verifies that all fields are frozen and cannot be reassigned.

3. Persisted representation
   - Ensures to_document() uses the persisted field names.
   - Ensures from_document() tolerates records written without clicks.
"""

from dataclasses import FrozenInstanceError

import pytest

from shortlinks.models import UrlRecordModel


@pytest.fixture
def record():
    return UrlRecordModel(
        original='https://example.com/article/123',
        code='ab12cd',
        short='http://localhost:3000/r/ab12cd',
        created_at='2025-10-15T00:00:00.000Z',
    )


# -------------------------------------------------
# 1. Model creation
# -------------------------------------------------


def test_valid_url_record_model_creation(record):
    """Ensure UrlRecordModel can be created with valid data."""
    assert record.original == 'https://example.com/article/123'
    assert record.code == 'ab12cd'
    assert record.short == 'http://localhost:3000/r/ab12cd'
    assert record.created_at == '2025-10-15T00:00:00.000Z'
    assert record.clicks == 0


def test_equal_models_compare_equal(record):
    """Models holding the same data compare equal."""
    twin = UrlRecordModel(
        original='https://example.com/article/123',
        code='ab12cd',
        short='http://localhost:3000/r/ab12cd',
        created_at='2025-10-15T00:00:00.000Z',
        clicks=0,
    )
    assert twin == record


# -------------------------------------------------
# 2. Immutability
# -------------------------------------------------


@pytest.mark.parametrize('field', ['original', 'code', 'short', 'created_at', 'clicks'])
def test_fields_are_frozen(record, field):
    """All fields are read-only after creation."""
    with pytest.raises(FrozenInstanceError):
        setattr(record, field, 'changed')


# -------------------------------------------------
# 3. Persisted representation
# -------------------------------------------------


def test_to_document_uses_persisted_names(record):
    assert record.to_document() == {
        'original': 'https://example.com/article/123',
        'short': 'http://localhost:3000/r/ab12cd',
        'code': 'ab12cd',
        'createdAt': '2025-10-15T00:00:00.000Z',
        'clicks': 0,
    }


def test_from_document_restores_record(record):
    assert UrlRecordModel.from_document(record.to_document()) == record


def test_from_document_defaults_missing_clicks_to_zero():
    restored = UrlRecordModel.from_document({'original': 'https://example.com', 'code': 'ab12cd'})

    assert restored.clicks == 0
    assert restored.short == ''
    assert restored.created_at == ''
