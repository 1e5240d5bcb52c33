"""Aggregate of every shortened URL persisted by a store

The StoreModel is the in-memory working copy of a whole backing document.
It is loaded, mutated and written back inside one exclusive access window,
and never shared between concurrent operations.

Persisted layout:
    {
        "urls": [
            {"original": str, "short": str, "code": str, "createdAt": str, "clicks": int},
            ...
        ],
        "codes": {"<code>": "<original url>", ...}
    }

Invariants:
    - every code in `codes` has exactly one record in `records` and vice versa
    - codes are unique, originals are unique
    - clicks are never negative

Example:
    >>> store = StoreModel.empty()
    >>> store.append(UrlRecordModel(original='https://example.com', code='ab12cd',
    ...                             short='http://localhost:3000/r/ab12cd',
    ...                             created_at='2025-10-15T00:00:00.000Z'))
    >>> store.find_by_code('ab12cd')
    'https://example.com'
    >>> store.increment_clicks('ab12cd').clicks
    1
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from shortlinks.types import StoreDocument
from shortlinks.models.url_record_model import UrlRecordModel
from shortlinks.constants import CORRUPT_RECORD_SKIPPED
from shortlinks.dao.exceptions import CorruptDataError


logger = logging.getLogger(__name__)


@dataclass
class StoreModel:
    records: list[UrlRecordModel] = field(default_factory=list)  # Insertion order, scanned by original URL
    codes: dict[str, str] = field(default_factory=dict)  # code -> original URL index

    @classmethod
    def empty(cls) -> 'StoreModel':
        return cls()

    def __len__(self) -> int:
        return len(self.records)

    def find_by_url(self, original: str) -> UrlRecordModel | None:
        return next((record for record in self.records if record.original == original), None)

    def find_by_code(self, code: str) -> str | None:
        return self.codes.get(code)

    def get_record(self, code: str) -> UrlRecordModel | None:
        if code not in self.codes:
            return None
        return next(record for record in self.records if record.code == code)

    def append(self, record: UrlRecordModel) -> None:
        """Append a new record and index its code.

        Raises:
            ValueError:
                If the record's code or original URL is already stored.
                Callers are expected to check both before appending.
        """
        if record.code in self.codes:
            raise ValueError(f"Short code '{record.code}' is already stored.")
        if self.find_by_url(record.original) is not None:
            raise ValueError(f"URL '{record.original}' is already stored.")

        self.records.append(record)
        self.codes[record.code] = record.original

    def increment_clicks(self, code: str) -> UrlRecordModel | None:
        """Increment the click counter of a record by one.

        Records are immutable, so the stored record is replaced by an updated copy.

        Returns:
            UrlRecordModel | None: The updated record, or None if the code is unknown.
        """
        if code not in self.codes:
            return None

        for position, record in enumerate(self.records):
            if record.code == code:
                updated = replace(record, clicks=record.clicks + 1)
                self.records[position] = updated
                return updated

        return None  # pragma: no cover

    def to_document(self) -> StoreDocument:
        return {
            'urls': [record.to_document() for record in self.records],
            'codes': {record.code: record.original for record in self.records},
        }

    @classmethod
    def from_document(cls, document: Any) -> 'StoreModel':
        """Validate a decoded JSON document and build a StoreModel from it.

        Only a document without the persisted layout is corrupt as a whole.
        Records are checked one by one: an invalid record, or a record whose
        code or original URL was already seen earlier in the document, is
        logged and skipped so that every valid record survives the next write.

        The code index is always rebuilt from the records. A stored index which
        disagrees with the records is reported and replaced on the next write.

        Raises:
            CorruptDataError:
                If the document is not an object holding a 'urls' list.
        """
        if not isinstance(document, dict):
            raise CorruptDataError(f'Store document must be a JSON object (given type: {type(document).__name__}).')

        urls = document.get('urls')
        if not isinstance(urls, list):
            raise CorruptDataError("Store document is missing the 'urls' list.")

        store = cls()
        for position, entry in enumerate(urls):
            try:
                record = _validated_record(position, entry)
                if record.code in store.codes:
                    raise CorruptDataError(f"Duplicate short code '{record.code}' at urls[{position}].")
                if store.find_by_url(record.original) is not None:
                    raise CorruptDataError(f"Duplicate original URL '{record.original}' at urls[{position}].")
            except CorruptDataError as e:
                logger.warning(
                    'Skipping invalid stored record.',
                    extra={'position': position, 'reason': str(e), 'event': CORRUPT_RECORD_SKIPPED},
                )
                continue

            store.records.append(record)
            store.codes[record.code] = record.original

        stored_codes = document.get('codes', {})
        if stored_codes != store.codes:
            logger.warning(
                'Stored code index disagrees with stored records. Rebuilt index from records.',
                extra={'indexedCodes': len(stored_codes) if isinstance(stored_codes, dict) else None, 'records': len(store.records)},
            )

        return store


def _validated_record(position: int, entry: Any) -> UrlRecordModel:
    if not isinstance(entry, dict):
        raise CorruptDataError(f'urls[{position}] must be a JSON object.')

    for key in ('original', 'code'):
        if not isinstance(entry.get(key), str) or not entry[key]:
            raise CorruptDataError(f"urls[{position}] is missing a non-empty '{key}' string.")
    for key in ('short', 'createdAt'):
        if key in entry and not isinstance(entry[key], str):
            raise CorruptDataError(f"urls[{position}].{key} must be a string.")

    clicks = entry.get('clicks', 0)
    # JSON numbers like 2.0 are whole click counts; true/false is not (bool is an int)
    if isinstance(clicks, float) and clicks.is_integer():
        clicks = int(clicks)
    if isinstance(clicks, bool) or not isinstance(clicks, int) or clicks < 0:
        raise CorruptDataError(f'urls[{position}].clicks must be a non-negative integer (given value: {clicks!r}).')

    return UrlRecordModel.from_document({**entry, 'clicks': clicks})
