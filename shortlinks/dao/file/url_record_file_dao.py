"""Data Access Object (DAO) implementation for shortened URLs in a JSON file

This module provides a JsonFileStore-based implementation of UrlRecordBaseDAO.
Every operation, reads included, runs inside one exclusive access window, so
no operation ever observes a partially written file and the uniqueness
re-check in insert() is atomic with the write.

Classes:
    UrlRecordFileDAO:
        DAO for storing and retrieving UrlRecordModel in a JSON file.

Example:
    >>> dao = UrlRecordFileDAO(data_path='data/urls.json', base_url='https://sho.rt').initialize()
    >>> dao.insert('https://example.com', 'ab12cd')
    UrlRecordModel(original='https://example.com', code='ab12cd', short='https://sho.rt/r/ab12cd', ...)
    >>> dao.find_by_code('ab12cd')
    'https://example.com'
    >>> dao.register_click('ab12cd')
    >>> dao.get('ab12cd').clicks
    1
"""

import os
import logging
from datetime import datetime

from beartype import beartype

from shortlinks.constants import Store, SHORT_URL_CREATED, SHORT_URL_EXISTS, CLICK_REGISTERED
from shortlinks.models import UrlRecordModel
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.file.json_store import JsonFileStore
from shortlinks.dao.exceptions import ShortcodeAlreadyExistsError
from shortlinks.utils.helpers import get_short_url, isoformat_utc


logger = logging.getLogger(__name__)


class UrlRecordFileDAO(UrlRecordBaseDAO):
    """JSON file based Data Access Object (DAO) for short URL mappings

    Attributes:
        store (JsonFileStore):
            Persistent store owning the backing file and its lock.
        base_url (str | None):
            Public base URL used to build each record's short URL.

    Methods:
        See UrlRecordBaseDAO. All methods may raise LockTimeoutError or
        StorageUnavailableError (both DataStoreError).
    """

    def __init__(
        self,
        data_path: str | os.PathLike = Store.DATA_PATH,
        lock_timeout_ms: int = Store.LOCK_TIMEOUT_MS,
        base_url: str | None = None,
        store: JsonFileStore | None = None,
    ):
        """Initialize a JSON file based DAO

        Either pass a ready JsonFileStore or let the DAO build one from the
        data path and lock timeout.
        """
        self.store = store if store is not None else JsonFileStore(data_path, lock_timeout_ms=lock_timeout_ms)
        self.base_url = base_url

    def __repr__(self) -> str:
        return f'<UrlRecordFileDAO {self.store.data_path}>'

    @beartype
    def initialize(self) -> 'UrlRecordFileDAO':
        self.store.initialize()
        return self

    @beartype
    def find_by_url(self, original: str) -> UrlRecordModel | None:
        return self.store.with_exclusive_access(lambda store: store.find_by_url(original))

    @beartype
    def find_by_code(self, code: str) -> str | None:
        return self.store.with_exclusive_access(lambda store: store.find_by_code(code))

    @beartype
    def get(self, code: str) -> UrlRecordModel | None:
        return self.store.with_exclusive_access(lambda store: store.get_record(code))

    @beartype
    def insert(self, original: str, code: str, created_at: datetime | None = None) -> UrlRecordModel:
        """Store a new record after re-checking uniqueness under the lock

        Between a caller's find_by_code() check and this call, another accessor
        may have stored the same URL or taken the same code. Both are re-checked
        here, inside the same exclusive access window as the write.

        Raises:
            ValueError:
                If the original URL or the code is empty.
            ShortcodeAlreadyExistsError:
                If the code is already mapped to a different URL.
        """
        if not original:
            raise ValueError('Original URL must be a non-empty string.')
        if not code:
            raise ValueError('Short code must be a non-empty string.')

        with self.store.exclusive_access() as store:
            existing = store.find_by_url(original)
            if existing is not None:
                logger.info(
                    'URL already shortened. Returning existing record.',
                    extra={'code': existing.code, 'event': SHORT_URL_EXISTS},
                )
                return existing

            if store.find_by_code(code) is not None:
                raise ShortcodeAlreadyExistsError(f"Short code '{code}' is already mapped to another URL.")

            record = UrlRecordModel(
                original=original,
                code=code,
                short=get_short_url(code, self.base_url),
                created_at=isoformat_utc(created_at),
            )
            store.append(record)

        logger.info('Stored new short URL.', extra={'code': code, 'event': SHORT_URL_CREATED})
        return record

    @beartype
    def register_click(self, code: str) -> None:
        with self.store.exclusive_access() as store:
            record = store.increment_clicks(code)

        if record is None:
            logger.debug('Click on unknown short code ignored.', extra={'code': code})
        else:
            logger.debug('Registered click.', extra={'code': code, 'clicks': record.clicks, 'event': CLICK_REGISTERED})
