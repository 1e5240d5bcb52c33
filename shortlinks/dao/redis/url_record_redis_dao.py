"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of UrlRecordBaseDAO. It keeps
the external contract of the JSON file backend (uniqueness of codes and URLs,
idempotent insert, atomic click increment) for deployments which outgrow a
single rewritten file.

Key layout (see RedisKeySchema):
    <prefix>:links:<code>           hash {original, short, code, createdAt, clicks}
    <prefix>:links:index:urls       hash {<original url>: <code>}

Classes:
    UrlRecordRedisDAO:
        DAO for storing and retrieving UrlRecordModel in a Redis datastore.

Example:
    >>> dao = UrlRecordRedisDAO(prefix="shortlinks:dev", base_url="https://sho.rt")
    >>> dao.insert("https://example.com/page", "ab12cd")
    UrlRecordModel(original='https://example.com/page', code='ab12cd', ...)
    >>> dao.find_by_code("ab12cd")
    'https://example.com/page'
    >>> dao.register_click("ab12cd")
    >>> dao.get("ab12cd").clicks
    1
"""

import logging
from datetime import datetime

import redis
from beartype import beartype

from shortlinks.constants import SHORT_URL_CREATED, SHORT_URL_EXISTS, CLICK_REGISTERED
from shortlinks.models import UrlRecordModel
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_connection_error
from shortlinks.dao.exceptions import ShortcodeAlreadyExistsError
from shortlinks.utils.helpers import get_short_url, isoformat_utc


logger = logging.getLogger(__name__)


class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        base_url (str | None):
            Public base URL used to build each record's short URL.

    Methods:
        See UrlRecordBaseDAO. All methods raise StorageUnavailableError on
        connectivity issues with Redis.
    """

    def __init__(self, *args, base_url: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = base_url

    @handle_redis_connection_error
    def initialize(self) -> 'UrlRecordRedisDAO':
        self._healthcheck()
        return self

    @handle_redis_connection_error
    @beartype
    def find_by_url(self, original: str) -> UrlRecordModel | None:
        code = self.redis.hget(self.keys.url_index_key(), original)
        if code is None:
            return None
        return self.get(code)

    @handle_redis_connection_error
    @beartype
    def find_by_code(self, code: str) -> str | None:
        return self.redis.hget(self.keys.link_key(code), 'original')

    @handle_redis_connection_error
    @beartype
    def get(self, code: str) -> UrlRecordModel | None:
        mapping = self.redis.hgetall(self.keys.link_key(code))
        return self._to_model(mapping) if mapping else None

    @handle_redis_connection_error
    @beartype
    def insert(self, original: str, code: str, created_at: datetime | None = None) -> UrlRecordModel:
        """Insert a short URL mapping into Redis

        The uniqueness checks and the writes run as one optimistic transaction:
        both the record key and the URL index are WATCHed, and the whole
        check-and-set is replayed when either changes before EXEC (bounded by
        timeout_ms, see RedisClientMixin._transaction()).

        Raises:
            ValueError:
                If the original URL or the code is empty.
            ShortcodeAlreadyExistsError:
                If the code is already mapped to a different URL.
            LockTimeoutError:
                If concurrent writers kept the transaction from committing in time.
            StorageUnavailableError:
                If a Redis connection issue occurs during the transaction.
        """
        if not original:
            raise ValueError('Original URL must be a non-empty string.')
        if not code:
            raise ValueError('Short code must be a non-empty string.')

        link_key = self.keys.link_key(code)
        url_index_key = self.keys.url_index_key()
        record = UrlRecordModel(
            original=original,
            code=code,
            short=get_short_url(code, self.base_url),
            created_at=isoformat_utc(created_at),
        )

        # NOTE: commands issued before pipe.multi() run immediately (WATCH mode),
        #       commands issued after it are queued and executed by redis-py.
        def _check_and_set(pipe: redis.client.Pipeline) -> tuple[UrlRecordModel, bool]:
            existing_code = pipe.hget(url_index_key, original)
            if existing_code is not None:
                return self._to_model(pipe.hgetall(self.keys.link_key(existing_code))), False
            if pipe.exists(link_key):
                raise ShortcodeAlreadyExistsError(f"Short code '{code}' is already mapped to another URL.")

            pipe.multi()
            pipe.hset(link_key, mapping=record.to_document())
            pipe.hset(url_index_key, original, code)
            return record, True

        stored, created = self._transaction(_check_and_set, link_key, url_index_key)

        if created:
            logger.info('Stored new short URL.', extra={'code': code, 'event': SHORT_URL_CREATED})
        else:
            logger.info('URL already shortened. Returning existing record.', extra={'code': stored.code, 'event': SHORT_URL_EXISTS})
        return stored

    @handle_redis_connection_error
    @beartype
    def register_click(self, code: str) -> None:
        """Increment the click counter of a short URL

        HINCRBY would create a missing hash, so the existence check and the
        increment run as one WATCHed transaction.
        """
        link_key = self.keys.link_key(code)

        def _increment(pipe: redis.client.Pipeline) -> bool:
            if not pipe.exists(link_key):
                return False
            pipe.multi()
            pipe.hincrby(link_key, 'clicks', 1)
            return True

        if self._transaction(_increment, link_key):
            logger.debug('Registered click.', extra={'code': code, 'event': CLICK_REGISTERED})
        else:
            logger.debug('Click on unknown short code ignored.', extra={'code': code})

    @staticmethod
    def _to_model(mapping: dict) -> UrlRecordModel:
        return UrlRecordModel(
            original=mapping['original'],
            code=mapping['code'],
            short=mapping.get('short', ''),
            created_at=mapping.get('createdAt', ''),
            clicks=int(mapping.get('clicks', 0)),
        )
