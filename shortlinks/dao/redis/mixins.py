"""Redis client plumbing shared by Redis-backed DAOs.

Responsibilities:
    - Build a Redis client whose socket waits are bounded like the file lock
    - Report the server address in error messages
    - Healthcheck the connection (once, from initialize())
    - Run WATCH/MULTI check-and-set transactions with a bounded retry window

Classes:
    - RedisClientMixin: Base mixin to inject Redis key management, client setup,
      healthcheck and optimistic transactions.

Example:
    Typical usage with a DAO implementation:

        >>> class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
        ...     pass
        ...
        >>> dao = UrlRecordRedisDAO(prefix="shortlinks:prod", timeout_ms=1000)
        >>> dao._healthcheck()
        True
"""

import time
import logging
from typing import TypeVar
from collections.abc import Callable

import redis

from shortlinks.constants import Store, LOCK_TIMEOUT
from shortlinks.dao.redis.redis_key_schema import RedisKeySchema
from shortlinks.dao.exceptions import LockTimeoutError, StorageUnavailableError


T = TypeVar('T')


logger = logging.getLogger(__name__)


class RedisClientMixin:
    """Client setup, health check and bounded transactions for Redis-backed DAOs.

    Attributes:
        redis (redis.Redis):
            Redis client used by subclasses. Responses are decoded to str.
        keys (RedisKeySchema):
            Helper class for generating namespaced Redis key names.
        timeout_ms (int):
            Bound on every wait: socket connect/read and the WATCH retry window.

    Methods:
        _address() -> str:
            'host:port/db' of the server, for error messages.
        _healthcheck(raise_error: bool = True) -> bool:
            Ping Redis to verify connectivity.
        _transaction(func, *watches) -> T:
            Run `func` as an optimistic WATCH/MULTI transaction.
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
        timeout_ms: int = Store.LOCK_TIMEOUT_MS,
    ):
        """Initialize a Redis-based DAO

        Either pass an existing Redis client or the connection parameters to
        build one. No connection is opened here: redis-py connects lazily and
        initialize() performs the first round trip.

        Raises:
            ValueError:
                If timeout_ms is not positive.
        """
        if timeout_ms <= 0:
            raise ValueError(f'Timeout must be a positive number of milliseconds (given value: {timeout_ms}).')

        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                username=redis_username,
                password=redis_password,
                decode_responses=True,
                socket_timeout=timeout_ms / 1000,
                socket_connect_timeout=timeout_ms / 1000,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)
        self.timeout_ms = timeout_ms

    def _address(self) -> str:
        info = self.redis.connection_pool.connection_kwargs
        return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis to healthcheck connectivity

        Returns:
            bool:
                True if Redis is reachable, False otherwise (only if raise_error=False).

        Raises:
            StorageUnavailableError:
                If Redis can't be reached and raise_error=True.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if raise_error:
                raise StorageUnavailableError(
                    f"Can't connect to Redis at {self._address()}. Check the provided configuration parameters."
                ) from e
            return False
        return True

    def _transaction(self, func: Callable[[redis.client.Pipeline], T], *watches: str) -> T:
        """Run `func` as an optimistic check-and-set transaction

        `func` runs with `watches` WATCHed: reads on the pipeline execute
        immediately, commands after pipe.multi() are queued and executed
        atomically. When a watched key changes before EXEC, the whole
        transaction is replayed until timeout_ms has elapsed.

        Returns:
            T: whatever the last (committed) `func` call returned.

        Raises:
            LockTimeoutError:
                If concurrent writers kept invalidating the transaction for
                longer than timeout_ms. Nothing was written in that case.
        """
        deadline = time.monotonic() + self.timeout_ms / 1000
        with self.redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(*watches)
                    result = func(pipe)
                    pipe.execute()
                    return result
                except redis.exceptions.WatchError as e:
                    if time.monotonic() >= deadline:
                        logger.warning(
                            'Timed out retrying a contended Redis transaction.',
                            extra={'keys': list(watches), 'timeoutMs': self.timeout_ms, 'event': LOCK_TIMEOUT},
                        )
                        raise LockTimeoutError(f'Transaction on {", ".join(watches)} not committed within {self.timeout_ms}ms.') from e
