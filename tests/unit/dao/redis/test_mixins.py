"""Unit tests for Redis-based mixins.

Test coverage includes:
    1. Initialization and configuration
       - Builds a client with decoded responses and socket waits bounded by timeout_ms.
       - Uses a pre-initialized client as is; never talks to Redis on construction.
    2. Healthcheck behavior
       - Healthcheck pings Redis.
       - Missed pong from Redis raises StorageUnavailableError, or returns False on request.
    3. Transactions
       - Commits on the first try, replays on WATCH conflicts, gives up after timeout_ms.
"""

from unittest.mock import MagicMock, patch

import pytest
import redis

from shortlinks.dao.exceptions import LockTimeoutError, StorageUnavailableError
from shortlinks.dao.redis.mixins import RedisClientMixin


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def pipe():
    return MagicMock(spec=redis.client.Pipeline)


@pytest.fixture
def redis_client(pipe):
    _redis_client = MagicMock(
        spec=redis.Redis, connection_pool=MagicMock(spec=redis.ConnectionPool, connection_kwargs={'host': 'redis', 'port': 6379, 'db': 0})
    )
    _redis_client.ping.return_value = True
    _redis_client.pipeline.return_value.__enter__.return_value = pipe
    return _redis_client


@pytest.fixture
def mixin(redis_client):
    return RedisClientMixin(redis_client=redis_client, prefix='shortlinks:test')


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_without_redis_client():
    """Ensure DAO creates a Redis client bounded by timeout_ms when none is provided."""
    redis_config = {
        'redis_host': 'redis',
        'redis_port': '6379',
        'redis_db': '2',
        'redis_username': 'default',
        'redis_password': 'password',
    }

    with patch('shortlinks.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        mixin = RedisClientMixin(**redis_config, prefix='shortlinks:test', timeout_ms=250)

    redis_mock.assert_called_once_with(
        host='redis',
        port=6379,
        db=2,
        username='default',
        password='password',
        decode_responses=True,
        socket_timeout=0.25,
        socket_connect_timeout=0.25,
    )
    assert mixin.redis is redis_mock.return_value
    assert mixin.keys.prefix == 'shortlinks:test'
    assert mixin.timeout_ms == 250


def test_initialize_with_redis_client(mixin, redis_client):
    """Ensure DAO uses a pre-initialized Redis client and opens no connection."""
    assert mixin.redis is redis_client
    redis_client.ping.assert_not_called()


@pytest.mark.parametrize('timeout_ms', [0, -100])
def test_initialize_with_invalid_timeout(redis_client, timeout_ms):
    with pytest.raises(ValueError, match='Timeout must be a positive number'):
        RedisClientMixin(redis_client=redis_client, timeout_ms=timeout_ms)


def test_address(mixin):
    assert mixin._address() == 'redis:6379/0'


# -------------------------------
# 2. Healthcheck behavior
# -------------------------------


def test_healthcheck_passes(mixin, redis_client):
    """Ensure healthcheck passes when Redis responds."""
    assert mixin._healthcheck()
    redis_client.ping.assert_called_once()


@pytest.mark.parametrize(
    'error',
    [
        redis.exceptions.ConnectionError('Connection error'),
        redis.exceptions.TimeoutError('Timed out'),
    ],
)
def test_healthcheck_fails(mixin, redis_client, error):
    """Ensure healthcheck raises StorageUnavailableError when Redis is unreachable."""
    redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}
    redis_client.ping.side_effect = error
    exception_message = "Can't connect to Redis at 203.0.113.1:18000/5. Check the provided configuration parameters."

    with pytest.raises(StorageUnavailableError, match=exception_message):
        mixin._healthcheck()


def test_healthcheck_without_raising(mixin, redis_client):
    """Ensure healthcheck reports False instead of raising when asked to."""
    redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection error')

    assert mixin._healthcheck(raise_error=False) is False


# -------------------------------
# 3. Transactions
# -------------------------------


def test_transaction_commits(mixin, pipe):
    func = MagicMock(return_value='done')

    assert mixin._transaction(func, 'links:ab12cd', 'links:index:urls') == 'done'

    pipe.watch.assert_called_once_with('links:ab12cd', 'links:index:urls')
    func.assert_called_once_with(pipe)
    pipe.execute.assert_called_once()


def test_transaction_replays_on_watch_error(mixin, pipe):
    func = MagicMock(side_effect=['first', 'second'])
    pipe.execute.side_effect = [redis.exceptions.WatchError('watched key changed'), []]

    assert mixin._transaction(func, 'links:ab12cd') == 'second'
    assert func.call_count == 2


def test_transaction_gives_up_after_timeout(redis_client, pipe):
    mixin = RedisClientMixin(redis_client=redis_client, timeout_ms=1)
    pipe.execute.side_effect = redis.exceptions.WatchError('watched key changed')

    with pytest.raises(LockTimeoutError, match='Transaction on links:ab12cd not committed within 1ms.'):
        mixin._transaction(MagicMock(), 'links:ab12cd')


def test_transaction_propagates_domain_errors(mixin, pipe):
    func = MagicMock(side_effect=KeyError('boom'))

    with pytest.raises(KeyError):
        mixin._transaction(func, 'links:ab12cd')

    pipe.execute.assert_not_called()
