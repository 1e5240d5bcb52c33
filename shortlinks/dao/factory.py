"""Storage backend selection

Centralizes the choice of UrlRecord DAO so callers stay ignorant of where
records live. The active backend comes from the application configuration
(`active_backend`, overridable with SHORTLINKS_BACKEND).

Example:
    >>> from shortlinks.dao.factory import get_url_record_dao
    >>> dao = get_url_record_dao({'active_backend': 'file', 'base_url': None,
    ...                           'file': {'data_path': 'data/urls.json', 'lock_timeout_ms': 1000}})
    >>> dao
    <UrlRecordFileDAO data/urls.json>
"""

import logging

from shortlinks.types import AppConfig
from shortlinks.constants import FILE_BACKEND, REDIS_BACKEND
from shortlinks.exceptions import BadConfigurationError
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.file import UrlRecordFileDAO
from shortlinks.dao.redis import UrlRecordRedisDAO
from shortlinks.utils.config import load_config, app_prefix


logger = logging.getLogger(__name__)


def get_url_record_dao(config: AppConfig | None = None) -> UrlRecordBaseDAO:
    """Return the UrlRecord DAO for the configured backend.

    Args:
        config (AppConfig | None):
            Application configuration. Loaded with load_config() when omitted.

    Returns:
        UrlRecordBaseDAO: An uninitialized DAO; call initialize() before use.

    Raises:
        BadConfigurationError:
            If the configured backend is unknown.
    """
    if config is None:
        config = load_config()

    backend = config['active_backend']
    logger.debug('Selected storage backend.', extra={'backend': backend})

    if backend == FILE_BACKEND:
        file_config = config['file']
        return UrlRecordFileDAO(
            data_path=file_config['data_path'],
            lock_timeout_ms=file_config['lock_timeout_ms'],
            base_url=config.get('base_url'),
        )

    if backend == REDIS_BACKEND:
        redis_config = config['redis']
        return UrlRecordRedisDAO(
            redis_host=redis_config['host'],
            redis_port=redis_config['port'],
            redis_db=redis_config['db'],
            redis_username=redis_config['username'],
            redis_password=redis_config['password'],
            timeout_ms=redis_config['timeout_ms'],
            prefix=app_prefix(),
            base_url=config.get('base_url'),
        )

    raise BadConfigurationError(f'Unknown storage backend: {backend!r}')
