"""Process start-up for callers of the storage layer

IMPORTANT: Call `bootstrap()` once at process start and finish it before
serving any request.

Example:
    >>> from shortlinks.bootstrap import bootstrap
    >>> dao = bootstrap()
    >>> dao
    <UrlRecordFileDAO data/urls.json>
"""

import logging

from shortlinks.types import AppConfig
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.factory import get_url_record_dao
from shortlinks.utils.config import load_config
from shortlinks.utils.logging import initialize_logging


logger = logging.getLogger(__name__)


def bootstrap(config: AppConfig | None = None, configure_logging: bool = True) -> UrlRecordBaseDAO:
    """Configure logging, select the storage backend and initialize it.

    Args:
        config (AppConfig | None):
            Application configuration. Loaded with load_config() when omitted.
        configure_logging (bool):
            If True (default), install the JSON log handler first.

    Returns:
        UrlRecordBaseDAO: The initialized DAO.

    Raises:
        ConfigurationError:
            If the configuration is invalid.
        StorageUnavailableError:
            If the backing store can't be created or reached (fatal at start-up).
    """
    if configure_logging:
        initialize_logging()

    if config is None:
        config = load_config()

    dao = get_url_record_dao(config).initialize()
    logger.info('Storage backend ready.', extra={'backend': config['active_backend']})
    return dao
