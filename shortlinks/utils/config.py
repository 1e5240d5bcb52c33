"""Utility functions for application configuration management.

Configuration is layered, later layers overriding earlier ones:

    1. Built-in defaults (see DEFAULT_CONFIG)
    2. A YAML document: `SHORTLINKS_CONFIG_FILE` if set, otherwise
       `<project root>/config/<APP_ENV>.yml` when that file exists
    3. Environment variables (see shortlinks.constants.ENV)

The resulting configuration follows this structure:

    {
        "active_backend": "file",
        "base_url": "http://localhost:3000",
        "shortcode": {"length": 6, "max_attempts": 100},
        "file": {"data_path": "data/urls.json", "lock_timeout_ms": 1000},
        "redis": {"host": "localhost", "port": 6379, "db": 0, "username": null, "password": null, "timeout_ms": 1000}
    }

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the project root directory, using `PROJECT_ROOT` when available.

    load_config() -> AppConfig
        Load and validate the layered application configuration.

Example:
    >>> from shortlinks.utils.config import load_config
    >>> config = load_config()
    >>> config['file']['data_path']
    'data/urls.json'
"""

import os
import copy
import logging
from pathlib import Path

from shortlinks.types import AppConfig
from shortlinks.constants import ENV, BACKENDS, DEFAULT_BASE_URL, Shortcode, Store
from shortlinks.exceptions import BadConfigurationError
from shortlinks.utils.helpers import load_yaml


logger = logging.getLogger(__name__)


DEFAULT_CONFIG: AppConfig = {
    'active_backend': 'file',
    'base_url': DEFAULT_BASE_URL,
    'shortcode': {
        'length': Shortcode.LENGTH,
        'max_attempts': Shortcode.MAX_ATTEMPTS,
    },
    'file': {
        'data_path': Store.DATA_PATH,
        'lock_timeout_ms': Store.LOCK_TIMEOUT_MS,
    },
    'redis': {
        'host': 'localhost',
        'port': 6379,
        'db': 0,
        'username': None,
        'password': None,
        'timeout_ms': Store.LOCK_TIMEOUT_MS,
    },
}

# (section, key) <- environment variable; a None section targets the top level
_ENV_OVERRIDES = (
    (None, 'active_backend', ENV.App.BACKEND),
    (None, 'base_url', ENV.App.BASE_URL),
    ('file', 'data_path', ENV.Store.DATA_PATH),
    ('file', 'lock_timeout_ms', ENV.Store.LOCK_TIMEOUT_MS),
    ('redis', 'host', ENV.Redis.HOST),
    ('redis', 'port', ENV.Redis.PORT),
    ('redis', 'db', ENV.Redis.DB),
    ('redis', 'username', ENV.Redis.USERNAME),
    ('redis', 'password', ENV.Redis.PASSWORD),
    ('redis', 'timeout_ms', ENV.Redis.TIMEOUT_MS),
)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.getcwd()))


def app_prefix() -> str | None:
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def config_file() -> Path | None:
    """Return the YAML configuration file to load, or None if there is none."""
    explicit = os.environ.get(ENV.App.CONFIG_FILE)
    if explicit:
        return Path(explicit)

    candidate = project_root() / 'config' / f'{app_env()}.yml'
    return candidate if candidate.is_file() else None


def load_config() -> AppConfig:
    """Load the layered application configuration.

    Returns:
        AppConfig: Validated configuration dictionary (see module docstring).

    Raises:
        FileNotFoundError:
            If `SHORTLINKS_CONFIG_FILE` points to a missing file.
        BadConfigurationError:
            If any configured value is invalid.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = config_file()
    if path is not None:
        logger.debug('Loading configuration file.', extra={'configFile': str(path)})
        _merge(config, load_yaml(path))

    for section, key, name in _ENV_OVERRIDES:
        value = os.environ.get(name)
        if value is None or value == '':
            continue
        target = config if section is None else config[section]
        target[key] = value

    return _validated(config)


def _merge(config: AppConfig, overrides: dict) -> None:
    if not isinstance(overrides, dict):
        raise BadConfigurationError('Configuration file must contain a YAML mapping.')

    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key].update(value)
        elif isinstance(config.get(key), dict):
            raise BadConfigurationError(f'{key} must be a mapping (given value: {value!r}).')
        else:
            config[key] = value


def _positive_int(config: AppConfig, section: str, key: str, minimum: int = 1) -> None:
    value = config[section][key]
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise BadConfigurationError(f'{section}.{key} must be an integer (given value: {value!r}).') from None
    if number < minimum:
        raise BadConfigurationError(f'{section}.{key} must be >= {minimum} (given value: {number}).')
    config[section][key] = number


def _validated(config: AppConfig) -> AppConfig:
    backend = str(config['active_backend']).strip().lower()
    if backend not in BACKENDS:
        raise BadConfigurationError(f'Unknown storage backend {backend!r} (expected one of: {", ".join(sorted(BACKENDS))}).')
    config['active_backend'] = backend

    if not config['file'].get('data_path'):
        raise BadConfigurationError('file.data_path must be a non-empty path.')

    _positive_int(config, 'file', 'lock_timeout_ms')
    _positive_int(config, 'shortcode', 'length')
    _positive_int(config, 'shortcode', 'max_attempts')
    _positive_int(config, 'redis', 'port')
    _positive_int(config, 'redis', 'db', minimum=0)
    _positive_int(config, 'redis', 'timeout_ms')

    return config
