from enum import StrEnum


class Store:
    """JSON file store defaults."""

    LOCK_TIMEOUT_MS = 1_000  # Max wait for the exclusive file lock
    LOCK_SUFFIX = '.lock'  # Companion lock marker: <data path>.lock
    DATA_PATH = 'data/urls.json'
    JSON_INDENT = 2


class Shortcode:
    """Short code generation defaults."""

    LENGTH = 6
    MAX_ATTEMPTS = 100  # Bound on the generate -> check -> insert retry loop


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG_FILE = 'SHORTLINKS_CONFIG_FILE'
        BACKEND = 'SHORTLINKS_BACKEND'
        BASE_URL = 'BASE_URL'

    class Store(StrEnum):
        DATA_PATH = 'SHORTLINKS_DATA_PATH'
        LOCK_TIMEOUT_MS = 'SHORTLINKS_LOCK_TIMEOUT_MS'

    class Redis(StrEnum):
        HOST = 'REDIS_HOST'
        PORT = 'REDIS_PORT'
        DB = 'REDIS_DB'
        USERNAME = 'REDIS_USERNAME'
        PASSWORD = 'REDIS_PASSWORD'  # noqa: S105
        TIMEOUT_MS = 'REDIS_TIMEOUT_MS'


# Default public base URL when none is configured
DEFAULT_BASE_URL = 'http://localhost:3000'

# Supported storage backends
FILE_BACKEND = 'file'
REDIS_BACKEND = 'redis'
BACKENDS = frozenset({FILE_BACKEND, REDIS_BACKEND})

# Log event names
STORE_INITIALIZED = 'STORE_INITIALIZED'
CORRUPT_DATA_RECOVERED = 'CORRUPT_DATA_RECOVERED'
CORRUPT_RECORD_SKIPPED = 'CORRUPT_RECORD_SKIPPED'
LOCK_TIMEOUT = 'LOCK_TIMEOUT'
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
SHORT_URL_EXISTS = 'SHORT_URL_EXISTS'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
CLICK_REGISTERED = 'CLICK_REGISTERED'
