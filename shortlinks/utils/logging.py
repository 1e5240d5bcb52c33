"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at process start (see
shortlinks.bootstrap.bootstrap()) before any other logging is done.

Every line on stdout is one JSON object. Storage events (see the event names
in shortlinks.constants) are a top-level field so that lock timeouts and
corrupt-data recoveries can be filtered without parsing messages; the other
`extra` fields are grouped under "context":

{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "WARNING",
    "logger": "shortlinks.dao.file.json_store",
    "event": "LOCK_TIMEOUT",
    "message": "Timed out waiting for the JSON store lock.",
    "context": {"lockPath": "data/urls.json.lock", "timeoutMs": 1000}
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shortlinks.constants import ENV


# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRS = frozenset(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None).__dict__) | {'message', 'asctime'}

# Third-party loggers which are too chatty below WARNING
_QUIET_LOGGERS = ('filelock',)


class JsonFormatter(logging.Formatter):
    """Format records as one JSON object with `event` and `context` fields"""

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec='milliseconds') \
                            .replace('+00:00', 'Z')
        # fmt: on

        context = {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}
        event = context.pop('event', None)

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
        }
        if event is not None:
            log['event'] = event
        log['message'] = record.getMessage()
        if context:
            log['context'] = context
        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str, ensure_ascii=False)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in _QUIET_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
