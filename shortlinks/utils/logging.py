"""Structured (JSON) logging for the Lambda handlers

`initialize_logging()` runs once per cold start, from each handler package's
`__init__.py`, so it is in place before any handler module logs anything.

Every log line is a single JSON object. Fields passed through `extra=` are
merged in next to the standard ones:

    >>> logger.info('Redirecting client to target URL.', extra={'shortcode': 'a1b2c3d4'})
    {"timestamp": "2025-10-15T12:00:00.000Z", "level": "INFO", "logger": "shortlinks.lambdas.redirect_url.app",
     "message": "Redirecting client to target URL.", "app": "shortlinks", "env": "dev", "shortcode": "a1b2c3d4"}

The log level comes from LOG_LEVEL (default INFO). Chatty third-party
loggers (boto, urllib3, redis) are held at WARNING.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Any

from shortlinks.constants import ENV


QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3', 'redis')


class JsonFormatter(logging.Formatter):
    """Render LogRecords, including their `extra` fields, as JSON"""

    # Attributes every LogRecord carries; anything else came in through `extra`
    RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime'}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        context = {'app': os.getenv(ENV.App.APP_NAME), 'env': os.getenv(ENV.App.APP_ENV)}
        self.context = {key: value for key, value in context.items() if value}

    def format(self, record: logging.LogRecord) -> str:
        log: dict[str, Any] = {
            'timestamp': self._timestamp(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            **self.context,
        }
        log.update((key, value) for key, value in record.__dict__.items() if key not in self.RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        return json.dumps(log, default=str)

    @staticmethod
    def _timestamp(record: logging.LogRecord) -> str:
        moment = datetime.fromtimestamp(record.created, tz=UTC)
        return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def log_level() -> str:
    """Return LOG_LEVEL as a logging level name, falling back to INFO for unknown values."""
    level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    return level if level in logging.getLevelNamesMapping() else 'INFO'


def initialize_logging() -> None:
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {'()': JsonFormatter},
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {
                'level': log_level(),
                'handlers': ['stdout'],
            },
        }
    )
