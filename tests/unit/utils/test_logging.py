import json
import logging
import sys

import pytest
from pytest import MonkeyPatch

from shortlinks.constants import ENV
from shortlinks.utils.logging import JsonFormatter, initialize_logging, log_level


def make_record(msg: str, *args, exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord('shortlinks.test', logging.INFO, __file__, 1, msg, args, exc_info)
    record.created = 1760486400.0  # 2025-10-15T00:00:00Z
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def no_app_context(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv(ENV.App.APP_NAME, raising=False)
    monkeypatch.delenv(ENV.App.APP_ENV, raising=False)


def test_json_formatter_renders_message_and_extras():
    record = make_record('Redirecting %s.', 'abc123', shortcode='abc123', event='REDIRECT_SUCCESS')

    log = json.loads(JsonFormatter().format(record))

    assert log == {
        'timestamp': '2025-10-15T00:00:00.000Z',
        'level': 'INFO',
        'logger': 'shortlinks.test',
        'message': 'Redirecting abc123.',
        'shortcode': 'abc123',
        'event': 'REDIRECT_SUCCESS',
    }


def test_json_formatter_adds_app_context(monkeypatch: MonkeyPatch):
    monkeypatch.setenv(ENV.App.APP_NAME, 'shortlinks')
    monkeypatch.setenv(ENV.App.APP_ENV, 'dev')

    log = json.loads(JsonFormatter().format(make_record('Hello.')))

    assert log['app'] == 'shortlinks'
    assert log['env'] == 'dev'


def test_json_formatter_renders_exceptions():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record('Failed.', exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))

    assert 'RuntimeError: boom' in log['exception']
    assert 'exc_info' not in log


def test_json_formatter_renders_stack_info():
    record = make_record('Where am I?')
    record.stack_info = 'Stack (most recent call last):\n  File "app.py", line 1'

    log = json.loads(JsonFormatter().format(record))

    assert log['stack'].startswith('Stack (most recent call last):')


def test_json_formatter_stringifies_unserializable_extras():
    log = json.loads(JsonFormatter().format(make_record('Swept.', cutoff=object())))

    assert log['cutoff'].startswith('<object object')


@pytest.mark.parametrize(
    'level, expected',
    [
        ('debug', 'DEBUG'),
        ('WARNING', 'WARNING'),
        ('verbose', 'INFO'),
        (None, 'INFO'),
    ],
)
def test_log_level(monkeypatch: MonkeyPatch, level, expected):
    if level is None:
        monkeypatch.delenv(ENV.App.LOG_LEVEL, raising=False)
    else:
        monkeypatch.setenv(ENV.App.LOG_LEVEL, level)

    assert log_level() == expected


def test_initialize_logging(monkeypatch: MonkeyPatch):
    monkeypatch.setenv(ENV.App.LOG_LEVEL, 'debug')
    root = logging.getLogger()
    monkeypatch.setattr(root, 'handlers', list(root.handlers))
    monkeypatch.setattr(root, 'level', root.level)
    botocore_logger = logging.getLogger('botocore')
    monkeypatch.setattr(botocore_logger, 'level', botocore_logger.level)

    initialize_logging()

    assert root.level == logging.DEBUG
    assert botocore_logger.level == logging.WARNING
    assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)
