"""Store handle lifecycle for Lambda handlers

A Lambda container serves many invocations of the same function, so the URL
record DAO (and the Redis connection pool inside it) is opened once, on the
first invocation, and handed to the services explicitly on every invocation:

    >>> dao = get_url_record_dao('redirect_url')
    >>> RedirectResolver(dao).resolve('a1b2c3d4')

`close_url_record_daos()` closes every opened handle. It is registered with
`atexit`, so it runs when the container shuts down.
"""

import atexit
import logging

from botocore.exceptions import BotoCoreError, ClientError

from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.redis import UrlRecordRedisDAO
from shortlinks.dao.exceptions import DataStoreError
from shortlinks.exceptions import ConfigurationError, InternalError
from shortlinks.utils.config import load_config, app_prefix


logger = logging.getLogger(__name__)

_daos: dict[str, UrlRecordBaseDAO] = {}


def get_url_record_dao(lambda_name: str) -> UrlRecordBaseDAO:
    """Return the URL record DAO for `lambda_name`, opening it on first use.

    Raises:
        InternalError: configuration could not be loaded or Redis is unreachable.
    """
    dao = _daos.get(lambda_name)
    if dao is not None:
        return dao

    try:
        app_config = load_config(lambda_name)
        logger.debug('Assuming Redis as the backend database for URL records.', extra={'lambdaName': lambda_name})
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        dao = UrlRecordRedisDAO(**redis_config, prefix=app_prefix())
    except (ConfigurationError, DataStoreError, BotoCoreError, ClientError, KeyError) as e:
        logger.exception('Failed to open URL record store.', extra={'lambdaName': lambda_name, 'reason': str(e)})
        raise InternalError() from e

    _daos[lambda_name] = dao
    return dao


@atexit.register
def close_url_record_daos() -> None:
    while _daos:
        lambda_name, dao = _daos.popitem()
        dao.close()
        logger.debug('Closed URL record store.', extra={'lambdaName': lambda_name})
