import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from shortlinks.dao.exceptions import DataStoreError
from shortlinks.dao.redis.mixins import connection_label


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_errors[F](method: F) -> F:
    """Decorator: convert redis-py errors raised by a DAO method into DataStoreError

    Connection failures name the Redis endpoint. Every other RedisError
    (timeouts, OOM, aborted MULTI/EXEC) names the failing DAO method.
    DAO exceptions such as UrlRecordNotFoundError pass through untouched.

    Example:
        >>> @handle_redis_errors
        ... def get(self, record_id):
        ...     return self.redis.hgetall(self.keys.url_record_key(record_id))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {connection_label(self.redis)}.") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis failed to execute {method.__name__}(): {e}') from e

    return wrapper
