"""Shared Redis client plumbing for Redis-backed DAOs.

A DAO mixes in RedisClientMixin to get:
    - a `redis.Redis` client, either injected or built from connection parameters;
    - a RedisKeySchema bound to the DAO's key prefix;
    - a PING on construction, so a misconfigured DAO fails fast;
    - `close()` to release the connection pool.

The connection parameters mirror the `redis` section of a Lambda's AppConfig
document with a `redis_` prefix, e.g. {'host': ..., 'port': ...} becomes
UrlRecordRedisDAO(redis_host=..., redis_port=...).

Example:
    >>> class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
    ...     pass
    ...
    >>> dao = UrlRecordRedisDAO(redis_host='redis.internal', prefix='shortlinks:dev')
    >>> dao.keys.counter_key()
    'shortlinks:dev:urls:counter'
    >>> dao.close()
"""

import redis

from shortlinks.types import RedisConnectionInfo
from shortlinks.dao.redis.redis_key_schema import RedisKeySchema
from shortlinks.dao.exceptions import DataStoreError


def connection_label(client: redis.Redis) -> str:
    """Return '<host>:<port>/<db>' of a Redis client, for error messages."""
    info: RedisConnectionInfo = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


class RedisClientMixin:
    """Redis client setup, healthcheck and teardown for DAOs.

    Attributes:
        redis (redis.Redis): client shared by every method of the DAO.
        keys (RedisKeySchema): namespaced key builder.
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_decode_responses: bool = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        """
        Args:
            redis_host, redis_port, redis_db, redis_username, redis_password:
                Connection parameters. Port and db may be given as strings
                (AppConfig documents sometimes carry them quoted).
            redis_decode_responses (bool):
                Return str instead of bytes. The DAOs rely on this being True.
            redis_client (redis.Redis | None):
                Ready-made client. Connection parameters are ignored when given.
            prefix (str | None):
                Key namespace, usually '<app name>:<app env>'.

        Raises:
            DataStoreError: Redis did not answer the initial PING.
        """
        self.redis = redis_client if redis_client is not None else self._connect(
            host=redis_host,
            port=int(redis_port),
            db=int(redis_db),
            decode_responses=redis_decode_responses,
            username=redis_username,
            password=redis_password,
        )
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    @staticmethod
    def _connect(**connection_kwargs) -> redis.Redis:
        return redis.Redis(**connection_kwargs)

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis.

        Returns False on a connection failure when `raise_error` is False.

        Raises:
            DataStoreError: on a connection failure when `raise_error` is True.
        """
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {connection_label(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True

    def close(self) -> None:
        self.redis.close()
