"""Redis key layout of the URL records

    <prefix>:urls:counter                 STRING  last issued record ID (INCR)
    <prefix>:urls:<id>                    HASH    one URL record
    <prefix>:urls:index:shortcode         HASH    shortcode -> record ID
    <prefix>:urls:index:original_url      HASH    original URL -> first record ID
    <prefix>:urls:index:expiry            ZSET    record ID scored by expiry epoch

The prefix is optional; '<APP_NAME>:<APP_ENV>' keeps environments sharing
one Redis apart.
"""

import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']


def prefix_key(func: Callable[..., str]) -> Callable[..., str]:
    @functools.wraps(func)
    def wrapper(self: 'RedisKeySchema', *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return key if self.prefix is None else f'{self.prefix}:{key}'

    return wrapper


class RedisKeySchema:
    """Builds the (optionally prefixed) Redis keys listed in the module docstring."""

    def __init__(self, prefix: str | None = None):
        if not isinstance(prefix, str | None):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')
        self.prefix = prefix

    @prefix_key
    def counter_key(self) -> str:
        return 'urls:counter'

    @prefix_key
    def url_record_key(self, record_id: int | str) -> str:
        return f'urls:{record_id}'

    @prefix_key
    def shortcode_index_key(self) -> str:
        return 'urls:index:shortcode'

    @prefix_key
    def original_url_index_key(self) -> str:
        return 'urls:index:original_url'

    @prefix_key
    def expiry_index_key(self) -> str:
        return 'urls:index:expiry'
