"""Data Access Object (DAO) implementation for managing URL records in Redis

This module provides a Redis-based implementation of UrlRecordBaseDAO for CRUD-like
operations with UrlRecordModel instances.

Data layout (keys namespaced by RedisKeySchema):
    urls:counter              STRING      auto-increment source for record ids
    urls:<id>                 HASH        id, original_url, shortcode, expires_at, clicks
    urls:index:shortcode      HASH        shortcode -> id (unique index)
    urls:index:original_url   HASH        original url -> id
    urls:index:expiry         ZSET        id scored by expiry (epoch seconds)

Responsibilities:
    - Insert, retrieve and partially update URL records;
    - Enforce short code uniqueness via HSETNX on the short code index;
    - Atomically increment per-record click counters;
    - Delete expired records on demand;
    - Map Redis failures and missing records onto DAO exceptions.

Classes:
    UrlRecordRedisDAO:
        DAO for storing and retrieving UrlRecordModel in a Redis datastore.

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> from shortlinks.dao.redis import UrlRecordRedisDAO

    >>> dao = UrlRecordRedisDAO(prefix="app:dev")

    >>> record = dao.insert(
    ...     original_url="https://example.com/page",
    ...     shortcode="a1b2c3d4",
    ...     expires_at=datetime.now(UTC) + timedelta(days=3),
    ... )
    >>> record.id, record.clicks
    (1, 0)

    >>> dao.hit(record.id)
    1

    >>> dao.sweep(datetime.now(UTC) + timedelta(days=4))
    1
"""

from dataclasses import replace
from datetime import datetime, UTC

from beartype import beartype

from shortlinks.types import UrlRecordHash
from shortlinks.models import UrlRecordModel
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_errors
from shortlinks.dao.exceptions import ShortcodeAlreadyExistsError, UrlRecordNotFoundError


# HINCRBY on a missing key would recreate a swept record as a bare {clicks} hash
HIT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return nil
end
return redis.call('HINCRBY', KEYS[1], 'clicks', 1)
"""


def _serialize(record: UrlRecordModel) -> UrlRecordHash:
    return {
        'id': record.id,
        'original_url': record.original_url,
        'shortcode': record.shortcode,
        'expires_at': record.expires_at.isoformat(),
        'clicks': record.clicks,
    }


def _deserialize(data: dict[str, str]) -> UrlRecordModel:
    expires_at = datetime.fromisoformat(data['expires_at'])
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)

    return UrlRecordModel(
        id=int(data['id']),
        original_url=data['original_url'],
        shortcode=data['shortcode'],
        expires_at=expires_at,
        clicks=int(data.get('clicks', 0)),
    )


class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
    """Redis-based Data Access Object (DAO) for managing URL records

    This class implements the UrlRecordBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(original_url, shortcode, expires_at, **kwargs) -> UrlRecordModel
        get(record_id, **kwargs) -> UrlRecordModel
        find_by_shortcode(shortcode, **kwargs) -> UrlRecordModel
        find_by_original_url(original_url, **kwargs) -> UrlRecordModel
        update(record_id, *, original_url, shortcode, expires_at, **kwargs) -> UrlRecordModel
        hit(shortcode, **kwargs) -> int
        sweep(now, **kwargs) -> int

    Every method raises DataStoreError on Redis failures.
    """

    @handle_redis_errors
    @beartype
    def insert(self, original_url: str, shortcode: str, expires_at: datetime, **kwargs) -> UrlRecordModel:
        """Insert a URL record into Redis

        The short code is claimed first with HSETNX on the short code index.
        Two concurrent inserts of the same short code can both pass the initial
        existence check, but only one of them wins the HSETNX; the other raises
        ShortcodeAlreadyExistsError. The record hash and its secondary indexes are
        then written in a single MULTI/EXEC transaction.

        Args:
            original_url (str):
                Destination URL.
            shortcode (str):
                Short code to claim.
            expires_at (datetime):
                Expiry moment (timezone-aware).
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            UrlRecordModel: the new record with a store-assigned id and 0 clicks.

        Raises:
            ShortcodeAlreadyExistsError:
                If the short code is already in use.
            DataStoreError:
                If a Redis issue occurs during the transaction.

        Example:
            >>> dao.insert('https://example.com', 'a1b2c3d4', expires_at)
            UrlRecordModel(id=1, original_url='https://example.com', shortcode='a1b2c3d4', ...)
        """
        shortcode_index_key = self.keys.shortcode_index_key()
        if self.redis.hexists(shortcode_index_key, shortcode):
            raise ShortcodeAlreadyExistsError(f"Short code '{shortcode}' already exists.")

        record_id = int(self.redis.incr(self.keys.counter_key()))
        if not self.redis.hsetnx(shortcode_index_key, shortcode, record_id):
            raise ShortcodeAlreadyExistsError(f"Short code '{shortcode}' already exists.")

        record = UrlRecordModel(
            id=record_id,
            original_url=original_url,
            shortcode=shortcode,
            expires_at=expires_at,
            clicks=0,
        )

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(self.keys.url_record_key(record_id), mapping=_serialize(record))
            pipe.hsetnx(self.keys.original_url_index_key(), original_url, record_id)
            pipe.zadd(self.keys.expiry_index_key(), {str(record_id): expires_at.timestamp()})
            pipe.execute()
        return record

    @handle_redis_errors
    @beartype
    def get(self, record_id: int, **kwargs) -> UrlRecordModel:
        """Retrieve a stored URL record by id

        Raises:
            UrlRecordNotFoundError:
                If the record does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get(1)
            UrlRecordModel(id=1, original_url='https://example.com', ...)
        """
        data = self.redis.hgetall(self.keys.url_record_key(record_id))
        if not data:
            raise UrlRecordNotFoundError(f"URL record with id '{record_id}' not found.")
        return _deserialize(data)

    @handle_redis_errors
    @beartype
    def find_by_shortcode(self, shortcode: str, **kwargs) -> UrlRecordModel:
        record_id = self.redis.hget(self.keys.shortcode_index_key(), shortcode)
        if record_id is None:
            raise UrlRecordNotFoundError(f"URL record with short code '{shortcode}' not found.")
        return self.get(int(record_id))

    @handle_redis_errors
    @beartype
    def find_by_original_url(self, original_url: str, **kwargs) -> UrlRecordModel:
        record_id = self.redis.hget(self.keys.original_url_index_key(), original_url)
        if record_id is None:
            raise UrlRecordNotFoundError(f"URL record for '{original_url}' not found.")
        return self.get(int(record_id))

    @handle_redis_errors
    @beartype
    def update(
        self,
        record_id: int,
        *,
        original_url: str | None = None,
        shortcode: str | None = None,
        expires_at: datetime | None = None,
        **kwargs,
    ) -> UrlRecordModel:
        """Partially update a URL record

        A new short code is claimed with HSETNX before anything else is written,
        so a rename can never steal another record's short code. The previous
        short code is released in the same transaction that rewrites the record.

        Raises:
            UrlRecordNotFoundError:
                If the record does not exist in Redis.
            ShortcodeAlreadyExistsError:
                If the new short code belongs to a different record.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.update(1, shortcode='my-alias')
            UrlRecordModel(id=1, shortcode='my-alias', ...)
        """
        current = self.get(record_id)
        changes = {}

        shortcode_index_key = self.keys.shortcode_index_key()
        if shortcode is not None and shortcode != current.shortcode:
            if not self.redis.hsetnx(shortcode_index_key, shortcode, record_id):
                raise ShortcodeAlreadyExistsError(f"Short code '{shortcode}' already exists.")
            changes['shortcode'] = shortcode
        if original_url is not None and original_url != current.original_url:
            changes['original_url'] = original_url
        if expires_at is not None and expires_at != current.expires_at:
            changes['expires_at'] = expires_at

        if not changes:
            return current

        updated = replace(current, **changes)
        original_url_index_key = self.keys.original_url_index_key()
        owns_original_url = 'original_url' in changes and self.redis.hget(original_url_index_key, current.original_url) == str(record_id)

        with self.redis.pipeline(transaction=True) as pipe:
            mapping = _serialize(updated)
            pipe.hset(self.keys.url_record_key(record_id), mapping={k: mapping[k] for k in changes})
            if 'shortcode' in changes:
                pipe.hdel(shortcode_index_key, current.shortcode)
            if 'original_url' in changes:
                if owns_original_url:
                    pipe.hdel(original_url_index_key, current.original_url)
                pipe.hsetnx(original_url_index_key, updated.original_url, record_id)
            if 'expires_at' in changes:
                pipe.zadd(self.keys.expiry_index_key(), {str(record_id): updated.expires_at.timestamp()})
            pipe.execute()
        return updated

    @handle_redis_errors
    @beartype
    def hit(self, record_id: int, **kwargs) -> int:
        """Increment the click counter of a URL record

        The existence check and HINCRBY run as one Lua script, so a record
        removed by a concurrent sweep is never recreated and no click is lost.

        Args:
            record_id (int):
                ID of the record that was just resolved.
            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: click count after the increment.

        Raises:
            UrlRecordNotFoundError:
                If no record with the given ID exists.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.hit(1)
            1
        """
        clicks = self.redis.eval(HIT_SCRIPT, 1, self.keys.url_record_key(record_id))
        if clicks is None:
            raise UrlRecordNotFoundError(f'URL record with ID {record_id} not found.')
        return int(clicks)

    @handle_redis_errors
    @beartype
    def sweep(self, now: datetime, **kwargs) -> int:
        """Delete every URL record whose expiry is strictly before `now`

        Expired ids are read from the expiry index with an exclusive upper bound.
        Each record and its index entries are removed in one transaction. The
        returned count is taken from DEL results, so concurrent sweeps never
        count the same record twice.

        Args:
            now (datetime):
                Cut-off moment.

        Returns:
            int: number of deleted records.

        Example:
            >>> dao.sweep(datetime.now(UTC))
            3
            >>> dao.sweep(datetime.now(UTC))
            0
        """
        expiry_index_key = self.keys.expiry_index_key()
        shortcode_index_key = self.keys.shortcode_index_key()
        original_url_index_key = self.keys.original_url_index_key()

        expired_ids = self.redis.zrangebyscore(expiry_index_key, '-inf', f'({now.timestamp()}')

        deleted = 0
        for record_id in expired_ids:
            record_key = self.keys.url_record_key(record_id)
            data = self.redis.hgetall(record_key)
            owns_original_url = bool(data) and self.redis.hget(original_url_index_key, data['original_url']) == str(record_id)

            with self.redis.pipeline(transaction=True) as pipe:
                pipe.delete(record_key)
                pipe.zrem(expiry_index_key, record_id)
                if data:
                    pipe.hdel(shortcode_index_key, data['shortcode'])
                if owns_original_url:
                    pipe.hdel(original_url_index_key, data['original_url'])
                results = pipe.execute()
            deleted += int(results[0])
        return deleted
