"""Abstract base class for URL record data access objects (DAOs).

This class establishes a consistent contract for all URL record DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, PostgreSQL, SQLite).

Responsibilities:
    - Provide an interface for inserting, retrieving, updating and sweeping UrlRecordModel objects.
    - Enforce short code uniqueness at the data store level.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from datetime import datetime, timedelta, UTC
        >>> from shortlinks.dao.redis import UrlRecordRedisDAO

        >>> dao = UrlRecordRedisDAO(...)

        >>> record = dao.insert(
        ...     original_url="https://example.com/blog/article-123",
        ...     shortcode="a1b2c3d4",
        ...     expires_at=datetime.now(UTC) + timedelta(days=3),
        ... )
        >>> record.id
        1

        >>> dao.find_by_shortcode("a1b2c3d4").original_url
        'https://example.com/blog/article-123'

        >>> dao.hit(record.id)
        1
"""

from abc import ABC, abstractmethod
from datetime import datetime

from shortlinks.models import UrlRecordModel


class UrlRecordBaseDAO(ABC):
    """Interface for URL record data access objects (DAOs).

    Methods:
        insert(original_url, shortcode, expires_at, **kwargs) -> UrlRecordModel:
            Create a new record with a store-assigned id and zero clicks.
            Raises ShortcodeAlreadyExistsError if the short code is taken.

        get(record_id, **kwargs) -> UrlRecordModel:
            Retrieve a record by id.
            Raises UrlRecordNotFoundError if it does not exist.

        find_by_shortcode(shortcode, **kwargs) -> UrlRecordModel:
            Retrieve a record by short code.
            Raises UrlRecordNotFoundError if it does not exist.

        find_by_original_url(original_url, **kwargs) -> UrlRecordModel:
            Retrieve the record shortening an original URL.
            Raises UrlRecordNotFoundError if it does not exist.

        update(record_id, *, original_url, shortcode, expires_at, **kwargs) -> UrlRecordModel:
            Partially update a record. Omitted (None) fields are left untouched.
            Raises UrlRecordNotFoundError or ShortcodeAlreadyExistsError.

        hit(record_id, **kwargs) -> int:
            Increment the click counter by one and return the new value.
            Raises UrlRecordNotFoundError if the record does not exist.

        sweep(now, **kwargs) -> int:
            Delete every record expiring strictly before `now`.
            Returns the number of deleted records.

        close() -> None:
            Release the underlying connection (pool).

    All methods raise DataStoreError on connection, read or write failures.

    Subclassing:
        Datastore-specific implementations (e.g., UrlRecordRedisDAO) must extend
        this class and implement all abstract methods.
    """

    @abstractmethod
    def insert(self, original_url: str, shortcode: str, expires_at: datetime, **kwargs) -> UrlRecordModel:
        """Insert a new URL record into the data store.

        Args:
            original_url (str):
                The destination URL.

            shortcode (str):
                The short code claimed by the new record.

            expires_at (datetime):
                Moment after which the record stops redirecting.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecordModel: the stored record, including its new id.

        Raises:
            ShortcodeAlreadyExistsError:
                If a record with the same short code already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, record_id: int, **kwargs) -> UrlRecordModel:
        """Retrieve a URL record by its id.

        Raises:
            UrlRecordNotFoundError:
                If no record with the given id exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_shortcode(self, shortcode: str, **kwargs) -> UrlRecordModel:
        pass

    @abstractmethod
    def find_by_original_url(self, original_url: str, **kwargs) -> UrlRecordModel:
        pass

    @abstractmethod
    def update(
        self,
        record_id: int,
        *,
        original_url: str | None = None,
        shortcode: str | None = None,
        expires_at: datetime | None = None,
        **kwargs,
    ) -> UrlRecordModel:
        """Partially update a URL record.

        Args:
            record_id (int):
                Id of the record to update.

            original_url (str | None):
                New destination URL, if given.

            shortcode (str | None):
                New short code, if given. Must not belong to another record.

            expires_at (datetime | None):
                New expiry moment, if given.

        Returns:
            UrlRecordModel: the record after the update.

        Raises:
            UrlRecordNotFoundError:
                If no record with the given id exists.

            ShortcodeAlreadyExistsError:
                If the new short code belongs to a different record.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hit(self, record_id: int, **kwargs) -> int:
        pass

    @abstractmethod
    def sweep(self, now: datetime, **kwargs) -> int:
        """Delete all records whose expiry is strictly before `now`.

        Args:
            now (datetime):
                Cut-off moment.

        Returns:
            int: number of records deleted. 0 when nothing has expired.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    def close(self) -> None:  # noqa: B027
        """Release data store resources. No-op unless overridden."""
