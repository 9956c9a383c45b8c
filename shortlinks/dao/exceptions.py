"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    UrlRecordNotFoundError:
        Raised when a UrlRecordModel is not found in the data store.

    ShortcodeAlreadyExistsError:
        Raised when a short code is already claimed by another record.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from shortlinks.dao.exceptions import UrlRecordNotFoundError
    >>> raise UrlRecordNotFoundError("URL record with short code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    shortlinks.dao.exceptions.UrlRecordNotFoundError: URL record with short code 'abc123' not found.
"""

from shortlinks.exceptions import ShortLinksError


class DAOError(ShortLinksError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class UrlRecordNotFoundError(DAOError):
    """Raised when a UrlRecordModel is not found in the data store."""

    error_code = 'dao:url_record_not_found_error'


class ShortcodeAlreadyExistsError(DAOError):
    """Raised when inserting or renaming to a short code that another record already owns."""

    error_code = 'dao:shortcode_already_exists_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'dao:data_store_error'
