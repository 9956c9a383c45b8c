"""Shortening service: the write path of the URL shortener

Responsibilities:
    - Validate original URLs and custom aliases;
    - Return the existing record when an original URL was shortened before;
    - Re-alias existing records and create new ones without ever sharing a short code;
    - Regenerate colliding random short codes (bounded);
    - Look up and partially update records by id.

Classes:
    ShorteningService

Example:
    >>> service = ShorteningService(dao)
    >>> result = service.shorten('https://example.com')
    >>> result.record.shortcode, result.created
    ('a1b2c3d4', True)
    >>> service.shorten('https://example.com').created
    False
"""

import logging
from datetime import datetime, UTC
from collections.abc import Callable

from shortlinks.constants import Shortcode
from shortlinks.models import UrlRecordModel, ShortenResult
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import ShortcodeAlreadyExistsError, UrlRecordNotFoundError
from shortlinks.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from shortlinks.services.helpers import translate_store_errors
from shortlinks.utils.helpers import expiry_from
from shortlinks.utils.shortener import generate_shortcode, is_valid_shortcode


logger = logging.getLogger(__name__)


def _validate_original_url(original_url) -> str:
    if not isinstance(original_url, str) or not original_url.strip():
        raise ValidationError('URL is required.')
    return original_url.strip()


def _validate_shortcode(shortcode) -> str:
    if not is_valid_shortcode(shortcode):
        raise ValidationError(
            f'Invalid short code {shortcode!r}: use 1-{Shortcode.MAX_LENGTH} letters, digits, "-" or "_" '
            f'(reserved: {", ".join(sorted(Shortcode.RESERVED))}).'
        )
    return shortcode


def _validate_record_id(record_id) -> int:
    if not isinstance(record_id, int) or isinstance(record_id, bool) or record_id <= 0:
        raise ValidationError('A valid numeric ID is required.')
    return record_id


def _conflict(shortcode: str) -> ConflictError:
    return ConflictError(f"Short code '{shortcode}' is already in use.")


class ShorteningService:
    """Create, look up and update URL records

    Attributes:
        dao (UrlRecordBaseDAO):
            Store handle, constructed and owned by the caller.
        generate (Callable[[], str]):
            Random short code generator.
        max_attempts (int):
            How many generated short codes to try before giving up.
    """

    def __init__(
        self,
        dao: UrlRecordBaseDAO,
        generate: Callable[[], str] = generate_shortcode,
        max_attempts: int = Shortcode.MAX_ATTEMPTS,
    ):
        self.dao = dao
        self.generate = generate
        self.max_attempts = max_attempts

    @translate_store_errors
    def shorten(self, original_url: str, custom_shortcode: str | None = None) -> ShortenResult:
        """Shorten `original_url`, optionally under a custom alias.

        Args:
            original_url (str):
                The destination URL. Required, non-empty.
            custom_shortcode (str | None):
                Custom alias. None or '' means "generate one".

        Returns:
            ShortenResult:
                created=True for a new record. created=False when an existing record
                for the same URL was returned as is or re-aliased.

        Raises:
            ValidationError: missing URL or malformed alias.
            ConflictError: the alias belongs to a different record.
            InternalError: data store fault, or no free random code after `max_attempts`.
        """
        original_url = _validate_original_url(original_url)
        if custom_shortcode is not None and custom_shortcode != '':
            custom_shortcode = _validate_shortcode(custom_shortcode)
        else:
            custom_shortcode = None

        existing = self._find(self.dao.find_by_original_url, original_url)
        if existing is not None:
            return self._realias(existing, custom_shortcode)

        if custom_shortcode is not None:
            record = self._create_with_custom_shortcode(original_url, custom_shortcode)
        else:
            record = self._create_with_generated_shortcode(original_url)

        logger.info(
            'Created short URL %s -> %s.',
            record.shortcode,
            record.original_url,
            extra={'id': record.id, 'shortcode': record.shortcode, 'custom': custom_shortcode is not None},
        )
        return ShortenResult(record=record, created=True)

    @translate_store_errors
    def get_by_id(self, record_id: int) -> UrlRecordModel:
        """Return the record with id `record_id`.

        Raises:
            ValidationError: `record_id` is not a positive integer.
            NotFoundError: no such record.
            InternalError: data store fault.
        """
        record_id = _validate_record_id(record_id)
        try:
            return self.dao.get(record_id)
        except UrlRecordNotFoundError as e:
            raise NotFoundError('URL not found.') from e

    @translate_store_errors
    def update(
        self,
        record_id: int,
        *,
        original_url: str | None = None,
        shortcode: str | None = None,
        expires_at: datetime | None = None,
    ) -> UrlRecordModel:
        """Partially update the record with id `record_id`.

        Fields left as None are not touched. Changing the short code does not
        move the expiry date.

        Raises:
            ValidationError: bad id, empty URL, malformed short code or expiry.
            NotFoundError: no such record.
            ConflictError: the new short code belongs to a different record.
            InternalError: data store fault.
        """
        record_id = _validate_record_id(record_id)
        if original_url is not None:
            original_url = _validate_original_url(original_url)
        if shortcode is not None:
            shortcode = _validate_shortcode(shortcode)
        if expires_at is not None:
            if not isinstance(expires_at, datetime):
                raise ValidationError('expiryDate must be a valid ISO 8601 timestamp.')
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=UTC)

        if shortcode is not None:
            owner = self._find(self.dao.find_by_shortcode, shortcode)
            if owner is not None and owner.id != record_id:
                raise _conflict(shortcode)

        try:
            record = self.dao.update(record_id, original_url=original_url, shortcode=shortcode, expires_at=expires_at)
        except UrlRecordNotFoundError as e:
            raise NotFoundError('URL not found.') from e
        except ShortcodeAlreadyExistsError as e:
            raise _conflict(shortcode) from e

        logger.info('Updated URL record %s.', record_id, extra={'id': record_id, 'shortcode': record.shortcode})
        return record

    def _find(self, lookup: Callable[[str], UrlRecordModel], key: str) -> UrlRecordModel | None:
        try:
            return lookup(key)
        except UrlRecordNotFoundError:
            return None

    def _realias(self, existing: UrlRecordModel, custom_shortcode: str | None) -> ShortenResult:
        if custom_shortcode is None or custom_shortcode == existing.shortcode:
            logger.debug('Original URL already shortened as %s.', existing.shortcode, extra={'id': existing.id})
            return ShortenResult(record=existing, created=False)

        if self._find(self.dao.find_by_shortcode, custom_shortcode) is not None:
            raise _conflict(custom_shortcode)

        try:
            record = self.dao.update(existing.id, shortcode=custom_shortcode)
        except ShortcodeAlreadyExistsError as e:
            raise _conflict(custom_shortcode) from e
        except UrlRecordNotFoundError:
            # Swept between lookup and update
            record = self._create_with_custom_shortcode(existing.original_url, custom_shortcode)
            return ShortenResult(record=record, created=True)

        logger.info(
            'Re-aliased short URL %s -> %s.',
            existing.shortcode,
            record.shortcode,
            extra={'id': record.id, 'shortcode': record.shortcode},
        )
        return ShortenResult(record=record, created=False)

    def _create_with_custom_shortcode(self, original_url: str, shortcode: str) -> UrlRecordModel:
        if self._find(self.dao.find_by_shortcode, shortcode) is not None:
            raise _conflict(shortcode)

        try:
            return self.dao.insert(original_url, shortcode, expiry_from())
        except ShortcodeAlreadyExistsError as e:
            # Lost the race against a concurrent request for the same alias
            raise _conflict(shortcode) from e

    def _create_with_generated_shortcode(self, original_url: str) -> UrlRecordModel:
        expires_at = expiry_from()
        for attempt in range(1, self.max_attempts + 1):
            shortcode = self.generate()
            if self._find(self.dao.find_by_shortcode, shortcode) is not None:
                logger.debug('Generated short code %s collides (attempt %s).', shortcode, attempt)
                continue
            try:
                return self.dao.insert(original_url, shortcode, expires_at)
            except ShortcodeAlreadyExistsError:
                logger.debug('Generated short code %s was claimed concurrently (attempt %s).', shortcode, attempt)

        logger.error('No free short code after %s attempts.', self.max_attempts, extra={'originalUrl': original_url})
        raise InternalError(f'Unable to generate a unique short code after {self.max_attempts} attempts.')
