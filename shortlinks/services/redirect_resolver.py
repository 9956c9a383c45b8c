"""Redirect resolver: the read path of the URL shortener

Classes:
    RedirectResolver

Example:
    >>> resolver = RedirectResolver(dao)
    >>> result = resolver.resolve('a1b2c3d4')
    >>> result.outcome, result.target
    (<RedirectOutcome.FOUND: 'found'>, 'https://example.com')
"""

import logging
from dataclasses import replace
from datetime import datetime, UTC

from shortlinks.models import RedirectOutcome, RedirectResult
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import DataStoreError, UrlRecordNotFoundError
from shortlinks.services.helpers import translate_store_errors


logger = logging.getLogger(__name__)


class RedirectResolver:
    """Resolve short codes to their destination and count clicks

    Attributes:
        dao (UrlRecordBaseDAO):
            Store handle, constructed and owned by the caller.
    """

    def __init__(self, dao: UrlRecordBaseDAO):
        self.dao = dao

    @translate_store_errors
    def resolve(self, shortcode: str | None) -> RedirectResult:
        """Resolve `shortcode`.

        Procedure:
        - Step 1: Look up the record by short code (unknown -> NOT_FOUND)
        - Step 2: Check expiry (expired -> EXPIRED, record left for the sweeper)
        - Step 3: Count the click (best effort)

        Returns:
            RedirectResult:
                FOUND with the record (click count already incremented), or
                NOT_FOUND / EXPIRED.

        Raises:
            InternalError: data store fault during lookup.
        """
        if not shortcode:
            return RedirectResult(outcome=RedirectOutcome.NOT_FOUND)

        # 1- Look up the record
        try:
            record = self.dao.find_by_shortcode(shortcode)
        except UrlRecordNotFoundError:
            logger.debug('Short code %s not found.', shortcode)
            return RedirectResult(outcome=RedirectOutcome.NOT_FOUND)

        # 2- Check expiry
        if record.is_expired(datetime.now(UTC)):
            logger.debug('Short code %s expired at %s.', shortcode, record.expires_at.isoformat())
            return RedirectResult(outcome=RedirectOutcome.EXPIRED, record=record)

        # 3- Count the click; never block the redirect on it
        try:
            clicks = self.dao.hit(record.id)
        except (DataStoreError, UrlRecordNotFoundError) as e:
            logger.warning(
                'Failed to count click for short code %s.',
                shortcode,
                exc_info=True,
                extra={'shortcode': shortcode, 'reason': str(e)},
            )
        else:
            record = replace(record, clicks=clicks)

        return RedirectResult(outcome=RedirectOutcome.FOUND, record=record)
