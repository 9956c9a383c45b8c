import logging
from datetime import datetime, UTC

from shortlinks.models import SweepResult
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.services.helpers import translate_store_errors


logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Delete URL records whose expiry date has passed.

    Meant to be triggered periodically (e.g. by an EventBridge schedule).
    Sweeping twice in a row deletes nothing the second time.
    """

    def __init__(self, dao: UrlRecordBaseDAO):
        self.dao = dao

    @translate_store_errors
    def sweep(self, now: datetime | None = None) -> SweepResult:
        now = now or datetime.now(UTC)
        deleted_count = self.dao.sweep(now)
        logger.info('Deleted %s expired URL records.', deleted_count, extra={'deletedCount': deleted_count, 'cutoff': now.isoformat()})
        return SweepResult(deleted_count=deleted_count, timestamp=now)
