from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch
from freezegun import freeze_time

from shortlinks.models import RedirectOutcome, UrlRecordModel
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import DataStoreError, UrlRecordNotFoundError
from shortlinks.exceptions import InternalError
from shortlinks.services import RedirectResolver


EXPIRES_AT = datetime(2025, 10, 18, 0, 0, 0, tzinfo=UTC)


class TestRedirectResolver:
    dao: UrlRecordBaseDAO
    resolver: RedirectResolver
    record: UrlRecordModel

    @pytest.fixture(autouse=True)
    def setup(self, dao: UrlRecordBaseDAO):
        self.dao = dao
        self.resolver = RedirectResolver(dao)
        self.record = dao.insert('https://example.com/article/123', 'abc123', EXPIRES_AT)

    @freeze_time('2025-10-15')
    def test_resolve_counts_clicks(self):
        first = self.resolver.resolve('abc123')
        second = self.resolver.resolve('abc123')

        assert first.outcome is RedirectOutcome.FOUND
        assert first.target == 'https://example.com/article/123'
        assert first.record.clicks == 1
        assert second.record.clicks == 2
        assert self.dao.get(self.record.id).clicks == 2

    @freeze_time('2025-10-18 00:00:00')
    def test_resolve_at_exact_expiry_moment(self):
        assert self.resolver.resolve('abc123').outcome is RedirectOutcome.FOUND

    @freeze_time('2025-10-18 00:00:01')
    def test_resolve_expired_short_url(self):
        result = self.resolver.resolve('abc123')

        assert result.outcome is RedirectOutcome.EXPIRED
        assert result.target is None
        assert result.record == self.record
        assert self.dao.get(self.record.id).clicks == 0  # expired redirects are not counted

    @pytest.mark.parametrize('shortcode', ['unknown', '', None])
    def test_resolve_unknown_short_url(self, shortcode):
        result = self.resolver.resolve(shortcode)

        assert result.outcome is RedirectOutcome.NOT_FOUND
        assert result.record is None
        assert result.target is None

    @pytest.mark.parametrize('exception', [DataStoreError('boom'), UrlRecordNotFoundError('swept')])
    @freeze_time('2025-10-15')
    def test_click_count_failure_does_not_block_redirect(self, monkeypatch: MonkeyPatch, exception: Exception):
        monkeypatch.setattr(self.dao, 'hit', MagicMock(side_effect=exception))

        result = self.resolver.resolve('abc123')

        assert result.outcome is RedirectOutcome.FOUND
        assert result.target == 'https://example.com/article/123'
        assert result.record.clicks == 0

    @freeze_time('2025-10-15')
    def test_click_counted_on_resolved_record_when_shortcode_moves(self, monkeypatch: MonkeyPatch):
        other = self.dao.insert('https://example.com/other', 'other1', EXPIRES_AT)
        find_by_shortcode = self.dao.find_by_shortcode

        def find_then_realias(shortcode: str, **kwargs) -> UrlRecordModel:
            found = find_by_shortcode(shortcode)
            self.dao.update(found.id, shortcode='moved1')
            self.dao.update(other.id, shortcode=shortcode)
            return found

        monkeypatch.setattr(self.dao, 'find_by_shortcode', find_then_realias)

        result = self.resolver.resolve('abc123')

        assert result.outcome is RedirectOutcome.FOUND
        assert result.target == 'https://example.com/article/123'
        assert self.dao.get(self.record.id).clicks == 1
        assert self.dao.get(other.id).clicks == 0

    def test_lookup_failure_raises_internal_error(self, monkeypatch: MonkeyPatch):
        monkeypatch.setattr(self.dao, 'find_by_shortcode', MagicMock(side_effect=DataStoreError('boom')))

        with pytest.raises(InternalError):
            self.resolver.resolve('abc123')

    @freeze_time('2025-10-15')
    def test_resolve_does_not_touch_other_records(self):
        other = self.dao.insert('https://example.com/other', 'xyz789', EXPIRES_AT + timedelta(days=1))

        self.resolver.resolve('abc123')

        assert self.dao.get(other.id) == other
