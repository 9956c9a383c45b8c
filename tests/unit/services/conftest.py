from dataclasses import replace
from datetime import datetime

import pytest

from shortlinks.models import UrlRecordModel
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import ShortcodeAlreadyExistsError, UrlRecordNotFoundError


class InMemoryUrlRecordDAO(UrlRecordBaseDAO):
    """Dict-backed URL record store following the DAO contract."""

    def __init__(self):
        self.records: dict[int, UrlRecordModel] = {}
        self.counter = 0

    def insert(self, original_url: str, shortcode: str, expires_at: datetime, **kwargs) -> UrlRecordModel:
        if any(r.shortcode == shortcode for r in self.records.values()):
            raise ShortcodeAlreadyExistsError(f"Short code '{shortcode}' already exists.")
        self.counter += 1
        record = UrlRecordModel(id=self.counter, original_url=original_url, shortcode=shortcode, expires_at=expires_at)
        self.records[record.id] = record
        return record

    def get(self, record_id: int, **kwargs) -> UrlRecordModel:
        try:
            return self.records[record_id]
        except KeyError as e:
            raise UrlRecordNotFoundError(f"URL record with id '{record_id}' not found.") from e

    def find_by_shortcode(self, shortcode: str, **kwargs) -> UrlRecordModel:
        for record in self.records.values():
            if record.shortcode == shortcode:
                return record
        raise UrlRecordNotFoundError(f"URL record with short code '{shortcode}' not found.")

    def find_by_original_url(self, original_url: str, **kwargs) -> UrlRecordModel:
        for record in sorted(self.records.values(), key=lambda r: r.id):
            if record.original_url == original_url:
                return record
        raise UrlRecordNotFoundError(f"URL record for '{original_url}' not found.")

    def update(self, record_id: int, *, original_url=None, shortcode=None, expires_at=None, **kwargs) -> UrlRecordModel:
        current = self.get(record_id)
        if shortcode is not None and shortcode != current.shortcode:
            if any(r.shortcode == shortcode for r in self.records.values()):
                raise ShortcodeAlreadyExistsError(f"Short code '{shortcode}' already exists.")
        changes = {
            k: v
            for k, v in {'original_url': original_url, 'shortcode': shortcode, 'expires_at': expires_at}.items()
            if v is not None
        }
        self.records[record_id] = replace(current, **changes)
        return self.records[record_id]

    def hit(self, record_id: int, **kwargs) -> int:
        record = self.get(record_id)
        self.records[record.id] = replace(record, clicks=record.clicks + 1)
        return record.clicks + 1

    def sweep(self, now: datetime, **kwargs) -> int:
        expired = [record_id for record_id, record in self.records.items() if record.expires_at < now]
        for record_id in expired:
            del self.records[record_id]
        return len(expired)


@pytest.fixture
def dao() -> InMemoryUrlRecordDAO:
    return InMemoryUrlRecordDAO()
