from datetime import datetime, UTC
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from shortlinks.types import LambdaContext
from shortlinks.constants import ENV
from shortlinks.models import UrlRecordModel
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import UrlRecordNotFoundError


@pytest.fixture(autouse=True)
def lambda_environment(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv(ENV.App.APP_ENV, 'test')
    monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    monkeypatch.delenv(ENV.App.ERROR_PAGE_URL, raising=False)


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'test_lambda'})


@pytest.fixture
def url_record() -> UrlRecordModel:
    return UrlRecordModel(
        id=1,
        original_url='https://example.com/blog/article-123',
        shortcode='abc123',
        expires_at=datetime(2025, 10, 18, 0, 0, 0, tzinfo=UTC),
        clicks=5,
    )


@pytest.fixture
def url_record_dao() -> UrlRecordBaseDAO:
    """DAO mock with an empty store."""
    dao = MagicMock(spec=UrlRecordBaseDAO)
    dao.get.side_effect = UrlRecordNotFoundError()
    dao.find_by_shortcode.side_effect = UrlRecordNotFoundError()
    dao.find_by_original_url.side_effect = UrlRecordNotFoundError()
    return cast(UrlRecordBaseDAO, dao)
