"""Tests for AppConfig loading.

Sections:
    1. App naming (APP_NAME, APP_ENV, key prefix)
    2. Picking a Lambda's section out of an AppConfig document
    3. Loading from AWS AppConfig
    4. Loading from a local AppConfig agent under SAM
    5. Local agent URL validation
"""

import json
from io import BytesIO
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from pytest import MonkeyPatch

from shortlinks.types import AppConfig
from shortlinks.utils import config
from shortlinks.constants import ENV
from shortlinks.exceptions import BadConfigurationError, MissingEnvironmentVariableError


REDIRECT_REDIS = {'host': 'redis.internal', 'port': 6380, 'db': 2}
AGENT_URL = 'http://appconfig-agent:2772'


@pytest.fixture
def document() -> AppConfig:
    return {
        'build': 7,
        'active_backend': 'redis',
        'configs': {
            'redirect_url': {'redis': REDIRECT_REDIS},
            'cleanup_urls': {'redis': {'host': 'redis.internal', 'port': 6380, 'db': 0}},
        },
    }


@pytest.fixture(autouse=True)
def appconfig_env(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv(ENV.App.APP_NAME, 'shortlinks')
    monkeypatch.setenv(ENV.App.APP_ENV, 'Staging')
    monkeypatch.setenv(ENV.AppConfig.APP_ID, 'a1b2c3')
    monkeypatch.setenv(ENV.AppConfig.ENV_ID, 'd4e5f6')
    monkeypatch.setenv(ENV.AppConfig.PROFILE_ID, 'g7h8i9')
    monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    monkeypatch.delenv(ENV.AppConfig.AGENT_URL, raising=False)
    monkeypatch.delenv(ENV.AppConfig.PROFILE_NAME, raising=False)


@pytest.fixture
def appconfigdata(monkeypatch: MonkeyPatch, document: AppConfig) -> MagicMock:
    client = MagicMock()
    client.start_configuration_session.return_value = {'InitialConfigurationToken': 'token-1'}
    client.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(document).encode('utf-8'))}
    monkeypatch.setattr(config.boto3, 'client', MagicMock(return_value=client))
    return client


@pytest.fixture
def agent(monkeypatch: MonkeyPatch, document: AppConfig) -> MagicMock:
    monkeypatch.setenv(ENV.App.AWS_SAM_LOCAL, 'true')
    monkeypatch.setenv(ENV.AppConfig.AGENT_URL, AGENT_URL)
    urlopen = MagicMock(return_value=BytesIO(json.dumps(document).encode('utf-8')))
    monkeypatch.setattr(config.urllib.request, 'urlopen', urlopen)
    return urlopen


# ---------------------------------------------------------------------
# 1. App naming
# ---------------------------------------------------------------------


def test_app_env_is_lowercased() -> None:
    assert config.app_env() == 'staging'


def test_app_env_defaults_to_local(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv(ENV.App.APP_ENV)
    assert config.app_env() == 'local'


def test_app_prefix() -> None:
    assert config.app_prefix() == 'shortlinks:staging'


def test_no_app_prefix_without_app_name(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv(ENV.App.APP_NAME)
    assert config.app_name() is None
    assert config.app_prefix() is None


# ---------------------------------------------------------------------
# 2. Lambda sections
# ---------------------------------------------------------------------


def test_lambda_section_keeps_only_active_backend(document: AppConfig) -> None:
    document['configs']['redirect_url']['dynamodb'] = {'table': 'urls'}
    assert config.lambda_section(document, 'redirect_url') == {'redis': REDIRECT_REDIS}


@pytest.mark.parametrize(
    'broken',
    [
        {},
        {'active_backend': 'redis'},
        {'active_backend': 'redis', 'configs': {}},
        {'active_backend': 'redis', 'configs': {'redirect_url': {'dynamodb': {}}}},
        {'active_backend': 'redis', 'configs': {'redirect_url': None}},
    ],
)
def test_lambda_section_missing(broken: AppConfig) -> None:
    with pytest.raises(BadConfigurationError, match="'redirect_url'"):
        config.lambda_section(broken, 'redirect_url')


# ---------------------------------------------------------------------
# 3. AWS AppConfig
# ---------------------------------------------------------------------


def test_load_config_from_appconfig(appconfigdata: MagicMock) -> None:
    assert config.load_config('redirect_url') == {'redis': REDIRECT_REDIS}

    appconfigdata.start_configuration_session.assert_called_once_with(
        ApplicationIdentifier='a1b2c3',
        EnvironmentIdentifier='d4e5f6',
        ConfigurationProfileIdentifier='g7h8i9',
    )
    appconfigdata.get_latest_configuration.assert_called_once_with(ConfigurationToken='token-1')


def test_load_config_unknown_lambda(appconfigdata: MagicMock) -> None:
    with pytest.raises(BadConfigurationError, match="'shorten_url'"):
        config.load_config('shorten_url')


def test_load_config_propagates_client_error(appconfigdata: MagicMock) -> None:
    appconfigdata.start_configuration_session.side_effect = ClientError(
        {'Error': {'Code': 'ResourceNotFoundException', 'Message': 'Profile not found'}},
        'StartConfigurationSession',
    )

    with pytest.raises(ClientError):
        config.load_config('redirect_url')


@pytest.mark.parametrize('variable', [ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID])
def test_load_config_requires_appconfig_identifiers(monkeypatch: MonkeyPatch, appconfigdata: MagicMock, variable: str) -> None:
    monkeypatch.setenv(variable, '')

    with pytest.raises(MissingEnvironmentVariableError, match=f"'{variable}'"):
        config.load_config('redirect_url')

    appconfigdata.start_configuration_session.assert_not_called()


# ---------------------------------------------------------------------
# 4. Local AppConfig agent
# ---------------------------------------------------------------------


def test_load_config_from_local_agent(agent: MagicMock, appconfigdata: MagicMock) -> None:
    assert config.load_config('redirect_url') == {'redis': REDIRECT_REDIS}

    agent.assert_called_once_with(
        f'{AGENT_URL}/applications/shortlinks/environments/staging/configurations/backend-config',
        timeout=5,
    )
    appconfigdata.start_configuration_session.assert_not_called()


def test_local_agent_honours_profile_name(monkeypatch: MonkeyPatch, agent: MagicMock) -> None:
    monkeypatch.setenv(ENV.AppConfig.PROFILE_NAME, 'redis-profile')

    config.load_config('cleanup_urls')

    assert agent.call_args.args[0].endswith('/configurations/redis-profile')


def test_local_agent_does_not_need_appconfig_identifiers(monkeypatch: MonkeyPatch, agent: MagicMock) -> None:
    monkeypatch.delenv(ENV.AppConfig.APP_ID)
    assert config.load_config('redirect_url') == {'redis': REDIRECT_REDIS}


def test_local_agent_ignored_outside_sam(monkeypatch: MonkeyPatch, agent: MagicMock, appconfigdata: MagicMock) -> None:
    monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL)

    config.load_config('redirect_url')

    agent.assert_not_called()
    appconfigdata.start_configuration_session.assert_called_once()


def test_local_agent_rejects_remote_url(monkeypatch: MonkeyPatch, agent: MagicMock) -> None:
    monkeypatch.setenv(ENV.AppConfig.AGENT_URL, 'http://config.example.com:2772')

    with pytest.raises(BadConfigurationError, match='Bad host'):
        config.load_config('redirect_url')

    agent.assert_not_called()


# ---------------------------------------------------------------------
# 5. Agent URL validation
# ---------------------------------------------------------------------


@pytest.mark.parametrize(
    'url',
    ['http://localhost:2772', 'http://127.0.0.1:2772', AGENT_URL, 'https://host.docker.internal'],
)
def test_valid_agent_url(url: str) -> None:
    assert config.validate_appconfig_agent_url(url) == url


@pytest.mark.parametrize('url', [None, ''])
def test_unset_agent_url(url: str | None) -> None:
    assert config.validate_appconfig_agent_url(url) == ''


@pytest.mark.parametrize(
    'url, reason',
    [
        ('file:///etc/hosts', 'Bad scheme'),
        ('gopher://localhost:2772', 'Bad scheme'),
        ('http://169.254.169.254:2772', 'Bad host'),
        ('http://127.0.0.1:9000', 'Bad port'),
    ],
)
def test_invalid_agent_url(url: str, reason: str) -> None:
    with pytest.raises(BadConfigurationError, match=reason):
        config.validate_appconfig_agent_url(url)
