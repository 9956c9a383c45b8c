"""Configuration loading for the Lambda handlers

Runtime configuration (Redis endpoints, mostly) lives in one AWS AppConfig
JSON document per environment. The document carries a section per Lambda
and per backend; only the active backend's section is handed to a Lambda:

    {
        "build": 7,
        "active_backend": "redis",
        "configs": {
            "shorten_url":  {"redis": {"host": "...", "port": 6379, "db": 0}},
            "redirect_url": {"redis": {...}},
            "get_url":      {"redis": {...}},
            "update_url":   {"redis": {...}},
            "cleanup_urls": {"redis": {...}}
        }
    }

    >>> load_config('redirect_url')
    {'redis': {'host': '...', 'port': 6379, 'db': 0}}

Under `sam local`, the document is read from a local AppConfig agent
(APPCONFIG_AGENT_URL) instead of the AppConfig Data API.
"""

import os
import json
import functools
import logging
import urllib.parse
import urllib.request
from collections.abc import Callable

import boto3

from shortlinks.types import AppConfig, AppConfigDataClient, LambdaConfiguration
from shortlinks.constants import ENV
from shortlinks.exceptions import BadConfigurationError
from shortlinks.utils.helpers import require_environment
from shortlinks.utils.runtime import running_locally


logger = logging.getLogger(__name__)

LOCAL_AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'})
LOCAL_AGENT_PORTS = frozenset({2772, None})
DEFAULT_PROFILE_NAME = 'backend-config'


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return the Redis key prefix '<APP_NAME>:<APP_ENV>', or None without APP_NAME.

    Example:
        >>> os.environ['APP_NAME'] = 'shortlinks'
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_prefix()
        'shortlinks:dev'
    """
    name = app_name()
    return None if name is None else f'{name}:{app_env()}'


def lambda_section(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    """Pick the active backend's section for `lambda_name` out of an AppConfig document.

    Raises:
        BadConfigurationError: the document has no such section.
    """
    try:
        backend = document['active_backend']
        return {backend: document['configs'][lambda_name][backend]}
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"AppConfig document has no active backend section for '{lambda_name}'.") from e


def validate_appconfig_agent_url(url: str | None) -> str:
    """Return `url` if it points at a local AppConfig agent, '' if unset.

    Raises:
        BadConfigurationError: on a non-HTTP scheme, a non-local host or an unexpected port.
    """
    if not url:
        return ''
    components = urllib.parse.urlparse(url)
    if components.scheme not in {'http', 'https'}:
        raise BadConfigurationError(f'Bad scheme {url}')
    if components.hostname not in LOCAL_AGENT_HOSTS:
        raise BadConfigurationError(f'Bad host {url}')
    if components.port not in LOCAL_AGENT_PORTS:
        raise BadConfigurationError(f'Bad port {url}')
    return url


def _fetch_from_agent(agent_url: str) -> AppConfig:
    profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, DEFAULT_PROFILE_NAME)
    url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'
    logger.debug('Fetching AppConfig document from local agent.', extra={'agentUrl': url})
    with urllib.request.urlopen(url, timeout=5) as response:  # noqa: S310
        return json.load(response)


def _fetch_from_appconfig() -> AppConfig:
    client: AppConfigDataClient = boto3.client('appconfigdata')
    session = client.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )
    response = client.get_latest_configuration(ConfigurationToken=session['InitialConfigurationToken'])
    return json.loads(response['Configuration'].read().decode('utf-8'))


def _sam_load_local_appconfig(func: Callable) -> Callable:
    """Decorator: read the AppConfig document from a local agent when running under SAM.

    Falls through to the wrapped loader outside SAM, or when
    APPCONFIG_AGENT_URL is unset.
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = validate_appconfig_agent_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        document = _fetch_from_agent(agent_url)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return lambda_section(document, lambda_name)

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load the configuration section of `lambda_name` from AWS AppConfig.

    Requires APPCONFIG_APP_ID, APPCONFIG_ENV_ID and APPCONFIG_PROFILE_ID.

    Returns:
        dict: {<active backend>: <backend configuration of this Lambda>}

    Raises:
        MissingEnvironmentVariableError: an AppConfig identifier is not set.
        BadConfigurationError: the document has no section for this Lambda.
        botocore.exceptions.ClientError: AppConfig rejected the request.
    """
    document = _fetch_from_appconfig()
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return lambda_section(document, lambda_name)
