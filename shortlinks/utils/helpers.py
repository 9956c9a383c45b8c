"""Helpers shared by the Lambda handlers

URL building (the public base URL, short URLs and the error page), expiry
arithmetic, environment checks and the last-resort exception guards that
wrap every handler.

The public base URL depends on how API Gateway is reached:

    >>> base_url({'requestContext': {'domainName': 'abc123.execute-api.us-east-1.amazonaws.com', 'stage': 'Prod'}})
    'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'
    >>> base_url({'requestContext': {'domainName': 'sho.rt', 'stage': 'Prod'}})
    'https://sho.rt'
    >>> base_url({})
    'http://localhost:3000'
"""

import os
import logging
import functools
from datetime import datetime, timedelta, UTC
from collections.abc import Callable

from shortlinks.types import LambdaEvent, LambdaResponse
from shortlinks.constants import ENV, TTL, ERROR_PAGE_PATH, UNKNOWN_INTERNAL_SERVER_ERROR
from shortlinks.exceptions import MissingEnvironmentVariableError
from shortlinks.utils.runtime import running_locally
from shortlinks.utils.responses import response_json, response_302


logger = logging.getLogger(__name__)

LOCAL_HOSTS = ('localhost', '127.0.0.1')
DEFAULT_BASE_URL = 'http://localhost:3000'


def base_url(event: LambdaEvent) -> str:
    """Return the public base URL the request came in through.

    `sam local start-api` is served over plain HTTP. Custom domains map the
    stage away, so only execute-api domains keep the stage in the path.
    """
    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName') or ''
    if not domain:
        return DEFAULT_BASE_URL

    hostname = domain.split(':')[0]
    if hostname in LOCAL_HOSTS:
        return f'http://{domain}'
    if 'execute-api' in hostname:
        return f'https://{domain}/{request_context.get("stage", "")}'
    return f'https://{domain}'


def get_short_url(shortcode: str, event: LambdaEvent) -> str:
    """Return the full short URL of `shortcode`, e.g. 'https://sho.rt/a1b2c3d4'."""
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def error_page_url(event: LambdaEvent) -> str:
    """Return the generic error destination for failed redirects.

    Uses ERROR_PAGE_URL when set, otherwise '<base url>/errorPage'.
    """
    return os.environ.get(ENV.App.ERROR_PAGE_URL) or f'{base_url(event).rstrip("/")}{ERROR_PAGE_PATH}'


def expiry_from(created_at: datetime | None = None) -> datetime:
    """Compute the expiry moment of a short URL.

    Args:
        created_at (datetime | None):
            Creation moment. Defaults to the current UTC time.

    Returns:
        datetime: `created_at` + 3 days.

    Example:
        >>> expiry_from(datetime(2025, 10, 15, tzinfo=UTC))
        datetime.datetime(2025, 10, 18, 0, 0, tzinfo=datetime.timezone.utc)
    """
    created_at = created_at or datetime.now(UTC)
    return created_at + timedelta(seconds=TTL.THREE_DAYS)


def require_environment(*names: str) -> Callable:
    """Decorator: fail with MissingEnvironmentVariableError unless every variable in `names` is set and non-empty.

    The check runs on each call, not at decoration time.

        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def load():
        ...     ...
        >>> load()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = ', '.join(f"'{name}'" for name in names if not os.environ.get(name))
            if missing:
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def _guarantee_response(fallback: Callable[[LambdaEvent], LambdaResponse]) -> Callable:
    def decorator(handler: Callable) -> Callable:
        @functools.wraps(handler)
        def wrapper(event: LambdaEvent, context, *args, **kwargs) -> LambdaResponse:
            try:
                return handler(event, context, *args, **kwargs)
            except Exception:
                if running_locally():
                    raise
                logger.exception(
                    'Unhandled exception in lambda handler.',
                    extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR, 'handler': handler.__module__},
                )
                return fallback(event)

        return wrapper

    return decorator


guarantee_500_response = _guarantee_response(
    lambda event: response_json(500, {'message': 'Internal Server Error', 'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR})
)
guarantee_500_response.__doc__ = """Decorator: respond with 500 when a lambda handler raises unexpectedly.

Re-raises the original exception when running locally.
"""

guarantee_error_redirect = _guarantee_response(lambda event: response_302(location=error_page_url(event)))
guarantee_error_redirect.__doc__ = """Decorator: redirect to the error page when a lambda handler raises unexpectedly.

Re-raises the original exception when running locally.
"""
