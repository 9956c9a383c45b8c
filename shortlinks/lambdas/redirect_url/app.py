import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.models import RedirectOutcome
from shortlinks.exceptions import ServiceError
from shortlinks.services import RedirectResolver
from shortlinks.utils import error_page_url, guarantee_error_redirect
from shortlinks.utils.responses import response_302
from shortlinks.lambdas.dependencies import get_url_record_dao
from shortlinks.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
    REDIRECT_FAILED,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)

LAMBDA_NAME = 'redirect_url'

OUTCOME_EVENTS = {
    RedirectOutcome.NOT_FOUND: SHORT_URL_NOT_FOUND,
    RedirectOutcome.EXPIRED: SHORT_URL_EXPIRED,
}


@guarantee_error_redirect
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs (GET /{shortcode})

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve shortcode (lookup, expiry check, click count)
    - Step 3: Redirect client to target URL, or to the error page

    HTTP responses:
        302: Always. Location is the target URL on success, and the generic
             error page when the short URL is missing, unknown, expired, or
             the lookup fails.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'a1b2c3d4'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Redirecting to error page.', extra={'event': MISSING_SHORTCODE})
        return response_302(location=error_page_url(event))

    # 2- Resolve shortcode
    try:
        resolver = RedirectResolver(get_url_record_dao(LAMBDA_NAME))
        result = resolver.resolve(shortcode)
    except ServiceError as error:
        logger.info(
            'Failed to resolve short URL. Redirecting to error page.',
            extra={'shortcode': shortcode, 'event': REDIRECT_FAILED, 'errorCode': error.error_code},
        )
        return response_302(location=error_page_url(event))

    if result.outcome is not RedirectOutcome.FOUND:
        logger.info(
            'Short URL is %s. Redirecting to error page.',
            result.outcome.value.replace('_', ' '),
            extra={'shortcode': shortcode, 'event': OUTCOME_EVENTS[result.outcome]},
        )
        return response_302(location=error_page_url(event))

    # 3- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS, 'clicks': result.record.clicks},
    )
    return response_302(location=result.target)
