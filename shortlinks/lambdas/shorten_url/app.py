import json
import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.exceptions import ServiceError, ValidationError
from shortlinks.services import ShorteningService
from shortlinks.utils import get_short_url, guarantee_500_response
from shortlinks.utils.responses import response_json, response_error
from shortlinks.lambdas.dependencies import get_url_record_dao
from shortlinks.lambdas.shorten_url.constants import SHORT_URL_CREATED, SHORT_URL_EXISTS, SHORTEN_REJECTED


logger = logging.getLogger(__name__)

LAMBDA_NAME = 'shorten_url'


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs (POST /shorten)

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract original URL and optional custom alias from request body
    - Step 2: Shorten via ShorteningService (reuses existing records for the same URL)
    - Step 3: Respond with 201 (new record) or 200 (existing record)

    HTTP responses:
        201: New short URL created
            id: record id
            shortCode: short code
            shortUrl: full short URL
        200: Original URL was already shortened (same body as 201)
        400: Bad client request
            message: invalid JSON body, missing url, malformed or conflicting alias
        500: Internal server error

    Example:
        >>> event = {'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])
        {'id': 1, 'shortCode': 'a1b2c3d4', 'shortUrl': 'http://localhost:3000/a1b2c3d4'}
    """
    try:
        # 1- Extract original URL and alias from request body
        try:
            request_body = json.loads(event.get('body') or '{}')
        except json.JSONDecodeError as e:
            raise ValidationError('Invalid JSON body.') from e
        if not isinstance(request_body, dict):
            raise ValidationError('Invalid JSON body.')

        # 2- Shorten
        service = ShorteningService(get_url_record_dao(LAMBDA_NAME))
        result = service.shorten(request_body.get('url'), request_body.get('customShortUrl'))
    except ServiceError as error:
        logger.info(
            'Rejected shorten request. Responding with %s.',
            error.status_code,
            extra={'event': SHORTEN_REJECTED, 'reason': error.message, 'errorCode': error.error_code},
        )
        return response_error(error)

    # 3- Respond
    record = result.record
    status_code = 201 if result.created else 200
    logger.info(
        'Short URL %s -> %s. Responding with %s.',
        record.shortcode,
        record.original_url,
        status_code,
        extra={'event': SHORT_URL_CREATED if result.created else SHORT_URL_EXISTS, 'id': record.id, 'shortcode': record.shortcode},
    )
    return response_json(
        status_code,
        {
            'id': record.id,
            'shortCode': record.shortcode,
            'shortUrl': get_short_url(record.shortcode, event),
        },
    )
