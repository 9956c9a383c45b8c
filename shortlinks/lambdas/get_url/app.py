import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.exceptions import ServiceError, ValidationError
from shortlinks.services import ShorteningService
from shortlinks.utils import guarantee_500_response
from shortlinks.utils.responses import response_json, response_error, url_record_body
from shortlinks.lambdas.dependencies import get_url_record_dao
from shortlinks.lambdas.get_url.constants import URL_RETRIEVED, GET_URL_REJECTED


logger = logging.getLogger(__name__)

LAMBDA_NAME = 'get_url'


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to look up URL records (GET /url?id=<id>)

    HTTP responses:
        200: URL record
            id, originalUrl, shortCode, expiryDate (ISO 8601), clicks
        400: Missing or non-numeric id
        404: No record with this id
        500: Internal server error
    """
    try:
        # 1- Extract record id from query string
        raw_id = (event.get('queryStringParameters') or {}).get('id')
        if not isinstance(raw_id, str) or not (raw_id.isascii() and raw_id.isdecimal()):
            raise ValidationError('A valid numeric ID is required.')

        # 2- Look up record
        service = ShorteningService(get_url_record_dao(LAMBDA_NAME))
        record = service.get_by_id(int(raw_id))
    except ServiceError as error:
        logger.info(
            'Rejected URL lookup. Responding with %s.',
            error.status_code,
            extra={'event': GET_URL_REJECTED, 'reason': error.message, 'errorCode': error.error_code},
        )
        return response_error(error)

    # 3- Respond
    logger.info('Retrieved URL record %s. Responding with 200.', record.id, extra={'event': URL_RETRIEVED, 'id': record.id})
    return response_json(200, url_record_body(record))
