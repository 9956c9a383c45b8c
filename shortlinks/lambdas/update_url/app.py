import json
import logging
from datetime import datetime

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.exceptions import ServiceError, ValidationError
from shortlinks.services import ShorteningService
from shortlinks.utils import guarantee_500_response
from shortlinks.utils.responses import response_json, response_error, url_record_body
from shortlinks.lambdas.dependencies import get_url_record_dao
from shortlinks.lambdas.update_url.constants import URL_UPDATED, UPDATE_URL_REJECTED, UPDATE_SUCCESS_MESSAGE


logger = logging.getLogger(__name__)

LAMBDA_NAME = 'update_url'


def _parse_record_id(value) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.isascii() and value.isdecimal():
        return int(value)
    raise ValidationError('A valid numeric ID is required.')


def _parse_expiry_date(value) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError('expiryDate must be a valid ISO 8601 timestamp.')
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError('expiryDate must be a valid ISO 8601 timestamp.') from e


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to update URL records (PUT /url)

    Request body (every field but id is optional):
        {"id": 1, "originalUrl": "...", "shortCode": "...", "expiryDate": "<ISO 8601>"}

    HTTP responses:
        200: Record updated
            message: 'The URL was successfully updated.'
            updatedUrl: id, originalUrl, shortCode, expiryDate, clicks
        400: Invalid JSON, bad id, malformed field or short code already in use
        404: No record with this id
        500: Internal server error
    """
    try:
        # 1- Extract fields from request body
        try:
            request_body = json.loads(event.get('body') or '{}')
        except json.JSONDecodeError as e:
            raise ValidationError('Invalid JSON body.') from e
        if not isinstance(request_body, dict):
            raise ValidationError('Invalid JSON body.')

        record_id = _parse_record_id(request_body.get('id'))
        expires_at = _parse_expiry_date(request_body.get('expiryDate'))

        # 2- Update record
        service = ShorteningService(get_url_record_dao(LAMBDA_NAME))
        record = service.update(
            record_id,
            original_url=request_body.get('originalUrl'),
            shortcode=request_body.get('shortCode'),
            expires_at=expires_at,
        )
    except ServiceError as error:
        logger.info(
            'Rejected URL update. Responding with %s.',
            error.status_code,
            extra={'event': UPDATE_URL_REJECTED, 'reason': error.message, 'errorCode': error.error_code},
        )
        return response_error(error)

    # 3- Respond
    logger.info('Updated URL record %s. Responding with 200.', record.id, extra={'event': URL_UPDATED, 'id': record.id})
    return response_json(200, {'message': UPDATE_SUCCESS_MESSAGE, 'updatedUrl': url_record_body(record)})
