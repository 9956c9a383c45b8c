import logging
from datetime import datetime, UTC

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.exceptions import ServiceError
from shortlinks.services import ExpirySweeper
from shortlinks.utils import guarantee_500_response
from shortlinks.utils.responses import response_json
from shortlinks.lambdas.dependencies import get_url_record_dao
from shortlinks.lambdas.cleanup_urls.constants import CLEANUP_SUCCESS, CLEANUP_FAILED, CLEANUP_FAILED_MESSAGE


logger = logging.getLogger(__name__)

LAMBDA_NAME = 'cleanup_urls'


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Delete expired URL records (DELETE /cleanup or an EventBridge schedule)

    The event payload is ignored, so the same handler serves both triggers.

    HTTP responses:
        200: Sweep finished
            message: '<n> expired URLs deleted.'
            deletedCount: n
            timestamp: ISO 8601 cut-off moment
            status: 'success'
        500: Sweep failed
            message: 'Failed to delete expired URLs.'
            timestamp: ISO 8601 moment of failure
            status: 'error'
    """
    try:
        sweeper = ExpirySweeper(get_url_record_dao(LAMBDA_NAME))
        result = sweeper.sweep()
    except ServiceError as error:
        logger.error(
            'Failed to delete expired URL records. Responding with 500.',
            extra={'event': CLEANUP_FAILED, 'errorCode': error.error_code},
        )
        return response_json(
            500,
            {
                'message': CLEANUP_FAILED_MESSAGE,
                'timestamp': datetime.now(UTC).isoformat(),
                'status': 'error',
            },
        )

    logger.info(
        'Deleted %s expired URL records. Responding with 200.',
        result.deleted_count,
        extra={'event': CLEANUP_SUCCESS, 'deletedCount': result.deleted_count},
    )
    return response_json(
        200,
        {
            'message': f'{result.deleted_count} expired URLs deleted.',
            'deletedCount': result.deleted_count,
            'timestamp': result.timestamp.isoformat(),
            'status': 'success',
        },
    )
