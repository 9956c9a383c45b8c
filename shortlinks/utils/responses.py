"""API Gateway (Lambda Proxy) response builders

Every JSON response carries the same Content-Type and CORS headers. Error
responses share one body shape:

    {"message": "<human readable message>", "errorCode": "<error code>"}
"""

import json

from shortlinks.types import HttpHeaders, JsonBody, LambdaResponse
from shortlinks.models import UrlRecordModel
from shortlinks.exceptions import ServiceError


CORS_HEADERS: HttpHeaders = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET,PUT,DELETE',
}


def response_json(status_code: int, body: JsonBody) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': 'application/json',
            **CORS_HEADERS,
        },
        'body': json.dumps(body),
    }


def response_error(error: ServiceError) -> LambdaResponse:
    body = {'message': error.message, 'errorCode': error.error_code}
    return response_json(error.status_code, body)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {
            'Location': location,
            **CORS_HEADERS,
        },
        'body': json.dumps({}),  # no body needed for redirects
    }


def url_record_body(record: UrlRecordModel) -> JsonBody:
    return {
        'id': record.id,
        'originalUrl': record.original_url,
        'shortCode': record.shortcode,
        'expiryDate': record.expires_at.isoformat(),
        'clicks': record.clicks,
    }
