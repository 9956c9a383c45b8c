from typing import Any

from botocore.client import BaseClient


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type LambdaConfiguration = dict[str, Any]
type AppConfig = dict[str, Any]

# Type aliases for HTTP payloads
type HttpHeaders = dict[str, str]
type JsonBody = dict[str, Any]

# Type aliases for Redis payloads
type RedisConnectionInfo = dict[str, Any]
type UrlRecordHash = dict[str, str | int]

# Type aliases for boto3 clients
type AppConfigDataClient = BaseClient
