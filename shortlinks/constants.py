from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Short URL expiry window (3 days in seconds)
    THREE_DAYS = 259_200  # 60 * 60 * 24 * 3


class Shortcode:
    """Short code generation and validation defaults."""

    RANDOM_BYTES = 4  # 4 random bytes -> 8 hex characters
    MAX_ATTEMPTS = 10  # Give up regenerating colliding codes after this many tries
    MAX_LENGTH = 64  # Longest accepted custom alias
    # Route names sharing the /{shortcode} path space
    RESERVED = frozenset({'shorten', 'url', 'cleanup', 'errorPage'})


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        ERROR_PAGE_URL = 'ERROR_PAGE_URL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Path of the generic error page, relative to the public base URL
ERROR_PAGE_PATH = '/errorPage'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
