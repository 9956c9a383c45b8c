class ShortLinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shortlinks_error'


class ServiceError(ShortLinksError):
    """Base exception for errors surfaced to API clients.

    Each subclass maps onto one HTTP status code.
    """

    error_code = 'service:service_error'
    status_code = 500
    default_message = 'Internal Server Error'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(ServiceError):
    """Raised when client input is missing or malformed."""

    error_code = 'service:validation_error'
    status_code = 400
    default_message = 'Bad Request'


class ConflictError(ServiceError):
    """Raised when a short code is already taken by a different record."""

    error_code = 'service:conflict_error'
    status_code = 400
    default_message = 'Short code is already in use'


class NotFoundError(ServiceError):
    """Raised when a URL record is unknown."""

    error_code = 'service:not_found_error'
    status_code = 404
    default_message = 'URL not found'


class InternalError(ServiceError):
    """Raised on data store or connectivity faults."""

    error_code = 'service:internal_error'
    status_code = 500


class ConfigurationError(ShortLinksError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
