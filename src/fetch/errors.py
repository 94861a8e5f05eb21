"""Error taxonomy and retry classification for the fetch layer."""

from enum import Enum

from src.fetch.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)


class FetchErrorClass(str, Enum):
    """Classification of fetch errors for logging and retry decisions.

    - VALIDATION: Bad input to the fetch call itself (never retried)
    - HTTP_4XX: Non-retryable 4xx client error (except 429)
    - HTTP_5XX: Retryable 5xx server error
    - RATE_LIMITED: 429 Too Many Requests
    - NETWORK_TIMEOUT: Request timed out
    - CONNECTION_ERROR: Could not establish connection
    - RESPONSE_SIZE_EXCEEDED: Response exceeded max size limit
    - PARSE_ERROR: Response body was not valid JSON
    - UNKNOWN: Unclassified error
    """

    VALIDATION = "VALIDATION"
    HTTP_4XX = "HTTP_4XX"
    HTTP_5XX = "HTTP_5XX"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    RESPONSE_SIZE_EXCEEDED = "RESPONSE_SIZE_EXCEEDED"
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN = "UNKNOWN"


class FetchFailure(Exception):
    """Base exception for fetch layer failures.

    Provides structured error information for logging and for tool
    handlers that turn failures into user-facing messages.
    """

    def __init__(
        self,
        error_class: FetchErrorClass,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        """Initialize the fetch failure.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            status_code: HTTP status code if one was obtained.
            endpoint: API endpoint path that failed.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.status_code = status_code
        self.endpoint = endpoint

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "status_code": self.status_code,
            "endpoint": self.endpoint,
        }


class FetchValidationError(FetchFailure):
    """Invalid usage of the fetch client (missing credential, bad endpoint).

    Also raised by tool handlers when their input fails validation.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize the validation error.

        Args:
            message: Human-readable error message.
            field: Name of the offending field, if any.
        """
        super().__init__(FetchErrorClass.VALIDATION, message)
        self.field = field


class TmdbApiError(FetchFailure):
    """Non-2xx response from the TMDb API."""

    def __init__(
        self,
        message: str,
        status_code: int,
        endpoint: str,
        body: str = "",
    ) -> None:
        """Initialize the API error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code of the response.
            endpoint: API endpoint path that failed.
            body: Response body text.
        """
        super().__init__(
            classify_status(status_code),
            message,
            status_code=status_code,
            endpoint=endpoint,
        )
        self.body = body


class TransportError(FetchFailure):
    """Failure below HTTP: timeouts, refused connections, TLS problems."""


class ResponseSizeExceededError(TransportError):
    """Raised when response size exceeds the configured limit."""

    def __init__(self, message: str, endpoint: str | None = None) -> None:
        super().__init__(
            FetchErrorClass.RESPONSE_SIZE_EXCEEDED, message, endpoint=endpoint
        )


class ResponseParseError(FetchFailure):
    """Raised when a 2xx response body cannot be decoded as JSON."""

    def __init__(self, message: str, endpoint: str | None = None) -> None:
        super().__init__(FetchErrorClass.PARSE_ERROR, message, endpoint=endpoint)


class ConfigurationError(Exception):
    """Raised when the process configuration is missing or invalid."""


def classify_status(status_code: int) -> FetchErrorClass:
    """Classify a non-2xx HTTP status code.

    Args:
        status_code: HTTP status code.

    Returns:
        Error class for the status.
    """
    if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
        return FetchErrorClass.RATE_LIMITED
    if status_code >= HTTP_STATUS_SERVER_ERROR_MIN:
        return FetchErrorClass.HTTP_5XX
    if status_code >= HTTP_STATUS_BAD_REQUEST:
        return FetchErrorClass.HTTP_4XX
    return FetchErrorClass.UNKNOWN


def is_retryable_error(error: BaseException) -> bool:
    """Decide whether a failure is transient and worth another attempt.

    An error is retryable iff it carries an HTTP status that is a server
    fault (>= 500) or rate limiting (429). Everything without a status,
    including timeouts and connection errors, is not retried.

    Args:
        error: The failure raised by an attempt.

    Returns:
        True if the error should be retried.
    """
    status_code = getattr(error, "status_code", None)
    if not isinstance(status_code, int) or isinstance(status_code, bool):
        return False
    return (
        status_code >= HTTP_STATUS_SERVER_ERROR_MIN
        or status_code == HTTP_STATUS_TOO_MANY_REQUESTS
    )
