"""Unit tests for failure classification."""

import pytest

from src.fetch.errors import (
    FetchErrorClass,
    FetchValidationError,
    ResponseParseError,
    ResponseSizeExceededError,
    TmdbApiError,
    TransportError,
    classify_status,
    is_retryable_error,
)


class StatusError(Exception):
    """Foreign exception type that happens to carry a status code."""

    def __init__(self, status_code: object) -> None:
        super().__init__("status error")
        self.status_code = status_code


class TestIsRetryableError:
    """Tests for the retry predicate."""

    @pytest.mark.unit
    @pytest.mark.parametrize("status_code", [500, 502, 503, 504, 599, 429])
    def test_server_errors_and_rate_limit_are_retryable(self, status_code: int) -> None:
        """Test that 5xx and 429 responses are transient."""
        error = TmdbApiError("err", status_code=status_code, endpoint="/x")

        assert is_retryable_error(error) is True

    @pytest.mark.unit
    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422])
    def test_client_errors_are_permanent(self, status_code: int) -> None:
        """Test that other 4xx responses are not retried."""
        error = TmdbApiError("err", status_code=status_code, endpoint="/x")

        assert is_retryable_error(error) is False

    @pytest.mark.unit
    def test_errors_without_status_are_permanent(self) -> None:
        """Test that timeouts, connection failures and plain errors are not retried."""
        errors: list[Exception] = [
            TransportError(FetchErrorClass.NETWORK_TIMEOUT, "timed out"),
            TransportError(FetchErrorClass.CONNECTION_ERROR, "refused"),
            ResponseSizeExceededError("too big"),
            ResponseParseError("bad json"),
            FetchValidationError("missing key"),
            RuntimeError("boom"),
        ]

        for error in errors:
            assert is_retryable_error(error) is False

    @pytest.mark.unit
    def test_any_exception_with_status_code_is_classified(self) -> None:
        """Test that classification reads the status of foreign errors too."""
        assert is_retryable_error(StatusError(503)) is True
        assert is_retryable_error(StatusError(404)) is False

    @pytest.mark.unit
    def test_non_integer_status_is_ignored(self) -> None:
        """Test that malformed status attributes count as no status."""
        assert is_retryable_error(StatusError("503")) is False
        assert is_retryable_error(StatusError(None)) is False
        assert is_retryable_error(StatusError(True)) is False


class TestClassifyStatus:
    """Tests for status classification."""

    @pytest.mark.unit
    def test_classes(self) -> None:
        """Test mapping from status code to error class."""
        assert classify_status(429) == FetchErrorClass.RATE_LIMITED
        assert classify_status(503) == FetchErrorClass.HTTP_5XX
        assert classify_status(404) == FetchErrorClass.HTTP_4XX
        assert classify_status(302) == FetchErrorClass.UNKNOWN

    @pytest.mark.unit
    def test_api_error_carries_class_and_status(self) -> None:
        """Test that API errors expose structured fields."""
        error = TmdbApiError(
            "TMDb API error: Not Found - missing",
            status_code=404,
            endpoint="/movie/1",
            body="missing",
        )

        assert error.to_dict() == {
            "error_class": "HTTP_4XX",
            "message": "TMDb API error: Not Found - missing",
            "status_code": 404,
            "endpoint": "/movie/1",
        }
        assert error.body == "missing"
