"""TMDb HTTP client with caching, retries, and failure classification."""

import hashlib
import time
import uuid
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog

from src.fetch.cache import ResponseCache
from src.fetch.config import FetchConfig
from src.fetch.constants import (
    API_KEY_PARAM,
    COMPONENT_FETCH,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)
from src.fetch.errors import (
    FetchErrorClass,
    FetchValidationError,
    ResponseParseError,
    ResponseSizeExceededError,
    TmdbApiError,
    TransportError,
    is_retryable_error,
)
from src.fetch.rate_limiter import RateLimiterProtocol
from src.fetch.redact import redact_headers, redact_secret
from src.fetch.retry import RetryPredicate, Sleeper, retry_call


logger = structlog.get_logger()

RATE_LIMIT_KEY = "tmdb"


def build_request_url(
    base_url: str,
    endpoint: str,
    params: Mapping[str, str | int | None],
    api_key: str,
) -> str:
    """Build the canonical request URL.

    The credential is sent as a query parameter. Parameters whose value is
    None or empty are omitted, and the rest are sorted by name so that the
    same parameter map always yields the same URL.

    Args:
        base_url: API base URL without trailing slash.
        endpoint: Path starting with '/'.
        params: Query parameters.
        api_key: Access credential.

    Returns:
        Fully resolved URL.
    """
    query: dict[str, str] = {API_KEY_PARAM: api_key}
    for key, value in params.items():
        if value is None or value == "":
            continue
        query[key] = str(value)
    return f"{base_url}{endpoint}?{urlencode(sorted(query.items()))}"


def derive_cache_key(url: str) -> str:
    """Derive the cache key for a canonical request URL.

    The key is a digest, so it can be logged without exposing the
    credential embedded in the URL.

    Args:
        url: Canonical request URL.

    Returns:
        SHA-256 hex digest of the URL.
    """
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


class TmdbClient:
    """Cached, retrying GET client for the TMDb API.

    Provides:
    - Fail-fast validation of credential and endpoint
    - Response caching keyed on the full canonical request
    - Retries with exponential backoff for 5xx and 429 responses
    - Credential redaction in every log statement
    """

    def __init__(
        self,
        config: FetchConfig,
        cache: ResponseCache[Any],
        http_client: httpx.Client | None = None,
        rate_limiter: RateLimiterProtocol | None = None,
        is_retryable: RetryPredicate = is_retryable_error,
        sleep: Sleeper = time.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            config: Fetch configuration.
            cache: Shared response cache.
            http_client: HTTP transport; one is created (and owned) if omitted.
            rate_limiter: Optional outbound throttle applied per attempt.
            is_retryable: Failure classification policy.
            sleep: Sleep function used for backoff, injectable for tests.
        """
        self._config = config
        self._cache = cache
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(
            timeout=config.timeout_seconds,
            follow_redirects=True,
        )
        self._rate_limiter = rate_limiter
        self._is_retryable = is_retryable
        self._sleep = sleep
        self._api_key = config.api_key.get_secret_value()
        self._log = logger.bind(component=COMPONENT_FETCH)

    @property
    def cache(self) -> ResponseCache[Any]:
        """Get the shared response cache."""
        return self._cache

    def fetch(
        self,
        endpoint: str,
        params: Mapping[str, str | int | None] | None = None,
    ) -> Any:
        """Fetch a TMDb endpoint, serving from cache when possible.

        Args:
            endpoint: API path starting with '/', e.g. '/search/movie'.
            params: Query parameters; empty and None values are dropped.

        Returns:
            Parsed JSON payload.

        Raises:
            FetchValidationError: Missing credential or malformed endpoint.
            TmdbApiError: Non-2xx response after retries.
            TransportError: Timeout, connection or size failure.
            ResponseParseError: Response body was not JSON.
        """
        if not self._api_key:
            msg = "TMDb API key is not set. Please add TMDB_API_KEY to your environment."
            raise FetchValidationError(msg, field="api_key")
        if not endpoint.startswith("/"):
            msg = "Endpoint must start with /"
            raise FetchValidationError(msg, field="endpoint")

        params = params or {}
        url = build_request_url(self._config.base_url, endpoint, params, self._api_key)
        cache_key = derive_cache_key(url)

        cached = self._cache.get(cache_key)
        if cached is not None:
            if self._config.log_requests:
                self._log.debug(
                    "tmdb_cache_hit", endpoint=endpoint, cache_key=cache_key
                )
            return cached

        request_id = uuid.uuid4().hex[:8]
        log = self._log.bind(request_id=request_id, endpoint=endpoint)
        if self._config.log_requests:
            log.debug(
                "tmdb_request_started",
                params=sorted(params),
                url=self._redact(url),
            )

        try:
            data = retry_call(
                lambda attempt: self._execute_single(url, endpoint, attempt, log),
                self._is_retryable,
                max_attempts=self._config.max_attempts,
                base_delay_ms=self._config.base_delay_ms,
                sleep=self._sleep,
                log=log,
            )
        except Exception as e:
            log.error(
                "tmdb_request_failed",
                max_attempts=self._config.max_attempts,
                error=self._redact(str(e)),
                error_type=type(e).__name__,
            )
            raise

        self._cache.set(cache_key, data, self._config.cache_ttl_ms)
        return data

    def close(self) -> None:
        """Close the HTTP transport if this client created it."""
        if self._owns_http_client:
            self._http.close()

    def __enter__(self) -> "TmdbClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _redact(self, text: str) -> str:
        return redact_secret(text, self._api_key)

    def _build_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._config.user_agent,
            "Accept": "application/json",
        }

    def _execute_single(
        self,
        url: str,
        endpoint: str,
        attempt: int,
        log: structlog.stdlib.BoundLogger,
    ) -> Any:
        """Execute one HTTP attempt.

        Args:
            url: Canonical request URL.
            endpoint: API endpoint path (for error reporting).
            attempt: 1-based attempt number.
            log: Bound logger.

        Returns:
            Parsed JSON payload.
        """
        if self._rate_limiter is not None:
            self._rate_limiter.acquire(RATE_LIMIT_KEY)

        headers = self._build_headers()
        start_time_ns = time.perf_counter_ns()

        try:
            response = self._http.get(
                url, headers=headers, timeout=self._config.timeout_seconds
            )
        except httpx.TimeoutException as e:
            msg = self._redact(f"Request timed out: {e}")
            raise TransportError(
                FetchErrorClass.NETWORK_TIMEOUT, msg, endpoint=endpoint
            ) from None
        except httpx.HTTPError as e:
            msg = self._redact(f"Connection failed: {e}")
            raise TransportError(
                FetchErrorClass.CONNECTION_ERROR, msg, endpoint=endpoint
            ) from None

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        if self._config.log_requests:
            log.debug(
                "tmdb_response_received",
                attempt=attempt,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
                headers=redact_headers(headers),
            )

        body = response.content
        if len(body) > self._config.max_response_size_bytes:
            msg = (
                f"Response size {len(body)} exceeds limit "
                f"{self._config.max_response_size_bytes}"
            )
            raise ResponseSizeExceededError(msg, endpoint=endpoint)

        if not HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
            error_text = self._redact(response.text)
            msg = f"TMDb API error: {response.reason_phrase} - {error_text}"
            raise TmdbApiError(
                msg,
                status_code=response.status_code,
                endpoint=endpoint,
                body=error_text,
            )

        try:
            data = response.json()
        except ValueError as e:
            msg = f"Invalid JSON from {endpoint}: {e}"
            raise ResponseParseError(msg, endpoint=endpoint) from None

        if self._config.log_requests:
            log.debug(
                "tmdb_request_succeeded",
                attempt=attempt,
                data_keys=sorted(data) if isinstance(data, dict) else None,
            )
        return data
