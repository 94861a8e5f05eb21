"""Resilient cached fetch layer for the TMDb API.

This module provides:
- A bounded TTL cache with LRU eviction and memory accounting
- A retry executor with exponential backoff
- Transient/permanent failure classification
- Credential redaction for logging
- A TMDb client composing all of the above
"""

from src.fetch.cache import CacheStats, MemoryUsage, ResponseCache, estimate_size
from src.fetch.client import TmdbClient, build_request_url, derive_cache_key
from src.fetch.config import CacheConfig, FetchConfig
from src.fetch.errors import (
    ConfigurationError,
    FetchErrorClass,
    FetchFailure,
    FetchValidationError,
    ResponseParseError,
    ResponseSizeExceededError,
    TmdbApiError,
    TransportError,
    is_retryable_error,
)
from src.fetch.rate_limiter import SlidingWindowRateLimiter
from src.fetch.redact import redact_headers, redact_url_credentials, redact_value
from src.fetch.retry import RetryAttempt, backoff_delay_ms, retry_call


__all__ = [
    # Client
    "TmdbClient",
    "build_request_url",
    "derive_cache_key",
    # Cache
    "ResponseCache",
    "CacheStats",
    "MemoryUsage",
    "estimate_size",
    # Config
    "FetchConfig",
    "CacheConfig",
    # Errors
    "FetchFailure",
    "FetchErrorClass",
    "FetchValidationError",
    "TmdbApiError",
    "TransportError",
    "ResponseSizeExceededError",
    "ResponseParseError",
    "ConfigurationError",
    "is_retryable_error",
    # Retry
    "retry_call",
    "backoff_delay_ms",
    "RetryAttempt",
    # Rate limiting
    "SlidingWindowRateLimiter",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
    "redact_value",
]
