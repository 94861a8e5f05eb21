"""Configuration models for the fetch layer and its cache."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from src.fetch.constants import (
    BYTES_PER_MB,
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_CLEANUP_INTERVAL_MS,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_MAX_MEMORY_MB,
    DEFAULT_CACHE_TTL_MS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    MAX_ATTEMPTS_LIMIT,
)


VALID_URL_SCHEMES = ("http://", "https://")


class FetchConfig(BaseModel):
    """Configuration for the TMDb fetch client.

    Supplied once at construction and never re-read mid-flight. The
    credential may be empty here; the client rejects such calls at fetch
    time as a validation error.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: Annotated[str, Field(min_length=1)] = DEFAULT_BASE_URL
    api_key: SecretStr = Field(
        default=SecretStr(""), description="TMDb v3 API key (query credential)"
    )
    max_attempts: Annotated[int, Field(ge=0, le=MAX_ATTEMPTS_LIMIT)] = (
        DEFAULT_MAX_ATTEMPTS
    )
    base_delay_ms: Annotated[int, Field(ge=0, le=60000)] = DEFAULT_BASE_DELAY_MS
    cache_ttl_ms: Annotated[int, Field(ge=0)] = DEFAULT_CACHE_TTL_MS
    timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = (
        DEFAULT_TIMEOUT_SECONDS
    )
    max_response_size_bytes: Annotated[int, Field(ge=1024, le=100 * 1024 * 1024)] = (
        DEFAULT_MAX_RESPONSE_SIZE_BYTES
    )
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    log_requests: bool = Field(
        default=True, description="Emit per-request debug logs"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the base URL is HTTP(S) and has no trailing slash."""
        if not v.startswith(VALID_URL_SCHEMES):
            msg = "base_url must start with http:// or https://"
            raise ValueError(msg)
        return v.rstrip("/")


class CacheConfig(BaseModel):
    """Bounds for the response cache."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_entries: Annotated[int, Field(ge=1)] = DEFAULT_CACHE_MAX_ENTRIES
    max_memory_mb: Annotated[float, Field(gt=0)] = DEFAULT_CACHE_MAX_MEMORY_MB
    default_ttl_ms: Annotated[int, Field(ge=0)] = DEFAULT_CACHE_TTL_MS
    cleanup_interval_ms: int | None = Field(
        default=DEFAULT_CACHE_CLEANUP_INTERVAL_MS,
        gt=0,
        description="Background cleanup period; None disables the thread",
    )

    @property
    def max_memory_bytes(self) -> int:
        """Memory cap in bytes."""
        return int(self.max_memory_mb * BYTES_PER_MB)
