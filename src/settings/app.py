"""Application settings powered by Pydantic BaseSettings."""

from typing import Any, Literal

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.fetch.config import CacheConfig, FetchConfig
from src.fetch.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_CLEANUP_INTERVAL_MS,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_MAX_MEMORY_MB,
    DEFAULT_CACHE_TTL_MS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_TIMEOUT_SECONDS,
    MAX_ATTEMPTS_LIMIT,
)
from src.fetch.errors import ConfigurationError
from src.settings.error_hints import describe_setting_error


LogLevelName = Literal["debug", "info", "warn", "error"]


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    tmdb_api_key: SecretStr = Field(validation_alias="TMDB_API_KEY")
    tmdb_base_url: str = Field(
        default=DEFAULT_BASE_URL, validation_alias="TMDB_BASE_URL"
    )
    tmdb_api_retries: int = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        ge=0,
        le=MAX_ATTEMPTS_LIMIT,
        validation_alias="TMDB_API_RETRIES",
    )
    tmdb_cache_ttl_ms: int = Field(
        default=DEFAULT_CACHE_TTL_MS, ge=0, validation_alias="TMDB_CACHE_TTL_MS"
    )
    tmdb_request_timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        validation_alias="TMDB_REQUEST_TIMEOUT_SECONDS",
    )
    tmdb_rate_limit_requests: int = Field(
        default=0, ge=0, validation_alias="TMDB_RATE_LIMIT_REQUESTS"
    )
    tmdb_rate_limit_window_ms: int = Field(
        default=10_000, gt=0, validation_alias="TMDB_RATE_LIMIT_WINDOW_MS"
    )
    cache_max_entries: int = Field(
        default=DEFAULT_CACHE_MAX_ENTRIES, ge=1, validation_alias="CACHE_MAX_ENTRIES"
    )
    cache_max_memory_mb: float = Field(
        default=DEFAULT_CACHE_MAX_MEMORY_MB,
        gt=0,
        validation_alias="CACHE_MAX_MEMORY_MB",
    )
    cache_cleanup_interval_ms: int = Field(
        default=DEFAULT_CACHE_CLEANUP_INTERVAL_MS,
        gt=0,
        validation_alias="CACHE_CLEANUP_INTERVAL_MS",
    )
    server_name: str = Field(default="movie-mcp-server", validation_alias="SERVER_NAME")
    server_version: str = Field(default="1.0.0", validation_alias="SERVER_VERSION")
    log_level: LogLevelName = Field(default="info", validation_alias="LOG_LEVEL")
    enable_request_logging: bool = Field(
        default=True, validation_alias="ENABLE_REQUEST_LOGGING"
    )
    json_logs: bool = Field(default=True, validation_alias="JSON_LOGS")
    expose_cache_stats: bool = Field(
        default=False, validation_alias="EXPOSE_CACHE_STATS"
    )

    @field_validator("tmdb_api_key")
    @classmethod
    def validate_api_key(cls, v: SecretStr) -> SecretStr:
        """Reject an empty API key."""
        if not v.get_secret_value().strip():
            msg = "TMDb API key is required"
            raise ValueError(msg)
        return v

    @field_validator("tmdb_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the base URL is HTTP(S)."""
        if not v.startswith(("http://", "https://")):
            msg = "TMDb base URL must be a valid URL"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Accept level names in any case."""
        return v.lower() if isinstance(v, str) else v

    def fetch_config(self) -> FetchConfig:
        """Build the fetch client configuration."""
        return FetchConfig(
            base_url=self.tmdb_base_url,
            api_key=self.tmdb_api_key,
            max_attempts=self.tmdb_api_retries,
            cache_ttl_ms=self.tmdb_cache_ttl_ms,
            timeout_seconds=self.tmdb_request_timeout_seconds,
            user_agent=f"{self.server_name}/{self.server_version}",
            log_requests=self.enable_request_logging,
        )

    def cache_config(self) -> CacheConfig:
        """Build the response cache configuration."""
        return CacheConfig(
            max_entries=self.cache_max_entries,
            max_memory_mb=self.cache_max_memory_mb,
            default_ttl_ms=self.tmdb_cache_ttl_ms,
            cleanup_interval_ms=self.cache_cleanup_interval_ms,
        )

    def redacted_summary(self) -> dict[str, str | int | float | bool]:
        """Settings summary that is safe to print or log."""
        return {
            "server_name": self.server_name,
            "server_version": self.server_version,
            "tmdb_base_url": self.tmdb_base_url,
            "tmdb_api_key": "[REDACTED]",
            "tmdb_api_retries": self.tmdb_api_retries,
            "tmdb_cache_ttl_ms": self.tmdb_cache_ttl_ms,
            "tmdb_rate_limit_requests": self.tmdb_rate_limit_requests,
            "cache_max_entries": self.cache_max_entries,
            "cache_max_memory_mb": self.cache_max_memory_mb,
            "log_level": self.log_level,
        }


def _error_location(error: Any) -> str:
    loc = error.get("loc") or ("settings",)
    return ".".join(str(part) for part in loc).upper()


def load_settings(**overrides: Any) -> AppSettings:
    """Load settings from the environment.

    Args:
        **overrides: Values taking precedence over the environment
            (keyed by environment variable name).

    Returns:
        Validated settings.

    Raises:
        ConfigurationError: If any variable is missing or invalid. The
            message lists every failing variable with a hint.
    """
    try:
        return AppSettings(**overrides)
    except ValidationError as e:
        lines = [
            describe_setting_error(
                variable=_error_location(error),
                message=error["msg"],
                error_type=error["type"],
            )
            for error in e.errors()
        ]
        msg = "Invalid configuration:\n  - " + "\n  - ".join(lines)
        raise ConfigurationError(msg) from None
