"""Observability module for structured, redacting logs."""

from src.observability.logging import (
    build_processors,
    configure_logging,
    parse_log_level,
    redact_event,
)


__all__ = [
    "build_processors",
    "configure_logging",
    "parse_log_level",
    "redact_event",
]
