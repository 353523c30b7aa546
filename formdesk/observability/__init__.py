"""Observability layer - structured logging."""

from formdesk.observability.logging import (
    bind_context,
    build_processors,
    clear_context,
    redact_secrets,
    setup_logging,
)

__all__ = [
    "bind_context",
    "build_processors",
    "clear_context",
    "redact_secrets",
    "setup_logging",
]
