"""
Structured logging for the formdesk CLI.

Log events go to stderr so command output on stdout stays pipeable.
Production renders one JSON object per line; elsewhere events render
through structlog's console renderer, colored only when stderr is a
terminal. Every event passes through ``redact_secrets`` so credentials
bound to a logger never reach the output.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from formdesk.config.settings import Settings, get_settings

REDACTED = "***"
SECRET_KEYS = frozenset({"password", "token", "authorization", "base64"})

NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "PIL")


def redact_secrets(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Mask values bound under credential-like keys (and inline image payloads)."""
    for key in event_dict.keys() & SECRET_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def build_processors(settings: Settings, colors: bool = False) -> list[Processor]:
    """Processor chain for the configured environment."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso" if settings.is_production else "%H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.is_production:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog and route stdlib logging through stderr.

    Modules log through ``structlog.get_logger(__name__)`` with key-value
    events, or through stdlib ``logging.getLogger(__name__)``.
    """
    settings = settings or get_settings()

    structlog.configure(
        processors=build_processors(settings, colors=sys.stderr.isatty()),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level),
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**kwargs) -> None:
    """Tag every later log event of the current context (the CLI binds ``session_id``)."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
