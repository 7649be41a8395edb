"""
Structured logging configuration using structlog.

JSON lines in production, coloured console output elsewhere. Standard
library loggers used by the library modules are routed through the same
processors, so ``logging.getLogger(__name__)`` and structlog loggers end
up in one stream with the bound request context.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from clawpulse.config.settings import get_settings

# Third-party loggers that are only useful when something is broken
_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "openai", "asyncpg")


def setup_logging(level: str | None = None) -> None:
    """
    Configure structlog and the root stdlib logger.

    Args:
        level: Log level name; defaults to ``LOG_LEVEL`` from settings

    Usage:
        setup_logging()
        logger = structlog.get_logger()
        logger.info("Action processed", action="break", from_agent="0xabc")
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: Processor
    if settings.is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**kwargs) -> None:
    """Bind key/value pairs to every log line in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
