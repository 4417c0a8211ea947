"""
Structured logging setup.

Modules obtain loggers with ``structlog.get_logger(__name__)`` at import
time and never configure anything themselves; entry points call
``configure_logging`` once. Output goes through the standard library so
third-party log records share the same handler and level.
"""

import logging
import sys

import structlog

from healthrisk.config import LoggingConfig

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Route structlog through stdlib logging with a JSON or console renderer."""
    config = config or LoggingConfig()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.level),
        force=True,
    )

    # ConsoleRenderer formats exceptions itself.
    renderers: list[structlog.types.Processor] = (
        [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        if config.format == "json"
        else [structlog.dev.ConsoleRenderer()]
    )

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, *renderers],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
