"""Structured logging setup using structlog.

Library modules only call ``structlog.get_logger(__name__)``. Entry points
call :func:`configure_logging` once to route events through stdlib logging
to stderr.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from typed_records.config import Settings, get_settings


def configure_logging(settings: Settings | None = None, level: str | None = None) -> None:
    """Configure stdlib logging and structlog.

    Args:
        settings: Settings to read the level and renderer from. Defaults to
            the cached environment settings.
        level: Overrides the configured log level.
    """
    if settings is None:
        settings = get_settings()
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    logging.basicConfig(format="%(message)s", level=log_level, handlers=[handler], force=True)

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.log_json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
