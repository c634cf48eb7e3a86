"""structlog configuration.

Every module logs through ``get_logger(__name__)`` using dotted event names
(``cli.done``) with key/value context instead of formatted messages.
"""

from __future__ import annotations

import logging
import sys

import structlog

from brewkit.config import Settings, settings


def setup_logging(cfg: Settings | None = None) -> None:
    """Configure stdlib logging and structlog once at startup."""
    _cfg = cfg or settings
    level = logging.getLevelName(_cfg.brew_log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if _cfg.brew_log_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)
