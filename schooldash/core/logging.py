# schooldash/core/logging.py
import logging
import sys

import structlog

from schooldash.core.config import settings

log = structlog.get_logger("schooldash")


def setup_logging(level: str | None = None, json_output: bool | None = None):
    """Configure stdlib logging and structlog once for the process"""
    level_name = (level or settings.LOG_LEVEL).upper()
    as_json = settings.LOG_JSON if json_output is None else json_output

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=getattr(logging, level_name, logging.INFO))

    renderer = structlog.processors.JSONRenderer() if as_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name, logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
