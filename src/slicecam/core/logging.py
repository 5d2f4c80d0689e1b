"""
Structured logging for SliceCAM.

Engine modules log through two front-ends: structlog event loggers
(``get_logger``) and plain ``logging.getLogger`` loggers with %-style
messages. ``configure_logging`` routes both through one handler on the
``slicecam`` logger and renders them identically, as JSON lines or as
console text. The host application's root logger is left alone.

Usage::

    from slicecam.core.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", json_output=True)
    logger = get_logger(__name__)
    logger.info("elements_scheduled", elements=3, levels=4)
"""

import logging
import sys
from typing import Optional, TextIO

import structlog

ROOT_LOGGER = "slicecam"


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Send engine logs to ``stream`` (stderr by default).

    Calling again replaces the handler installed by the previous call.

    Args:
        level: Minimum level name; unknown names fall back to INFO.
        json_output: Render JSON lines instead of console text.
        stream: Destination text stream.

    Returns:
        The installed handler, so callers can detach it.
    """
    stream = stream or sys.stderr
    engine_logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(engine_logger.handlers):
        if getattr(handler, "_slicecam", False):
            engine_logger.removeHandler(handler)

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        isatty = getattr(stream, "isatty", None)
        renderer = structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))

    handler = logging.StreamHandler(stream)
    handler._slicecam = True
    # %-style records get the same level/name/timestamp keys as structlog events
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    engine_logger.addHandler(handler)
    engine_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    engine_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    return handler


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger for the given module name.

    Args:
        name: Module name, typically ``__name__``.
    """
    return structlog.get_logger(name)
