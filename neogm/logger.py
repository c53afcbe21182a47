"""Loguru setup for applications using neogm.

Library modules log through the standard ``logging`` module. Calling
:func:`configure_logging` routes those records into loguru sinks.
"""

import logging
import sys
from inspect import currentframe

import typing as t
from loguru import logger

from .config import LoggerSettings

__all__ = ["InterceptHandler", "configure_logging", "logger"]


class InterceptHandler(logging.Handler):
    """Handler to intercept standard library logging and route to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Emit log record via Loguru."""
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = (currentframe(), 0)
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level,
            record.getMessage(),
        )


def _module_filter(settings: LoggerSettings) -> t.Callable[[dict[str, t.Any]], bool]:
    def _filter(record: dict[str, t.Any]) -> bool:
        name = record["name"] or ""
        level = settings.level_for(name)
        return record["level"].no >= logger.level(level).no

    return _filter


def configure_logging(
    settings: LoggerSettings | None = None,
    sink: t.Any = sys.stderr,
) -> int:
    """Replace loguru's sinks with one configured from ``settings``.

    Returns the loguru handler id of the new sink.
    """
    settings = settings or LoggerSettings()
    logger.remove()
    handler_id = logger.add(
        sink,
        level="TRACE" if settings.level_per_module else settings.log_level,
        format=settings.format_string,
        filter=_module_filter(settings),
        serialize=settings.serialize,
        colorize=settings.colorize if sink in (sys.stderr, sys.stdout) else False,
        backtrace=settings.backtrace,
        diagnose=settings.diagnose,
        enqueue=False,
    )
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    return handler_id
