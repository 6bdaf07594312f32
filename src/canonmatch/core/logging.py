# src/canonmatch/core/logging.py
"""Structured logging for canonmatch.

canonmatch runs inside somebody else's test suite, so it never touches the
root logger or the global structlog configuration. Every logger returned by
get_logger() is a structlog BoundLogger wrapped around a stdlib logger in
the ``canonmatch`` namespace. Its events reach stdlib logging already
prepared for ProcessorFormatter:

- By default nothing is attached; records propagate to whatever handlers the
  host has (pytest's caplog included).
- configure_logging() attaches one ProcessorFormatter handler to the
  ``canonmatch`` logger and stops propagation, giving JSON or console output
  for canonmatch events only.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

LOGGER_NAMESPACE = "canonmatch"
_HANDLER_NAME = "canonmatch-structlog"

_SHARED_PROCESSORS: list[Any] = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def _remove_internal_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Drop the _record/_from_structlog keys ProcessorFormatter adds."""
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _namespace_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAMESPACE)


def _detach_handler(logger: logging.Logger) -> None:
    for handler in [h for h in logger.handlers if h.get_name() == _HANDLER_NAME]:
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
) -> None:
    """Send canonmatch events to stdout through structlog renderers.

    Only the ``canonmatch`` logger is changed. Calling this again replaces
    the handler from the previous call.

    Args:
        json_output: If True, output JSON. If False, human-readable.
        level: Log level (DEBUG, INFO, WARNING, ERROR).
    """
    if json_output:
        final_processors: list[Any] = [
            _remove_internal_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final_processors = [
            _remove_internal_fields,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final_processors,
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )

    logger = _namespace_logger()
    _detach_handler(logger)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False


def reset_logging() -> None:
    """Undo configure_logging(): records propagate to the host again."""
    logger = _namespace_logger()
    _detach_handler(logger)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module.

    Args:
        name: Logger name (typically __name__); names outside the
            ``canonmatch`` namespace are nested under it.

    Returns:
        Bound structlog logger.
    """
    if name != LOGGER_NAMESPACE and not name.startswith(f"{LOGGER_NAMESPACE}."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        processors=[structlog.stdlib.filter_by_level, *_SHARED_PROCESSORS, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
    return logger
