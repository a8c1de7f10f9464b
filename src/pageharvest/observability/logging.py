"""
Structured logging setup for applications that embed PageHarvest.

The extraction engine never calls :func:`configure_logging` itself. It logs
through whatever structlog logger it was handed, so hosts decide where the
events go.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Dict, List

import structlog

if TYPE_CHECKING:
    from pageharvest.config.config import LoggingConfig

MAX_VALUE_CHARS = 300


def truncate_long_values(logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shortens oversized string fields.

    Parser and selector errors can quote whole chunks of the offending markup.
    """
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_VALUE_CHARS:
            event_dict[key] = value[:MAX_VALUE_CHARS] + "..."
    return event_dict


def _renderer_and_handler(config: LoggingConfig) -> tuple[Any, logging.Handler]:
    if config.log_file:
        return structlog.processors.JSONRenderer(), logging.FileHandler(config.log_file, encoding="utf-8")
    handler = logging.StreamHandler(sys.stderr)
    if config.json_logs:
        return structlog.processors.JSONRenderer(), handler
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()), handler


def configure_logging(config: LoggingConfig) -> None:
    """
    Route structlog and stdlib logging through one handler.

    JSON lines go to ``log_file`` when it is set (or to stderr with
    ``json_logs``); otherwise a console renderer is used.
    """
    shared_processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        truncate_long_values,
    ]

    renderer, handler = _renderer_and_handler(config)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    # force=True replaces handlers from an earlier call
    logging.basicConfig(
        format="%(message)s",
        level=config.log_level,
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger("pageharvest.logging").debug(
        "Logging configured", level=config.log_level, output=config.log_file or "stderr"
    )
