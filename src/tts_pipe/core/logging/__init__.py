"""
tts-pipe Structured Logging.

Numeric levels (1-4), a colored console handler on stderr, an optional
rotating JSONL file handler, and job id correlation through a ContextVar.

Configuration:
    export TTS_PIPE_LOG_LEVEL=3   # VERBOSE
    export TTS_PIPE_LOG_DIR=logs  # also write logs/tts-pipe.jsonl
    export NO_COLOR=1

    In settings.yaml:
        logging:
          level: 2
          log_dir: logs
          jsonl_file: tts-pipe.jsonl

Usage:
    from tts_pipe.core.logging import get_logger, info, verbose

    log = get_logger("tts-pipe.client")
    info(log, "job_started", chunks=12, voice="en_us_002")
    verbose(log, "cache_hit", chars=180)

Console output goes to stderr so that ``tts-pipe --json`` keeps stdout
machine-readable.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from .context import (
    get_job_id,
    get_level,
    get_level_name,
    get_log_config,
    is_configured,
    read_logging_config,
    reset_job_id,
    set_configured,
    set_job_id,
    set_level,
    set_log_config,
)
from .formatters import ColoredConsoleFormatter, Colors, JsonlFormatter, supports_color
from .levels import LEVEL_MAP, LEVEL_NAMES, LogLevel, coerce_level

# Handlers installed by configure_logging, tracked so reconfiguration only
# replaces our own handlers on the root logger.
_handlers: list[logging.Handler] = []


def configure_logging(level: Optional[int | str | LogLevel] = None, force: bool = False) -> None:
    """
    Configure console (and optionally JSONL file) logging.

    Args:
        level: Log level (1-4, level name, or LogLevel). Overrides config.
        force: Reconfigure even if logging was already configured.
    """
    if is_configured() and not force:
        return

    log_config = read_logging_config()
    set_log_config(log_config)

    current_level = coerce_level(level if level is not None else log_config.get("level", LogLevel.NORMAL))
    set_level(current_level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG - 10)
    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(LEVEL_MAP.get(current_level, logging.INFO))
    console.setFormatter(ColoredConsoleFormatter())
    _handlers.append(console)

    log_dir = log_config.get("log_dir")
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            Path(log_dir) / str(log_config.get("jsonl_file", "tts-pipe.jsonl")),
            maxBytes=int(log_config.get("rotate_max_bytes", 10 * 1024 * 1024)),
            backupCount=int(log_config.get("rotate_backup_count", 5)),
            encoding="utf-8",
            delay=True,
        )
        file_handler.setLevel(logging.DEBUG - 10)
        file_handler.setFormatter(JsonlFormatter())
        _handlers.append(file_handler)

    for handler in _handlers:
        root.addHandler(handler)

    # httpx logs every request at INFO; our client already logs per chunk
    logging.getLogger("httpx").setLevel(logging.WARNING)

    set_configured(True)


def get_logger(name: str = "tts-pipe") -> logging.Logger:
    """Get a logger, configuring logging on first use."""
    configure_logging()
    return logging.getLogger(name)


def _log(
    logger: logging.Logger,
    level: int,
    tag: str,
    msg: str,
    numeric_level: int = 2,
    exc_info: Any = None,
    **fields: Any
) -> None:
    if numeric_level > get_level():
        return

    event = fields.pop("event", None)
    seconds = fields.pop("seconds", None)
    logger.log(
        level,
        msg,
        exc_info=exc_info,
        extra={
            "tag": tag,
            "job_id": get_job_id(),
            "event": event,
            "seconds": seconds,
            "extra_data": fields or None,
            "numeric_level": numeric_level,
        },
    )


def info(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log at NORMAL (2)."""
    _log(logger, logging.INFO, "INFO", msg, numeric_level=2, **fields)


def warn(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log a warning at NORMAL (2)."""
    _log(logger, logging.WARNING, "WARN", msg, numeric_level=2, **fields)


def error(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log an error at MINIMAL (1)."""
    _log(logger, logging.ERROR, "ERROR", msg, numeric_level=1, **fields)


def success(logger: logging.Logger, msg: str, **fields: Any) -> None:
    _log(logger, logging.INFO, "SUCCESS", msg, numeric_level=2, **fields)


def fail(logger: logging.Logger, msg: str, **fields: Any) -> None:
    _log(logger, logging.ERROR, "FAIL", msg, numeric_level=1, **fields)


def verbose(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log at VERBOSE (3)."""
    _log(logger, logging.DEBUG, "INFO", msg, numeric_level=3, **fields)


def debug(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log at DEBUG (4)."""
    _log(logger, logging.DEBUG - 5, "DEBUG", msg, numeric_level=4, **fields)


__all__ = [
    "LogLevel",
    "LEVEL_MAP",
    "LEVEL_NAMES",
    "coerce_level",
    "Colors",
    "supports_color",
    "JsonlFormatter",
    "ColoredConsoleFormatter",
    "get_job_id",
    "set_job_id",
    "reset_job_id",
    "get_level",
    "set_level",
    "get_level_name",
    "get_log_config",
    "configure_logging",
    "get_logger",
    "info",
    "warn",
    "error",
    "success",
    "fail",
    "verbose",
    "debug",
]
