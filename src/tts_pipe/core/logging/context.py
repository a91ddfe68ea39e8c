"""
Job Correlation and Logging State.

The job id lives in a ContextVar so every line logged while a job runs
carries it. The worker pool copies the submitting context into its
threads, so chunk-level lines from workers are tagged with the same id.

Environment Variables:
    - TTS_PIPE_SETTINGS: settings file to read the logging section from
    - TTS_PIPE_LOG_LEVEL: level override (1-4 or name)
    - TTS_PIPE_LOG_DIR: enables the JSONL file handler in this directory
    - TTS_PIPE_JSONL_FILE: JSONL filename (default tts-pipe.jsonl)
    - TTS_PIPE_LOG_ROTATE_BYTES / TTS_PIPE_LOG_ROTATE_BACKUP: rotation
"""
from __future__ import annotations

import os
from contextvars import ContextVar, Token
from typing import Any, Dict

import yaml

from .levels import LEVEL_NAMES, LogLevel

_job_id: ContextVar[str] = ContextVar("job_id", default="-")

_configured: bool = False
_log_config: Dict[str, Any] = {}
_current_level: LogLevel = LogLevel.NORMAL


def get_job_id() -> str:
    """Return the job id of the current context, or "-" outside a job."""
    return _job_id.get()


def set_job_id(job_id: str) -> Token:
    """Set the job id; pass the returned token to reset_job_id() when done."""
    return _job_id.set(job_id)


def reset_job_id(token: Token) -> None:
    _job_id.reset(token)


def get_level() -> LogLevel:
    return _current_level


def set_level(level: LogLevel) -> None:
    global _current_level
    _current_level = level


def get_level_name() -> str:
    return LEVEL_NAMES.get(_current_level, "NORMAL")


def is_configured() -> bool:
    return _configured


def set_configured(value: bool) -> None:
    global _configured
    _configured = value


def get_log_config() -> Dict[str, Any]:
    return _log_config


def set_log_config(config: Dict[str, Any]) -> None:
    global _log_config
    _log_config = config


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def read_logging_config() -> Dict[str, Any]:
    """
    Resolve the logging configuration.

    Priority (highest first): TTS_PIPE_* environment variables, the
    ``logging`` section of the settings file, built-in defaults.

    Returns:
        Dictionary with any of: level, log_dir, jsonl_file,
        rotate_max_bytes, rotate_backup_count.
    """
    cfg: Dict[str, Any] = {}

    settings_path = os.getenv("TTS_PIPE_SETTINGS")
    try:
        from tts_pipe.core.config import load_settings
        settings = load_settings(settings_path)
        cfg.update(settings.raw.get("logging", {}) or {})
    except (OSError, yaml.YAMLError):
        # Unreadable or malformed settings: logging still has to come up
        pass

    if os.getenv("TTS_PIPE_LOG_LEVEL"):
        cfg["level"] = os.environ["TTS_PIPE_LOG_LEVEL"]
    if os.getenv("TTS_PIPE_LOG_DIR"):
        cfg["log_dir"] = os.environ["TTS_PIPE_LOG_DIR"]
    if os.getenv("TTS_PIPE_JSONL_FILE"):
        cfg["jsonl_file"] = os.environ["TTS_PIPE_JSONL_FILE"]

    rotate_bytes = _env_int("TTS_PIPE_LOG_ROTATE_BYTES")
    if rotate_bytes is not None:
        cfg["rotate_max_bytes"] = rotate_bytes
    rotate_backup = _env_int("TTS_PIPE_LOG_ROTATE_BACKUP")
    if rotate_backup is not None:
        cfg["rotate_backup_count"] = rotate_backup

    return cfg
