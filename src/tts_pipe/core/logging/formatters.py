"""
Console and JSONL Formatters.

ColoredConsoleFormatter writes one human-readable line per record:
    14:30:05 [ INFO  ] (a1b2c3d4) batch_done done=5 total=12 0.812s

JsonlFormatter writes one JSON object per record for the rotating file:
    {"ts":"...","level":2,"tag":"INFO","message":"batch_done","job_id":"a1b2c3d4","extra":{...}}

Colors are off when stderr is not a TTY, or when NO_COLOR or
TTS_PIPE_NO_COLOR=1 is set.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict


class Colors:
    RESET = "\033[0m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    GRAY = "\033[90m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"


TAG_COLORS = {
    "SUCCESS": Colors.BRIGHT_GREEN,
    "FAIL": Colors.BRIGHT_RED,
    "ERROR": Colors.BRIGHT_RED,
    "WARN": Colors.BRIGHT_YELLOW,
    "INFO": Colors.BRIGHT_CYAN,
    "DEBUG": Colors.GRAY,
}


def supports_color(stream: Any = None) -> bool:
    """Return True if ANSI colors should be written to ``stream`` (default stderr)."""
    if os.getenv("TTS_PIPE_NO_COLOR", "0") == "1":
        return False
    if os.getenv("NO_COLOR"):
        return False
    stream = stream if stream is not None else sys.stderr
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def get_tag_color(tag: str) -> str:
    return TAG_COLORS.get(tag.upper(), Colors.WHITE)


class JsonlFormatter(logging.Formatter):
    """Format records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created).astimezone().isoformat(),
            "level": getattr(record, "numeric_level", 2),
            "tag": getattr(record, "tag", record.levelname),
            "message": record.getMessage(),
            "job_id": getattr(record, "job_id", "-"),
            "logger": record.name,
        }

        event = getattr(record, "event", None)
        if event:
            payload["event"] = event

        seconds = getattr(record, "seconds", None)
        if seconds is not None:
            payload["seconds"] = seconds

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            payload["extra"] = extra_data

        return json.dumps(payload, ensure_ascii=False, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """
    Format records for the terminal.

    Layout: ``HH:MM:SS [ TAG ] (job) message key=value 0.123s``. The job id
    is omitted outside a job. Durations are green under 0.1s, yellow under
    1s, red above. Failure counts above zero are highlighted red.
    """

    def __init__(self, use_colors: bool | None = None):
        super().__init__()
        self.use_colors = supports_color() if use_colors is None else use_colors

    def _c(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{Colors.RESET}"

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        tag = getattr(record, "tag", record.levelname)
        job_id = getattr(record, "job_id", "-")

        parts = [self._c(ts, Colors.DIM), self._c(f"[{tag:^7}]", get_tag_color(tag))]
        if job_id != "-":
            parts.append(self._c(f"({job_id})", Colors.DIM + Colors.CYAN))
        parts.append(record.getMessage())

        event = getattr(record, "event", None)
        if event:
            parts.append(self._c(f"event={event}", Colors.BLUE))

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            for k, v in extra_data.items():
                parts.append(self._c(f"{k}={v}", self._field_color(k, v)))

        seconds = getattr(record, "seconds", None)
        if seconds is not None:
            if seconds < 0.1:
                color = Colors.GREEN
            elif seconds < 1.0:
                color = Colors.YELLOW
            else:
                color = Colors.RED
            parts.append(self._c(f"{seconds:.3f}s", color))

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        line = " ".join(parts)
        if record.exc_text:
            line = f"{line}\n{record.exc_text}"
        return line

    @staticmethod
    def _field_color(key: str, value: Any) -> str:
        if key in ("failed", "failed_chunks") and isinstance(value, int) and value > 0:
            return Colors.RED
        if key == "cache_hit_rate" and isinstance(value, (int, float)):
            return Colors.GREEN if value >= 50 else Colors.CYAN
        return Colors.DIM
