"""
Configuration Management for tts-pipe.

This module provides centralized configuration handling with:
    - Default values (Defaults class)
    - Dataclass-based configuration objects
    - YAML file loading with environment variable overrides
    - Validation with meaningful error messages

Configuration Hierarchy (highest priority first):
    1. Environment variables (MAX_WORKERS, RATE_LIMIT_DELAY, etc.)
    2. YAML config file (config/settings.yaml)
    3. Defaults class values

Example settings.yaml:
    api:
      base_url: https://api16-normal-v6.tiktokv.com/media/api/text/speech/invoke
      default_voice: en_us_002
      timeout_s: 30

    performance:
      max_chunk_length: 200
      max_workers: 4
      rate_limit_delay_ms: 50

    cache:
      max_items: 1000

    logging:
      level: 2  # NORMAL

The resulting PipelineConfig is built once and passed explicitly into the
client, the orchestrator and the front-ends; nothing reads configuration
lazily at call time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_SETTINGS_PATH = "config/settings.yaml"

# Environment variable -> (section, key) in the raw settings dictionary
ENV_OVERRIDES = {
    "TTS_API_BASE_URL": ("api", "base_url"),
    "DEFAULT_VOICE_CODE": ("api", "default_voice"),
    "TIKTOK_SESSION_ID": ("api", "session_id"),
    "MAX_CHUNK_LENGTH": ("performance", "max_chunk_length"),
    "MAX_WORKERS": ("performance", "max_workers"),
    "RATE_LIMIT_DELAY": ("performance", "rate_limit_delay_ms"),
    "MAX_CACHE_SIZE": ("cache", "max_items"),
}


class ConfigValidationError(Exception):
    """
    Raised when configuration validation fails.

    This exception is thrown when a configuration value is outside
    acceptable bounds or of the wrong type.
    """
    pass


def _cpu_count() -> int:
    return os.cpu_count() or 1


class Defaults:
    """
    Centralized default configuration values.

    Sections:
        - API: Remote endpoint and wire constants
        - Performance: Chunking, workers, rate limiting, batching
        - Cache: Response cache bound
        - Logging: Log level and previews
        - Files: Default input/credential/output locations
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Remote API
    # ─────────────────────────────────────────────────────────────────────────
    API_BASE_URL = "https://api16-normal-v6.tiktokv.com/media/api/text/speech/invoke"
    API_DEFAULT_VOICE = "en_us_002"     # Jessie
    API_USER_AGENT = (
        "com.zhiliaoapp.musically/2022600030 (Linux; U; Android 7.1.2; es_ES; "
        "SM-G988N; Build/NRD90M;tt-ok/3.12.13.1)"
    )
    API_SPEAKER_MAP_TYPE = 0
    API_AID = 1233
    API_TIMEOUT_S = 30.0                # Per-request timeout

    # ─────────────────────────────────────────────────────────────────────────
    # Performance
    # ─────────────────────────────────────────────────────────────────────────
    PERF_MAX_CHUNK_LENGTH = 200         # Characters per chunk
    PERF_MAX_WORKERS = _cpu_count()     # Upper bound, capped at cpu count
    PERF_RATE_LIMIT_DELAY_MS = 50       # Minimum gap between remote requests
    PERF_BATCH_SIZE = 5                 # Tasks per progress batch
    PERF_MAX_TEXT_LENGTH = 10000        # Characters per job

    # ─────────────────────────────────────────────────────────────────────────
    # Cache
    # ─────────────────────────────────────────────────────────────────────────
    CACHE_MAX_ITEMS = 1000              # Admission stops at this size

    # ─────────────────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────────────────
    LOGGING_TEXT_PREVIEW_CHARS = 80
    LOGGING_LEVEL = 2                   # 1=MINIMAL, 2=NORMAL, 3=VERBOSE, 4=DEBUG

    # ─────────────────────────────────────────────────────────────────────────
    # Files
    # ─────────────────────────────────────────────────────────────────────────
    FILES_INPUT = "input.txt"
    FILES_SESSION_ID = "sessionId.txt"
    FILES_OUTPUT = "output/out.mp3"


@dataclass
class ApiConfig:
    """
    Remote synthesis endpoint configuration.

    session_id is optional here; front-ends may also take it from a file
    or a request body.
    """
    base_url: str = Defaults.API_BASE_URL
    default_voice: str = Defaults.API_DEFAULT_VOICE
    user_agent: str = Defaults.API_USER_AGENT
    speaker_map_type: int = Defaults.API_SPEAKER_MAP_TYPE
    aid: int = Defaults.API_AID
    timeout_s: float = Defaults.API_TIMEOUT_S
    session_id: Optional[str] = None


@dataclass
class PerformanceConfig:
    """
    Job dispatch configuration.

    The pool for a job is sized min(max_workers, chunk_count). Tasks are
    submitted in batches of min(max_workers, batch_size) purely for
    progress reporting.
    """
    max_chunk_length: int = Defaults.PERF_MAX_CHUNK_LENGTH
    max_workers: int = Defaults.PERF_MAX_WORKERS
    rate_limit_delay_ms: int = Defaults.PERF_RATE_LIMIT_DELAY_MS
    batch_size: int = Defaults.PERF_BATCH_SIZE
    max_text_length: int = Defaults.PERF_MAX_TEXT_LENGTH

    @property
    def rate_limit_delay_s(self) -> float:
        return self.rate_limit_delay_ms / 1000.0


@dataclass
class CacheConfig:
    """Response cache configuration (no eviction, admission stops when full)."""
    max_items: int = Defaults.CACHE_MAX_ITEMS


@dataclass
class LoggingConfig:
    """
    Logging configuration.

    Log levels:
        1 = MINIMAL: Startup, shutdown, critical errors only
        2 = NORMAL: Job lifecycle, progress (default)
        3 = VERBOSE: Per-chunk flow, rate-limit waits
        4 = DEBUG: Internal state, full tracing
    """
    text_preview_chars: int = Defaults.LOGGING_TEXT_PREVIEW_CHARS
    level: int = Defaults.LOGGING_LEVEL


@dataclass
class FilesConfig:
    """Default file locations used by the CLI."""
    input: str = Defaults.FILES_INPUT
    session_id: str = Defaults.FILES_SESSION_ID
    output: str = Defaults.FILES_OUTPUT


@dataclass
class PipelineConfig:
    """
    Validated configuration for the whole pipeline.

    Usage:
        settings = load_settings("config/settings.yaml")
        config = PipelineConfig.from_settings(settings)
        print(config.performance.max_workers)
    """
    api: ApiConfig = field(default_factory=ApiConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    files: FilesConfig = field(default_factory=FilesConfig)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "PipelineConfig":
        """
        Create PipelineConfig from Settings with validation.

        Args:
            settings: Raw Settings object loaded from YAML.

        Returns:
            Validated PipelineConfig instance.

        Raises:
            ConfigValidationError: If any value fails validation.
        """
        raw = settings.raw

        # ─────────────────────────────────────────────────────────────────────
        # API
        # ─────────────────────────────────────────────────────────────────────
        api_raw = raw.get("api", {}) or {}
        session_id = api_raw.get("session_id")
        api = ApiConfig(
            base_url=str(api_raw.get("base_url", Defaults.API_BASE_URL)),
            default_voice=str(api_raw.get("default_voice", Defaults.API_DEFAULT_VOICE)),
            user_agent=str(api_raw.get("user_agent", Defaults.API_USER_AGENT)),
            speaker_map_type=cls._as_int("api.speaker_map_type", api_raw.get("speaker_map_type", Defaults.API_SPEAKER_MAP_TYPE)),
            aid=cls._as_int("api.aid", api_raw.get("aid", Defaults.API_AID)),
            timeout_s=cls._as_float("api.timeout_s", api_raw.get("timeout_s", Defaults.API_TIMEOUT_S)),
            session_id=(str(session_id).strip() or None) if session_id else None,
        )
        if not api.base_url.startswith(("http://", "https://")):
            raise ConfigValidationError(f"api.base_url must be an http(s) URL, got {api.base_url!r}")
        if not api.default_voice:
            raise ConfigValidationError("api.default_voice must not be empty")
        cls._validate_positive("api.timeout_s", api.timeout_s)

        # ─────────────────────────────────────────────────────────────────────
        # Performance
        # ─────────────────────────────────────────────────────────────────────
        perf_raw = raw.get("performance", {}) or {}
        max_workers = cls._as_int("performance.max_workers", perf_raw.get("max_workers", Defaults.PERF_MAX_WORKERS))
        cls._validate_positive("performance.max_workers", max_workers)
        performance = PerformanceConfig(
            max_chunk_length=cls._as_int(
                "performance.max_chunk_length",
                perf_raw.get("max_chunk_length", Defaults.PERF_MAX_CHUNK_LENGTH),
            ),
            max_workers=min(max_workers, _cpu_count()),
            rate_limit_delay_ms=cls._as_int(
                "performance.rate_limit_delay_ms",
                perf_raw.get("rate_limit_delay_ms", Defaults.PERF_RATE_LIMIT_DELAY_MS),
            ),
            batch_size=cls._as_int("performance.batch_size", perf_raw.get("batch_size", Defaults.PERF_BATCH_SIZE)),
            max_text_length=cls._as_int(
                "performance.max_text_length",
                perf_raw.get("max_text_length", Defaults.PERF_MAX_TEXT_LENGTH),
            ),
        )
        cls._validate_positive("performance.max_chunk_length", performance.max_chunk_length)
        cls._validate_non_negative("performance.rate_limit_delay_ms", performance.rate_limit_delay_ms)
        cls._validate_positive("performance.batch_size", performance.batch_size)
        cls._validate_positive("performance.max_text_length", performance.max_text_length)

        # ─────────────────────────────────────────────────────────────────────
        # Cache
        # ─────────────────────────────────────────────────────────────────────
        cache_raw = raw.get("cache", {}) or {}
        cache = CacheConfig(
            max_items=cls._as_int("cache.max_items", cache_raw.get("max_items", Defaults.CACHE_MAX_ITEMS)),
        )
        cls._validate_positive("cache.max_items", cache.max_items)

        # ─────────────────────────────────────────────────────────────────────
        # Logging
        # ─────────────────────────────────────────────────────────────────────
        logging_raw = raw.get("logging", {}) or {}
        log_level_raw = logging_raw.get("level", Defaults.LOGGING_LEVEL)

        # Handle string log levels (e.g., "INFO", "DEBUG")
        if isinstance(log_level_raw, str):
            level_map = {
                "MINIMAL": 1, "1": 1,
                "NORMAL": 2, "INFO": 2, "2": 2,
                "VERBOSE": 3, "3": 3,
                "DEBUG": 4, "TRACE": 4, "4": 4,
            }
            log_level = level_map.get(log_level_raw.upper(), Defaults.LOGGING_LEVEL)
        else:
            log_level = cls._as_int("logging.level", log_level_raw)

        logging_cfg = LoggingConfig(
            text_preview_chars=cls._as_int(
                "logging.text_preview_chars",
                logging_raw.get("text_preview_chars", Defaults.LOGGING_TEXT_PREVIEW_CHARS),
            ),
            level=log_level,
        )
        cls._validate_non_negative("logging.text_preview_chars", logging_cfg.text_preview_chars)
        cls._validate_range("logging.level", logging_cfg.level, 1, 4)

        # ─────────────────────────────────────────────────────────────────────
        # Files
        # ─────────────────────────────────────────────────────────────────────
        files_raw = raw.get("files", {}) or {}
        files = FilesConfig(
            input=str(files_raw.get("input", Defaults.FILES_INPUT)),
            session_id=str(files_raw.get("session_id", Defaults.FILES_SESSION_ID)),
            output=str(files_raw.get("output", Defaults.FILES_OUTPUT)),
        )

        return cls(
            api=api,
            performance=performance,
            cache=cache,
            logging=logging_cfg,
            files=files,
        )

    @staticmethod
    def _as_int(name: str, value: Any) -> int:
        """Convert a raw value to int, reporting the setting name on failure."""
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigValidationError(f"{name} must be an integer, got {value!r}")

    @staticmethod
    def _as_float(name: str, value: Any) -> float:
        """Convert a raw value to float, reporting the setting name on failure."""
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigValidationError(f"{name} must be a number, got {value!r}")

    @staticmethod
    def _validate_positive(name: str, value: int | float) -> None:
        """Validate that a value is positive (> 0)."""
        if value <= 0:
            raise ConfigValidationError(f"{name} must be positive, got {value}")

    @staticmethod
    def _validate_non_negative(name: str, value: int | float) -> None:
        """Validate that a value is non-negative (>= 0)."""
        if value < 0:
            raise ConfigValidationError(f"{name} must be non-negative, got {value}")

    @staticmethod
    def _validate_range(name: str, value: int | float, min_val: int | float, max_val: int | float) -> None:
        """Validate that a value is within a range [min_val, max_val]."""
        if not (min_val <= value <= max_val):
            raise ConfigValidationError(f"{name} must be between {min_val} and {max_val}, got {value}")


@dataclass(frozen=True)
class Settings:
    """
    Immutable settings container loaded from YAML.

    This is the raw settings object before validation. Use
    get_pipeline_config() to get the validated PipelineConfig.

    Attributes:
        raw: Dictionary of raw configuration values.
    """
    raw: Dict[str, Any]

    def get_pipeline_config(self) -> PipelineConfig:
        """
        Get validated PipelineConfig from these settings.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return PipelineConfig.from_settings(self)


def apply_env_overrides(raw: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Apply environment variable overrides to a raw settings dictionary.

    Empty variables are ignored. Values stay strings here; conversion and
    validation happen in PipelineConfig.from_settings().

    Args:
        raw: Raw settings dictionary (modified in place).
        environ: Mapping to read from (defaults to os.environ).

    Returns:
        The same dictionary, for chaining.
    """
    env = os.environ if environ is None else environ
    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            # an empty YAML section loads as None
            raw[section] = raw.get(section) or {}
            raw[section][key] = value
    return raw


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings from a YAML configuration file.

    When no path is given, config/settings.yaml is used if present and
    an empty configuration otherwise. An explicit path must exist.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Settings object with loaded configuration and env overrides applied.

    Raises:
        FileNotFoundError: If an explicitly given settings file doesn't exist.
    """
    p = Path(path or DEFAULT_SETTINGS_PATH)
    raw: Dict[str, Any] = {}

    if p.exists():
        with p.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    elif path is not None:
        raise FileNotFoundError(f"settings file not found: {p.resolve()}")

    return Settings(raw=apply_env_overrides(raw))
