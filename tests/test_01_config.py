"""
Tests for configuration validation and defaults.

Tests cover:
- PipelineConfig.from_settings() - all sections
- Defaults class values
- ConfigValidationError on invalid values
- String log level coercion ("DEBUG" -> 4)
- Environment overrides with the original variable names
- load_settings() file handling
"""

import os

import pytest

from tts_pipe.core.config import (
    ApiConfig,
    ConfigValidationError,
    Defaults,
    PipelineConfig,
    Settings,
    apply_env_overrides,
    load_settings,
)


class TestDefaults:
    """Tests for Defaults class values."""

    def test_api_defaults(self):
        assert Defaults.API_BASE_URL == "https://api16-normal-v6.tiktokv.com/media/api/text/speech/invoke"
        assert Defaults.API_DEFAULT_VOICE == "en_us_002"
        assert Defaults.API_SPEAKER_MAP_TYPE == 0
        assert Defaults.API_AID == 1233
        assert Defaults.API_TIMEOUT_S == 30.0

    def test_performance_defaults(self):
        assert Defaults.PERF_MAX_CHUNK_LENGTH == 200
        assert Defaults.PERF_RATE_LIMIT_DELAY_MS == 50
        assert Defaults.PERF_BATCH_SIZE == 5
        assert Defaults.PERF_MAX_TEXT_LENGTH == 10000
        assert Defaults.PERF_MAX_WORKERS == (os.cpu_count() or 1)

    def test_cache_and_logging_defaults(self):
        assert Defaults.CACHE_MAX_ITEMS == 1000
        assert Defaults.LOGGING_LEVEL == 2


class TestPipelineConfigFromSettings:
    """Tests for PipelineConfig.from_settings()."""

    def test_empty_settings_use_defaults(self):
        config = Settings(raw={}).get_pipeline_config()

        assert config.api.base_url == Defaults.API_BASE_URL
        assert config.api.default_voice == "en_us_002"
        assert config.api.session_id is None
        assert config.performance.max_chunk_length == 200
        assert config.performance.rate_limit_delay_ms == 50
        assert config.cache.max_items == 1000
        assert config.logging.level == 2
        assert config.files.output == "output/out.mp3"

    def test_custom_values(self):
        settings = Settings(raw={
            "api": {"default_voice": "en_uk_001", "timeout_s": 5, "session_id": "  abc  "},
            "performance": {"max_chunk_length": 120, "max_workers": 1, "rate_limit_delay_ms": 0},
            "cache": {"max_items": 10},
        })
        config = PipelineConfig.from_settings(settings)

        assert config.api.default_voice == "en_uk_001"
        assert config.api.timeout_s == 5.0
        assert config.api.session_id == "abc"
        assert config.performance.max_chunk_length == 120
        assert config.performance.max_workers == 1
        assert config.performance.rate_limit_delay_ms == 0
        assert config.cache.max_items == 10

    def test_blank_session_is_none(self):
        config = Settings(raw={"api": {"session_id": "   "}}).get_pipeline_config()
        assert config.api.session_id is None

    def test_max_workers_capped_at_cpu_count(self):
        config = Settings(raw={"performance": {"max_workers": 10_000}}).get_pipeline_config()
        assert config.performance.max_workers == (os.cpu_count() or 1)

    def test_rate_limit_delay_seconds(self):
        config = Settings(raw={"performance": {"rate_limit_delay_ms": 250}}).get_pipeline_config()
        assert config.performance.rate_limit_delay_s == pytest.approx(0.25)

    def test_string_values_from_env_are_converted(self):
        config = Settings(raw={
            "performance": {"max_chunk_length": "150", "rate_limit_delay_ms": "20"},
            "cache": {"max_items": "3"},
        }).get_pipeline_config()

        assert config.performance.max_chunk_length == 150
        assert config.performance.rate_limit_delay_ms == 20
        assert config.cache.max_items == 3

    def test_string_log_level(self):
        config = Settings(raw={"logging": {"level": "DEBUG"}}).get_pipeline_config()
        assert config.logging.level == 4

    def test_none_sections_use_defaults(self):
        config = Settings(raw={"api": None, "performance": None}).get_pipeline_config()
        assert config.api == ApiConfig()


class TestValidation:
    """Invalid values raise ConfigValidationError."""

    @pytest.mark.parametrize("section,key,value", [
        ("performance", "max_chunk_length", 0),
        ("performance", "max_workers", 0),
        ("performance", "rate_limit_delay_ms", -1),
        ("performance", "batch_size", 0),
        ("cache", "max_items", 0),
        ("api", "timeout_s", 0),
        ("logging", "level", 9),
    ])
    def test_out_of_range(self, section, key, value):
        with pytest.raises(ConfigValidationError):
            Settings(raw={section: {key: value}}).get_pipeline_config()

    def test_non_numeric_value(self):
        with pytest.raises(ConfigValidationError, match="max_workers"):
            Settings(raw={"performance": {"max_workers": "many"}}).get_pipeline_config()

    def test_bad_base_url(self):
        with pytest.raises(ConfigValidationError, match="base_url"):
            Settings(raw={"api": {"base_url": "ftp://example.com"}}).get_pipeline_config()


class TestEnvOverrides:
    """Original environment variable names override the file."""

    def test_apply_env_overrides(self):
        raw = {"performance": {"max_workers": 2}}
        apply_env_overrides(raw, {
            "MAX_WORKERS": "1",
            "RATE_LIMIT_DELAY": "75",
            "MAX_CHUNK_LENGTH": "90",
            "MAX_CACHE_SIZE": "5",
            "DEFAULT_VOICE_CODE": "fr_001",
            "TTS_API_BASE_URL": "http://tts.test/invoke",
            "TIKTOK_SESSION_ID": "sess",
        })
        config = Settings(raw=raw).get_pipeline_config()

        assert config.performance.max_workers == 1
        assert config.performance.rate_limit_delay_ms == 75
        assert config.performance.max_chunk_length == 90
        assert config.cache.max_items == 5
        assert config.api.default_voice == "fr_001"
        assert config.api.base_url == "http://tts.test/invoke"
        assert config.api.session_id == "sess"

    def test_empty_env_values_ignored(self):
        raw = apply_env_overrides({}, {"MAX_WORKERS": ""})
        assert raw == {}

    def test_load_settings_applies_env(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("performance:\n  max_chunk_length: 100\n", encoding="utf-8")
        monkeypatch.setenv("MAX_CHUNK_LENGTH", "42")

        settings = load_settings(str(path))

        assert settings.raw["performance"]["max_chunk_length"] == "42"
        assert settings.get_pipeline_config().performance.max_chunk_length == 42

    def test_empty_yaml_section_takes_override(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("performance:\ncache:\n", encoding="utf-8")
        monkeypatch.setenv("MAX_WORKERS", "1")
        monkeypatch.setenv("MAX_CACHE_SIZE", "9")

        config = load_settings(str(path)).get_pipeline_config()

        assert config.performance.max_workers == 1
        assert config.cache.max_items == 9


class TestLoadSettings:
    """Tests for load_settings() file handling."""

    def test_reads_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DEFAULT_VOICE_CODE", raising=False)
        path = tmp_path / "settings.yaml"
        path.write_text("api:\n  default_voice: de_001\n", encoding="utf-8")

        settings = load_settings(str(path))

        assert settings.get_pipeline_config().api.default_voice == "de_001"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert isinstance(load_settings(str(path)).raw, dict)

    def test_missing_explicit_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "nope.yaml"))

    def test_missing_default_file_is_empty(self, tmp_path, monkeypatch):
        for var in ("TTS_API_BASE_URL", "DEFAULT_VOICE_CODE", "TIKTOK_SESSION_ID", "MAX_CHUNK_LENGTH",
                    "MAX_WORKERS", "RATE_LIMIT_DELAY", "MAX_CACHE_SIZE"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.chdir(tmp_path)

        assert load_settings().raw == {}

