"""
FastAPI Dependency Providers.

Settings, validated config and the SynthesisClient are process-wide
singletons (lru_cache), so every request shares one response cache and one
rate limiter. Tests replace them through ``app.dependency_overrides``.
"""
from __future__ import annotations

import os
from functools import lru_cache

from fastapi import Depends

from tts_pipe.core.config import PipelineConfig, Settings, load_settings
from tts_pipe.services import Orchestrator
from tts_pipe.tts.client import SynthesisClient


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once (TTS_PIPE_SETTINGS or config/settings.yaml)."""
    return load_settings(os.getenv("TTS_PIPE_SETTINGS"))


@lru_cache(maxsize=1)
def get_config() -> PipelineConfig:
    return get_settings().get_pipeline_config()


@lru_cache(maxsize=1)
def get_client() -> SynthesisClient:
    return SynthesisClient.from_config(get_config())


def get_orchestrator(
    client: SynthesisClient = Depends(get_client),
    config: PipelineConfig = Depends(get_config),
) -> Orchestrator:
    return Orchestrator(client, config)


def close_client() -> None:
    """Close the shared client if one was created. Called on shutdown."""
    if get_client.cache_info().currsize:
        get_client().close()
        get_client.cache_clear()
