"""
FastAPI Application Entry Point.

Usage:
    uvicorn tts_pipe.main:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from tts_pipe.api.dependencies import close_client
from tts_pipe.api.routes import router
from tts_pipe.core.logging import configure_logging


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    close_client()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Logging is configured first (TTS_PIPE_LOG_LEVEL and friends); the
    shared SynthesisClient is created on first use and closed on shutdown.
    """
    configure_logging()
    app = FastAPI(title="tts-pipe", lifespan=_lifespan)
    app.include_router(router)
    return app


app = create_app()
