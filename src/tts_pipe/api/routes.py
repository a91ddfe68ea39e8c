"""
tts-pipe API Routes.

Endpoints:
    POST /v1/tts     - Run a job, return the combined audio (audio/mpeg)
    GET  /v1/voices  - Voice catalog grouped by category
    GET  /health     - Configuration summary and cache statistics
    GET  /metrics    - Prometheus metrics

Error Handling:
    Errors are returned as JSON:
    {
        "ok": false,
        "error": "<ERROR_CODE>",
        "message": "<human readable message>",
        "details": {...}
    }

    HTTP status codes by error code:
        - EMPTY_INPUT, INPUT_TOO_LONG, INVALID_INPUT -> 400
        - NO_SESSION -> 401
        - NO_SUCCESSFUL_CHUNKS -> 502
        - anything else -> 500

Example:
    curl -X POST http://localhost:8000/v1/tts \\
        -H "Content-Type: application/json" \\
        -d '{"text": "Hello there", "session_id": "..."}' \\
        --output speech.mp3
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from tts_pipe import __version__
from tts_pipe.api.dependencies import get_client, get_config, get_orchestrator
from tts_pipe.api.schemas import TTSRequest
from tts_pipe.core.config import PipelineConfig
from tts_pipe.core.errors import ErrorCode, NoSessionProvidedError, TTSPipeError
from tts_pipe.core.logging import error, get_level_name, get_log_config, get_logger
from tts_pipe.core.metrics import metrics
from tts_pipe.core.voices import voices_by_category
from tts_pipe.services import Orchestrator
from tts_pipe.tts.chunker import clean_text
from tts_pipe.tts.client import SynthesisClient

router = APIRouter()

_LOG = get_logger("tts-pipe.api")

_STATUS_MAP = {
    ErrorCode.EMPTY_INPUT: 400,
    ErrorCode.INPUT_TOO_LONG: 400,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.NO_SESSION: 401,
    ErrorCode.NO_SUCCESSFUL_CHUNKS: 502,
}


def _error_response(err: TTSPipeError) -> JSONResponse:
    return JSONResponse(status_code=_STATUS_MAP.get(err.code, 500), content=err.to_dict())


@router.post("/v1/tts", response_class=Response)
def tts_v1(
    req: TTSRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
    config: PipelineConfig = Depends(get_config),
):
    """
    Run one chunked synthesis job.

    Returns:
        Response: audio/mpeg bytes with headers:
            - X-Job-Id: Job id (matches the job's log lines)
            - X-Chunks-Total: Number of chunks
            - X-Chunks-Failed: Number of chunks missing from the audio
            - X-Cache-Hit-Rate: Cache hit rate in percent
    """
    voice = req.voice or config.api.default_voice
    session_id = (req.session_id or config.api.session_id or "").strip()
    max_workers = req.max_workers
    if max_workers is not None:
        max_workers = min(max_workers, config.performance.max_workers)

    try:
        if not session_id:
            raise NoSessionProvidedError()
        job = orchestrator.run(
            clean_text(req.text),
            voice,
            session_id,
            max_chunk_length=req.max_chunk_length,
            max_workers=max_workers,
        )
    except TTSPipeError as e:
        return _error_response(e)
    except Exception as e:
        error(_LOG, "job_crashed", error=type(e).__name__)
        return JSONResponse(
            status_code=500,
            content={
                "ok": False,
                "error": ErrorCode.INTERNAL_ERROR,
                "message": "Internal server error",
            },
        )

    headers = {
        "X-Job-Id": job.job_id,
        "X-Chunks-Total": str(job.metrics.total_chunks),
        "X-Chunks-Failed": str(job.metrics.failed_chunks),
        "X-Cache-Hit-Rate": str(job.metrics.cache_hit_rate),
    }
    return Response(content=job.audio, media_type="audio/mpeg", headers=headers)


@router.get("/v1/voices")
def list_voices():
    return {
        category: [voice._asdict() for voice in voices]
        for category, voices in voices_by_category().items()
        if voices
    }


@router.get("/health")
def health(
    client: SynthesisClient = Depends(get_client),
    config: PipelineConfig = Depends(get_config),
):
    """Configuration summary, logging setup and cache statistics."""
    return {
        "status": "ok",
        "version": __version__,
        "config": {
            "base_url": config.api.base_url,
            "default_voice": config.api.default_voice,
            "session_configured": bool(config.api.session_id),
            "max_chunk_length": config.performance.max_chunk_length,
            "max_workers": config.performance.max_workers,
            "rate_limit_delay_ms": config.performance.rate_limit_delay_ms,
        },
        "logging": {
            "level": get_level_name(),
            "jsonl": bool(get_log_config().get("log_dir")),
        },
        "cache": client.cache_stats(),
    }


@router.get("/metrics")
def prometheus_metrics():
    content, content_type = metrics.get_metrics_response()
    return Response(content=content, media_type=content_type)
