"""
API Request Schemas.

Text content checks (blank, too long) are left to the orchestrator so that
they produce the same error codes as the CLI.
"""
from __future__ import annotations

from pydantic import BaseModel, Field


class TTSRequest(BaseModel):
    """
    Body of POST /v1/tts.

    Example:
        {"text": "Hello there", "voice": "en_us_002"}
    """
    text: str = Field(..., description="Text to synthesize")
    voice: str | None = Field(
        default=None,
        description="Voice code (default from server configuration)"
    )
    session_id: str | None = Field(
        default=None,
        description="Session credential (default from server configuration)"
    )
    max_chunk_length: int | None = Field(
        default=None,
        gt=0,
        description="Maximum characters per chunk"
    )
    max_workers: int | None = Field(
        default=None,
        gt=0,
        description="Maximum concurrent workers for this job (capped at the server setting)"
    )
