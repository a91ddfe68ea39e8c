"""
tts-pipe: Chunked Text-to-Speech Pipeline.

Turns arbitrary-length text into a single audio file by splitting it into
bounded chunks, synthesizing each chunk through a remote TTS endpoint with a
fixed pool of worker threads, and stitching the results back together in
original order.

Key Features:
    - Greedy word-packing segmentation with a configurable chunk limit
    - Shared response cache keyed by (voice, text)
    - Minimum spacing between outbound requests across all workers
    - Partial-failure tolerant jobs (failed chunks are skipped, not fatal)
    - CLI and FastAPI front-ends
    - Prometheus metrics

Example Usage:
    >>> from tts_pipe.core.config import Settings
    >>> from tts_pipe.services import Orchestrator
    >>> from tts_pipe.tts.client import SynthesisClient
    >>>
    >>> config = Settings(raw={}).get_pipeline_config()
    >>> with SynthesisClient.from_config(config) as client:
    ...     job = Orchestrator(client, config).run("Hello there", "en_us_002", "<session>")
    >>> with open("out.mp3", "wb") as f:
    ...     f.write(job.audio)
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
