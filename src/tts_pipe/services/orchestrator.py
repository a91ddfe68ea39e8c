"""
Orchestrator - Chunked Synthesis Jobs.

Turns one text into one audio artifact:

    Validate → Split → Tasks → Worker Pool → Collect → Sort → Concatenate

Failure Policy:
    - Input problems (blank or too long text, bad overrides) raise before any
      network activity
    - A failing chunk becomes a failure ChunkResult; its siblings keep
      running and the job continues
    - Only when every chunk failed does the job raise
      NoSuccessfulChunksError
    - The worker pool is terminated whatever happens

The artifact is the raw concatenation of the successful chunks' audio in
chunk order; failed chunks are simply missing from it.

Example:
    >>> config = load_settings().get_pipeline_config()
    >>> with SynthesisClient.from_config(config) as client:
    ...     job = Orchestrator(client, config).run(text, "en_us_002", session_id)
    >>> job.metrics.failed_chunks
    0
"""
from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from tts_pipe.core.config import PipelineConfig
from tts_pipe.core.errors import (
    InvalidInputError,
    NoSuccessfulChunksError,
    TTSPipeError,
)
from tts_pipe.core.logging import (
    debug,
    fail,
    get_logger,
    info,
    reset_job_id,
    set_job_id,
    success,
    verbose,
    warn,
)
from tts_pipe.core.metrics import metrics
from tts_pipe.tts.chunker import Chunk, split_text, validate_text
from tts_pipe.tts.client import SynthesisClient
from tts_pipe.tts.pool import WorkerPool

_LOG = get_logger("tts-pipe.orchestrator")

ProgressCallback = Callable[[int, int], None]


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Task:
    """One unit of work for the pool: a chunk plus the job-wide parameters."""
    chunk: Chunk
    voice_code: str
    session_id: str


@dataclass
class ChunkResult:
    """
    Outcome of one task.

    Attributes:
        index: Chunk index.
        audio: Decoded audio bytes, None on failure.
        message: Human-readable outcome line.
        success: Whether audio was produced.
    """
    index: int
    audio: Optional[bytes]
    message: str
    success: bool


@dataclass
class JobMetrics:
    total_chunks: int
    successful_chunks: int
    failed_chunks: int
    cache_hit_rate: int
    total_file_size: int
    processing_time: float


@dataclass
class JobResult:
    """
    Result of a finished job.

    Attributes:
        job_id: Short id shared by all log lines of the job.
        audio: Concatenated audio of the successful chunks.
        results: One ChunkResult per chunk, sorted by index.
        metrics: Job summary numbers.
    """
    job_id: str
    audio: bytes
    results: List[ChunkResult]
    metrics: JobMetrics

    def summary(self) -> Dict[str, Any]:
        """JSON-friendly summary (no audio bytes)."""
        m = self.metrics
        return {
            "job_id": self.job_id,
            "total_chunks": m.total_chunks,
            "successful_chunks": m.successful_chunks,
            "failed_chunks": m.failed_chunks,
            "cache_hit_rate": m.cache_hit_rate,
            "total_file_size": m.total_file_size,
            "processing_time": round(m.processing_time, 3),
            "messages": [r.message for r in self.results],
        }


def cache_hit_rate(cache_size: int, total_results: int) -> int:
    """
    Percentage figure reported as the cache hit rate.

    Cache size relative to the number of results of this job, rounded half
    up and capped at 100. Zero when the cache is empty.
    """
    if cache_size <= 0 or total_results <= 0:
        return 0
    return min(100, math.floor(cache_size / total_results * 100 + 0.5))


# =============================================================================
# Orchestrator
# =============================================================================

class Orchestrator:
    """
    Runs chunked synthesis jobs against a shared SynthesisClient.

    The client (and with it the cache and rate limiter) outlives jobs; a
    fresh WorkerPool is created for every job.

    Args:
        client: Shared synthesis client.
        config: Validated pipeline configuration.
    """

    def __init__(self, client: SynthesisClient, config: Optional[PipelineConfig] = None):
        self.client = client
        self.config = config or PipelineConfig()

    def run(
        self,
        text: str,
        voice_code: str,
        session_id: str,
        max_chunk_length: Optional[int] = None,
        max_workers: Optional[int] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> JobResult:
        """
        Run one job.

        Args:
            text: Job text.
            voice_code: Voice for every chunk.
            session_id: Session credential for every request. A blank one only
                fails the chunks that miss the cache.
            max_chunk_length: Override of performance.max_chunk_length.
            max_workers: Override of performance.max_workers.
            progress: Called as ``progress(done, total)`` after each batch.

        Returns:
            JobResult with concatenated audio and per-chunk results.

        Raises:
            InvalidInputError: Blank or too long text, bad overrides.
            NoSuccessfulChunksError: Every chunk failed.
        """
        perf = self.config.performance
        max_chunk_length = perf.max_chunk_length if max_chunk_length is None else max_chunk_length
        max_workers = perf.max_workers if max_workers is None else max_workers

        job_id = uuid.uuid4().hex[:8]
        token = set_job_id(job_id)
        t0 = time.perf_counter()
        try:
            try:
                if max_workers < 1:
                    raise InvalidInputError(
                        f"max_workers must be positive, got {max_workers}",
                        details={"max_workers": max_workers},
                    )
                validate_text(text, perf.max_text_length)
                chunks = split_text(text, max_chunk_length)
            except InvalidInputError as e:
                metrics.record_job("rejected")
                warn(_LOG, "job_rejected", error=e.code)
                raise

            session_id = (session_id or "").strip()
            tasks = [Task(chunk=c, voice_code=voice_code, session_id=session_id) for c in chunks]
            results = self._dispatch(tasks, max_workers, progress)
            return self._assemble(job_id, results, time.perf_counter() - t0)
        finally:
            reset_job_id(token)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _dispatch(
        self,
        tasks: List[Task],
        max_workers: int,
        progress: Optional[ProgressCallback],
    ) -> List[ChunkResult]:
        total = len(tasks)
        batch_size = max(1, min(max_workers, self.config.performance.batch_size))
        # at most one batch is in flight
        pool_size = min(batch_size, total)
        info(
            _LOG,
            "job_started",
            chunks=total,
            workers=pool_size,
            batch_size=batch_size,
            voice=tasks[0].voice_code,
        )

        results: List[ChunkResult] = []
        pool = WorkerPool(pool_size, self._run_task)
        try:
            for start in range(0, total, batch_size):
                batch = tasks[start:start + batch_size]
                futures = [(task.chunk.index, pool.execute(task)) for task in batch]
                for index, future in futures:
                    try:
                        results.append(future.result())
                    except Exception as e:
                        reason = e.message if isinstance(e, TTSPipeError) else str(e) or type(e).__name__
                        results.append(ChunkResult(
                            index=index,
                            audio=None,
                            message=f"Chunk {index} failed: {reason}",
                            success=False,
                        ))
                info(_LOG, "batch_done", done=len(results), total=total)
                stats = pool.stats()
                debug(_LOG, "pool_stats", busy=stats.busy_workers, queued=stats.queued_tasks)
                if progress is not None:
                    progress(len(results), total)
        finally:
            pool.terminate()

        results.sort(key=lambda r: r.index)
        return results

    def _run_task(self, task: Task) -> ChunkResult:
        """Pool handler: synthesize one chunk, turning pipeline errors into a failure result."""
        i = task.chunk.index
        try:
            audio = self.client.synthesize(task.chunk.text, task.voice_code, task.session_id)
        except TTSPipeError as e:
            metrics.record_chunk("failed")
            verbose(_LOG, "chunk_failed", index=i, error=e.code)
            return ChunkResult(index=i, audio=None, message=f"Worker No.{i} failed: {e.message}", success=False)

        metrics.record_chunk("success", len(audio))
        verbose(_LOG, "chunk_done", index=i, bytes=len(audio))
        return ChunkResult(index=i, audio=audio, message=f"Worker No.{i} completed successfully!", success=True)

    # =========================================================================
    # Assembly
    # =========================================================================

    def _assemble(self, job_id: str, results: List[ChunkResult], elapsed: float) -> JobResult:
        good = [r for r in results if r.success and r.audio is not None]
        failed = len(results) - len(good)

        if not good:
            metrics.record_job("failed", elapsed)
            fail(_LOG, "job_failed", chunks=len(results), seconds=round(elapsed, 3))
            raise NoSuccessfulChunksError([r.message for r in results])

        audio = b"".join(r.audio for r in good)
        job_metrics = JobMetrics(
            total_chunks=len(results),
            successful_chunks=len(good),
            failed_chunks=failed,
            cache_hit_rate=cache_hit_rate(self.client.cache_stats()["size"], len(results)),
            total_file_size=len(audio),
            processing_time=elapsed,
        )

        if failed:
            metrics.record_job("partial", elapsed)
            warn(
                _LOG,
                "job_partial",
                failed=failed,
                total=len(results),
                bytes=len(audio),
                seconds=round(elapsed, 3),
            )
        else:
            metrics.record_job("success", elapsed)
            success(
                _LOG,
                "job_done",
                chunks=len(results),
                bytes=len(audio),
                cache_hit_rate=job_metrics.cache_hit_rate,
                seconds=round(elapsed, 3),
            )

        return JobResult(job_id=job_id, audio=audio, results=results, metrics=job_metrics)
