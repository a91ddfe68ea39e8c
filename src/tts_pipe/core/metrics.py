"""
Prometheus Metrics for tts-pipe.

Metrics Exposed:
    tts_pipe_remote_requests_total           - Remote calls by outcome (ok/remote_error/transport_error)
    tts_pipe_remote_request_duration_seconds - Remote call latency
    tts_pipe_cache_hits_total                - Response cache hits
    tts_pipe_cache_misses_total              - Response cache misses
    tts_pipe_rate_limit_wait_seconds         - Time spent waiting for a request slot
    tts_pipe_chunks_total                    - Chunk outcomes by status (success/failed)
    tts_pipe_audio_bytes_total               - Decoded audio bytes returned to callers
    tts_pipe_jobs_total                      - Jobs by status (success/partial/failed/rejected)
    tts_pipe_job_duration_seconds            - Job wall-clock duration
    tts_pipe_busy_workers                    - Workers currently running a task

Usage:
    from tts_pipe.core.metrics import metrics

    metrics.record_remote_request("ok", duration=0.42)
    metrics.record_cache("hit")
    content, content_type = metrics.get_metrics_response()

All metrics live in a private CollectorRegistry so several collectors (for
example one per test) never clash with the process-wide default registry.
"""
from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class PipelineMetrics:
    """
    Metrics collector for the dispatch pipeline.

    Prometheus metric objects are thread-safe, so workers record directly
    without extra locking.
    """

    def __init__(self):
        self._registry = CollectorRegistry()

        self._remote_requests = Counter(
            "tts_pipe_remote_requests_total",
            "Remote synthesis requests",
            ["outcome"],
            registry=self._registry,
        )
        self._remote_duration = Histogram(
            "tts_pipe_remote_request_duration_seconds",
            "Remote synthesis request duration in seconds",
            buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
            registry=self._registry,
        )
        self._cache_hits = Counter(
            "tts_pipe_cache_hits_total",
            "Response cache hits",
            registry=self._registry,
        )
        self._cache_misses = Counter(
            "tts_pipe_cache_misses_total",
            "Response cache misses",
            registry=self._registry,
        )
        self._rate_limit_wait = Histogram(
            "tts_pipe_rate_limit_wait_seconds",
            "Time spent waiting for a rate-limit slot",
            buckets=(0.0, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
            registry=self._registry,
        )
        self._chunks = Counter(
            "tts_pipe_chunks_total",
            "Chunks processed",
            ["status"],
            registry=self._registry,
        )
        self._audio_bytes = Counter(
            "tts_pipe_audio_bytes_total",
            "Decoded audio bytes produced",
            registry=self._registry,
        )
        self._jobs = Counter(
            "tts_pipe_jobs_total",
            "Jobs run",
            ["status"],
            registry=self._registry,
        )
        self._job_duration = Histogram(
            "tts_pipe_job_duration_seconds",
            "Job duration in seconds",
            buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
            registry=self._registry,
        )
        self._busy_workers = Gauge(
            "tts_pipe_busy_workers",
            "Worker threads currently running a task",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def record_remote_request(self, outcome: str, duration: float) -> None:
        """
        Record one remote call.

        Args:
            outcome: "ok", "remote_error" or "transport_error".
            duration: Seconds spent in the HTTP round trip.
        """
        self._remote_requests.labels(outcome=outcome).inc()
        self._remote_duration.observe(duration)

    def record_cache(self, result: str) -> None:
        if result == "hit":
            self._cache_hits.inc()
        else:
            self._cache_misses.inc()

    def record_rate_limit_wait(self, seconds: float) -> None:
        self._rate_limit_wait.observe(max(0.0, seconds))

    def record_chunk(self, status: str, audio_bytes: int = 0) -> None:
        self._chunks.labels(status=status).inc()
        if audio_bytes > 0:
            self._audio_bytes.inc(audio_bytes)

    def record_job(self, status: str, duration: float | None = None) -> None:
        """Record a finished job. ``duration`` is omitted for rejected input."""
        self._jobs.labels(status=status).inc()
        if duration is not None:
            self._job_duration.observe(duration)

    def worker_busy(self) -> None:
        self._busy_workers.inc()

    def worker_idle(self) -> None:
        self._busy_workers.dec()

    def get_metrics_response(self) -> tuple[bytes, str]:
        """Return (content, content_type) in Prometheus text format."""
        return generate_latest(self._registry), CONTENT_TYPE_LATEST


metrics = PipelineMetrics()
