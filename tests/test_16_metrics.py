"""Tests for Prometheus metrics."""
from __future__ import annotations

import pytest


@pytest.fixture
def collector():
    """Fresh collector with its own registry."""
    from tts_pipe.core.metrics import PipelineMetrics

    return PipelineMetrics()


def sample(collector, name, labels=None):
    return collector.registry.get_sample_value(name, labels or {})


class TestPipelineMetrics:
    """Test PipelineMetrics recording."""

    def test_global_instance(self):
        from tts_pipe.core.metrics import PipelineMetrics, metrics

        assert isinstance(metrics, PipelineMetrics)

    def test_remote_requests(self, collector):
        collector.record_remote_request("ok", 0.3)
        collector.record_remote_request("ok", 0.2)
        collector.record_remote_request("remote_error", 0.1)

        assert sample(collector, "tts_pipe_remote_requests_total", {"outcome": "ok"}) == 2
        assert sample(collector, "tts_pipe_remote_requests_total", {"outcome": "remote_error"}) == 1
        assert sample(collector, "tts_pipe_remote_request_duration_seconds_count") == 3

    def test_cache(self, collector):
        collector.record_cache("hit")
        collector.record_cache("miss")
        collector.record_cache("miss")

        assert sample(collector, "tts_pipe_cache_hits_total") == 1
        assert sample(collector, "tts_pipe_cache_misses_total") == 2

    def test_chunks_and_bytes(self, collector):
        collector.record_chunk("success", 1024)
        collector.record_chunk("failed")

        assert sample(collector, "tts_pipe_chunks_total", {"status": "success"}) == 1
        assert sample(collector, "tts_pipe_chunks_total", {"status": "failed"}) == 1
        assert sample(collector, "tts_pipe_audio_bytes_total") == 1024

    def test_jobs(self, collector):
        collector.record_job("success", 1.2)
        collector.record_job("rejected")

        assert sample(collector, "tts_pipe_jobs_total", {"status": "success"}) == 1
        assert sample(collector, "tts_pipe_jobs_total", {"status": "rejected"}) == 1
        assert sample(collector, "tts_pipe_job_duration_seconds_count") == 1

    def test_busy_workers(self, collector):
        collector.worker_busy()
        collector.worker_busy()
        collector.worker_idle()

        assert sample(collector, "tts_pipe_busy_workers") == 1

    def test_rate_limit_wait(self, collector):
        collector.record_rate_limit_wait(0.05)
        collector.record_rate_limit_wait(-1)

        assert sample(collector, "tts_pipe_rate_limit_wait_seconds_count") == 2
        assert sample(collector, "tts_pipe_rate_limit_wait_seconds_sum") == pytest.approx(0.05)

    def test_exposition(self, collector):
        collector.record_job("success", 1.0)
        content, content_type = collector.get_metrics_response()

        assert b"tts_pipe_jobs_total" in content
        assert content_type.startswith("text/plain")
