"""
Tests for the HTTP API.

The shared SynthesisClient and config are replaced through
app.dependency_overrides; the endpoint is an httpx.MockTransport.
"""
import base64

import httpx
import pytest


@pytest.fixture
def api():
    """TestClient with a mocked endpoint; yields (client, state)."""
    from fastapi.testclient import TestClient

    from tts_pipe.api.dependencies import get_client, get_config
    from tts_pipe.core.config import Settings
    from tts_pipe.main import create_app
    from tts_pipe.tts.client import SynthesisClient
    from tts_pipe.tts.ratelimit import RateLimiter

    state = {"requests": [], "status_code": 0, "session": "server-sess"}

    def handler(request: httpx.Request) -> httpx.Response:
        text = request.url.params["req_text"]
        state["requests"].append((text, request.headers["cookie"]))
        if state["status_code"] != 0:
            return httpx.Response(200, json={"status_code": state["status_code"]})
        v_str = base64.b64encode(f"<{text}>".encode()).decode("ascii")
        return httpx.Response(200, json={"status_code": 0, "data": {"v_str": v_str}})

    def config_override():
        raw = {"performance": {"max_workers": 1, "rate_limit_delay_ms": 0}}
        if state["session"]:
            raw["api"] = {"session_id": state["session"]}
        return Settings(raw=raw).get_pipeline_config()

    synth = SynthesisClient(rate_limiter=RateLimiter(0), transport=httpx.MockTransport(handler))

    app = create_app()
    app.dependency_overrides[get_config] = config_override
    app.dependency_overrides[get_client] = lambda: synth

    yield TestClient(app), state
    synth.close()


class TestSynthesisEndpoint:
    """POST /v1/tts"""

    def test_returns_audio(self, api):
        c, state = api
        r = c.post("/v1/tts", json={"text": "one two three", "max_chunk_length": 3})

        assert r.status_code == 200
        assert r.headers["content-type"].startswith("audio/mpeg")
        assert r.content == b"<one><two><three>"
        assert r.headers["X-Chunks-Total"] == "3"
        assert r.headers["X-Chunks-Failed"] == "0"
        assert len(r.headers["X-Job-Id"]) == 8
        assert state["requests"][0][1] == "sessionid=server-sess"

    def test_request_session_overrides_config(self, api):
        c, state = api
        r = c.post("/v1/tts", json={"text": "hello", "session_id": "mine"})
        assert r.status_code == 200
        assert state["requests"] == [("hello", "sessionid=mine")]

    def test_text_is_cleaned(self, api):
        c, state = api
        r = c.post("/v1/tts", json={"text": "  hello   #world  "})
        assert r.status_code == 200
        assert r.content == b"<hello world>"

    @pytest.mark.parametrize("text,code", [
        ("", "EMPTY_INPUT"),
        ("   ", "EMPTY_INPUT"),
        ("x" * 10_001, "INPUT_TOO_LONG"),
    ])
    def test_bad_text(self, api, text, code):
        c, state = api
        r = c.post("/v1/tts", json={"text": text})
        assert r.status_code == 400
        body = r.json()
        assert body["ok"] is False
        assert body["error"] == code
        assert state["requests"] == []

    def test_no_session(self, api):
        c, state = api
        state["session"] = None
        r = c.post("/v1/tts", json={"text": "hello"})
        assert r.status_code == 401
        assert r.json()["error"] == "NO_SESSION"

    def test_all_chunks_fail(self, api):
        c, state = api
        state["status_code"] = 1
        r = c.post("/v1/tts", json={"text": "hello"})
        assert r.status_code == 502
        body = r.json()
        assert body["error"] == "NO_SUCCESSFUL_CHUNKS"
        assert body["details"]["chunks"] == 1

    def test_max_workers_capped_at_server_setting(self, api, monkeypatch):
        import tts_pipe.services.orchestrator as orchestrator_module

        sizes = []
        real_pool = orchestrator_module.WorkerPool

        def recording_pool(size, handler, *args, **kwargs):
            sizes.append(size)
            return real_pool(size, handler, *args, **kwargs)

        monkeypatch.setattr(orchestrator_module, "WorkerPool", recording_pool)

        c, state = api
        r = c.post("/v1/tts", json={
            "text": "a b c d e f",
            "max_chunk_length": 1,
            "max_workers": 100_000,
        })
        assert r.status_code == 200
        assert r.headers["X-Chunks-Total"] == "6"
        assert sizes == [1]

    def test_schema_validation(self, api):
        c, _ = api
        assert c.post("/v1/tts", json={"text": "hi", "max_chunk_length": 0}).status_code == 422
        assert c.post("/v1/tts", json={}).status_code == 422


class TestInfoEndpoints:
    """GET endpoints."""

    def test_voices(self, api):
        c, _ = api
        r = c.get("/v1/voices")
        assert r.status_code == 200
        body = r.json()
        assert body["English Standard"][0] == {
            "name": "Jessie",
            "code": "en_us_002",
            "category": "English Standard",
            "language": "English",
        }
        assert all(body.values())

    def test_health(self, api):
        c, _ = api
        c.post("/v1/tts", json={"text": "hello"})
        r = c.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["config"]["session_configured"] is True
        assert body["logging"]["level"] in ("MINIMAL", "NORMAL", "VERBOSE", "DEBUG")
        assert body["cache"]["size"] == 1

    def test_metrics(self, api):
        c, _ = api
        c.post("/v1/tts", json={"text": "hello"})
        r = c.get("/metrics")
        assert r.status_code == 200
        assert "tts_pipe_jobs_total" in r.text
        assert "tts_pipe_remote_requests_total" in r.text
