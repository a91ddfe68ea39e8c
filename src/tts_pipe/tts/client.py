"""
Remote Synthesis Client.

One SynthesisClient is built per process and shared by every worker. It
owns the response cache and the rate limiter, so both persist across jobs.

Request flow for ``synthesize(text, voice_code, session_id)``:
    1. Cache lookup on (voice_code, text); a hit returns at once and
       does not consume a rate-limit slot
    2. RateLimiter.acquire()
    3. POST <base_url>/?text_speaker=..&req_text=..&speaker_map_type=0&aid=1233
    4. Non-zero ``status_code`` raises the mapped RemoteError (no retry)
    5. ``data.v_str`` is base64-decoded and offered to the cache
    6. The decoded bytes are returned

Text Encoding:
    ``+`` -> ``plus``, then every whitespace character -> ``+``, then
    ``&`` -> ``and``. The order matters: a literal plus must not be
    confused with an encoded space. The result is percent-quoted with
    ``+`` left literal.

Example:
    >>> config = load_settings().get_pipeline_config()
    >>> with SynthesisClient.from_config(config) as client:
    ...     audio = client.synthesize("Hello there", "en_us_002", session_id)
"""
from __future__ import annotations

import base64
import binascii
import re
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from tts_pipe.core.config import Defaults, PipelineConfig
from tts_pipe.core.errors import NoSessionProvidedError, RemoteError, TransportError, error_for_status
from tts_pipe.core.logging import debug, get_logger, verbose
from tts_pipe.core.metrics import metrics
from tts_pipe.tts.cache import SynthesisCache
from tts_pipe.tts.ratelimit import RateLimiter
from tts_pipe.utils.timeit import timeit

_LOG = get_logger("tts-pipe.client")

_WHITESPACE_CHAR = re.compile(r"\s")


def encode_text(text: str) -> str:
    """
    Apply the endpoint's text substitutions.

    >>> encode_text("a+b & c")
    'aplusb+and+c'
    """
    return _WHITESPACE_CHAR.sub("+", text.replace("+", "plus")).replace("&", "and")


class SynthesisClient:
    """
    Cached, rate-limited client for the remote synthesis endpoint.

    Thread-safe: the cache and the rate limiter each hold their own lock,
    and httpx.Client may be shared between threads. Neither lock is held
    during the network call.

    Args:
        base_url: Endpoint URL without query string.
        user_agent: User-Agent header value.
        speaker_map_type: Fixed ``speaker_map_type`` query value.
        aid: Fixed ``aid`` query value.
        timeout_s: Per-request timeout in seconds.
        rate_limiter: Shared limiter (default: 50ms spacing).
        cache: Shared response cache (default: 1000 entries).
        http_client: Pre-built httpx.Client. When omitted one is created
            (using ``transport`` if given) and closed by close().
        transport: httpx transport for the internally created client,
            e.g. httpx.MockTransport in tests.
    """

    def __init__(
        self,
        base_url: str = Defaults.API_BASE_URL,
        user_agent: str = Defaults.API_USER_AGENT,
        speaker_map_type: int = Defaults.API_SPEAKER_MAP_TYPE,
        aid: int = Defaults.API_AID,
        timeout_s: float = Defaults.API_TIMEOUT_S,
        rate_limiter: Optional[RateLimiter] = None,
        cache: Optional[SynthesisCache] = None,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.speaker_map_type = speaker_map_type
        self.aid = aid
        self.timeout_s = timeout_s
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter(
            Defaults.PERF_RATE_LIMIT_DELAY_MS / 1000.0
        )
        self.cache = cache if cache is not None else SynthesisCache(Defaults.CACHE_MAX_ITEMS)

        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.Client(
            timeout=httpx.Timeout(timeout_s), transport=transport
        )

    @classmethod
    def from_config(cls, config: PipelineConfig, **kwargs: Any) -> "SynthesisClient":
        """Build a client from validated configuration. kwargs override."""
        params: Dict[str, Any] = dict(
            base_url=config.api.base_url,
            user_agent=config.api.user_agent,
            speaker_map_type=config.api.speaker_map_type,
            aid=config.api.aid,
            timeout_s=config.api.timeout_s,
            rate_limiter=RateLimiter(config.performance.rate_limit_delay_s),
            cache=SynthesisCache(config.cache.max_items),
        )
        params.update(kwargs)
        return cls(**params)

    # =========================================================================
    # Synthesis
    # =========================================================================

    def build_url(self, text: str, voice_code: str) -> str:
        query = "&".join([
            f"text_speaker={quote(voice_code, safe='')}",
            f"req_text={quote(encode_text(text), safe='+')}",
            f"speaker_map_type={self.speaker_map_type}",
            f"aid={self.aid}",
        ])
        return f"{self.base_url}/?{query}"

    def synthesize(self, text: str, voice_code: str, session_id: str) -> bytes:
        """
        Synthesize one chunk of text.

        Args:
            text: Chunk text (already bounded by the segmenter).
            voice_code: Remote voice identifier, passed through opaquely.
            session_id: Session credential for the Cookie header.

        Returns:
            Decoded audio bytes.

        Raises:
            NoSessionProvidedError: session_id is blank (no request is made).
            RemoteError: The endpoint answered with a non-zero status_code.
            TransportError: Network failure or undecodable response.
        """
        key = (voice_code, text)
        cached = self.cache.get(key)
        if cached is not None:
            metrics.record_cache("hit")
            verbose(_LOG, "cache_hit", voice=voice_code, chars=len(text))
            return cached
        metrics.record_cache("miss")

        if not session_id or not session_id.strip():
            raise NoSessionProvidedError()

        waited = self.rate_limiter.acquire()
        metrics.record_rate_limit_wait(waited)

        with timeit("remote", meta={"chars": len(text)}) as t:
            try:
                audio = self._request(text, voice_code, session_id.strip())
            except RemoteError:
                metrics.record_remote_request("remote_error", t.elapsed)
                raise
            except TransportError:
                metrics.record_remote_request("transport_error", t.elapsed)
                raise
        metrics.record_remote_request("ok", t.timing.seconds if t.timing else 0.0)

        stored = self.cache.put(key, audio)
        verbose(
            _LOG,
            "synthesized",
            voice=voice_code,
            chars=len(text),
            bytes=len(audio),
            cached=stored,
            seconds=round(t.timing.seconds, 3) if t.timing else None,
        )
        return audio

    def _request(self, text: str, voice_code: str, session_id: str) -> bytes:
        url = self.build_url(text, voice_code)
        headers = {
            "User-Agent": self.user_agent,
            "Cookie": f"sessionid={session_id}",
            "Accept-Encoding": "gzip,deflate,compress",
        }
        debug(_LOG, "remote_request", voice=voice_code, url_len=len(url))

        try:
            response = self._http.post(url, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(f"TTS API request failed: {e}", details={"type": type(e).__name__}) from e

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                "TTS API returned invalid JSON",
                details={"http_status": response.status_code},
            ) from e
        if not isinstance(data, dict):
            raise TransportError("TTS API returned an unexpected payload", details={"http_status": response.status_code})

        status_code = data.get("status_code")
        if status_code != 0:
            raise error_for_status(status_code)

        payload = data.get("data") or {}
        v_str = payload.get("v_str") if isinstance(payload, dict) else None
        if not v_str:
            raise TransportError("TTS API response contained no audio data")

        try:
            return base64.b64decode(v_str, validate=True)
        except (binascii.Error, ValueError) as e:
            raise TransportError("TTS API returned invalid base64 audio") from e

    # =========================================================================
    # Cache management and lifecycle
    # =========================================================================

    def cache_stats(self) -> Dict[str, int]:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "SynthesisClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
