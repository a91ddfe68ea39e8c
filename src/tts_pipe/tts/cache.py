"""
Bounded Response Cache.

Maps ``(voice_code, text)`` to decoded audio bytes. Shared by every worker
of a SynthesisClient and kept across jobs.

Admission policy:
    - Entries are admitted while ``size < max_items``
    - Once full, new keys are silently dropped (no eviction)
    - Re-putting an existing key overwrites it, full or not

Example:
    >>> cache = SynthesisCache(max_items=2)
    >>> cache.put(("en_us_002", "hello"), b"...")
    True
    >>> cache.get(("en_us_002", "hello"))
    b'...'
"""
from __future__ import annotations

import threading
from typing import Dict, Optional, Tuple

from tts_pipe.core.config import Defaults
from tts_pipe.core.logging import debug, get_logger

_LOG = get_logger("tts-pipe.cache")

CacheKey = Tuple[str, str]


class SynthesisCache:
    """
    Thread-safe first-come cache with a hard size bound.

    All public methods take a single lock. Hit/miss counters are kept for
    ``stats()``.

    Attributes:
        max_items: Admission stops once this many entries are stored.
    """

    def __init__(self, max_items: int = Defaults.CACHE_MAX_ITEMS):
        self.max_items = int(max_items)
        self._d: Dict[CacheKey, bytes] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: CacheKey) -> Optional[bytes]:
        with self._lock:
            data = self._d.get(key)
            if data is None:
                self._misses += 1
            else:
                self._hits += 1
            return data

    def put(self, key: CacheKey, data: bytes) -> bool:
        """
        Store ``data`` under ``key`` if there is room.

        Returns:
            True if stored, False if the cache is full and key is new.
        """
        with self._lock:
            if key not in self._d and len(self._d) >= self.max_items:
                debug(_LOG, "cache_full", size=len(self._d), max_items=self.max_items)
                return False
            self._d[key] = data
            return True

    def clear(self) -> None:
        with self._lock:
            self._d.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._d)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._d

    def stats(self) -> Dict[str, int]:
        """Return size, max_items, hits and misses."""
        with self._lock:
            return {
                "size": len(self._d),
                "max_items": self.max_items,
                "hits": self._hits,
                "misses": self._misses,
            }
