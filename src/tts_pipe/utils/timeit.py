"""
Timing helpers.

    with timeit("split", meta={"chars": len(text)}) as t:
        chunks = split_text(text, 200)
    verbose(log, "chunked", seconds=t.timing.seconds)

Uses time.perf_counter().
"""
from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import Any, Dict, Optional


@dataclass
class Timing:
    """Result of one measurement."""
    name: str
    seconds: float
    meta: Optional[Dict[str, Any]] = None


class timeit:
    """
    Context manager timing the enclosed block.

    ``timing`` is set on exit, also when the block raises, so callers can
    log how long a failed step took.
    """

    def __init__(self, name: str, meta: Optional[Dict[str, Any]] = None):
        self.name = name
        self.meta = meta
        self._t0: float | None = None
        self.timing: Timing | None = None

    def __enter__(self) -> "timeit":
        self._t0 = perf_counter()
        return self

    @property
    def elapsed(self) -> float:
        """Seconds since entering the block (final value after exit)."""
        if self.timing is not None:
            return self.timing.seconds
        if self._t0 is None:
            return 0.0
        return perf_counter() - self._t0

    def __exit__(self, exc_type, exc, tb) -> None:
        t1 = perf_counter()
        assert self._t0 is not None
        self.timing = Timing(name=self.name, seconds=(t1 - self._t0), meta=self.meta)

