"""
tts-pipe Services Layer.

Sits between the front-ends (CLI, HTTP API) and the dispatch components.

Components:
    - orchestrator.py: Orchestrator (one call per job), job data classes
"""
from .orchestrator import (
    ChunkResult,
    JobMetrics,
    JobResult,
    Orchestrator,
    Task,
    cache_hit_rate,
)

__all__ = [
    "Orchestrator",
    "Task",
    "ChunkResult",
    "JobMetrics",
    "JobResult",
    "cache_hit_rate",
]
