"""
Core Infrastructure for tts-pipe.

This package provides foundational components:
    - config.py: Configuration loading and validation
    - errors.py: Error codes and the exception hierarchy
    - logging/: Structured logging with numeric levels
    - metrics.py: Prometheus metrics collection
    - voices.py: Voice catalog
"""
