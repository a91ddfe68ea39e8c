"""
FastAPI REST API Layer for tts-pipe.

    - routes.py: /v1/tts, /v1/voices, /health, /metrics
    - schemas.py: Request models
    - dependencies.py: Shared settings, config and client
"""
