"""
Utility Modules for tts-pipe.

    - files.py: Reading input text and session credentials, writing the artifact
    - timeit.py: Performance measurement utilities
"""
