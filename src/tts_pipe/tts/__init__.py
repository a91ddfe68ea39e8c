"""
Synthesis Dispatch Components.

    - chunker.py: Text cleaning, validation and word-packing segmentation
    - cache.py: Bounded response cache keyed by (voice, text)
    - ratelimit.py: Minimum spacing between outbound requests
    - client.py: Remote synthesis client (cache + rate limit + HTTP)
    - pool.py: Fixed-size worker thread pool with futures
"""
