"""Domain layer (pure logic).

- Keep dice weighting and roll bookkeeping here.
- Avoid I/O: no HTTP/FastAPI, no scheduler, no environment lookups.
- Random sources are passed in as arguments (rng=...) so tests can seed them.
"""
