"""
Core utilities shared across the medinfo catalog.

This package hosts:
- configuration helpers (env vars, storage paths, session TTLs)
- cross-cutting services such as logging, password hashing and rate limiting.

Routers and services depend on these primitives instead of reading os.environ
or configuring handlers themselves.
"""
