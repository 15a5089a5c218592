"""
Core utilities shared across the owners API.

This package hosts configuration helpers (env vars, database URL, session
TTL) and cross-cutting services such as logging, password hashing and rate
limit helpers. Services and routers depend on these primitives instead of
reading os.environ directly.
"""
