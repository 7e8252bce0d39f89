"""
Core utilities shared across the Cardfolio API.

This package hosts:
- configuration helpers (env vars, paths, limits)
- cross-cutting services such as logging setup, the mailer adapter,
  password hashing and rate limit helpers.

Routers and services depend on these primitives instead of reading
os.environ or configuring logging themselves.
"""
