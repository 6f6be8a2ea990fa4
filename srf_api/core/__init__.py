"""
Core utilities shared across the forms API.

This package hosts configuration, logging setup, password helpers and the
rate limiter. Routers and services depend on these primitives instead of
reading os.environ or configuring handlers themselves.
"""
