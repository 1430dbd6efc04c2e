"""Rate limiting adapters.

A small abstraction layer so the in-memory sliding-window limiter can be
swapped for a shared store (e.g. Redis) without changing the API layer.
"""
