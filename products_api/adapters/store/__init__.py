"""Record storage adapters.

The service depends on the abstract store so the in-memory map can later be
replaced by a shared backend without touching the HTTP layer.
"""
