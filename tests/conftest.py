"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any application import so settings
are built for the testing environment.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from products_api.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from products_api.adapters.store.in_memory import InMemoryRecordStore
from products_api.core.app_factory import create_app


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def clock() -> Mock:
    """Controllable time source starting at t=1000s."""
    return Mock(return_value=1000.0)


@pytest.fixture
def app(store: InMemoryRecordStore) -> FastAPI:
    """Fresh app per test, with its own store and limiter."""
    return create_app(store=store)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def limited_app_factory(store: InMemoryRecordStore, clock: Mock):
    """Build apps whose limiter uses the fake clock and a small limit."""

    def _build(limit: int = 2, window_seconds: int = 60) -> FastAPI:
        limiter = InMemorySlidingWindowRateLimiter(
            limit=limit, window_seconds=window_seconds, clock=clock
        )
        return create_app(store=store, rate_limiter=limiter)

    return _build
