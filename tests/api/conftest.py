"""Fixtures shared by the HTTP endpoint tests."""

import pytest

from src.api.middleware.rate_limit import limiter


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Clear limiter counters so each test starts under the per-minute caps."""
    limiter.reset()
    yield
    limiter.reset()
