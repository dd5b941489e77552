"""Shared test fixtures."""

from __future__ import annotations

import pytest

from vigil.health.checker import Checker


@pytest.fixture
def checker():
    """Inline checker (no timeout) with a fixed revision."""
    c = Checker(revision_provider=lambda: "abc123")
    yield c
    c.close()


@pytest.fixture
def timed_checker():
    """Checker running each check on a worker thread with a short timeout."""
    c = Checker(revision_provider=lambda: "abc123", check_timeout=0.2)
    yield c
    c.close()
