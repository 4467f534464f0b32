"""Shared fixtures for the big-integer helper tests."""

from __future__ import annotations

import pytest

import digits
from powcache import PowCacheRegistry
from settings import Settings


@pytest.fixture
def registry() -> PowCacheRegistry:
    """An isolated registry so cache state never leaks between tests."""
    return PowCacheRegistry()


@pytest.fixture
def tiny_registry() -> PowCacheRegistry:
    """A registry whose caches are small enough to reason about by hand."""
    return PowCacheRegistry(
        Settings(default_max_size=16, min_growth=4, growth_headroom=1)
    )


@pytest.fixture(params=["limbs", "decimal"])
def large_path(request, monkeypatch) -> str:
    """Run a test once through each large-value trailing-zero path."""
    use_limbs = request.param == "limbs"
    monkeypatch.setattr(digits, "optimizations_enabled", lambda: use_limbs)
    return request.param


@pytest.fixture
def fallback_only(monkeypatch) -> None:
    """Force the portable decimal fallback for large values."""
    monkeypatch.setattr(digits, "optimizations_enabled", lambda: False)
