"""Shared test fixtures for the hasscope test suite."""

from __future__ import annotations

import pytest

from hasscope.core.scope import ScopeRegistry


class Owner:
    """Registry owner used by engine-level tests."""


@pytest.fixture
def registry() -> ScopeRegistry:
    return ScopeRegistry()


@pytest.fixture
def owner() -> type:
    return Owner
