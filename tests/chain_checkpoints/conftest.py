"""
Shared pytest fixtures for all chain_checkpoints tests.

Provides core fixtures used across multiple test modules.
"""

from __future__ import annotations

import pytest

from chain_checkpoints.checkpoints import CheckpointRegistry, NetworkType
from tests.chain_checkpoints.helpers import make_registry


@pytest.fixture
def registry() -> CheckpointRegistry:
    """Empty checkpoint registry."""
    return CheckpointRegistry()


@pytest.fixture
def sparse_registry() -> CheckpointRegistry:
    """Registry pinning heights 10 and 50."""
    return make_registry(10, 50)


@pytest.fixture
def mainnet_registry() -> CheckpointRegistry:
    """Registry holding the built-in mainnet checkpoints."""
    registry = CheckpointRegistry()
    assert registry.init_default_checkpoints(NetworkType.MAINNET)
    return registry
