"""Pytest configuration and fixtures for forest generator tests."""

import random

import pytest

from forestgen import ModuleRegistry, PlantSettings


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def settings():
    return PlantSettings().clamped()


@pytest.fixture
def path_registry():
    """Registry whose modules are a three-node path."""
    return ModuleRegistry({"path": [(0, 1), (1, 2)]}, seed=1)
