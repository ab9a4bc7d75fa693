"""Shared fixtures for all tests."""

import os

import pytest

from statforge.config import get_settings
from statforge.game.character.resources import ResourcePool
from statforge.game.stats.registry import StatRegistry
from statforge.game.stats.stat import Stat
from statforge.game.stats.stat_type import StatType


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep STATFORGE_* variables from the host environment out of tests."""
    for key in list(os.environ):
        if key.startswith("STATFORGE_"):
            monkeypatch.delenv(key)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def attack_stat():
    """An Attack stat with base value 10."""
    return Stat(StatType.ATTACK, 10)


@pytest.fixture
def registry():
    """A registry with a typical set of character stats."""
    return StatRegistry(
        {
            StatType.MAX_HEALTH: 100,
            StatType.MAX_MANA: 50,
            StatType.MAX_STAMINA: 100,
            StatType.ATTACK: 10,
            StatType.DEFENSE: 50,
            StatType.MAGIC_DEFENSE: 25,
        }
    )


@pytest.fixture
def pool(registry):
    """A resource pool at full health, mana and stamina."""
    return ResourcePool(registry)


class Recorder:
    """Collects every call made to it, for asserting on emitted events."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)

    @property
    def count(self):
        return len(self.calls)

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def recorder():
    """Factory for event recorders."""
    return Recorder
