"""Shared fixtures for the tank arena tests."""

import random

import pytest

from game.tanks import CLASSIC_ARENA, ArenaConfig, TankArena


class ScriptedRng:
    """
    Stand-in for random.Random with scripted draws.

    random() pops from `randoms` and falls back to `default` (0.99 keeps enemies
    from re-rolling or firing); choice() pops from `choices`; randrange() is
    delegated to a seeded Random so barrier layouts still work.
    """

    def __init__(self, randoms=(), choices=(), default=0.99, seed=0):
        self.randoms = list(randoms)
        self.choices = list(choices)
        self.default = default
        self._real = random.Random(seed)

    def random(self):
        return self.randoms.pop(0) if self.randoms else self.default

    def choice(self, seq):
        return self.choices.pop(0) if self.choices else seq[0]

    def randrange(self, *args):
        return self._real.randrange(*args)


def arena_config(**overrides) -> ArenaConfig:
    """Classic arena without barriers, with any field overridden."""
    params = dict(CLASSIC_ARENA)
    params["barrier_count"] = 0
    params.update(overrides)
    return ArenaConfig(**params)


def make_arena(rng=None, **overrides) -> TankArena:
    return TankArena(arena_config(**overrides), rng=rng if rng is not None else ScriptedRng())


@pytest.fixture
def classic_config():
    return ArenaConfig(**CLASSIC_ARENA)


@pytest.fixture
def quiet_rng():
    return ScriptedRng()


@pytest.fixture
def arena(quiet_rng):
    """Classic layout, no barriers, enemies that never re-roll or fire."""
    return make_arena(rng=quiet_rng)
