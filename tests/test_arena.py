#!/usr/bin/env python3
"""
Tests for arena setup and the per-tick loop.

Covers:
- barrier placement (grid aligned, never on a tank, the base or another barrier)
- win / loss outcomes and what happens after them
- fire cooldown gating and the order cooldowns age in
- snapshots handed to renderers
"""

import dataclasses
import itertools

import pytest

from game.tanks import (
    CLASSIC_ARENA,
    Allegiance,
    ArenaConfig,
    Bullet,
    ConfigError,
    Direction,
    Intents,
    Outcome,
    TankArena,
)
from game.tanks.utils import rects_overlap

from conftest import ScriptedRng, arena_config, make_arena


def _bullet(x, y, direction, source):
    return Bullet(x=x, y=y, direction=direction, source=source, speed=5, size=4)


# =============================================================================
# BARRIER PLACEMENT
# =============================================================================

class TestBarrierPlacement:

    @pytest.mark.parametrize("seed", range(20))
    def test_barriers_never_overlap_tanks_or_each_other(self, classic_config, seed):
        arena = TankArena(classic_config, seed=seed)
        spawns = classic_config.spawn_rects()

        assert len(arena.barriers) == 20
        for barrier in arena.barriers:
            for spawn in spawns:
                assert not rects_overlap(barrier.rect, spawn)
            assert not rects_overlap(barrier.rect, arena.base.rect)
        for a, b in itertools.combinations(arena.barriers, 2):
            assert not rects_overlap(a.rect, b.rect)

    @pytest.mark.parametrize("seed", range(5))
    def test_barriers_on_the_grid(self, classic_config, seed):
        arena = TankArena(classic_config, seed=seed)
        for barrier in arena.barriers:
            assert barrier.x % 32 == 0 and barrier.y % 32 == 0
            assert 0 <= barrier.x < 15 * 32
            assert 0 <= barrier.y < 12 * 32
            assert barrier.health == 3
            assert barrier.size == 32

    def test_same_seed_same_layout(self, classic_config):
        first = TankArena(classic_config, seed=7)
        second = TankArena(classic_config, seed=7)
        assert [(b.x, b.y) for b in first.barriers] == [(b.x, b.y) for b in second.barriers]

    def test_fills_every_free_cell(self):
        # 2 x 2 grid, one cell taken by the enemy: exactly three barriers fit
        arena = make_arena(
            barrier_cols=2, barrier_rows=2, barrier_count=3,
            enemy_spawns=((0, 0),), max_placement_attempts=500,
        )
        assert sorted((b.x, b.y) for b in arena.barriers) == [(0, 32), (32, 0), (32, 32)]

    def test_too_many_barriers_fails_fast(self):
        config = arena_config(
            barrier_cols=2, barrier_rows=1, barrier_count=2,
            enemy_spawns=((0, 0),), max_placement_attempts=50,
        )
        with pytest.raises(ConfigError, match="too many barriers"):
            TankArena(config, seed=0)


# =============================================================================
# OUTCOMES
# =============================================================================

class TestOutcomes:

    def test_last_enemy_destroyed_wins(self):
        arena = make_arena(enemy_spawns=((224, 0),), enemy_health=1)
        arena.bullets.append(_bullet(240, 35, Direction.UP, Allegiance.PLAYER))

        result = arena.tick(Intents())

        assert result.outcome is Outcome.WIN
        assert arena.enemies == []
        assert result.events["kills"] == 1

    def test_player_destroyed_loses(self):
        arena = make_arena(player_health=1)
        arena.bullets.append(_bullet(140, 445, Direction.DOWN, Allegiance.ENEMY))

        result = arena.tick(Intents())

        assert result.outcome is Outcome.LOSS
        assert arena.player.health == 0
        assert arena.player not in arena.tanks

    def test_outcome_is_sticky(self):
        arena = make_arena(enemy_spawns=((224, 0),), enemy_health=1)
        arena.bullets.append(_bullet(240, 35, Direction.UP, Allegiance.PLAYER))
        arena.tick(Intents())
        player = arena.player
        x, y = player.x, player.y

        result = arena.tick(Intents(up=True, fire=True))

        assert result.outcome is Outcome.WIN
        assert (player.x, player.y) == (x, y)
        assert arena.bullets == []
        assert arena.enemies == []
        assert arena.tick_count == 1

    def test_rest_of_tick_skipped_after_loss(self):
        # The enemy would fire this tick if the enemy phase ran
        rng = ScriptedRng(randoms=[0.5, 0.0])
        arena = make_arena(rng=rng, player_health=1, enemy_spawns=((300, 100),))
        arena.bullets.append(_bullet(140, 445, Direction.DOWN, Allegiance.ENEMY))
        enemy = arena.enemies[0]

        result = arena.tick(Intents())

        assert result.outcome is Outcome.LOSS
        assert (enemy.x, enemy.y) == (300, 100)
        assert result.events["enemy_shots"] == 0

    def test_first_outcome_stands(self):
        # Base hit (loss) resolves before the winning shot in the same pass
        arena = make_arena(enemy_spawns=((224, 0),), enemy_health=1)
        arena.bullets.append(_bullet(256, 461, Direction.DOWN, Allegiance.ENEMY))
        arena.bullets.append(_bullet(240, 35, Direction.UP, Allegiance.PLAYER))

        result = arena.tick(Intents())

        assert result.outcome is Outcome.LOSS
        assert arena.enemies == []
        assert arena.bullets == []

    def test_ongoing_while_enemies_remain(self, arena):
        for _ in range(10):
            assert arena.tick(Intents()).outcome is Outcome.ONGOING


# =============================================================================
# COOLDOWN
# =============================================================================

class TestCooldown:

    def test_second_shot_inside_cooldown_is_dropped(self, arena):
        shots = [arena.tick(Intents(fire=True)).events["shots"] for _ in range(2)]
        assert shots == [1, 0]
        assert len([b for b in arena.bullets if b.source is Allegiance.PLAYER]) == 1

    def test_fires_again_once_cooldown_has_elapsed(self, arena):
        cooldown = arena.config.cooldown_time
        shots = [arena.tick(Intents(fire=True)).events["shots"] for _ in range(cooldown + 1)]

        assert shots[0] == 1
        assert sum(shots[1:cooldown]) == 0
        assert shots[cooldown] == 1

    def test_cooldown_ages_after_firing(self, arena):
        arena.tick(Intents(fire=True))
        assert arena.player.cooldown == arena.config.cooldown_time - 1

    def test_enemy_cooldowns_age(self, arena):
        for enemy in arena.enemies:
            enemy.cooldown = 3
        arena.tick(Intents())
        assert [e.cooldown for e in arena.enemies] == [2, 2, 2]

    def test_player_bullet_leaves_from_facing(self, arena):
        arena.tick(Intents(left=True, fire=True))
        (bullet,) = arena.bullets
        assert bullet.direction is Direction.LEFT
        assert bullet.source is Allegiance.PLAYER


# =============================================================================
# SNAPSHOT
# =============================================================================

class TestSnapshot:

    def test_reflects_state(self, classic_config):
        arena = TankArena(classic_config, seed=3)
        arena.tick(Intents(fire=True))
        snap = arena.snapshot()

        assert snap.tick == 1
        assert snap.outcome is Outcome.ONGOING
        assert (snap.width, snap.height) == (512, 512)
        assert snap.player.allegiance is Allegiance.PLAYER
        assert snap.player.health == 2
        assert len(snap.enemies) == len(arena.enemies)
        assert len(snap.barriers) == len(arena.barriers)
        assert len(snap.bullets) == len(arena.bullets)
        assert snap.base.health == 1

    def test_is_read_only(self, arena):
        snap = arena.snapshot()
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.player.health = 99
        assert isinstance(snap.enemies, tuple)

    def test_detached_from_live_state(self, arena):
        snap = arena.snapshot()
        arena.tick(Intents(up=True))
        assert snap.player.y == 448
        assert arena.player.y == 446

    def test_no_base(self):
        arena = make_arena(base_position=None)
        assert arena.snapshot().base is None


# =============================================================================
# RESET
# =============================================================================

def test_reset_restores_spawns(classic_config):
    arena = TankArena(classic_config, seed=1)
    for _ in range(50):
        arena.tick(Intents(up=True, fire=True))
    arena.reset()

    assert (arena.player.x, arena.player.y) == (124, 448)
    assert arena.player.health == 2
    assert [(e.x, e.y) for e in arena.enemies] == [(0, 0), (224, 0), (448, 0)]
    assert arena.bullets == []
    assert arena.tick_count == 0
    assert arena.outcome is Outcome.ONGOING


def test_config_shared_between_arenas():
    config = ArenaConfig(**CLASSIC_ARENA)
    a, b = TankArena(config, seed=1), TankArena(config, seed=2)
    a.tick(Intents(up=True))
    assert b.player.y == 448
