#!/usr/bin/env python3
"""
Tests for bullet resolution.

Each tick a bullet advances one step and then applies the FIRST of:
    base hit > barrier hit > tank hit > leaving the arena
and nothing else. Classic layout used throughout:
    player (124, 448), base (240, 464), enemies (0, 0) (224, 0) (448, 0)
"""

import pytest

from game.tanks import (
    CLASSIC_ARENA,
    Allegiance,
    ArenaConfig,
    Barrier,
    Bullet,
    Direction,
    Intents,
    Outcome,
    TankArena,
)

from conftest import make_arena


def _bullet(x, y, direction, source, speed=5, size=4):
    return Bullet(x=x, y=y, direction=direction, source=source, speed=speed, size=size)


def _player_bullet(x, y, direction=Direction.UP):
    return _bullet(x, y, direction, Allegiance.PLAYER)


def _enemy_bullet(x, y, direction=Direction.DOWN):
    return _bullet(x, y, direction, Allegiance.ENEMY)


# =============================================================================
# BASE
# =============================================================================

class TestBaseHits:

    def test_enemy_bullet_destroys_base(self, arena):
        arena.bullets.append(_enemy_bullet(256, 461))   # lands at y=466, inside the base

        result = arena.tick(Intents())

        assert result.outcome is Outcome.LOSS
        assert result.events["base_hits"] == 1
        assert arena.base.health == 0
        assert arena.bullets == []

    def test_player_bullet_absorbed_by_default(self, arena):
        arena.bullets.append(_player_bullet(256, 461, Direction.DOWN))

        result = arena.tick(Intents())

        assert result.outcome is Outcome.ONGOING
        assert arena.base.health == 1
        assert arena.bullets == []

    def test_player_bullet_damages_base_when_enabled(self):
        arena = make_arena(player_bullets_damage_base=True)
        arena.bullets.append(_player_bullet(256, 461, Direction.DOWN))

        result = arena.tick(Intents())

        assert result.outcome is Outcome.LOSS
        assert arena.base.health == 0

    def test_enemy_hit_loses_whatever_the_base_health(self):
        arena = make_arena(base_health=2)
        arena.bullets.append(_enemy_bullet(256, 461))

        result = arena.tick(Intents())

        assert result.outcome is Outcome.LOSS
        assert result.events["base_hits"] == 1
        assert arena.base.health == 0

    def test_player_fire_wears_the_base_down(self):
        arena = make_arena(base_health=2, player_bullets_damage_base=True)

        arena.bullets.append(_player_bullet(256, 461, Direction.DOWN))
        first = arena.tick(Intents())
        assert first.outcome is Outcome.ONGOING
        assert arena.base.health == 1

        arena.bullets.append(_player_bullet(256, 461, Direction.DOWN))
        second = arena.tick(Intents())
        assert second.outcome is Outcome.LOSS
        assert arena.base.health == 0

    def test_no_base_configured(self):
        arena = make_arena(base_position=None)
        arena.bullets.append(_enemy_bullet(256, 461))

        result = arena.tick(Intents())

        assert arena.base is None
        assert result.outcome is Outcome.ONGOING
        assert len(arena.bullets) == 1


# =============================================================================
# BARRIERS
# =============================================================================

class TestBarrierHits:

    def test_hit_takes_one_health(self, arena):
        arena.barriers.append(Barrier(x=320, y=200, size=32, health=3))
        arena.bullets.append(_player_bullet(336, 235))  # lands at y=230

        result = arena.tick(Intents())

        assert arena.barriers[0].health == 2
        assert result.events["barrier_hits"] == 1
        assert arena.bullets == []

    def test_last_point_removes_barrier(self, arena):
        arena.barriers.append(Barrier(x=320, y=200, size=32, health=1))
        arena.bullets.append(_enemy_bullet(336, 197))

        result = arena.tick(Intents())

        assert arena.barriers == []
        assert result.events["barriers_destroyed"] == 1

    def test_three_hits_to_destroy(self, arena):
        barrier = Barrier(x=320, y=200, size=32, health=3)
        arena.barriers.append(barrier)
        seen = []
        for _ in range(3):
            arena.bullets.append(_player_bullet(336, 235))
            arena.tick(Intents())
            seen.append(barrier.health)

        assert seen == [2, 1, 0]
        assert arena.barriers == []

    def test_bullet_never_passes_through(self, arena):
        # Two barriers stacked in the bullet's path: only the first is touched
        near = Barrier(x=320, y=200, size=32, health=3)
        far = Barrier(x=320, y=168, size=32, health=3)
        arena.barriers.extend([far, near])
        arena.bullets.append(_player_bullet(336, 235))
        for _ in range(10):
            arena.tick(Intents())

        assert near.health == 2
        assert far.health == 3

    def test_earliest_barrier_wins(self, arena):
        # Bullet straddles the seam between two barriers
        left = Barrier(x=288, y=200, size=32, health=3)
        right = Barrier(x=320, y=200, size=32, health=3)
        arena.barriers.extend([left, right])
        arena.bullets.append(_player_bullet(320, 235))

        result = arena.tick(Intents())

        assert (left.health, right.health) == (2, 3)
        assert result.events["barrier_hits"] == 1


# =============================================================================
# TANKS
# =============================================================================

class TestTankHits:

    def test_player_bullet_damages_enemy(self, arena):
        enemy = arena.enemies[1]                        # (224, 0), health 3
        arena.bullets.append(_player_bullet(240, 35))

        result = arena.tick(Intents())

        assert enemy.health == 2
        assert enemy in arena.enemies
        assert result.events["hits"] == 1
        assert result.events["kills"] == 0

    def test_enemy_removed_at_zero(self, arena):
        enemy = arena.enemies[1]
        enemy.health = 1
        arena.bullets.append(_player_bullet(240, 35))

        result = arena.tick(Intents())

        assert enemy not in arena.enemies
        assert len(arena.enemies) == 2
        assert result.events["kills"] == 1
        assert result.outcome is Outcome.ONGOING

    def test_enemy_bullet_ignores_enemies(self, arena):
        arena.bullets.append(_enemy_bullet(240, 35, Direction.UP))

        arena.tick(Intents())

        assert [e.health for e in arena.enemies] == [3, 3, 3]
        assert len(arena.bullets) == 1

    def test_player_bullet_ignores_player(self, arena):
        arena.bullets.append(_player_bullet(140, 470))

        arena.tick(Intents())

        assert arena.player.health == 2
        assert len(arena.bullets) == 1

    def test_enemy_bullet_damages_player(self, arena):
        arena.bullets.append(_enemy_bullet(140, 445))   # lands at y=450

        result = arena.tick(Intents())

        assert arena.player.health == 1
        assert result.events["damage_taken"] == 1
        assert result.outcome is Outcome.ONGOING
        assert arena.bullets == []

    def test_earliest_enemy_wins(self):
        arena = make_arena(enemy_spawns=((200, 100), (232, 100)))
        first, second = arena.enemies
        arena.bullets.append(_player_bullet(232, 135))  # straddles both hulls

        arena.tick(Intents())

        assert (first.health, second.health) == (2, 3)


# =============================================================================
# SINGLE EFFECT
# =============================================================================

class TestSingleEffect:

    def test_base_before_barrier(self, arena):
        barrier = Barrier(x=240, y=432, size=32, health=3)   # sits on top of the base
        arena.barriers.append(barrier)
        arena.bullets.append(_enemy_bullet(256, 459))         # lands at y=464, on the seam

        result = arena.tick(Intents())

        assert result.outcome is Outcome.LOSS
        assert barrier.health == 3
        assert result.events["barrier_hits"] == 0

    def test_barrier_before_tank(self):
        arena = make_arena(enemy_spawns=((300, 200),))
        enemy = arena.enemies[0]
        barrier = Barrier(x=300, y=232, size=32, health=3)    # directly below the enemy
        arena.barriers.append(barrier)
        arena.bullets.append(_player_bullet(316, 237))        # lands at y=232, on the seam

        result = arena.tick(Intents())

        assert barrier.health == 2
        assert enemy.health == 3
        assert result.events["hits"] == 0

    @pytest.mark.parametrize("seed", range(5))
    def test_at_most_one_effect_per_bullet(self, seed):
        arena = TankArena(ArenaConfig(**CLASSIC_ARENA), seed=seed)
        effects = ("hits", "damage_taken", "base_hits", "barrier_hits", "bullets_expired")
        for _ in range(600):
            before = len(arena.bullets)
            result = arena.tick(Intents(fire=True, up=True))
            events = result.events
            spent = sum(events[k] for k in effects)
            # every effect accounts for exactly one removed bullet
            assert len(arena.bullets) == before + events["shots"] - spent + events["enemy_shots"]
            if result.outcome.terminal:
                break


# =============================================================================
# OUT OF BOUNDS
# =============================================================================

class TestOutOfBounds:

    def test_bullet_leaving_arena_is_removed(self, arena):
        arena.bullets.append(_player_bullet(3, 200, Direction.LEFT))

        result = arena.tick(Intents())

        assert arena.bullets == []
        assert result.events["bullets_expired"] == 1

    def test_bullet_on_the_edge_survives(self, arena):
        bullet = _player_bullet(5, 200, Direction.LEFT)
        arena.bullets.append(bullet)

        arena.tick(Intents())
        assert arena.bullets == [bullet]
        assert bullet.x == 0

        arena.tick(Intents())
        assert arena.bullets == []

    def test_bullet_flies_until_it_leaves(self, arena):
        bullet = _player_bullet(400, 200, Direction.RIGHT)
        arena.bullets.append(bullet)

        ticks = 0
        while arena.bullets:
            arena.tick(Intents())
            ticks += 1

        # 400 -> 515 takes 23 steps of 5
        assert ticks == 23
