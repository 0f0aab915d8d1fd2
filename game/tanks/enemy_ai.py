"""
Enemy tank behaviour
--------------------
Enemies hold a heading and drive along it every tick. With a small chance per
tick they re-think the heading:
- most of the time they pursue the player: step along the axis with the larger
  gap, fall back to the other axis when blocked, and turn around when both are
  blocked
- otherwise they pick a random heading, legal or not
They also fire at random while their gun is ready.

There is no search here; an enemy can stay stuck against terrain until the
next re-roll.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Tuple

from .entities import DIRECTIONS, Bullet, Direction, Tank
from .utils import step_offset

if TYPE_CHECKING:
    from .arena import TankArena

log = logging.getLogger(__name__)


def pursuit_axes(enemy: Tank, target_x: float, target_y: float) -> Tuple[Direction, Direction]:
    """Primary and secondary headings toward the target, larger gap first"""
    dx = target_x - enemy.x
    dy = target_y - enemy.y
    horizontal = Direction.RIGHT if dx > 0 else Direction.LEFT
    vertical = Direction.DOWN if dy > 0 else Direction.UP
    if abs(dx) > abs(dy):
        return horizontal, vertical
    return vertical, horizontal


def pursue_direction(arena: "TankArena", enemy: Tank, target_x: float, target_y: float) -> Direction:
    primary, secondary = pursuit_axes(enemy, target_x, target_y)
    for direction in (primary, secondary):
        dx, dy = step_offset(direction, enemy.speed)
        if arena.can_move(enemy, enemy.x + dx, enemy.y + dy):
            return direction
    # Both blocked: turn around
    return enemy.direction.opposite or primary


def choose_direction(arena: "TankArena", enemy: Tank, target: Tuple[float, float], rng) -> Optional[Direction]:
    """New heading for this tick, or None when the enemy keeps its heading"""
    if rng.random() >= arena.config.reroll_probability:
        return None
    if rng.random() < arena.config.pursue_probability:
        return pursue_direction(arena, enemy, *target)
    return rng.choice(DIRECTIONS)


def update_enemy(arena: "TankArena", enemy: Tank, target: Tuple[float, float], rng) -> Optional[Bullet]:
    """Run one tick of behaviour for an enemy; returns the bullet it fired, if any"""
    direction = choose_direction(arena, enemy, target, rng)
    if direction is not None and direction is not enemy.direction:
        log.debug("enemy at (%s, %s) turns %s -> %s", enemy.x, enemy.y,
                  enemy.direction.value, direction.value)
    if direction is not None:
        enemy.direction = direction

    arena.move_tank(enemy, enemy.direction)

    if rng.random() < arena.config.fire_probability:
        return enemy.fire(arena.config.bullet_speed, arena.config.bullet_size)
    return None
