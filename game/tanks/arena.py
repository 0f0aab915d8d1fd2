"""
TankArena - the tank battle simulation engine
---------------------------------------------
- One player tank defends a base against enemy tanks
- Destructible barriers placed on a grid at setup
- Fixed-step, discrete movement: a step is either taken whole or not at all
- Bullets fly straight and stop at the first thing they hit
- Enemies pursue the player greedily (see enemy_ai)

The arena knows nothing about windows or keyboards. A host feeds it one
Intents value per frame through tick() and reads snapshot() to draw it.

Per tick, in order:
    1. player movement, one step per held direction
    2. player fire
    3. bullet resolution
    4. enemy behaviour (heading, movement, fire)
    5. cooldowns age by one tick
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import ArenaConfig, ConfigError
from .enemy_ai import update_enemy
from .entities import DIRECTIONS, Allegiance, Barrier, Base, Bullet, Direction, Tank
from .snapshot import (
    ArenaSnapshot,
    BarrierView,
    BaseView,
    BulletView,
    Outcome,
    TankView,
)
from .utils import Rect, rects_overlap, step_offset

log = logging.getLogger(__name__)

EVENT_KEYS = (
    "shots",
    "enemy_shots",
    "hits",
    "kills",
    "damage_taken",
    "base_hits",
    "barrier_hits",
    "barriers_destroyed",
    "bullets_expired",
)


def _new_events() -> Dict[str, int]:
    return {key: 0 for key in EVENT_KEYS}


@dataclass(frozen=True)
class Intents:
    """Player input for one tick"""
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    fire: bool = False

    def directions(self) -> List[Direction]:
        """Held directions, in the order they are applied"""
        held = {
            Direction.UP: self.up,
            Direction.DOWN: self.down,
            Direction.LEFT: self.left,
            Direction.RIGHT: self.right,
        }
        return [d for d in DIRECTIONS if held[d]]


@dataclass(frozen=True)
class TickResult:
    outcome: Outcome
    events: Dict[str, int] = field(default_factory=_new_events)


class TankArena:
    """Owns every entity of one game and advances them one tick at a time"""

    def __init__(self, config: ArenaConfig, rng: Optional[random.Random] = None,
                 seed: Optional[int] = None):
        self.config = config
        self.rng = rng if rng is not None else random.Random(seed)

        self.player: Optional[Tank] = None
        self.enemies: List[Tank] = []
        self.barriers: List[Barrier] = []
        self.bullets: List[Bullet] = []
        self.base: Optional[Base] = None

        self.outcome = Outcome.ONGOING
        self.tick_count = 0

        self.reset()

    # ----------------------------
    # Setup
    # ----------------------------

    def reset(self):
        cfg = self.config
        self.outcome = Outcome.ONGOING
        self.tick_count = 0
        self.bullets = []

        px, py = cfg.player_spawn
        self.player = self._make_tank(px, py, cfg.player_direction,
                                      Allegiance.PLAYER, cfg.player_health)
        self.enemies = [
            self._make_tank(x, y, cfg.enemy_direction, Allegiance.ENEMY, cfg.enemy_health)
            for x, y in cfg.enemy_spawns
        ]

        self.base = None
        if cfg.base_position is not None:
            bx, by = cfg.base_position
            self.base = Base(x=bx, y=by, size=cfg.base_size, health=cfg.base_health)

        self.barriers = []
        self._generate_barriers()

        log.info("arena ready: %dx%d, %d enemies, %d barriers",
                 cfg.width, cfg.height, len(self.enemies), len(self.barriers))

    def _make_tank(self, x, y, direction, allegiance, health) -> Tank:
        cfg = self.config
        return Tank(
            x=x,
            y=y,
            direction=direction,
            allegiance=allegiance,
            health=health,
            size=cfg.tank_size,
            speed=cfg.tank_speed,
            cooldown=0,
            cooldown_time=cfg.cooldown_time,
        )

    def _generate_barriers(self):
        cfg = self.config
        for _ in range(cfg.barrier_count):
            for _ in range(cfg.max_placement_attempts):
                x = self.rng.randrange(cfg.barrier_cols) * cfg.grid_size
                y = self.rng.randrange(cfg.barrier_rows) * cfg.grid_size
                rect = Rect(x, y, cfg.grid_size, cfg.grid_size)
                if not self._is_occupied(rect):
                    self.barriers.append(
                        Barrier(x=x, y=y, size=cfg.grid_size, health=cfg.barrier_health)
                    )
                    break
            else:
                raise ConfigError(
                    f"too many barriers for the arena: placed {len(self.barriers)} of "
                    f"{cfg.barrier_count} after {cfg.max_placement_attempts} attempts"
                )

    def _is_occupied(self, rect: Rect) -> bool:
        if self.base is not None and rects_overlap(rect, self.base.rect):
            return True
        if any(rects_overlap(rect, t.rect) for t in self.tanks):
            return True
        return any(rects_overlap(rect, b.rect) for b in self.barriers)

    # ----------------------------
    # Queries
    # ----------------------------

    @property
    def tanks(self) -> List[Tank]:
        """Live roster: the player while alive, then the enemies"""
        roster = [self.player] if self.player.alive else []
        return roster + self.enemies

    def can_move(self, tank: Tank, new_x: float, new_y: float) -> bool:
        """Whether `tank` may occupy (new_x, new_y)"""
        cfg = self.config
        if new_x < 0 or new_x + tank.size > cfg.width or \
                new_y < 0 or new_y + tank.size > cfg.height:
            return False

        rect = tank.rect_at(new_x, new_y)
        if self.base is not None and rects_overlap(rect, self.base.rect):
            return False
        for barrier in self.barriers:
            if rects_overlap(rect, barrier.rect):
                return False
        for other in self.tanks:
            if other is not tank and rects_overlap(rect, other.rect):
                return False
        return True

    # ----------------------------
    # Actions
    # ----------------------------

    def move_tank(self, tank: Tank, direction: Direction) -> bool:
        """Turn `tank` to `direction` and take one step if the way is clear"""
        tank.direction = direction
        dx, dy = step_offset(direction, tank.speed)
        new_x, new_y = tank.x + dx, tank.y + dy
        if not self.can_move(tank, new_x, new_y):
            return False
        tank.x = new_x
        tank.y = new_y
        return True

    def fire(self, tank: Tank) -> Optional[Bullet]:
        bullet = tank.fire(self.config.bullet_speed, self.config.bullet_size)
        if bullet is not None:
            self.bullets.append(bullet)
        return bullet

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self, intents: Optional[Intents] = None) -> TickResult:
        """Advance the simulation by one step"""
        events = _new_events()
        if self.outcome.terminal:
            return TickResult(self.outcome, events)
        if intents is None:
            intents = Intents()

        self.tick_count += 1

        for direction in intents.directions():
            self.move_tank(self.player, direction)

        if intents.fire and self.fire(self.player) is not None:
            events["shots"] += 1

        self._resolve_bullets(events)
        if self.outcome.terminal:
            return TickResult(self.outcome, events)

        # Every enemy chases where the player is now, not where it ends up
        target = (self.player.x, self.player.y)
        for enemy in list(self.enemies):
            bullet = update_enemy(self, enemy, target, self.rng)
            if bullet is not None:
                self.bullets.append(bullet)
                events["enemy_shots"] += 1

        for tank in self.tanks:
            tank.update_cooldown()

        return TickResult(self.outcome, events)

    def _resolve_bullets(self, events: Dict[str, int]):
        survivors = []
        for bullet in self.bullets:
            bullet.advance()
            if not self._resolve_bullet(bullet, events):
                survivors.append(bullet)
        self.bullets = survivors

    def _resolve_bullet(self, bullet: Bullet, events: Dict[str, int]) -> bool:
        """Apply the first thing `bullet` hits. Returns True if the bullet is spent."""
        rect = bullet.rect

        if self.base is not None and rects_overlap(rect, self.base.rect):
            events["base_hits"] += 1
            if bullet.source is Allegiance.ENEMY:
                # Any enemy hit on the base is fatal, whatever its health
                self.base.health = 0
            elif self.config.player_bullets_damage_base:
                self.base.health = max(0, self.base.health - 1)
            if self.base.health <= 0:
                self._finish(Outcome.LOSS, f"base destroyed by {bullet.source.value} fire")
            return True

        for i, barrier in enumerate(self.barriers):
            if rects_overlap(rect, barrier.rect):
                barrier.health -= 1
                events["barrier_hits"] += 1
                if barrier.health <= 0:
                    del self.barriers[i]
                    events["barriers_destroyed"] += 1
                    log.debug("barrier at (%s, %s) destroyed", barrier.x, barrier.y)
                return True

        if bullet.source is Allegiance.PLAYER:
            for i, enemy in enumerate(self.enemies):
                if rects_overlap(rect, enemy.rect):
                    enemy.health -= 1
                    events["hits"] += 1
                    if enemy.health <= 0:
                        del self.enemies[i]
                        events["kills"] += 1
                        log.debug("enemy at (%s, %s) destroyed, %d left",
                                  enemy.x, enemy.y, len(self.enemies))
                        if not self.enemies:
                            self._finish(Outcome.WIN, "all enemies destroyed")
                    return True
        elif self.player.alive and rects_overlap(rect, self.player.rect):
            self.player.health -= 1
            events["damage_taken"] += 1
            if self.player.health <= 0:
                self._finish(Outcome.LOSS, "player destroyed")
            return True

        if not bullet.in_bounds(self.config.width, self.config.height):
            events["bullets_expired"] += 1
            return True

        return False

    def _finish(self, outcome: Outcome, reason: str):
        # First terminal outcome of a tick stands
        if self.outcome.terminal:
            return
        self.outcome = outcome
        log.info("game over after %d ticks: %s (%s)", self.tick_count,
                 outcome.value, reason)

    # ----------------------------
    # Snapshot
    # ----------------------------

    def snapshot(self) -> ArenaSnapshot:
        return ArenaSnapshot(
            width=self.config.width,
            height=self.config.height,
            tick=self.tick_count,
            outcome=self.outcome,
            player=TankView.of(self.player),
            enemies=tuple(TankView.of(e) for e in self.enemies),
            barriers=tuple(BarrierView.of(b) for b in self.barriers),
            bullets=tuple(BulletView.of(b) for b in self.bullets),
            base=BaseView.of(self.base) if self.base is not None else None,
        )

