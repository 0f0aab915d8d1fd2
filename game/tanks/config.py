"""
Arena configuration

Every field of ArenaConfig is required; CLASSIC_ARENA holds the values of the
classic 512x512 layout (one player defending a base against three tanks).
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .entities import Direction
from .utils import Rect, rects_overlap


class ConfigError(ValueError):
    """Raised when an arena cannot be built from the given configuration"""


@dataclass(frozen=True)
class ArenaConfig:
    # Arena
    width: int
    height: int
    grid_size: int

    # Tanks
    tank_size: int
    tank_speed: int
    cooldown_time: int
    player_spawn: Tuple[int, int]
    player_direction: Direction
    player_health: int
    enemy_spawns: Tuple[Tuple[int, int], ...]
    enemy_direction: Direction
    enemy_health: int

    # Bullets
    bullet_speed: int
    bullet_size: int

    # Barriers (placed on a barrier_cols x barrier_rows grid from the top-left)
    barrier_count: int
    barrier_health: int
    barrier_cols: int
    barrier_rows: int
    max_placement_attempts: int

    # Base (None for arenas without one)
    base_position: Optional[Tuple[int, int]]
    base_size: int
    base_health: int
    player_bullets_damage_base: bool

    # Enemy behaviour, per tick
    reroll_probability: float
    pursue_probability: float
    fire_probability: float

    def __post_init__(self):
        # Accept plain strings / lists coming from dict configs
        object.__setattr__(self, "player_direction", Direction(self.player_direction))
        object.__setattr__(self, "enemy_direction", Direction(self.enemy_direction))
        object.__setattr__(self, "player_spawn", tuple(self.player_spawn))
        object.__setattr__(
            self, "enemy_spawns", tuple(tuple(s) for s in self.enemy_spawns)
        )
        if self.base_position is not None:
            object.__setattr__(self, "base_position", tuple(self.base_position))
        self.validate()

    def validate(self):
        for name in ("width", "height", "grid_size", "tank_size", "tank_speed",
                     "bullet_speed", "bullet_size", "barrier_health",
                     "player_health", "enemy_health", "base_health",
                     "max_placement_attempts"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")

        for name in ("cooldown_time", "barrier_count", "barrier_cols", "barrier_rows"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")

        for name in ("reroll_probability", "pursue_probability", "fire_probability"):
            p = getattr(self, name)
            if not 0.0 <= p <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {p}")

        if self.barrier_cols * self.grid_size > self.width or \
                self.barrier_rows * self.grid_size > self.height:
            raise ConfigError("barrier grid does not fit inside the arena")

        if self.barrier_count > self.barrier_cols * self.barrier_rows:
            raise ConfigError(
                f"too many barriers for the arena: {self.barrier_count} barriers, "
                f"{self.barrier_cols * self.barrier_rows} grid cells"
            )

        spawns = self.spawn_rects()
        for rect in spawns:
            if rect.left < 0 or rect.top < 0 or rect.right > self.width or rect.bottom > self.height:
                raise ConfigError(f"spawn {rect} lies outside the arena")
        for i, a in enumerate(spawns):
            for b in spawns[i + 1:]:
                if rects_overlap(a, b):
                    raise ConfigError(f"spawns {a} and {b} overlap")

        base = self.base_rect()
        if base is not None:
            if base.left < 0 or base.top < 0 or base.right > self.width or base.bottom > self.height:
                raise ConfigError(f"base {base} lies outside the arena")
            for rect in spawns:
                if rects_overlap(rect, base):
                    raise ConfigError(f"spawn {rect} overlaps the base")

    def spawn_rects(self) -> Tuple[Rect, ...]:
        """Player spawn first, then enemy spawns in order"""
        points = (self.player_spawn,) + self.enemy_spawns
        return tuple(Rect(x, y, self.tank_size, self.tank_size) for x, y in points)

    def base_rect(self) -> Optional[Rect]:
        if self.base_position is None:
            return None
        x, y = self.base_position
        return Rect(x, y, self.base_size, self.base_size)


CLASSIC_ARENA = {
    "width": 512,
    "height": 512,
    "grid_size": 32,
    "tank_size": 32,
    "tank_speed": 2,
    "cooldown_time": 30,
    "player_spawn": (124, 448),
    "player_direction": "up",
    "player_health": 2,
    "enemy_spawns": ((0, 0), (224, 0), (448, 0)),
    "enemy_direction": "down",
    "enemy_health": 3,
    "bullet_speed": 5,
    "bullet_size": 4,
    "barrier_count": 20,
    "barrier_health": 3,
    "barrier_cols": 15,
    "barrier_rows": 12,
    "max_placement_attempts": 1000,
    "base_position": (240, 464),
    "base_size": 32,
    "base_health": 1,
    "player_bullets_damage_base": False,
    "reroll_probability": 0.01,
    "pursue_probability": 0.8,
    "fire_probability": 0.02,
}
