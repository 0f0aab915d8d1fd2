"""
Game entity dataclasses
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .utils import Rect, step_offset


class Direction(Enum):
    """Facing / travel direction. Screen coordinates: y grows downward."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def unit(self) -> Tuple[int, int]:
        return _UNITS[self]

    @property
    def opposite(self) -> Optional["Direction"]:
        return _OPPOSITES.get(self)


_UNITS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Order matters: wander draws from it and player intents are applied in it
DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


class Allegiance(Enum):
    PLAYER = "player"
    ENEMY = "enemy"


@dataclass
class Bullet:
    """Projectile entity. (x, y) is the centre of the bullet."""
    x: float
    y: float
    direction: Direction
    source: Allegiance
    speed: float
    size: float

    @property
    def rect(self) -> Rect:
        half = self.size / 2
        return Rect(self.x - half, self.y - half, self.size, self.size)

    def advance(self):
        dx, dy = step_offset(self.direction, self.speed)
        self.x += dx
        self.y += dy

    def in_bounds(self, width: float, height: float) -> bool:
        return 0 <= self.x <= width and 0 <= self.y <= height


@dataclass
class Tank:
    """Tank entity, player or enemy. (x, y) is the top-left corner."""
    x: float
    y: float
    direction: Direction
    allegiance: Allegiance
    health: int
    size: float
    speed: float
    cooldown: int
    cooldown_time: int

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.size, self.size)

    @property
    def alive(self) -> bool:
        return self.health > 0

    @property
    def is_player(self) -> bool:
        return self.allegiance is Allegiance.PLAYER

    def rect_at(self, x: float, y: float) -> Rect:
        return Rect(x, y, self.size, self.size)

    def fire(self, bullet_speed: float, bullet_size: float) -> Optional[Bullet]:
        """Spawn a bullet from the tank centre, or None while cooling down"""
        if self.cooldown > 0:
            return None
        self.cooldown = self.cooldown_time
        return Bullet(
            x=self.x + self.size / 2,
            y=self.y + self.size / 2,
            direction=self.direction,
            source=self.allegiance,
            speed=bullet_speed,
            size=bullet_size,
        )

    def update_cooldown(self):
        if self.cooldown > 0:
            self.cooldown -= 1


@dataclass
class Barrier:
    """Destructible wall block"""
    x: float
    y: float
    size: float
    health: int

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.size, self.size)


@dataclass
class Base:
    """The player's base. Immovable obstacle; losing it loses the game."""
    x: float
    y: float
    size: float
    health: int

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.size, self.size)
