"""
Immutable views of the arena state, handed to renderers and observers
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .entities import Allegiance, Barrier, Base, Bullet, Direction, Tank


class Outcome(Enum):
    ONGOING = "ongoing"
    WIN = "win"
    LOSS = "loss"

    @property
    def terminal(self) -> bool:
        return self is not Outcome.ONGOING


@dataclass(frozen=True)
class TankView:
    x: float
    y: float
    size: float
    direction: Direction
    health: int
    cooldown: int
    allegiance: Allegiance

    @classmethod
    def of(cls, tank: Tank) -> "TankView":
        return cls(tank.x, tank.y, tank.size, tank.direction, tank.health,
                   tank.cooldown, tank.allegiance)


@dataclass(frozen=True)
class BarrierView:
    x: float
    y: float
    size: float
    health: int

    @classmethod
    def of(cls, barrier: Barrier) -> "BarrierView":
        return cls(barrier.x, barrier.y, barrier.size, barrier.health)


@dataclass(frozen=True)
class BaseView:
    x: float
    y: float
    size: float
    health: int

    @classmethod
    def of(cls, base: Base) -> "BaseView":
        return cls(base.x, base.y, base.size, base.health)


@dataclass(frozen=True)
class BulletView:
    x: float
    y: float
    size: float
    direction: Direction
    source: Allegiance

    @classmethod
    def of(cls, bullet: Bullet) -> "BulletView":
        return cls(bullet.x, bullet.y, bullet.size, bullet.direction, bullet.source)


@dataclass(frozen=True)
class ArenaSnapshot:
    width: int
    height: int
    tick: int
    outcome: Outcome
    player: TankView
    enemies: Tuple[TankView, ...]
    barriers: Tuple[BarrierView, ...]
    bullets: Tuple[BulletView, ...]
    base: Optional[BaseView]
