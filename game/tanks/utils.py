"""
Geometry helpers shared by the arena, the env and the tests
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple
import numpy as np

if TYPE_CHECKING:
    from .entities import Direction


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle, (x, y) is the top-left corner"""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps(self, other: "Rect") -> bool:
        return rects_overlap(self, other)


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Check if two rectangles overlap. Touching edges do not count."""
    return not (
        a.right <= b.left
        or a.left >= b.right
        or a.bottom <= b.top
        or a.top >= b.bottom
    )


def step_offset(direction: Direction, distance: float) -> Tuple[float, float]:
    """Displacement of one step of `distance` along `direction` (y grows down)"""
    ux, uy = direction.unit
    return ux * distance, uy * distance


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
