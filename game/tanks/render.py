"""
Colours and an offscreen numpy rasteriser for arena snapshots
"""

from typing import Tuple

import numpy as np

from .entities import Allegiance, Direction
from .snapshot import ArenaSnapshot

Color = Tuple[int, int, int]

BG: Color = (0, 0, 0)
PLAYER_C: Color = (85, 204, 153)
PLAYER_CANNON_C: Color = (17, 136, 85)
ENEMY_C: Color = (255, 85, 85)
ENEMY_CANNON_C: Color = (153, 17, 17)
BASE_C: Color = (0, 255, 0)
STAR_C: Color = (255, 255, 0)
PLAYER_BULLET_C: Color = (255, 255, 255)
ENEMY_BULLET_C: Color = (255, 0, 0)
HUD_C: Color = (220, 220, 220)

# Barrier shade by remaining health, darker when damaged
BARRIER_SHADES = {1: (68, 68, 68), 2: (102, 102, 102), 3: (136, 136, 136)}

CANNON_WIDTH = 4
CANNON_LENGTH = 20


def barrier_color(health: int) -> Color:
    return BARRIER_SHADES[min(max(health, 1), 3)]


def tank_colors(allegiance: Allegiance) -> Tuple[Color, Color]:
    """(body, cannon) colours for a tank"""
    if allegiance is Allegiance.PLAYER:
        return PLAYER_C, PLAYER_CANNON_C
    return ENEMY_C, ENEMY_CANNON_C


def bullet_color(source: Allegiance) -> Color:
    return PLAYER_BULLET_C if source is Allegiance.PLAYER else ENEMY_BULLET_C


def cannon_rect(x: float, y: float, size: float, direction: Direction) -> Tuple[float, float, float, float]:
    """(x, y, w, h) of the cannon sticking out of a tank, half of it outside the hull"""
    mid = (size - CANNON_WIDTH) / 2
    half = CANNON_LENGTH / 2
    if direction is Direction.UP:
        return x + mid, y - half, CANNON_WIDTH, CANNON_LENGTH
    if direction is Direction.DOWN:
        return x + mid, y + size - half, CANNON_WIDTH, CANNON_LENGTH
    if direction is Direction.LEFT:
        return x - half, y + mid, CANNON_LENGTH, CANNON_WIDTH
    return x + size - half, y + mid, CANNON_LENGTH, CANNON_WIDTH


def _fill(frame: np.ndarray, x: float, y: float, w: float, h: float, color: Color):
    height, width = frame.shape[:2]
    x0 = max(0, int(round(x)))
    y0 = max(0, int(round(y)))
    x1 = min(width, int(round(x + w)))
    y1 = min(height, int(round(y + h)))
    if x0 < x1 and y0 < y1:
        frame[y0:y1, x0:x1] = color


def rasterize(snapshot: ArenaSnapshot) -> np.ndarray:
    """Draw a snapshot into an (H, W, 3) uint8 array, row 0 at the top"""
    frame = np.zeros((snapshot.height, snapshot.width, 3), dtype=np.uint8)
    frame[:, :] = BG

    if snapshot.base is not None:
        b = snapshot.base
        _fill(frame, b.x, b.y, b.size, b.size, BASE_C)
        _fill(frame, b.x + b.size / 4, b.y + b.size / 4, b.size / 2, b.size / 2, STAR_C)

    for barrier in snapshot.barriers:
        _fill(frame, barrier.x, barrier.y, barrier.size, barrier.size,
              barrier_color(barrier.health))

    for bullet in snapshot.bullets:
        half = bullet.size / 2
        _fill(frame, bullet.x - half, bullet.y - half, bullet.size, bullet.size,
              bullet_color(bullet.source))

    tanks = list(snapshot.enemies)
    if snapshot.player.health > 0:
        tanks.append(snapshot.player)
    for tank in tanks:
        body, cannon = tank_colors(tank.allegiance)
        _fill(frame, tank.x, tank.y, tank.size, tank.size, body)
        _fill(frame, *cannon_rect(tank.x, tank.y, tank.size, tank.direction), cannon)

    return frame
