"""
Arcade front end for the tank arena

TankWindow draws whatever snapshot its source returns; PlayWindow adds the
keyboard and a fixed-rate tick so a human can play:

    python -m game.tanks.window [--seed N]

Arrows move, space fires, R restarts after the game ends, Esc quits.
"""

import argparse
from typing import Callable, Optional, Set

import arcade

from .arena import Intents, TankArena
from .config import CLASSIC_ARENA, ArenaConfig
from .render import (
    BASE_C,
    BG,
    HUD_C,
    STAR_C,
    barrier_color,
    bullet_color,
    cannon_rect,
    tank_colors,
)
from .snapshot import ArenaSnapshot, Outcome

KEY_INTENTS = {
    arcade.key.UP: "up",
    arcade.key.DOWN: "down",
    arcade.key.LEFT: "left",
    arcade.key.RIGHT: "right",
    arcade.key.SPACE: "fire",
}

BANNERS = {
    Outcome.WIN: "You Win! Congratulations!",
    Outcome.LOSS: "Game Over!",
}


class TankWindow(arcade.Window):
    """Arcade window rendering arena snapshots"""

    def __init__(self, source: Callable[[], ArenaSnapshot], width: int, height: int,
                 title: str = "Tank Arena", update_rate: float = 1 / 60):
        super().__init__(width, height, title, update_rate=update_rate)
        self.source = source

    def _rect(self, x: float, y: float, w: float, h: float, color):
        # Arena y grows downward, arcade's grows upward
        arcade.draw_lrbt_rectangle_filled(x, x + w, self.height - y - h, self.height - y, color)

    def _label(self, text: str, cx: float, cy: float, color, size: int):
        arcade.draw_text(text, cx, self.height - cy, color, size,
                         anchor_x="center", anchor_y="center")

    def on_draw(self):
        """Draw the current arena state"""
        self.clear()
        arcade.set_background_color(BG)
        snap = self.source()

        if snap.base is not None:
            b = snap.base
            self._rect(b.x, b.y, b.size, b.size, BASE_C)
            self._label("*", b.x + b.size / 2, b.y + b.size / 2, STAR_C, 24)

        for barrier in snap.barriers:
            self._rect(barrier.x, barrier.y, barrier.size, barrier.size,
                       barrier_color(barrier.health))
            self._label(str(barrier.health), barrier.x + barrier.size / 2,
                        barrier.y + barrier.size / 2, HUD_C, 14)

        for bullet in snap.bullets:
            half = bullet.size / 2
            self._rect(bullet.x - half, bullet.y - half, bullet.size, bullet.size,
                       bullet_color(bullet.source))

        tanks = list(snap.enemies)
        if snap.player.health > 0:
            tanks.append(snap.player)
        for tank in tanks:
            body, cannon = tank_colors(tank.allegiance)
            self._rect(tank.x, tank.y, tank.size, tank.size, body)
            self._rect(*cannon_rect(tank.x, tank.y, tank.size, tank.direction), cannon)
            # Health indicator
            mid_x, mid_y = tank.x + tank.size / 2, tank.y + tank.size / 2
            self._rect(mid_x - 6, mid_y - 6, 12, 12, (0, 0, 0))
            self._label(str(tank.health), mid_x, mid_y, HUD_C, 9)

        if snap.outcome.terminal:
            self._label(BANNERS[snap.outcome], self.width / 2, self.height / 2 - 12, HUD_C, 24)
            self._label("Press R to play again", self.width / 2, self.height / 2 + 20, HUD_C, 14)


class PlayWindow(TankWindow):
    """Keyboard-driven game: holds the pressed keys and ticks the arena"""

    def __init__(self, config: ArenaConfig, seed: Optional[int] = None):
        self.config = config
        self.seed = seed
        self.arena = TankArena(config, seed=seed)
        self.held: Set[str] = set()
        super().__init__(self.arena.snapshot, config.width, config.height)

    def restart(self):
        self.seed = None if self.seed is None else self.seed + 1
        self.arena = TankArena(self.config, seed=self.seed)
        self.source = self.arena.snapshot
        self.held.clear()

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == arcade.key.ESCAPE:
            self.close()
        elif symbol == arcade.key.R and self.arena.outcome.terminal:
            self.restart()
        elif symbol in KEY_INTENTS:
            self.held.add(KEY_INTENTS[symbol])

    def on_key_release(self, symbol: int, modifiers: int):
        self.held.discard(KEY_INTENTS.get(symbol, ""))

    def on_update(self, delta_time: float):
        if self.arena.outcome.terminal:
            return
        result = self.arena.tick(Intents(**{name: True for name in self.held}))
        if result.outcome.terminal:
            print(f"{BANNERS[result.outcome]} ({self.arena.tick_count} ticks)")


def play(seed: Optional[int] = None):
    """Open a window and play the classic arena"""
    PlayWindow(ArenaConfig(**CLASSIC_ARENA), seed=seed)
    arcade.run()


def main():
    parser = argparse.ArgumentParser(description="Play the tank arena")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for barrier layout and enemy behaviour (default: random)",
    )
    args = parser.parse_args()
    play(seed=args.seed)


if __name__ == "__main__":
    main()
