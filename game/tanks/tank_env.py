"""
TankEnv - the tank arena as a Gymnasium environment
---------------------------------------------------
- TankArena for simulation, numpy / Arcade for rendering
- Gymnasium API
- 1 RL agent drives the player tank: move + fire (with cooldown)
- Enemy tanks pursue the player and shoot back; an enemy hit on the base ends
  the episode
- Vector observation: player state + nearest enemies + nearest enemy bullets
  + nearest barriers
- Discrete MultiDiscrete action space: [move(5), fire(2)]

Install:
    pip install gymnasium arcade numpy

Quick test:
    python -m game.tanks.tank_env
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Union

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .arena import Intents, TankArena, TickResult
from .config import CLASSIC_ARENA, ArenaConfig
from .entities import DIRECTIONS, Allegiance
from .render import rasterize
from .snapshot import Outcome
from .utils import clamp, seed_everything

# move: 0 stay, 1 up, 2 down, 3 left, 4 right
MOVE_INTENTS = (
    {},
    {"up": True},
    {"down": True},
    {"left": True},
    {"right": True},
)

DEFAULT_REWARDS = {
    "R_HIT": 0.3,
    "R_KILL": 1.0,
    "R_DAMAGE": 1.0,
    "R_BARRIER": 0.02,
    "R_SHOT": 0.01,
    "R_TIME": 0.001,
    "R_WIN": 5.0,
    "R_LOSS": 5.0,
}


def action_to_intents(move: int, fire: int) -> Intents:
    return Intents(fire=bool(fire), **MOVE_INTENTS[move])


class TankEnv(gym.Env):
    """Tank arena environment; the agent plays the player tank"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        obs_mode: str = "vector",
        arena_config: Union[ArenaConfig, Dict[str, Any], None] = None,
        max_steps: int = 3600,  # 60s at 60 FPS
        k_enemies: int = 3,
        m_bullets: int = 4,
        n_barriers: int = 6,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        assert obs_mode in ("vector",), "Only 'vector' observations are implemented."
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.obs_mode = obs_mode

        if arena_config is None:
            arena_config = CLASSIC_ARENA
        if isinstance(arena_config, dict):
            arena_config = ArenaConfig(**arena_config)
        self.config = arena_config
        self.max_steps = max_steps

        # Observation config
        self.k_enemies = k_enemies
        self.m_bullets = m_bullets
        self.n_barriers = n_barriers

        self.rewards = dict(DEFAULT_REWARDS)
        if reward_config:
            self.rewards.update({k: v for k, v in reward_config.items() if k.startswith("R_")})

        self.action_space = spaces.MultiDiscrete([5, 2])

        # Player: pos(2) facing(4) health(1) cooldown(1) base(1)
        # Each enemy: rel pos(2) health(1)
        # Each enemy bullet: rel pos(2)
        # Each barrier: rel pos(2) health(1)
        obs_dim = 2 + 4 + 1 + 1 + 1 + (self.k_enemies * 3) + (self.m_bullets * 2) + (self.n_barriers * 3)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None

        self.arena: Optional[TankArena] = None
        self._step_count = 0
        self._totals: Dict[str, int] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        arena_seed = seed if seed is not None else int(self.np_random.integers(0, 2**31 - 1))
        self.arena = TankArena(self.config, seed=arena_seed)

        self._step_count = 0
        self._totals = {"kills": 0, "hits": 0, "damage_taken": 0, "shots": 0}

        return self._get_obs(), self._get_info()

    def step(self, action):
        move, fire = int(action[0]), int(action[1])

        result = self.arena.tick(action_to_intents(move, fire))
        for key in self._totals:
            self._totals[key] += result.events.get(key, 0)

        reward = self._compute_reward(result)

        terminated = result.outcome.terminal
        self._step_count += 1
        truncated = not terminated and self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        cfg = self.config
        player = self.arena.player
        cx, cy = _centre(player)

        obs_parts: List[float] = [
            (player.x / cfg.width) * 2 - 1,
            (player.y / cfg.height) * 2 - 1,
        ]
        obs_parts += [1.0 if player.direction is d else 0.0 for d in DIRECTIONS]
        obs_parts += [
            clamp(player.health / cfg.player_health, 0, 1) * 2 - 1,
            clamp(player.cooldown / max(1, cfg.cooldown_time), 0, 1) * 2 - 1,
            1.0 if self.arena.base is not None and self.arena.base.health > 0 else -1.0,
        ]

        def rel(x: float, y: float) -> List[float]:
            return [clamp((x - cx) / cfg.width, -1, 1), clamp((y - cy) / cfg.height, -1, 1)]

        def nearest(items, k, centre):
            return sorted(
                items, key=lambda it: (centre(it)[0] - cx) ** 2 + (centre(it)[1] - cy) ** 2
            )[:k]

        # Enemies: top-K nearest
        enemies = nearest(self.arena.enemies, self.k_enemies, _centre)
        for i in range(self.k_enemies):
            if i < len(enemies):
                e = enemies[i]
                obs_parts += rel(*_centre(e)) + [clamp(e.health / cfg.enemy_health, 0, 1)]
            else:
                obs_parts += [0.0, 0.0, 0.0]

        # Enemy bullets: top-M nearest
        hostile = [b for b in self.arena.bullets if b.source is Allegiance.ENEMY]
        bullets = nearest(hostile, self.m_bullets, lambda b: (b.x, b.y))
        for i in range(self.m_bullets):
            if i < len(bullets):
                obs_parts += rel(bullets[i].x, bullets[i].y)
            else:
                obs_parts += [0.0, 0.0]

        # Barriers: top-N nearest
        barriers = nearest(self.arena.barriers, self.n_barriers, _centre)
        for i in range(self.n_barriers):
            if i < len(barriers):
                b = barriers[i]
                obs_parts += rel(*_centre(b)) + [clamp(b.health / cfg.barrier_health, 0, 1)]
            else:
                obs_parts += [0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self, result: TickResult) -> float:
        r = self.rewards
        events = result.events

        reward = 0.0
        reward += r["R_HIT"] * events["hits"]
        reward += r["R_KILL"] * events["kills"]
        reward += r["R_BARRIER"] * events["barriers_destroyed"]

        reward -= r["R_DAMAGE"] * events["damage_taken"]
        reward -= r["R_SHOT"] * events["shots"]
        reward -= r["R_TIME"]

        if result.outcome is Outcome.WIN:
            reward += r["R_WIN"]
        elif result.outcome is Outcome.LOSS:
            reward -= r["R_LOSS"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "health": self.arena.player.health,
            "cooldown": self.arena.player.cooldown,
            "num_enemies": len(self.arena.enemies),
            "num_barriers": len(self.arena.barriers),
            "num_bullets": len(self.arena.bullets),
            "outcome": self.arena.outcome.value,
            "enemies_killed": self._totals.get("kills", 0),
            "damage_taken": self._totals.get("damage_taken", 0),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self.render_mode == "rgb_array":
            return rasterize(self.arena.snapshot())

        if self._window is None:
            # Arcade needs a display, so only import it when a window is wanted
            from .window import TankWindow
            self._window = TankWindow(self.arena.snapshot, self.config.width, self.config.height)

        # reset() replaces the arena
        self._window.source = self.arena.snapshot
        self._window.on_draw()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


def _centre(entity):
    half = entity.size / 2
    return entity.x + half, entity.y + half


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: Optional[int] = 42):
    """Run a random episode for testing"""
    env = TankEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... close the window to exit early.")

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

        if render and env._window:
            env._window.dispatch_events()
            env._window.flip()
            time.sleep(1 / 60)

    print(f"Random episode return: {total:.2f} ({info['outcome']} after {info['step']} steps)")

    env.close()
    return total, info


if __name__ == "__main__":
    run_random_episode(render=True)
