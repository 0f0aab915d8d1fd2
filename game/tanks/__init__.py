"""Tank arena - top-down tank battle simulation and environment"""

from .arena import Intents, TankArena, TickResult
from .config import CLASSIC_ARENA, ArenaConfig, ConfigError
from .entities import Allegiance, Barrier, Base, Bullet, Direction, Tank
from .snapshot import ArenaSnapshot, Outcome
from .tank_env import TankEnv, run_random_episode

__all__ = [
    'TankArena', 'Intents', 'TickResult',
    'ArenaConfig', 'ConfigError', 'CLASSIC_ARENA',
    'Allegiance', 'Barrier', 'Base', 'Bullet', 'Direction', 'Tank',
    'ArenaSnapshot', 'Outcome',
    'TankEnv', 'run_random_episode',
]
