"""
Training configuration for the tank arena environment
Reward shaping variants for defending the base vs. hunting enemies
"""

from game.tanks.config import CLASSIC_ARENA

# Environment parameters
ENV_CONFIG = {
    # "render_mode": None,  # Don't render during training
    "arena_config": CLASSIC_ARENA,
    "max_steps": 3600,  # 60 seconds at 60 FPS
    "k_enemies": 3,
    "m_bullets": 4,
    "n_barriers": 6,
}

# ==============================================================================
# REWARD SHAPING CONFIGURATIONS
# ==============================================================================

# Balanced: kill enemies, avoid damage
REWARD_CONFIG_BASELINE = {
    "name": "baseline",
    "description": "Balanced reward shaping",
    "R_HIT": 0.3,        # Bullet lands on an enemy
    "R_KILL": 1.0,       # Enemy destroyed
    "R_DAMAGE": 1.0,     # Penalty per point of player damage
    "R_BARRIER": 0.02,   # Barrier destroyed (clears lines of fire)
    "R_SHOT": 0.01,      # Penalty per shot
    "R_TIME": 0.001,     # Small time penalty
    "R_WIN": 5.0,        # All enemies destroyed
    "R_LOSS": 5.0,       # Player or base destroyed
}

# Defensive: losing is much worse than winning slowly
REWARD_CONFIG_DEFENSIVE = {
    "name": "defensive",
    "description": "Protect the player and base - heavy damage and loss penalties",
    "R_HIT": 0.1,
    "R_KILL": 0.5,
    "R_DAMAGE": 3.0,
    "R_BARRIER": 0.0,
    "R_SHOT": 0.02,
    "R_TIME": 0.0,       # No pressure to finish quickly
    "R_WIN": 5.0,
    "R_LOSS": 10.0,
}

# Aggressive: hunt enemies down fast
REWARD_CONFIG_AGGRESSIVE = {
    "name": "aggressive",
    "description": "Hunt enemies - higher combat rewards, cheaper shots",
    "R_HIT": 0.5,
    "R_KILL": 2.0,
    "R_DAMAGE": 0.5,
    "R_BARRIER": 0.05,
    "R_SHOT": 0.005,
    "R_TIME": 0.002,
    "R_WIN": 10.0,
    "R_LOSS": 3.0,
}

REWARD_CONFIGS = {
    "baseline": REWARD_CONFIG_BASELINE,
    "defensive": REWARD_CONFIG_DEFENSIVE,
    "aggressive": REWARD_CONFIG_AGGRESSIVE,
}

# ==============================================================================
# ALGORITHM HYPERPARAMETERS
# ==============================================================================

PPO_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "n_steps": 2048,
    "batch_size": 256,
    "n_epochs": 10,
    "gamma": 0.99,
    "gae_lambda": 0.95,
    "clip_range": 0.2,
    "ent_coef": 0.01,
    "vf_coef": 0.5,
    "max_grad_norm": 0.5,
    "verbose": 1,
}

DQN_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 1e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 128,
    "tau": 1.0,
    "gamma": 0.99,
    "train_freq": 4,
    "gradient_steps": 1,
    "target_update_interval": 1000,
    "exploration_fraction": 0.1,
    "exploration_initial_eps": 1.0,
    "exploration_final_eps": 0.05,
    "verbose": 1,
}

# ==============================================================================
# TRAINING SETTINGS
# ==============================================================================

TRAINING_CONFIG = {
    "total_timesteps": 1_000_000,
    "save_freq": 20_000,
    "eval_freq": 10_000,
    "log_dir": "./logs",
    "model_dir": "./models",
    "tensorboard_log": "./tensorboard_logs",
}
