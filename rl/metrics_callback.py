"""
Custom callback for tracking task-specific metrics during training.
Records: enemies killed, damage taken, episode outcome.
"""

import os
import csv
from typing import Dict, List, Any, Optional

import numpy as np
from stable_baselines3.common.callbacks import BaseCallback


class MetricsCallback(BaseCallback):
    """
    Callback to track and log task-specific metrics per episode.
    Saves to CSV for easy plotting.
    """

    def __init__(
        self,
        log_dir: str,
        algo_name: str,
        verbose: int = 1,
    ):
        super().__init__(verbose)
        self.log_dir = log_dir
        self.algo_name = algo_name

        self.episode_rewards: List[float] = []
        self.episode_lengths: List[int] = []
        self.episode_kills: List[int] = []
        self.episode_damage: List[int] = []
        self.episode_wins: List[float] = []

        self.csv_path: Optional[str] = None
        self.csv_file = None
        self.csv_writer = None

    def _on_training_start(self) -> None:
        """Initialize CSV file for logging."""
        os.makedirs(self.log_dir, exist_ok=True)
        self.csv_path = os.path.join(self.log_dir, f"{self.algo_name}_metrics.csv")

        self.csv_file = open(self.csv_path, "w", newline="")
        self.csv_writer = csv.writer(self.csv_file)
        self.csv_writer.writerow([
            "timestep", "episode", "reward", "length",
            "kills", "damage", "outcome", "win"
        ])
        self.csv_file.flush()

        if self.verbose > 0:
            print(f"[MetricsCallback] Logging to {self.csv_path}")

    def _on_step(self) -> bool:
        infos = self.locals.get("infos", [])
        dones = self.locals.get("dones", [])

        for info, done in zip(infos, dones):
            # Monitor adds "episode" to the info of the final step
            if done and "episode" in info:
                self.record_episode(info)

        return True

    def record_episode(self, info: Dict[str, Any]):
        ep_info = info["episode"]
        outcome = info.get("outcome", "ongoing")
        win = 1.0 if outcome == "win" else 0.0

        self.episode_rewards.append(ep_info["r"])
        self.episode_lengths.append(ep_info["l"])
        self.episode_kills.append(info.get("enemies_killed", 0))
        self.episode_damage.append(info.get("damage_taken", 0))
        self.episode_wins.append(win)

        if self.csv_writer:
            self.csv_writer.writerow([
                self.num_timesteps,
                len(self.episode_rewards),
                ep_info["r"],
                ep_info["l"],
                self.episode_kills[-1],
                self.episode_damage[-1],
                outcome,
                win,
            ])
            self.csv_file.flush()

        if self.verbose > 0 and len(self.episode_rewards) % 10 == 0:
            avg_reward = sum(self.episode_rewards[-10:]) / 10
            print(f"[{self.algo_name}] Episode {len(self.episode_rewards)}, "
                  f"Timestep {self.num_timesteps}, "
                  f"Avg Reward (10 ep): {avg_reward:.2f}, "
                  f"Wins (10 ep): {int(sum(self.episode_wins[-10:]))}")

    def _on_training_end(self) -> None:
        """Cleanup CSV file."""
        if self.csv_file:
            self.csv_file.close()
            if self.verbose > 0:
                print(f"[MetricsCallback] Saved {len(self.episode_rewards)} episodes to {self.csv_path}")

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics."""
        if not self.episode_rewards:
            return {}

        return {
            "mean_reward": np.mean(self.episode_rewards),
            "std_reward": np.std(self.episode_rewards),
            "mean_length": np.mean(self.episode_lengths),
            "total_episodes": len(self.episode_rewards),
            "mean_kills": np.mean(self.episode_kills),
            "mean_damage": np.mean(self.episode_damage),
            "win_rate": np.mean(self.episode_wins),
        }


class TensorboardMetricsCallback(BaseCallback):
    """
    Logs episode reward, length, kills and outcome to TensorBoard.
    """

    def _on_step(self) -> bool:
        infos = self.locals.get("infos", [])
        dones = self.locals.get("dones", [])

        for info, done in zip(infos, dones):
            if done and "episode" in info and self.logger:
                ep = info["episode"]
                self.logger.record("custom/episode_reward", ep["r"])
                self.logger.record("custom/episode_length", ep["l"])
                self.logger.record("custom/enemies_killed", info.get("enemies_killed", 0))
                self.logger.record("custom/win", 1.0 if info.get("outcome") == "win" else 0.0)

        return True
