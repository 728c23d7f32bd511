from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import GameConfig, GameSession, Intent, ScoringRules, TetrominoType

# Action index that only advances time.
NOOP_ACTION = len(Intent)


class FallingBlocksEnv(gym.Env):
    """
    Frame-stepped environment around a :class:`GameSession`.

    Actions (8 total):
      0-6: the ``Intent`` with that value (move left/right, soft drop,
           hard drop, rotate, toggle pause, restart)
      7:   no-op, only the clock advances

    Every step is one frame of ``frame_seconds``: the chosen intent is applied,
    then the session ticks. The reward is the score gained during the step.
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        frame_seconds: float = 0.1,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        if frame_seconds <= 0:
            raise ValueError(f"frame_seconds must be positive, got {frame_seconds}")
        self.config = config or GameConfig()
        self.rules = rules
        self.frame_seconds = float(frame_seconds)
        self.max_episode_steps = int(max_episode_steps)
        self.game = self._make_game(self.config.random_seed)

        n_kinds = len(TetrominoType)
        self.observation_space = spaces.Dict(
            {
                # Landed blocks as positive tags, the falling piece as negative tags
                "grid": spaces.Box(
                    low=-n_kinds, high=n_kinds,
                    shape=(self.config.height, self.config.width), dtype=np.int8,
                ),
                "next_piece": spaces.Discrete(n_kinds),
            }
        )
        self.action_space = spaces.Discrete(len(Intent) + 1)
        self._steps = 0

    def _make_game(self, seed: Optional[int]) -> GameSession:
        config = replace(self.config, random_seed=seed)
        return GameSession(config=config, rules=self.rules)

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.get_state(),
            "next_piece": int(self.game.next_piece.kind) - 1,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "level": self.game.level,
            "total_lines_cleared": self.game.total_lines_cleared,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game = self._make_game(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        action = int(action)
        score_before = self.game.score
        pressed = () if action == NOOP_ACTION else (Intent(action),)
        landed = self.game.frame(self.frame_seconds, pressed=pressed)

        self._steps += 1
        terminated = bool(self.game.is_over)
        truncated = self._steps >= self.max_episode_steps and not terminated
        reward = float(self.game.score - score_before)

        info = self._get_info()
        info["landed"] = landed
        return self._get_obs(), reward, terminated, truncated, info

    def close(self) -> None:
        pass
