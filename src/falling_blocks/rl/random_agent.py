from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import gymnasium as gym

import falling_blocks.env  # noqa: F401  ensure registration
from falling_blocks.env.falling_blocks_env import NOOP_ACTION
from falling_blocks.game import Intent

logger = logging.getLogger(__name__)

# Pausing would stall the episode, so the agent never picks it.
AGENT_ACTIONS = [int(i) for i in Intent if i is not Intent.TOGGLE_PAUSE] + [NOOP_ACTION]


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def run_random(steps: int = 200, seed: Optional[int] = None, frame_seconds: float = 0.1) -> dict:
    env = gym.make("FallingBlocks-10x20-v0", frame_seconds=frame_seconds)
    obs, info = env.reset(seed=seed)
    rng = env.unwrapped.np_random
    total_reward = 0.0
    games = 1
    best_score = 0
    for _ in range(steps):
        action = int(rng.choice(AGENT_ACTIONS))
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        best_score = max(best_score, int(info["score"]))
        if terminated or truncated:
            logger.info("Episode %d ended: score=%d lines=%d", games, info["score"], info["total_lines_cleared"])
            obs, info = env.reset()
            games += 1
    env.close()
    return {"total_reward": total_reward, "games": games, "best_score": best_score}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks with uniformly random intents.")
    p.add_argument("--steps", type=int, default=2000)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--frame-seconds", type=float, default=0.1)
    p.add_argument("--verbose", action="store_true", help="log every landing")
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    stats = run_random(steps=args.steps, seed=args.seed, frame_seconds=args.frame_seconds)
    print(
        f"Random agent total reward: {stats['total_reward']:.2f} "
        f"over {stats['games']} game(s), best score {stats['best_score']}"
    )


if __name__ == "__main__":  # pragma: no cover
    main()
