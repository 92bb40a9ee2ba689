from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import gymnasium as gym

import block_puzzle_ai.env  # noqa: F401  ensure registration
from block_puzzle_ai.env.wrappers import ResampleInvalidActionWrapper


logger = logging.getLogger(__name__)


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    env = ResampleInvalidActionWrapper(gym.make("FallingBlockPlacement-v0"), rng=np.random.default_rng(seed))
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    for _ in range(steps):
        # invalid samples are replaced by the wrapper
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    logger.info("random agent total reward: %.2f", total_reward)
    return total_reward


if __name__ == "__main__":  # pragma: no cover
    from block_puzzle_ai.utils.logging import setup_logger

    setup_logger(name="block_puzzle_ai")
    run_random()
