"""Gymnasium environment exposing the game as one placement per step."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="FallingBlockPlacement-v0",
    entry_point="block_puzzle_ai.env.placement_env:PlacementEnv",
)

__all__ = ["FallingBlockPlacement-v0"]
