from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_puzzle_ai.ai.config import AgentConfig
from block_puzzle_ai.ai.moves import MIN_COLUMN, ROTATION_STATES, Move, enumerate_placements, rotation_states
from block_puzzle_ai.ai.search import choose_move
from block_puzzle_ai.game.core import BlockPuzzleGame, GameConfig
from block_puzzle_ai.game.pieces import TetrominoType


def columns_per_rotation(width: int) -> int:
    return width - MIN_COLUMN


def encode_action(rotation: int, x: int, width: int) -> int:
    return rotation * columns_per_rotation(width) + (x - MIN_COLUMN)


def decode_action(action: int, width: int) -> Tuple[int, int]:
    rotation, col = divmod(int(action), columns_per_rotation(width))
    return rotation, col + MIN_COLUMN


def _compute_action_mask(game: BlockPuzzleGame) -> np.ndarray:
    width = game.config.width
    mask = np.zeros((ROTATION_STATES * columns_per_rotation(width),), dtype=np.bool_)
    if game.game_over or game.current_piece is None:
        return mask
    for placement in enumerate_placements(game.board, game.current_piece):
        mask[encode_action(placement.rotation, placement.x, width)] = True
    return mask


class PlacementEnv(gym.Env):
    """One action per piece: pick a rotation state and a column, then hard-drop.

    action = rotation * (width + 2) + (x + 2), matching the enumeration order
    used by the search. Illegal actions are penalised and leave the game
    untouched.
    """

    metadata = {"render_modes": []}

    def __init__(self, config: Optional[GameConfig] = None, invalid_action_penalty: float = -1.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = BlockPuzzleGame(config)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.game.config.height, self.game.config.width
        q = self.game.config.queue_size
        n_kinds = len(TetrominoType)

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=n_kinds, shape=(h, w), dtype=np.int8),
                "piece": spaces.Discrete(n_kinds + 1),
                "queue": spaces.Box(low=0, high=n_kinds, shape=(q,), dtype=np.int8),
            }
        )
        self.action_space = spaces.Discrete(ROTATION_STATES * columns_per_rotation(w))

    def _get_obs(self) -> Dict[str, Any]:
        piece = self.game.current_piece
        queue = np.array([int(p.kind) for p in self.game.queue], dtype=np.int8)
        return {
            "grid": self.game.board.grid.copy(),
            "piece": int(piece.kind) if piece is not None else 0,
            "queue": queue,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "lines": self.game.lines_cleared_total,
            "pieces_placed": self.game.pieces_placed,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        mask = _compute_action_mask(self.game)
        action = int(action)
        if not (0 <= action < mask.shape[0]) or not bool(mask[action]):
            info = self._get_info()
            info["invalid_action"] = True
            return self._get_obs(), self.invalid_action_penalty, bool(self.game.game_over), False, info

        rotation, x = decode_action(action, self.game.config.width)
        shape, _ = rotation_states(self.game.current_piece.shape)[rotation]
        score_before = self.game.score
        lines = self.game.apply_move(Move(x=x, shape=shape, score=0.0, rotation=rotation))

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        if terminated:
            reward += self.terminal_penalty
        info = self._get_info()
        info["lines_cleared"] = lines
        return self._get_obs(), reward, terminated, False, info

    def close(self) -> None:
        pass


def heuristic_action(env: PlacementEnv, config: AgentConfig) -> Optional[int]:
    """Action id the lookahead search would play in the env's current state."""
    game = env.unwrapped.game
    if game.game_over or game.current_piece is None:
        return None
    move = choose_move(game.board, game.current_piece, list(game.queue), config)
    if move is None:
        return None
    return encode_action(move.rotation, move.x, game.config.width)
