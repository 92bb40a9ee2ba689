from __future__ import annotations

from dataclasses import dataclass

from block_puzzle_ai.game.grid import BOARD_HEIGHT
from block_puzzle_ai.game.rules import Difficulty


MAX_LOOKAHEAD = 2


@dataclass(frozen=True)
class AgentConfig:
    """Per-call search settings.

    lookahead is the number of queued pieces considered beyond the current
    one (0, 1 or 2).
    """

    max_height_allowed: int = BOARD_HEIGHT
    tetris_priority: bool = False
    hole_aversion: bool = False
    lookahead: int = 1

    def __post_init__(self) -> None:
        if not 0 <= int(self.lookahead) <= MAX_LOOKAHEAD:
            raise ValueError(f"lookahead must be in [0, {MAX_LOOKAHEAD}], got {self.lookahead}")
        if int(self.max_height_allowed) < 0:
            raise ValueError(f"max_height_allowed must be >= 0, got {self.max_height_allowed}")

    @classmethod
    def for_difficulty(
        cls,
        difficulty: Difficulty,
        *,
        hyper: bool = False,
        tetris_priority: bool = False,
        hole_aversion: bool = False,
    ) -> "AgentConfig":
        return cls(
            max_height_allowed=difficulty.max_height,
            tetris_priority=tetris_priority,
            hole_aversion=hole_aversion,
            lookahead=2 if hyper else 1,
        )
