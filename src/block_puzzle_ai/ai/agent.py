from __future__ import annotations

import random
from enum import Enum
from typing import Callable, Dict, Optional, Sequence

from block_puzzle_ai.game.grid import Board
from block_puzzle_ai.game.pieces import Piece

from .config import AgentConfig
from .moves import Move
from .random_mover import random_move
from .search import choose_move


class Strategy(Enum):
    LOOKAHEAD = "lookahead"
    RANDOM = "random"


MoveSelector = Callable[[Board, Piece, Sequence[Piece], AgentConfig, random.Random], Optional[Move]]


def _lookahead(board: Board, piece: Piece, queue: Sequence[Piece], config: AgentConfig,
               rng: random.Random) -> Optional[Move]:
    return choose_move(board, piece, queue, config)


def _random(board: Board, piece: Piece, queue: Sequence[Piece], config: AgentConfig,
            rng: random.Random) -> Optional[Move]:
    return random_move(board, piece, rng)


SELECTORS: Dict[Strategy, MoveSelector] = {
    Strategy.LOOKAHEAD: _lookahead,
    Strategy.RANDOM: _random,
}


def select_move(
    board: Board,
    piece: Piece,
    queue: Sequence[Piece],
    config: AgentConfig,
    strategy: Strategy = Strategy.LOOKAHEAD,
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """Choose this tick's move with the requested strategy."""
    return SELECTORS[strategy](board, piece, queue, config, rng or random.Random())
