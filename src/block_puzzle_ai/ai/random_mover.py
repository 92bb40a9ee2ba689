from __future__ import annotations

import math
import random
from typing import Optional

from block_puzzle_ai.game.grid import Board
from block_puzzle_ai.game.pieces import Piece

from .config import AgentConfig
from .moves import Move, enumerate_placements, to_move
from .search import choose_move


def random_move(board: Board, piece: Piece, rng: Optional[random.Random] = None) -> Optional[Move]:
    """Uniformly random legal placement with a score of 0.

    When nothing is legal at the spawn row, defer to an immediate-only
    search with no height cap and both modes off.
    """
    rng = rng or random.Random()
    placements = enumerate_placements(board, piece)
    if placements:
        return to_move(rng.choice(placements), 0.0)

    fallback = choose_move(
        board,
        piece,
        (),
        AgentConfig(max_height_allowed=board.height, tetris_priority=False, hole_aversion=False, lookahead=0),
    )
    if fallback is None or not math.isfinite(fallback.score):
        return None
    return fallback
