from __future__ import annotations

import logging
from typing import Optional, Sequence

from block_puzzle_ai.game.grid import Board
from block_puzzle_ai.game.pieces import Piece

from .config import AgentConfig, MAX_LOOKAHEAD
from .heuristic import evaluate, evaluate_features, placement_features
from .moves import Move, Placement, enumerate_placements, resting_row, resulting_board, to_move


logger = logging.getLogger(__name__)

NEG_INF = float("-inf")
# current piece plus at most MAX_LOOKAHEAD queued pieces
MAX_SEQUENCE_LENGTH = MAX_LOOKAHEAD + 1


def _placement_score(
    board: Board,
    piece: Piece,
    placement: Placement,
    rest: Sequence[Piece],
    config: AgentConfig,
) -> float:
    if rest:
        return best_leaf_score(resulting_board(board, piece, placement), rest, config)
    # last piece of the sequence: score the drop without building the board
    features = placement_features(board, placement.offsets, placement.x, resting_row(board, placement))
    return evaluate_features(features, config.max_height_allowed, config.tetris_priority, config.hole_aversion)


def best_leaf_score(board: Board, pieces: Sequence[Piece], config: AgentConfig) -> float:
    """Best evaluation reachable after placing every piece of `pieces` in order.

    Returns -inf when some piece in the sequence has no legal placement on
    every branch.
    """
    if not pieces:
        return evaluate(board, config.max_height_allowed, config.tetris_priority, config.hole_aversion)

    head, tail = pieces[0], pieces[1:]
    best = NEG_INF
    for placement in enumerate_placements(board, head):
        score = _placement_score(board, head, placement, tail, config)
        if score > best:
            best = score
    return best


def choose_move(
    board: Board,
    current_piece: Piece,
    lookahead_pieces: Sequence[Piece] = (),
    config: AgentConfig = AgentConfig(),
) -> Optional[Move]:
    """Pick the placement of `current_piece` with the best backed-up score.

    Only the first `config.lookahead` queued pieces are searched. Ties keep
    the first enumerated candidate (rotation ascending, then column
    ascending). Returns None when the current piece cannot be placed.
    """
    future = tuple(lookahead_pieces[: config.lookahead])[: MAX_SEQUENCE_LENGTH - 1]

    best: Optional[Move] = None
    candidates = 0
    for placement in enumerate_placements(board, current_piece):
        candidates += 1
        score = _placement_score(board, current_piece, placement, future, config)
        if best is None or score > best.score:
            best = to_move(placement, score)

    if best is None:
        logger.debug("no legal placement for %s", current_piece.kind.name)
        return None
    logger.debug(
        "chose x=%d rot=%d score=%.4f among %d candidates (lookahead=%d)",
        best.x, best.rotation, best.score, candidates, len(future),
    )
    return best
