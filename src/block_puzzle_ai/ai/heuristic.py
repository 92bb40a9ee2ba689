from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from block_puzzle_ai.game.grid import Board, Offsets


@dataclass(frozen=True)
class HeuristicWeights:
    # a*agg_height + b*complete_lines^2 + c*holes + d*bumpiness
    aggregate_height: float = -0.510066
    completed_lines: float = 0.760666
    holes: float = -0.35663
    bumpiness: float = -0.184483


DEFAULT_WEIGHTS = HeuristicWeights()

TETRIS_LINES = 4
TETRIS_MULTIPLIER = 2
HOLE_AVERSION_MULTIPLIER = 5
HEIGHT_PENALTY_SCALE = 10


@dataclass(frozen=True)
class BoardFeatures:
    column_heights: Tuple[int, ...]
    aggregate_height: int
    bumpiness: int
    completed_lines: int
    holes: int
    max_height: int


def _features(heights: Sequence[int], filled: int, completed: int) -> BoardFeatures:
    aggregate = sum(heights)
    return BoardFeatures(
        column_heights=tuple(heights),
        aggregate_height=aggregate,
        bumpiness=sum(abs(heights[i] - heights[i + 1]) for i in range(len(heights) - 1)),
        completed_lines=completed,
        # every cell between the surface and the floor that is not filled is a hole
        holes=aggregate - filled,
        max_height=max(heights),
    )


def board_features(board: Board) -> BoardFeatures:
    """Structural features of a static board (no piece in flight)."""
    height = board.height
    counts = board.row_counts
    return _features(
        [height - top for top in board.column_tops],
        sum(counts),
        counts.count(board.width),
    )


def placement_features(board: Board, offsets: Offsets, x: int, y: int) -> BoardFeatures:
    """Features of `board` with the cells in `offsets` written at anchor (x, y).

    Equal to `board_features(board.lock(offsets, x, y, color))` for a legal
    resting position, without building the new board. Cells above row 0
    are ignored as `Board.lock` ignores them.
    """
    height = board.height
    width = board.width
    tops = list(board.column_tops)
    added: Dict[int, int] = {}
    for dy, dx in offsets:
        by = y + dy
        if by < 0:
            continue
        bx = x + dx
        if by < tops[bx]:
            tops[bx] = by
        added[by] = added.get(by, 0) + 1

    counts = board.row_counts
    completed = counts.count(width)
    filled = sum(counts)
    for by, n in added.items():
        filled += n
        if counts[by] + n == width:
            completed += 1
    return _features([height - top for top in tops], filled, completed)


def evaluate_features(
    features: BoardFeatures,
    max_height_allowed: int,
    tetris_priority: bool = False,
    hole_aversion: bool = False,
    weights: HeuristicWeights = DEFAULT_WEIGHTS,
) -> float:
    lines = features.completed_lines
    lines_score = weights.completed_lines * lines * lines
    if tetris_priority and lines == TETRIS_LINES:
        lines_score *= TETRIS_MULTIPLIER

    hole_weight = weights.holes * HOLE_AVERSION_MULTIPLIER if hole_aversion else weights.holes

    if features.max_height > max_height_allowed:
        height_penalty = (features.max_height - max_height_allowed) ** 2 * HEIGHT_PENALTY_SCALE
    else:
        height_penalty = 0

    return (
        weights.aggregate_height * features.aggregate_height
        + lines_score
        + hole_weight * features.holes
        + weights.bumpiness * features.bumpiness
        - height_penalty
    )


def evaluate(
    board: Board,
    max_height_allowed: int,
    tetris_priority: bool = False,
    hole_aversion: bool = False,
) -> float:
    """Score a board; higher is better. Pure and deterministic."""
    return evaluate_features(board_features(board), max_height_allowed, tetris_priority, hole_aversion)
