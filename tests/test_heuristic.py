from __future__ import annotations

import numpy as np
import pytest

from block_puzzle_ai.ai.heuristic import board_features, evaluate, placement_features
from block_puzzle_ai.ai.moves import enumerate_placements, resting_row, resulting_board
from block_puzzle_ai.game.grid import Board
from block_puzzle_ai.game.pieces import Piece, TetrominoType


def _board(cells: dict) -> Board:
    rows = [[0] * 10 for _ in range(20)]
    for (y, x), v in cells.items():
        rows[y][x] = v
    return Board.from_rows(rows)


def test_empty_board_scores_zero(empty_board: Board) -> None:
    assert evaluate(empty_board, 20, False, False) == 0


def test_board_features() -> None:
    board = _board({(18, 0): 1, (19, 1): 2})
    f = board_features(board)
    assert f.column_heights[:3] == (2, 1, 0)
    assert f.aggregate_height == 3
    assert f.bumpiness == 2
    assert f.holes == 1
    assert f.max_height == 2
    assert f.completed_lines == 0


def test_evaluate_matches_weighted_sum() -> None:
    board = _board({(18, 0): 1, (19, 1): 2})
    expected = -0.510066 * 3 + 0.760666 * 0 * 0 + -0.35663 * 1 + -0.184483 * 2 - 0
    assert evaluate(board, 20, False, False) == pytest.approx(expected)


def test_evaluate_is_deterministic() -> None:
    board = _board({(15, 3): 4, (19, 3): 4, (19, 9): 7})
    assert evaluate(board, 16, True, True) == evaluate(board, 16, True, True)


def test_hole_aversion_multiplies_hole_weight() -> None:
    board = _board({(17, 0): 1})  # column 0 height 3, two holes beneath
    plain = evaluate(board, 20, False, False)
    averse = evaluate(board, 20, False, True)
    assert plain - averse == pytest.approx(0.35663 * 4 * 2)


def test_more_holes_strictly_lower_score() -> None:
    solid = _board({(17, 0): 1, (18, 0): 1, (19, 0): 1})
    holey = _board({(17, 0): 1})
    assert board_features(solid).aggregate_height == board_features(holey).aggregate_height
    assert board_features(solid).bumpiness == board_features(holey).bumpiness
    assert evaluate(holey, 20, False, False) < evaluate(solid, 20, False, False)


def test_height_penalty_above_cap() -> None:
    board = _board({(y, 0): 1 for y in range(5, 20)})  # column 0 height 15
    assert board_features(board).max_height == 15
    uncapped = evaluate(board, 20, False, False)
    capped = evaluate(board, 14, False, False)
    assert uncapped - capped == pytest.approx(10.0)
    assert evaluate(board, 15, False, False) == uncapped


def test_tetris_priority_doubles_four_line_bonus() -> None:
    board = Board.from_rows([[0] * 10 for _ in range(16)] + [[1] * 10 for _ in range(4)])
    assert board_features(board).completed_lines == 4
    plain = evaluate(board, 20, False, False)
    tetris = evaluate(board, 20, True, False)
    assert plain == pytest.approx(-0.510066 * 40 + 0.760666 * 16)
    assert tetris == pytest.approx(-0.510066 * 40 + 0.760666 * 16 * 2)


def test_tetris_priority_ignores_smaller_clears() -> None:
    board = Board.from_rows([[0] * 10 for _ in range(19)] + [[1] * 10])
    assert evaluate(board, 20, True, False) == evaluate(board, 20, False, False)


def test_placement_features_match_the_locked_board() -> None:
    rng = np.random.default_rng(5)
    grid = np.zeros((20, 10), dtype=np.int8)
    grid[13:] = rng.integers(0, 2, size=(7, 10)) * 2
    grid[19, :9] = 2
    board = Board.from_array(grid)
    for kind in TetrominoType:
        piece = Piece.spawn(kind)
        for placement in enumerate_placements(board, piece):
            y = resting_row(board, placement)
            locked = resulting_board(board, piece, placement)
            assert placement_features(board, placement.offsets, placement.x, y) == board_features(locked)
