from __future__ import annotations

import numpy as np

from block_puzzle_ai.ai.moves import enumerate_placements, resulting_board, rotation_states
from block_puzzle_ai.ai.heuristic import board_features
from block_puzzle_ai.game.grid import Board, shape_offsets
from block_puzzle_ai.game.pieces import Piece, TetrominoType

from conftest import rows_with_gap


def test_enumerates_i_piece_on_empty_board(empty_board: Board) -> None:
    placements = enumerate_placements(empty_board, Piece.spawn(TetrominoType.I))
    assert len(placements) == 7 + 10 + 7 + 10
    assert (placements[0].rotation, placements[0].x) == (0, 0)
    assert (placements[-1].rotation, placements[-1].x) == (3, 9)


def test_enumeration_order_is_rotation_then_column(empty_board: Board) -> None:
    placements = enumerate_placements(empty_board, Piece.spawn(TetrominoType.T))
    keys = [(p.rotation, p.x) for p in placements]
    assert keys == sorted(keys)


def test_square_rotations_are_not_deduplicated(empty_board: Board) -> None:
    placements = enumerate_placements(empty_board, Piece.spawn(TetrominoType.O))
    assert len(placements) == 4 * 9
    assert all(np.array_equal(p.shape, placements[0].shape) for p in placements)


def test_negative_anchor_reaches_left_wall(empty_board: Board) -> None:
    piece = Piece.spawn(TetrominoType.I).with_shape([[0, 0, 1], [0, 0, 1]])
    xs = [p.x for p in enumerate_placements(empty_board, piece) if p.rotation == 0]
    assert xs[0] == -2
    assert xs[-1] == 7


def test_no_placements_on_full_board(full_board: Board) -> None:
    for kind in TetrominoType:
        assert enumerate_placements(full_board, Piece.spawn(kind)) == []


def test_resulting_board_keeps_full_rows() -> None:
    board = rows_with_gap(10, 20, [19], gap_col=5)
    piece = Piece.spawn(TetrominoType.I)
    vertical = [p for p in enumerate_placements(board, piece) if p.rotation == 1 and p.x == 5][0]
    after = resulting_board(board, piece, vertical)
    assert board_features(after).completed_lines == 1
    assert after.grid[16:, 5].tolist() == [1, 1, 1, 1]


def test_placements_carry_their_offsets(empty_board: Board) -> None:
    piece = Piece.spawn(TetrominoType.T)
    for placement in enumerate_placements(empty_board, piece):
        assert placement.offsets == shape_offsets(placement.shape)
        assert resulting_board(empty_board, piece, placement) == empty_board.commit(
            placement.shape, placement.x, 0, piece.color_id
        )


def test_rotation_states_of_an_empty_shape_yield_no_placements(empty_board: Board) -> None:
    piece = Piece.spawn(TetrominoType.I).with_shape([[0, 0], [0, 0]])
    assert all(offsets is None for _, offsets in rotation_states(piece.shape))
    assert enumerate_placements(empty_board, piece) == []
