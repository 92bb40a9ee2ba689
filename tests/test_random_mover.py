from __future__ import annotations

import random
from collections import Counter

import numpy as np

from block_puzzle_ai.ai.agent import Strategy, select_move
from block_puzzle_ai.ai.config import AgentConfig
from block_puzzle_ai.ai.moves import enumerate_placements
from block_puzzle_ai.ai.random_mover import random_move
from block_puzzle_ai.ai.search import choose_move
from block_puzzle_ai.game.grid import Board
from block_puzzle_ai.game.pieces import Piece, TetrominoType


def test_random_move_is_always_legal() -> None:
    rng = random.Random(11)
    grid = np.zeros((20, 10), dtype=np.int8)
    grid[15:, ::2] = 6
    board = Board.from_array(grid)
    for kind in TetrominoType:
        piece = Piece.spawn(kind)
        legal = {(p.rotation, p.x) for p in enumerate_placements(board, piece)}
        for _ in range(50):
            move = random_move(board, piece, rng)
            assert (move.rotation, move.x) in legal
            assert move.score == 0
            assert board.is_valid_placement(move.shape, move.x, 0)


def test_random_move_is_uniform_over_legal_set(empty_board: Board) -> None:
    rng = random.Random(2024)
    piece = Piece.spawn(TetrominoType.I)
    legal = [(p.rotation, p.x) for p in enumerate_placements(empty_board, piece)]
    trials = 150 * len(legal)
    counts = Counter()
    for _ in range(trials):
        move = random_move(empty_board, piece, rng)
        counts[(move.rotation, move.x)] += 1
    assert set(counts) == set(legal)
    # expected 150 per bucket, std ~12
    assert all(90 < c < 210 for c in counts.values())


def test_random_move_on_full_board_is_none(full_board: Board) -> None:
    assert random_move(full_board, Piece.spawn(TetrominoType.T), random.Random(0)) is None


def test_select_move_dispatches_lookahead(empty_board: Board) -> None:
    piece = Piece.spawn(TetrominoType.L)
    queue = [Piece.spawn(TetrominoType.J)]
    config = AgentConfig(lookahead=1)
    assert select_move(empty_board, piece, queue, config, Strategy.LOOKAHEAD) == choose_move(
        empty_board, piece, queue, config
    )


def test_select_move_dispatches_random(empty_board: Board) -> None:
    piece = Piece.spawn(TetrominoType.S)
    expected = random_move(empty_board, piece, random.Random(5))
    got = select_move(empty_board, piece, [], AgentConfig(), Strategy.RANDOM, random.Random(5))
    assert got == expected
    assert got.score == 0


def test_both_strategies_report_no_move_on_full_board(full_board: Board) -> None:
    piece = Piece.spawn(TetrominoType.Z)
    for strategy in Strategy:
        assert select_move(full_board, piece, [], AgentConfig(lookahead=0), strategy) is None
