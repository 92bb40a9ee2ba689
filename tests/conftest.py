from __future__ import annotations

from typing import List

import pytest

from block_puzzle_ai.game.grid import Board


def rows_with_gap(width: int, height: int, full_rows: List[int], gap_col: int) -> Board:
    rows = [[0] * width for _ in range(height)]
    for y in full_rows:
        rows[y] = [0 if x == gap_col else 1 for x in range(width)]
    return Board.from_rows(rows)


@pytest.fixture
def empty_board() -> Board:
    return Board.empty()


@pytest.fixture
def full_board() -> Board:
    return Board.from_rows([[1] * 10 for _ in range(20)])
