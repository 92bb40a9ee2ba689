from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from block_puzzle_ai.game.grid import Board, Offsets, shape_offsets
from block_puzzle_ai.game.pieces import Piece, Shape, rotate


ROTATION_STATES = 4
# Anchors left of column 0 let shapes whose occupied cells do not start at
# their own column 0 reach the left wall.
MIN_COLUMN = -2
SPAWN_ROW = 0


class Placement(NamedTuple):
    rotation: int
    x: int
    shape: Shape
    offsets: Offsets


@dataclass(frozen=True)
class Move:
    x: int
    shape: Shape = field(compare=False, repr=False)
    score: float
    rotation: int = 0


@lru_cache(maxsize=64)
def _rotation_states(raw: bytes, rows: int, cols: int) -> Tuple[Tuple[Shape, Optional[Offsets]], ...]:
    shape = np.frombuffer(raw, dtype=np.int8).reshape(rows, cols)
    states = []
    for _ in range(ROTATION_STATES):
        states.append((shape, shape_offsets(shape)))
        shape = rotate(shape)
    return tuple(states)


def rotation_states(shape: Shape) -> Tuple[Tuple[Shape, Optional[Offsets]], ...]:
    """The shape rotated 0..3 times, each with its occupied-cell offsets.

    Offsets are None for a state with no occupied cell. A shape that is not
    a 2-D matrix has no states.
    """
    arr = np.asarray(shape, dtype=np.int8)
    if arr.ndim != 2 or arr.size == 0:
        return ()
    rows, cols = arr.shape
    return _rotation_states(arr.tobytes(), int(rows), int(cols))


def enumerate_placements(board: Board, piece: Piece) -> List[Placement]:
    """Every legal (rotation, column) pair for `piece`, in tie-break order.

    Rotation states are produced by rotating the piece's current shape
    0..3 times; columns run from MIN_COLUMN to the board width. Validity is
    tested at the spawn row. Identical rotation states are not collapsed.
    """
    placements: List[Placement] = []
    for r, (shape, offsets) in enumerate(rotation_states(piece.shape)):
        if offsets is None:
            continue
        for x in range(MIN_COLUMN, board.width):
            if board.fits(offsets, x, SPAWN_ROW):
                placements.append(Placement(r, x, shape, offsets))
    return placements


def resting_row(board: Board, placement: Placement) -> int:
    return board.drop_row(placement.offsets, placement.x, SPAWN_ROW)


def resulting_board(board: Board, piece: Piece, placement: Placement) -> Board:
    """Board after hard-dropping `placement` from the spawn row.

    Full rows are left in place so the evaluator can score them.
    """
    return board.lock(placement.offsets, placement.x, SPAWN_ROW, piece.color_id)


def to_move(placement: Placement, score: float) -> Move:
    return Move(x=placement.x, shape=placement.shape, score=score, rotation=placement.rotation)
