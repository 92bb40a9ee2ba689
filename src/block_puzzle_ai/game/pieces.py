from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, Optional

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    L = 4
    J = 5
    S = 6
    Z = 7


Shape = np.ndarray


def _freeze(shape: Shape) -> Shape:
    out = np.array(shape, dtype=np.int8, copy=True)
    out.setflags(write=False)
    return out


def rotate(shape: Shape) -> Shape:
    """Rotate a shape matrix 90 degrees clockwise.

    Cell (row, col) of the input lands at (col, rows - 1 - row). Equivalent
    rotation states are not collapsed.
    """
    return _freeze(np.rot90(np.asarray(shape), 1, axes=(1, 0)))


# Cell values carry the color id of the piece.
BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _freeze([[1, 1, 1, 1]]),
    TetrominoType.O: _freeze([[2, 2], [2, 2]]),
    TetrominoType.T: _freeze([[0, 3, 0], [3, 3, 3]]),
    TetrominoType.L: _freeze([[0, 0, 4], [4, 4, 4]]),
    TetrominoType.J: _freeze([[5, 0, 0], [5, 5, 5]]),
    TetrominoType.S: _freeze([[0, 6, 6], [6, 6, 0]]),
    TetrominoType.Z: _freeze([[7, 7, 0], [0, 7, 7]]),
}


@dataclass(frozen=True)
class Piece:
    kind: TetrominoType
    shape: Shape = field(compare=False)
    color_id: int
    x: int = 0
    y: int = 0
    rotation: int = 0  # 0..3

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int = 10) -> "Piece":
        shape = BASE_SHAPES[kind]
        x = board_width // 2 - shape.shape[1] // 2
        return cls(kind=kind, shape=shape, color_id=int(kind), x=x, y=0, rotation=0)

    def rotated(self) -> "Piece":
        return replace(self, shape=rotate(self.shape), rotation=(self.rotation + 1) % 4)

    def with_shape(self, shape: Shape, x: Optional[int] = None) -> "Piece":
        return replace(self, shape=_freeze(shape), x=self.x if x is None else int(x))


class PieceGenerator:
    """Uniform random source over the seven tetrominoes."""

    def __init__(self, seed: Optional[int] = None, board_width: int = 10) -> None:
        self.rng = random.Random(seed)
        self.board_width = int(board_width)

    def next_piece(self) -> Piece:
        kind = self.rng.choice(list(TetrominoType))
        return Piece.spawn(kind, self.board_width)
