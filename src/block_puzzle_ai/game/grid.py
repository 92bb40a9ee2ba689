from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property, lru_cache
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .pieces import Shape


BOARD_WIDTH = 10
BOARD_HEIGHT = 20
# cells are stored one byte each and exposed as int8
MAX_CELL_VALUE = 127

Offset = Tuple[int, int]
Offsets = Tuple[Offset, ...]


@lru_cache(maxsize=256)
def _offsets_cached(raw: bytes, rows: int, cols: int) -> Optional[Offsets]:
    flat = np.frombuffer(raw, dtype=np.int64)
    offsets = tuple((int(i) // cols, int(i) % cols) for i in np.flatnonzero(flat))
    return offsets or None


def shape_offsets(shape: Shape) -> Optional[Offsets]:
    """(row, col) offsets of the occupied cells, or None for a malformed shape.

    A shape is malformed when it is not a rectangular 2-D matrix of numbers
    or has no occupied cell.
    """
    try:
        arr = np.asarray(shape).astype(np.int64)
    except (TypeError, ValueError):
        # ragged or non-numeric input
        return None
    if arr.ndim != 2 or arr.size == 0:
        return None
    rows, cols = arr.shape
    return _offsets_cached(arr.tobytes(), int(rows), int(cols))


@dataclass(frozen=True, eq=False)
class Board:
    """Immutable snapshot of the playfield.

    Cells hold 0 when empty and 1-7 for locked cells tagged with the color
    id of the piece that produced them. Row 0 is the top. Rows are stored
    as `bytes` so the placement loops index plain Python data; `grid` is a
    read-only int8 view for callers that want numpy. Every transformation
    returns a new Board.

    The offset-based methods (`fits`, `drop_row`, `lock`) take the
    precomputed output of `shape_offsets`; the shape-based ones wrap them.
    """

    rows: Tuple[bytes, ...]

    def __post_init__(self) -> None:
        rows = tuple(bytes(r) for r in self.rows)
        if not rows or not rows[0]:
            raise ValueError("board must have at least one row and one column")
        if any(len(r) != len(rows[0]) for r in rows):
            raise ValueError("all rows must have the same width")
        object.__setattr__(self, "rows", rows)

    @classmethod
    def _make(cls, rows: Tuple[bytes, ...]) -> "Board":
        # rows produced by this module are already validated
        board = object.__new__(cls)
        object.__setattr__(board, "rows", rows)
        return board

    @classmethod
    def empty(cls, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> "Board":
        if width <= 0 or height <= 0:
            raise ValueError(f"board dimensions must be positive, got {width}x{height}")
        return cls._make((bytes(width),) * height)

    @classmethod
    def from_array(cls, grid: np.ndarray) -> "Board":
        arr = np.asarray(grid)
        if arr.ndim != 2 or arr.size == 0:
            raise ValueError(f"board grid must be a non-empty 2-D array, got shape {arr.shape}")
        if arr.min() < 0 or arr.max() > MAX_CELL_VALUE:
            raise ValueError(f"cell values must be within 0..{MAX_CELL_VALUE}")
        arr = arr.astype(np.uint8)
        return cls._make(tuple(row.tobytes() for row in arr))

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[int]]) -> "Board":
        rows = [list(r) for r in rows]
        widths = {len(r) for r in rows}
        if len(widths) != 1:
            raise ValueError(f"all rows must have the same width, got widths {sorted(widths)}")
        return cls.from_array(np.array(rows))

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @cached_property
    def grid(self) -> np.ndarray:
        # frombuffer over bytes yields a read-only array
        return np.frombuffer(b"".join(self.rows), dtype=np.int8).reshape(self.height, self.width)

    @cached_property
    def column_tops(self) -> Tuple[int, ...]:
        """Row of the topmost filled cell per column; `height` when empty."""
        height = len(self.rows)
        width = len(self.rows[0])
        tops = [height] * width
        open_columns = width
        for y, row in enumerate(self.rows):
            if row.count(0) == width:
                continue
            for x in range(width):
                if tops[x] == height and row[x]:
                    tops[x] = y
                    open_columns -= 1
            if not open_columns:
                break
        return tuple(tops)

    @cached_property
    def row_counts(self) -> Tuple[int, ...]:
        """Number of filled cells per row."""
        width = len(self.rows[0])
        return tuple(width - row.count(0) for row in self.rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.rows == other.rows

    def __hash__(self) -> int:
        return hash(self.rows)

    def fits(self, offsets: Offsets, x: int, y: int) -> bool:
        rows = self.rows
        width = len(rows[0])
        height = len(rows)
        for dy, dx in offsets:
            bx = x + dx
            by = y + dy
            if bx < 0 or bx >= width or by >= height:
                return False
            if by >= 0 and rows[by][bx]:
                return False
        return True

    def drop_row(self, offsets: Offsets, x: int, y: int) -> int:
        """Lowest anchor row reachable from y, given the shape's offsets."""
        tops = self.column_tops
        width = len(tops)
        lowest = None
        for dy, dx in offsets:
            col = x + dx
            start = y + dy
            if col < 0 or col >= width or tops[col] <= start:
                # out of bounds or under an overhang: step down one row at a time
                return self._drop_stepwise(offsets, x, y)
            limit = tops[col] - 1 - dy
            if lowest is None or limit < lowest:
                lowest = limit
        return y if lowest is None else lowest

    def _drop_stepwise(self, offsets: Offsets, x: int, y: int) -> int:
        while self.fits(offsets, x, y + 1):
            y += 1
        return y

    def lock(self, offsets: Offsets, x: int, y: int, color_id: int) -> "Board":
        """Hard-drop the cells in `offsets` from (x, y) and write `color_id`.

        Cells that would land above row 0 are not written.
        """
        final_y = self.drop_row(offsets, x, y)
        rows = list(self.rows)
        width = len(rows[0])
        touched = {}
        for dy, dx in offsets:
            bx = x + dx
            by = final_y + dy
            if 0 <= by < len(rows) and 0 <= bx < width:
                if by not in touched:
                    touched[by] = bytearray(rows[by])
                touched[by][bx] = color_id
        for by, row in touched.items():
            rows[by] = bytes(row)
        return Board._make(tuple(rows))

    def is_valid_placement(self, shape: Shape, x: int, y: int) -> bool:
        """Check whether `shape` anchored at (x, y) fits on the board.

        Cells above the top row (y < 0) are allowed so pieces can be tested
        while still protruding above the spawn row.
        """
        offsets = shape_offsets(shape)
        if offsets is None:
            return False
        return self.fits(offsets, x, y)

    def resting_row(self, shape: Shape, x: int, y: int) -> int:
        """Lowest anchor row reachable by dropping straight down from y."""
        offsets = shape_offsets(shape)
        if offsets is None:
            return y
        return self.drop_row(offsets, x, y)

    def commit(self, shape: Shape, x: int, y: int, color_id: int) -> "Board":
        offsets = shape_offsets(shape)
        if offsets is None:
            return self
        return self.lock(offsets, x, y, color_id)

    def clear_full_lines(self) -> Tuple["Board", int]:
        width = len(self.rows[0])
        kept = tuple(row for row, count in zip(self.rows, self.row_counts) if count != width)
        cleared = len(self.rows) - len(kept)
        if cleared == 0:
            return self, 0
        # Remove full rows and add empty rows at the top
        return Board._make((bytes(width),) * cleared + kept), cleared
