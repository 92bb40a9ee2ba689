"""Game module for the falling-block autoplay agent.

Exports the board model and supporting classes:
- Board: immutable playfield snapshot with drop and line clearing
- Piece: tetromino with rotation mechanics
- TetrominoType: Enum of available piece types
- PieceGenerator: uniform random piece source
- ScoringRules: line clear points
- Difficulty: tick speed and height cap presets

The headless game session lives in `block_puzzle_ai.game.core`; it depends
on the agent and is not imported here.
"""

from .grid import BOARD_HEIGHT, BOARD_WIDTH, Board
from .pieces import BASE_SHAPES, Piece, PieceGenerator, TetrominoType, rotate
from .rules import Difficulty, ScoringRules

__all__ = [
    "BASE_SHAPES",
    "BOARD_HEIGHT",
    "BOARD_WIDTH",
    "Board",
    "Difficulty",
    "Piece",
    "PieceGenerator",
    "ScoringRules",
    "TetrominoType",
    "rotate",
]
