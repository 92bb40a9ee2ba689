from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional

from block_puzzle_ai.ai.agent import Strategy, select_move
from block_puzzle_ai.ai.config import AgentConfig
from block_puzzle_ai.ai.moves import Move

from .grid import BOARD_HEIGHT, BOARD_WIDTH, Board
from .pieces import Piece, PieceGenerator, TetrominoType
from .rules import ScoringRules


logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    width: int = BOARD_WIDTH
    height: int = BOARD_HEIGHT
    queue_size: int = 5
    random_seed: Optional[int] = None
    # placements averaged for the rolling lines-per-piece figure
    lpp_window: int = 51

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"board dimensions must be positive, got {self.width}x{self.height}")
        if self.queue_size < 1:
            raise ValueError(f"queue_size must be >= 1, got {self.queue_size}")
        if self.lpp_window < 1:
            raise ValueError(f"lpp_window must be >= 1, got {self.lpp_window}")


class BlockPuzzleGame:
    """Headless game session driven one placement per tick.

    The session owns the board, the falling piece and the preview queue; a
    caller (CLI, env or UI) asks for a move and applies it.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.generator = PieceGenerator(self.config.random_seed, self.config.width)
        # separate stream so random moves do not perturb the piece sequence
        self.move_rng = random.Random(self.config.random_seed)
        self.board = Board.empty(self.config.width, self.config.height)
        self.current_piece: Optional[Piece] = None
        self.queue: Deque[Piece] = deque()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_placed = 0
        self.piece_stats: Dict[TetrominoType, int] = {}
        self.recent_lines: Deque[int] = deque(maxlen=self.config.lpp_window)
        self.lpp_history: List[float] = []
        self.game_over = False
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.generator = PieceGenerator(seed, self.config.width)
            self.move_rng = random.Random(seed)
        self.board = Board.empty(self.config.width, self.config.height)
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_placed = 0
        self.piece_stats = {kind: 0 for kind in TetrominoType}
        self.recent_lines.clear()
        self.lpp_history = []
        self.game_over = False
        self.current_piece = self._new_piece()
        self.queue = deque(self._new_piece() for _ in range(self.config.queue_size))

    def _new_piece(self) -> Piece:
        piece = self.generator.next_piece()
        self.piece_stats[piece.kind] += 1
        return piece

    @property
    def rolling_lpp(self) -> float:
        if not self.recent_lines:
            return 0.0
        return sum(self.recent_lines) / len(self.recent_lines)

    def ghost_row(self, move: Move) -> Optional[int]:
        """Row the move's shape would come to rest on, for ghost display.

        None when there is no piece in flight.
        """
        if self.current_piece is None:
            return None
        return self.board.resting_row(move.shape, move.x, self.current_piece.y)

    def choose(self, config: AgentConfig, strategy: Strategy = Strategy.LOOKAHEAD) -> Optional[Move]:
        if self.game_over or self.current_piece is None:
            return None
        return select_move(self.board, self.current_piece, list(self.queue), config, strategy, self.move_rng)

    def apply_move(self, move: Move) -> int:
        """Lock the current piece as `move` describes and advance the queue.

        Returns the number of lines cleared.
        """
        if self.game_over or self.current_piece is None:
            return 0
        piece = self.current_piece
        dropped = self.board.commit(move.shape, move.x, piece.y, piece.color_id)
        board, lines = dropped.clear_full_lines()

        self.board = board
        self.lines_cleared_total += lines
        self.score += self.rules.score_for_lines(lines)
        self.pieces_placed += 1
        self.recent_lines.append(lines)
        self.lpp_history.append(self.rolling_lpp)

        next_piece = self.queue[0]
        # A blocked spawn ends the game before the queue advances; the piece
        # just placed stays current.
        if not self.board.is_valid_placement(next_piece.shape, next_piece.x, next_piece.y):
            logger.info("game over after %d pieces, score=%d", self.pieces_placed, self.score)
            self.game_over = True
            return lines
        self.queue.popleft()
        self.queue.append(self._new_piece())
        self.current_piece = next_piece
        return lines

    def step(self, config: AgentConfig, strategy: Strategy = Strategy.LOOKAHEAD) -> Optional[Move]:
        """Select and apply one move. A tick with no legal move ends the game."""
        if self.game_over:
            return None
        move = self.choose(config, strategy)
        if move is None:
            logger.info("no legal placement for %s, game over", self.current_piece.kind.name)
            self.game_over = True
            return None
        self.apply_move(move)
        return move

    def get_stats(self) -> dict:
        return {
            "score": self.score,
            "lines_cleared": self.lines_cleared_total,
            "pieces_placed": self.pieces_placed,
            "rolling_lpp": self.rolling_lpp,
            "avg_lines_per_piece": self.lines_cleared_total / max(1, self.pieces_placed),
            "piece_stats": {kind.name: count for kind, count in self.piece_stats.items()},
            "game_over": self.game_over,
        }
