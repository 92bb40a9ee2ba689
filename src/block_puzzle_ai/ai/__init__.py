"""Decision engine: board evaluation, placement enumeration and search.

- evaluate / board_features: weighted structural heuristic
- enumerate_placements: legal (rotation, column) pairs in tie-break order
- choose_move: exhaustive lookahead over the current piece and queue
- random_move: uniform fallback used when the agent is disabled
- select_move: strategy dispatch shared by both
"""

from .agent import Strategy, select_move
from .config import AgentConfig
from .heuristic import BoardFeatures, HeuristicWeights, board_features, evaluate
from .moves import Move, Placement, enumerate_placements, resulting_board
from .random_mover import random_move
from .search import best_leaf_score, choose_move

__all__ = [
    "AgentConfig",
    "BoardFeatures",
    "HeuristicWeights",
    "Move",
    "Placement",
    "Strategy",
    "best_leaf_score",
    "board_features",
    "choose_move",
    "enumerate_placements",
    "evaluate",
    "random_move",
    "resulting_board",
    "select_move",
]
