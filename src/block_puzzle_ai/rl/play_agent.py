from __future__ import annotations

import argparse
from typing import List, Optional

from block_puzzle_ai.ai.agent import Strategy
from block_puzzle_ai.ai.config import AgentConfig
from block_puzzle_ai.game.core import BlockPuzzleGame, GameConfig
from block_puzzle_ai.game.rules import Difficulty
from block_puzzle_ai.utils.logging import setup_logger


def build_config(args: argparse.Namespace) -> AgentConfig:
    difficulty = Difficulty.from_name(args.difficulty)
    lookahead = args.lookahead if args.lookahead is not None else (2 if args.hyper else 1)
    return AgentConfig(
        max_height_allowed=difficulty.max_height,
        tetris_priority=args.tetris,
        hole_aversion=args.afraid_of_holes,
        lookahead=lookahead,
    )


def play_game(game: BlockPuzzleGame, config: AgentConfig, strategy: Strategy, max_pieces: int) -> dict:
    while not game.game_over and game.pieces_placed < max_pieces:
        game.step(config, strategy)
    return game.get_stats()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run headless games with the autoplay agent.")
    p.add_argument("--games", type=int, default=1)
    p.add_argument("--difficulty", choices=[d.name.lower() for d in Difficulty], default="medium")
    p.add_argument("--hyper", action="store_true", help="Look two pieces ahead instead of one")
    p.add_argument("--lookahead", type=int, choices=[0, 1, 2], default=None,
                   help="Override the number of queued pieces searched")
    p.add_argument("--tetris", action="store_true", help="Double the bonus for 4-line clears")
    p.add_argument("--afraid-of-holes", action="store_true", help="Penalise holes five times harder")
    p.add_argument("--random", action="store_true", help="Disable the agent and play random legal moves")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--max-pieces", type=int, default=500)
    p.add_argument("--log-level", type=str, default="info")
    return p


def run_games(argv: Optional[List[str]] = None) -> List[dict]:
    args = build_parser().parse_args(argv)
    logger = setup_logger(name="block_puzzle_ai", level=args.log_level)

    config = build_config(args)
    strategy = Strategy.RANDOM if args.random else Strategy.LOOKAHEAD
    logger.info(
        "playing %d game(s): strategy=%s lookahead=%d cap=%d tetris=%s holes=%s",
        args.games, strategy.value, config.lookahead, config.max_height_allowed,
        config.tetris_priority, config.hole_aversion,
    )

    results: List[dict] = []
    for i in range(args.games):
        seed = None if args.seed is None else args.seed + i
        game = BlockPuzzleGame(GameConfig(random_seed=seed))
        stats = play_game(game, config, strategy, args.max_pieces)
        results.append(stats)
        logger.info(
            "game %d/%d: score=%d lines=%d pieces=%d lpp=%.3f%s",
            i + 1, args.games, stats["score"], stats["lines_cleared"], stats["pieces_placed"],
            stats["avg_lines_per_piece"], " (topped out)" if stats["game_over"] else "",
        )

    if results:
        mean_score = sum(r["score"] for r in results) / len(results)
        mean_lines = sum(r["lines_cleared"] for r in results) / len(results)
        logger.info("mean score=%.1f mean lines=%.1f", mean_score, mean_lines)
    return results


def main() -> None:
    run_games()


if __name__ == "__main__":  # pragma: no cover
    main()
