#!/usr/bin/env python3
"""
evaluate_position.py
Score a position and rank its legal moves with a TorchScript NNUE model.

Usage:
    python evaluate_position.py --model checkpoints/shallow-nnue.pt --fen "<FEN>" --top 5
"""

import argparse

import chess

import config
from logger import setup_logger
from model.evaluator import NNUEEvaluator
from model.oracle import TorchScriptOracle


def rank_moves(evaluator: NNUEEvaluator, top: int) -> list:
    """
    Score all legal moves and keep the best ``top``.

    Scores are from the perspective of the side to move, higher is better.

    Returns:
        List of (move, score) sorted by descending score
    """
    scores = evaluator.score_moves()
    ranked = sorted(scores.items(), key=lambda x: x[1], reverse=True)
    return ranked[:top]


def main():
    parser = argparse.ArgumentParser(description="Rank legal moves with a shallow NNUE model")
    parser.add_argument('--model', type=str, default=config.DEFAULT_MODEL_PATH,
                        help='Path to TorchScript model')
    parser.add_argument('--fen', type=str, default=chess.STARTING_FEN,
                        help='Position to evaluate')
    parser.add_argument('--top', type=int, default=config.TOP_MOVES,
                        help='Number of moves to print')
    parser.add_argument('--log-level', type=str, default=config.LOG_LEVEL,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')

    args = parser.parse_args()

    logger = setup_logger("evaluate_position", level=args.log_level)
    # Route package loggers through the same handlers
    for name in ("encoding", "model"):
        setup_logger(name, level=args.log_level)

    oracle = TorchScriptOracle.load(args.model)
    board = chess.Board(args.fen)
    evaluator = NNUEEvaluator(oracle, board, device=oracle.device)

    logger.info(f"Position: {board.fen()}")
    logger.info(f"Active features: {len(evaluator.vector.active_indices())}")

    print("=" * 50)
    print(f"Static score ({chess.COLOR_NAMES[board.turn]} to move): {evaluator.evaluate():+.4f}")
    print("=" * 50)

    if board.is_game_over():
        print(f"Game over: {board.result()}")
        return

    print(f"{'Rank':<6} {'Move':<8} {'Score':<10}")
    print("-" * 50)
    for rank, (move, score) in enumerate(rank_moves(evaluator, args.top), start=1):
        print(f"{rank:<6} {board.san(move):<8} {score:+.4f}")
    print("=" * 50)


if __name__ == "__main__":
    main()
