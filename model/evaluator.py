"""
evaluator.py
Incremental position evaluation: board + feature vector + oracle.

evaluate_move() classifies a move against the current board, applies its
deltas, queries the oracle and reverts, so the vector is never re-encoded
from scratch between sibling moves.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

import chess
import torch

from encoding.move import MoveClassification, classify_move
from encoding.vector import FeatureVector

logger = logging.getLogger(__name__)

Oracle = Callable[[torch.Tensor], float]


class NNUEEvaluator:
    """
    Owns a private board copy and its feature vector.

    Any callable mapping a [768] tensor to a float works as oracle, e.g. a
    TorchScriptOracle or a stub in tests.
    """

    def __init__(
        self,
        oracle: Oracle,
        board: Optional[chess.Board] = None,
        device: Optional[torch.device] = None
    ):
        """
        Args:
            oracle: Scoring function over the feature tensor
            board: Starting position (default: standard initial position)
            device: Device for the feature vector (default: CPU)
        """
        self.oracle = oracle
        self.vector = FeatureVector(device=device)
        self.board = chess.Board()
        self._history: List[MoveClassification] = []
        self.set_board(board if board is not None else chess.Board())

    def set_board(self, board: chess.Board) -> None:
        """
        Hard reset: copy ``board`` and re-encode every piece.

        The side to move becomes the vector's perspective.
        """
        self.board = board.copy()
        self._history.clear()
        self.vector.resync(self.board)
        logger.debug(f"Board set: {self.board.fen()}")

    def classify(self, move: chess.Move) -> MoveClassification:
        """Deltas of ``move`` on the current board, in the vector's perspective."""
        return classify_move(self.board, move, self.vector.perspective)

    def evaluate(self) -> float:
        """Score the current position."""
        return self.oracle(self.vector.tensor)

    def evaluate_move(self, move: chess.Move) -> float:
        """
        Score the position after ``move`` without keeping it.

        Args:
            move: Move consistent with the current board

        Returns:
            Oracle score of the resulting encoding

        Raises:
            IllegalMoveError: Move lands on one of the mover's own pieces
            InconsistentBoardError: Board does not match the move
            OracleEvaluationError: Propagated from the oracle, after revert
        """
        classification = self.classify(move)
        self.vector.apply(classification)
        try:
            return self.oracle(self.vector.tensor)
        finally:
            self.vector.revert(classification)

    def score_moves(self, moves: Optional[Iterable[chess.Move]] = None) -> Dict[chess.Move, float]:
        """
        Score each move (default: all legal moves).

        Returns:
            {move: score}
        """
        if moves is None:
            moves = list(self.board.legal_moves)
        return {move: self.evaluate_move(move) for move in moves}

    def push(self, move: chess.Move) -> MoveClassification:
        """
        Play ``move``: apply its deltas and push it onto the board.

        The perspective stays the one set by set_board(), so the vector keeps
        matching encode_board(board, perspective) after any push sequence.
        """
        classification = self.classify(move)
        self.vector.apply(classification)
        self.board.push(move)
        self._history.append(classification)
        return classification

    def pop(self) -> chess.Move:
        """
        Undo the last push().

        Raises:
            IndexError: No pushed move to undo
        """
        if not self._history:
            raise IndexError("pop from empty move history")

        classification = self._history.pop()
        self.vector.revert(classification)
        return self.board.pop()

    @property
    def ply(self) -> int:
        """Moves pushed since the last set_board()."""
        return len(self._history)
