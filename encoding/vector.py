"""
vector.py
Mutable 768-wide feature vector updated incrementally by move deltas.

Apply/revert set features directly (no counters), so every classification
must touch pairwise-distinct indices; encoding.move guarantees this.
"""

import logging
from typing import List, Optional

import chess
import numpy as np
import torch

from encoding.errors import PerspectiveMismatchError, RevertOrderError
from encoding.move import MoveClassification, PieceChange, check_shape
from encoding.state import FEATURE_SIZE, encode_board

logger = logging.getLogger(__name__)


class FeatureVector:
    """
    Encoded position owned by a single traversal.

    Classifications are applied and reverted in stack order, mirroring
    board.push() / board.pop() in a depth-first search.
    """

    def __init__(self, device: Optional[torch.device] = None):
        """
        Args:
            device: Torch device holding the tensor (default: CPU)
        """
        self.device = torch.device(device) if device is not None else torch.device("cpu")
        self._features = torch.zeros(FEATURE_SIZE, dtype=torch.float32, device=self.device)
        self._applied: List[MoveClassification] = []
        self.perspective: chess.Color = chess.WHITE

    @classmethod
    def from_board(
        cls,
        board: chess.Board,
        perspective: Optional[chess.Color] = None,
        device: Optional[torch.device] = None
    ) -> 'FeatureVector':
        """Create a vector already resynced to ``board``."""
        vector = cls(device=device)
        vector.resync(board, perspective)
        return vector

    @property
    def tensor(self) -> torch.Tensor:
        """Underlying [768] float32 tensor (do not mutate directly)."""
        return self._features

    @property
    def depth(self) -> int:
        """Number of applied, not yet reverted classifications."""
        return len(self._applied)

    def apply(self, classification: MoveClassification) -> None:
        """
        Set each delta's feature: 1 for PLACE, 0 for REMOVE, in declared order.

        Args:
            classification: Deltas from encoding.move.classify_move

        Raises:
            PerspectiveMismatchError: Deltas were built for the other side
        """
        check_shape(classification)
        if classification.perspective != self.perspective:
            raise PerspectiveMismatchError(
                f"{classification.move.uci()} was classified for "
                f"{chess.COLOR_NAMES[classification.perspective]}, vector encodes "
                f"{chess.COLOR_NAMES[self.perspective]}"
            )
        for delta in classification.deltas:
            self._features[delta.index] = 1.0 if delta.change is PieceChange.PLACE else 0.0
        self._applied.append(classification)

    def revert(self, classification: MoveClassification) -> None:
        """
        Undo apply(): 0 for PLACE, 1 for REMOVE.

        Args:
            classification: Must be the most recently applied classification

        Raises:
            RevertOrderError: Nothing applied, or not the last applied one
        """
        if not self._applied:
            raise RevertOrderError("Nothing to revert")
        if self._applied[-1] != classification:
            raise RevertOrderError(
                f"Reverting {classification.move.uci()} but last applied was "
                f"{self._applied[-1].move.uci()}"
            )

        for delta in classification.deltas:
            self._features[delta.index] = 0.0 if delta.change is PieceChange.PLACE else 1.0
        self._applied.pop()

    def resync(self, board: chess.Board, perspective: Optional[chess.Color] = None) -> None:
        """
        Rebuild from board contents, dropping any applied classifications.

        Args:
            board: Position to encode
            perspective: Side to encode for (default: side to move)
        """
        if perspective is None:
            perspective = board.turn

        self._features.copy_(encode_board(board, perspective))
        self._applied.clear()
        self.perspective = perspective
        logger.debug("Resynced %d pieces for %s", len(board.piece_map()), chess.COLOR_NAMES[perspective])

    def clone(self) -> 'FeatureVector':
        """Independent copy (tensor and applied stack) for another branch."""
        other = FeatureVector(device=self.device)
        other._features.copy_(self._features)
        other._applied = list(self._applied)
        other.perspective = self.perspective
        return other

    def active_indices(self) -> np.ndarray:
        """Sorted indices of features set to 1."""
        return np.flatnonzero(self.to_numpy())

    def to_numpy(self) -> np.ndarray:
        return self._features.detach().cpu().numpy().copy()

    def equals(self, other: 'FeatureVector') -> bool:
        """Bit-for-bit comparison of the encoded features."""
        return torch.equal(self._features.cpu(), other.tensor.cpu())

    def __repr__(self) -> str:
        return (
            f"FeatureVector(active={int(self._features.sum().item())}, "
            f"perspective={chess.COLOR_NAMES[self.perspective]}, depth={self.depth})"
        )
