"""
encoding package
Sparse 768-feature encoding and incremental move deltas for the NNUE evaluator.
"""

from encoding.state import orient, piece_index, feature_index, encode_board, FEATURE_SIZE
from encoding.move import (
    PieceChange, FeatureDelta, Quiet, Promotion, PromotionCapture, Capture, Castle,
    MoveClassification, classify_move
)
from encoding.vector import FeatureVector
from encoding.errors import (
    EncodingError, IllegalMoveError, InconsistentBoardError, RevertOrderError, PerspectiveMismatchError
)

__all__ = [
    'orient', 'piece_index', 'feature_index', 'encode_board', 'FEATURE_SIZE',
    'PieceChange', 'FeatureDelta', 'Quiet', 'Promotion', 'PromotionCapture', 'Capture', 'Castle',
    'MoveClassification', 'classify_move',
    'FeatureVector',
    'EncodingError', 'IllegalMoveError', 'InconsistentBoardError', 'RevertOrderError', 'PerspectiveMismatchError',
]
