"""
state.py
Orientation and feature indexing for the 768-wide NNUE input.

Encoding scheme:
- 12 piece classes × 64 squares = 768 binary features
- Classes 0-5: own pieces (P, N, B, R, Q, K)
- Classes 6-11: opponent pieces (P, N, B, R, Q, K)
- Squares are reoriented so the encoded side always sits on ranks 1-2:
  identity for White, point reflection (63 - sq) for Black
"""

import chess
import torch
from typing import Optional

NUM_SQUARES = 64
NUM_PIECE_TYPES = 6
NUM_PIECE_CLASSES = 2 * NUM_PIECE_TYPES
FEATURE_SIZE = NUM_PIECE_CLASSES * NUM_SQUARES  # 768


def orient(square: int, color: chess.Color) -> int:
    """
    Reorient a square for the side being encoded.

    Args:
        square: Square index [0, 63]
        color: Perspective the encoding is expressed from

    Returns:
        Reoriented square [0, 63]
    """
    if color == chess.WHITE:
        return square
    return 63 - square


def piece_index(piece_type: chess.PieceType, is_own: bool) -> int:
    """
    Piece class [0, 11]: ordinal for own pieces, ordinal + 6 for opponent ones.

    Examples:
        piece_index(chess.KING, True) -> 5
        piece_index(chess.BISHOP, False) -> 8
    """
    if piece_type not in chess.PIECE_TYPES:
        raise ValueError(f"Unknown piece type: {piece_type!r}")

    ordinal = piece_type - 1  # chess.PAWN == 1
    if is_own:
        return ordinal
    return ordinal + NUM_PIECE_TYPES


def feature_index(piece_type: chess.PieceType, is_own: bool, reoriented_square: int) -> int:
    """
    Map (piece, ownership, reoriented square) to a feature index [0, 767].

    Args:
        piece_type: python-chess piece type
        is_own: True if the piece belongs to the encoded side
        reoriented_square: Square already passed through orient()

    Returns:
        piece_index * 64 + reoriented_square

    Examples:
        White pawn on e4 seen by White: feature_index(PAWN, True, 28) -> 28
    """
    if not 0 <= reoriented_square < NUM_SQUARES:
        raise ValueError(f"Square out of range: {reoriented_square}")
    return piece_index(piece_type, is_own) * NUM_SQUARES + reoriented_square


def square_feature(board: chess.Board, square: int, perspective: chess.Color) -> Optional[int]:
    """Feature index of the piece on ``square`` seen from ``perspective``, None if empty."""
    piece = board.piece_at(square)
    if piece is None:
        return None
    return feature_index(piece.piece_type, piece.color == perspective, orient(square, perspective))


def encode_board(board: chess.Board, perspective: Optional[chess.Color] = None) -> torch.Tensor:
    """
    Encode the whole board from scratch.

    Args:
        board: Chess board state to encode
        perspective: Side the encoding is expressed from (default: side to move)

    Returns:
        Tensor of shape [768], dtype float32, values in {0.0, 1.0}

    Invariant:
        Output is deterministic for same board state and perspective
    """
    if perspective is None:
        perspective = board.turn

    features = torch.zeros(FEATURE_SIZE, dtype=torch.float32)
    for square, piece in board.piece_map().items():
        index = feature_index(piece.piece_type, piece.color == perspective, orient(square, perspective))
        features[index] = 1.0

    return features
