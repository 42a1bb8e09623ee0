"""
move.py
Classify a chess move into the sparse feature deltas it causes.

Move shapes (closed set, fixed delta count and order):
- Quiet:            place mover @ to, remove mover @ from
- Promotion:        remove pawn @ from, place promoted @ to
- PromotionCapture: remove captured @ to, place promoted @ to, remove pawn @ from
- Capture:          remove captured @ captured square, place mover @ to, remove mover @ from
- Castle:           remove king @ from, place king @ to, remove rook @ from, place rook @ to

Ownership and orientation are relative to the encoding perspective, which
defaults to the side to move.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import chess

from encoding.errors import IllegalMoveError, InconsistentBoardError
from encoding.state import feature_index, orient

logger = logging.getLogger(__name__)


class PieceChange(enum.Enum):
    """Sign of a feature delta."""
    PLACE = 1
    REMOVE = -1


@dataclass(frozen=True)
class FeatureDelta:
    index: int
    change: PieceChange


@dataclass(frozen=True)
class Quiet:
    move: chess.Move
    deltas: Tuple[FeatureDelta, FeatureDelta]
    perspective: chess.Color


@dataclass(frozen=True)
class Promotion:
    move: chess.Move
    deltas: Tuple[FeatureDelta, FeatureDelta]
    perspective: chess.Color


@dataclass(frozen=True)
class PromotionCapture:
    move: chess.Move
    deltas: Tuple[FeatureDelta, FeatureDelta, FeatureDelta]
    perspective: chess.Color


@dataclass(frozen=True)
class Capture:
    move: chess.Move
    deltas: Tuple[FeatureDelta, FeatureDelta, FeatureDelta]
    perspective: chess.Color


@dataclass(frozen=True)
class Castle:
    move: chess.Move
    deltas: Tuple[FeatureDelta, FeatureDelta, FeatureDelta, FeatureDelta]
    perspective: chess.Color


MoveClassification = Union[Quiet, Promotion, PromotionCapture, Capture, Castle]

DELTA_COUNTS = {
    Quiet: 2,
    Promotion: 2,
    PromotionCapture: 3,
    Capture: 3,
    Castle: 4,
}


def assert_distinct(deltas: Tuple[FeatureDelta, ...]) -> None:
    """
    Deltas are applied by direct assignment, so one move must never touch
    the same feature index twice.

    Raises:
        InconsistentBoardError: If two deltas share an index
    """
    indices = [delta.index for delta in deltas]
    if len(set(indices)) != len(indices):
        raise InconsistentBoardError(f"Deltas collide on a feature index: {indices}")


def check_shape(classification: MoveClassification) -> None:
    """
    Validate that ``classification`` is one of the known move shapes with
    its fixed number of deltas.

    Raises:
        TypeError: Unknown shape
        ValueError: Wrong delta count
    """
    expected = DELTA_COUNTS.get(type(classification))
    if expected is None:
        raise TypeError(f"Not a move classification: {classification!r}")
    if len(classification.deltas) != expected:
        raise ValueError(
            f"{type(classification).__name__} needs {expected} deltas, "
            f"got {len(classification.deltas)}"
        )


def classify_move(
    board: chess.Board,
    move: chess.Move,
    perspective: Optional[chess.Color] = None
) -> MoveClassification:
    """
    Derive the feature deltas ``move`` causes on ``board``.

    Args:
        board: Position immediately before the move (not mutated)
        move: Move to classify; legality is the caller's concern
        perspective: Side the feature vector is encoded for (default: side to move)

    Returns:
        Exactly one of Quiet, Promotion, PromotionCapture, Capture, Castle

    Raises:
        IllegalMoveError: Destination holds one of the mover's own pieces
        InconsistentBoardError: Board does not hold the pieces the move needs

    Examples:
        Starting position, e2e4 -> Quiet(deltas=(PLACE 28, REMOVE 12))
    """
    if perspective is None:
        perspective = board.turn

    mover = board.piece_at(move.from_square)
    if mover is None:
        raise InconsistentBoardError(f"No piece on source square of {move.uci()}")

    is_own = mover.color == perspective

    def place(piece_type: chess.PieceType, square: int, own: bool = is_own) -> FeatureDelta:
        return FeatureDelta(feature_index(piece_type, own, orient(square, perspective)), PieceChange.PLACE)

    def remove(piece_type: chess.PieceType, square: int, own: bool = is_own) -> FeatureDelta:
        return FeatureDelta(feature_index(piece_type, own, orient(square, perspective)), PieceChange.REMOVE)

    # Castle
    if mover.piece_type == chess.KING and _is_castle(board, move, mover.color):
        return _classify_castle(board, move, mover.color, perspective, place, remove)

    target = board.piece_at(move.to_square)
    if target is not None and target.color == mover.color:
        raise IllegalMoveError(f"{move.uci()} lands on own {chess.piece_name(target.piece_type)}")

    # Promotion
    if move.promotion is not None:
        if mover.piece_type != chess.PAWN:
            raise InconsistentBoardError(f"Promotion {move.uci()} does not start from a pawn")

        if target is None:
            deltas = (
                remove(chess.PAWN, move.from_square),
                place(move.promotion, move.to_square),
            )
            return _finish(Promotion(move, deltas, perspective))

        deltas = (
            remove(target.piece_type, move.to_square, own=not is_own),
            place(move.promotion, move.to_square),
            remove(chess.PAWN, move.from_square),
        )
        return _finish(PromotionCapture(move, deltas, perspective))

    # Capture
    if target is not None:
        deltas = (
            remove(target.piece_type, move.to_square, own=not is_own),
            place(mover.piece_type, move.to_square),
            remove(mover.piece_type, move.from_square),
        )
        return _finish(Capture(move, deltas, perspective))

    if mover.piece_type == chess.PAWN and board.is_en_passant(move):
        # Captured pawn sits beside the mover, not on the destination
        captured_square = chess.square(chess.square_file(move.to_square), chess.square_rank(move.from_square))
        captured = board.piece_at(captured_square)
        if captured is None or captured.color == mover.color:
            raise InconsistentBoardError(f"No enemy pawn to take en passant with {move.uci()}")

        deltas = (
            remove(captured.piece_type, captured_square, own=not is_own),
            place(mover.piece_type, move.to_square),
            remove(mover.piece_type, move.from_square),
        )
        return _finish(Capture(move, deltas, perspective))

    # Quiet move
    deltas = (
        place(mover.piece_type, move.to_square),
        remove(mover.piece_type, move.from_square),
    )
    return _finish(Quiet(move, deltas, perspective))


def _is_castle(board: chess.Board, move: chess.Move, color: chess.Color) -> bool:
    """
    King moves that castle: a two-file step along the home rank onto an
    empty square, or the king taking its own rook on the home rank while
    that rook still carries a castling right.

    Any other king move onto an own piece is left to the own-piece check.
    """
    home_rank = 0 if color == chess.WHITE else 7
    if chess.square_rank(move.from_square) != home_rank or chess.square_rank(move.to_square) != home_rank:
        return False

    target = board.piece_at(move.to_square)
    if target is not None:
        return (
            target.piece_type == chess.ROOK
            and target.color == color
            and bool(board.castling_rights & chess.BB_SQUARES[move.to_square])
        )

    return abs(chess.square_file(move.to_square) - chess.square_file(move.from_square)) == 2


def _classify_castle(board, move, color, perspective, place, remove) -> Castle:
    """
    Castle deltas from the real king and rook squares.

    Handles both the standard two-file king move (e1g1) and the
    king-takes-rook notation (e1h1).
    """
    rank = chess.square_rank(move.from_square)
    kingside = chess.square_file(move.to_square) > chess.square_file(move.from_square)

    target = board.piece_at(move.to_square)
    if target is not None and target.piece_type == chess.ROOK and target.color == color:
        rook_from = move.to_square
    else:
        rook_from = chess.square(7 if kingside else 0, rank)

    rook = board.piece_at(rook_from)
    if rook is None or rook.piece_type != chess.ROOK or rook.color != color:
        raise InconsistentBoardError(f"No castling rook on {chess.square_name(rook_from)} for {move.uci()}")

    king_to = chess.square(6 if kingside else 2, rank)
    rook_to = chess.square(5 if kingside else 3, rank)

    deltas = (
        remove(chess.KING, move.from_square),
        place(chess.KING, king_to),
        remove(chess.ROOK, rook_from),
        place(chess.ROOK, rook_to),
    )
    return _finish(Castle(move, deltas, perspective))


def _finish(classification: MoveClassification) -> MoveClassification:
    check_shape(classification)
    assert_distinct(classification.deltas)
    logger.debug("%s classified as %s", classification.move.uci(), type(classification).__name__)
    return classification
