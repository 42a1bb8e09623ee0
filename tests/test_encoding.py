"""
test_encoding.py
Unit tests for orientation, feature indexing and move classification.
"""

import itertools

import chess
import pytest
import torch
from encoding.state import orient, piece_index, feature_index, encode_board, square_feature, FEATURE_SIZE
from encoding.move import (
    FeatureDelta, PieceChange, Quiet, Promotion, PromotionCapture, Capture, Castle,
    DELTA_COUNTS, classify_move, check_shape
)
from encoding.errors import IllegalMoveError, InconsistentBoardError

PLACE = PieceChange.PLACE
REMOVE = PieceChange.REMOVE


class TestOrientation:
    """Test square reorientation."""

    def test_orient_white_is_identity(self):
        """White perspective leaves every square unchanged."""
        for square in chess.SQUARES:
            assert orient(square, chess.WHITE) == square

    def test_orient_black_is_point_reflection(self):
        """Black perspective maps square to 63 - square."""
        for square in chess.SQUARES:
            assert orient(square, chess.BLACK) == 63 - square

    def test_orient_corners(self):
        """h8 seen by Black is a1."""
        assert orient(chess.H8, chess.BLACK) == chess.A1
        assert orient(chess.A1, chess.WHITE) == chess.A1


class TestIndexing:
    """Test piece classes and feature indices."""

    def test_piece_index_examples(self):
        """Known piece classes."""
        assert piece_index(chess.KING, False) == 11
        assert piece_index(chess.KING, True) == 5
        assert piece_index(chess.BISHOP, False) == 8
        assert piece_index(chess.BISHOP, True) == 2

    def test_opponent_offset(self):
        """Opponent class is own class + 6, own class in [0, 5]."""
        for piece_type in chess.PIECE_TYPES:
            assert 0 <= piece_index(piece_type, True) <= 5
            assert piece_index(piece_type, False) == piece_index(piece_type, True) + 6

    def test_feature_index_injective_and_in_range(self):
        """All (piece, ownership, square) triples map to distinct indices in [0, 768)."""
        indices = set()
        for piece_type, is_own, square in itertools.product(chess.PIECE_TYPES, (True, False), chess.SQUARES):
            index = feature_index(piece_type, is_own, square)
            assert 0 <= index < FEATURE_SIZE
            indices.add(index)
        assert len(indices) == FEATURE_SIZE

    def test_feature_index_rejects_bad_square(self):
        """Squares outside the board are rejected."""
        with pytest.raises(ValueError):
            feature_index(chess.PAWN, True, 64)
        with pytest.raises(ValueError):
            feature_index(chess.PAWN, True, -1)

    def test_piece_index_rejects_unknown_piece(self):
        with pytest.raises(ValueError):
            piece_index(7, True)


class TestBoardEncoding:
    """Test full-board encoding."""

    def test_encode_board_shape(self):
        """Output is a float32 vector of 768 entries."""
        features = encode_board(chess.Board())
        assert features.shape == (FEATURE_SIZE,)
        assert features.dtype == torch.float32

    def test_encode_board_starting_position(self):
        """32 pieces, own pawns on indices 8-15."""
        features = encode_board(chess.Board())
        assert int(features.sum().item()) == 32
        assert all(features[i] == 1.0 for i in range(8, 16))
        # Own king on e1
        assert features[5 * 64 + chess.E1] == 1.0
        # Opponent king on e8
        assert features[11 * 64 + chess.E8] == 1.0

    def test_start_position_symmetric_for_black(self):
        """After a null move Black sees own pawns on reoriented ranks 2."""
        board = chess.Board()
        board.push(chess.Move.null())
        features = encode_board(board)
        assert all(features[i] == 1.0 for i in range(8, 16))
        # Black king e8 reflects to d1
        assert features[5 * 64 + chess.D1] == 1.0

    def test_square_feature(self):
        """Empty squares have no feature."""
        board = chess.Board()
        assert square_feature(board, chess.E4, chess.WHITE) is None
        assert square_feature(board, chess.E2, chess.WHITE) == 12
        assert square_feature(board, chess.E2, chess.BLACK) == 6 * 64 + (63 - chess.E2)


class TestMoveClassification:
    """Test move shapes and their deltas."""

    def test_quiet_e2e4(self):
        """e2e4 places a pawn on 28 and removes it from 12."""
        board = chess.Board()
        result = classify_move(board, chess.Move.from_uci("e2e4"))
        assert isinstance(result, Quiet)
        assert result.deltas == (FeatureDelta(28, PLACE), FeatureDelta(12, REMOVE))

    def test_classify_does_not_mutate_board(self):
        board = chess.Board()
        fen = board.fen()
        classify_move(board, chess.Move.from_uci("g1f3"))
        assert board.fen() == fen

    def test_capture_white(self):
        """exd5: remove enemy pawn, place own pawn, remove own pawn."""
        board = chess.Board()
        for san in ["e4", "d5"]:
            board.push_san(san)
        result = classify_move(board, chess.Move.from_uci("e4d5"))
        assert isinstance(result, Capture)
        assert result.deltas == (
            FeatureDelta(6 * 64 + chess.D5, REMOVE),
            FeatureDelta(chess.D5, PLACE),
            FeatureDelta(chess.E4, REMOVE),
        )

    def test_capture_black_reoriented(self):
        """Qxd5 by Black is expressed from Black's reoriented view."""
        board = chess.Board()
        for san in ["e4", "d5", "exd5"]:
            board.push_san(san)
        result = classify_move(board, chess.Move.from_uci("d8d5"))
        assert isinstance(result, Capture)
        assert result.deltas == (
            FeatureDelta(6 * 64 + 28, REMOVE),
            FeatureDelta(4 * 64 + 28, PLACE),
            FeatureDelta(4 * 64 + 4, REMOVE),
        )

    def test_en_passant_removes_pawn_beside(self):
        """exd6 e.p. removes the pawn from d5, not d6."""
        board = chess.Board("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        result = classify_move(board, chess.Move.from_uci("e5d6"))
        assert isinstance(result, Capture)
        assert result.deltas == (
            FeatureDelta(6 * 64 + chess.D5, REMOVE),
            FeatureDelta(chess.D6, PLACE),
            FeatureDelta(chess.E5, REMOVE),
        )

    def test_promotion(self):
        """a8=Q removes the pawn and places a queen."""
        board = chess.Board("8/P6k/8/8/8/8/8/K7 w - - 0 1")
        result = classify_move(board, chess.Move.from_uci("a7a8q"))
        assert isinstance(result, Promotion)
        assert result.deltas == (
            FeatureDelta(chess.A7, REMOVE),
            FeatureDelta(4 * 64 + chess.A8, PLACE),
        )

    def test_promotion_capture_removes_captured_piece(self):
        """axb8=N also removes the captured rook."""
        board = chess.Board("1r5k/P7/8/8/8/8/8/K7 w - - 0 1")
        result = classify_move(board, chess.Move.from_uci("a7b8n"))
        assert isinstance(result, PromotionCapture)
        assert result.deltas == (
            FeatureDelta(9 * 64 + chess.B8, REMOVE),
            FeatureDelta(1 * 64 + chess.B8, PLACE),
            FeatureDelta(chess.A7, REMOVE),
        )

    @pytest.mark.parametrize("uci,king_to,rook_from,rook_to", [
        ("e1g1", chess.G1, chess.H1, chess.F1),
        ("e1h1", chess.G1, chess.H1, chess.F1),
        ("e1c1", chess.C1, chess.A1, chess.D1),
        ("e1a1", chess.C1, chess.A1, chess.D1),
    ])
    def test_castle_white(self, uci, king_to, rook_from, rook_to):
        """Both castle notations yield king and rook origin/destination deltas."""
        board = chess.Board("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        result = classify_move(board, chess.Move.from_uci(uci))
        assert isinstance(result, Castle)
        assert result.deltas == (
            FeatureDelta(5 * 64 + chess.E1, REMOVE),
            FeatureDelta(5 * 64 + king_to, PLACE),
            FeatureDelta(3 * 64 + rook_from, REMOVE),
            FeatureDelta(3 * 64 + rook_to, PLACE),
        )

    def test_castle_black(self):
        """Black kingside castle uses reflected squares."""
        board = chess.Board("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
        result = classify_move(board, chess.Move.from_uci("e8g8"))
        assert isinstance(result, Castle)
        assert result.deltas == (
            FeatureDelta(5 * 64 + 63 - chess.E8, REMOVE),
            FeatureDelta(5 * 64 + 63 - chess.G8, PLACE),
            FeatureDelta(3 * 64 + 63 - chess.H8, REMOVE),
            FeatureDelta(3 * 64 + 63 - chess.F8, PLACE),
        )

    def test_castle_without_rook_is_inconsistent(self):
        board = chess.Board("r3k3/8/8/8/8/8/8/R3K3 w Qq - 0 1")
        with pytest.raises(InconsistentBoardError):
            classify_move(board, chess.Move.from_uci("e1g1"))

    def test_own_piece_destination_is_illegal(self):
        """Moving onto an own piece raises IllegalMoveError."""
        board = chess.Board()
        with pytest.raises(IllegalMoveError):
            classify_move(board, chess.Move.from_uci("a1a2"))
        with pytest.raises(IllegalMoveError):
            classify_move(board, chess.Move.from_uci("d1e1"))

    @pytest.mark.parametrize("fen,uci", [
        ("4k3/8/8/8/8/8/8/4KR2 w - - 0 1", "e1f1"),
        ("4k3/8/8/4R3/4K3/8/8/8 w - - 0 1", "e4e5"),
        ("4k3/8/8/8/8/8/8/R3K2R w - - 0 1", "e1h1"),
        ("4kr2/8/8/8/8/8/8/4K3 b - - 0 1", "e8f8"),
        ("4k3/8/8/8/8/8/8/4K1N1 w - - 0 1", "e1g1"),
    ])
    def test_king_onto_own_piece_is_illegal(self, fen, uci):
        """A king landing on its own piece is not a castle unless the rook can castle."""
        board = chess.Board(fen)
        with pytest.raises(IllegalMoveError):
            classify_move(board, chess.Move.from_uci(uci))

    def test_promotion_onto_own_piece_is_illegal(self):
        board = chess.Board("N6k/P7/8/8/8/8/8/K7 w - - 0 1")
        with pytest.raises(IllegalMoveError):
            classify_move(board, chess.Move.from_uci("a7a8q"))

    def test_empty_source_is_inconsistent(self):
        """Empty source square raises InconsistentBoardError, not IllegalMoveError."""
        board = chess.Board()
        with pytest.raises(InconsistentBoardError):
            classify_move(board, chess.Move.from_uci("e3e4"))

    def test_explicit_perspective(self):
        """Classifying a Black move for a White-perspective vector."""
        board = chess.Board()
        board.push_san("e4")
        result = classify_move(board, chess.Move.from_uci("e7e5"), perspective=chess.WHITE)
        assert result.perspective == chess.WHITE
        assert result.deltas == (
            FeatureDelta(6 * 64 + chess.E5, PLACE),
            FeatureDelta(6 * 64 + chess.E7, REMOVE),
        )


class TestDeltaInvariants:
    """Every move shape has a fixed size and pairwise-distinct indices."""

    POSITIONS = [
        chess.STARTING_FEN,
        "r3k2r/pppq1ppp/2n2n2/3pp3/1b1PP3/2N2N2/PPPQ1PPP/R3K2R w KQkq - 0 1",
        "r3k2r/pppq1ppp/2n2n2/3pp3/1b1PP3/2N2N2/PPPQ1PPP/R3K2R b KQkq - 0 1",
        "1r2k3/P1P5/8/3pP3/8/8/5p1p/K5R1 w - d6 0 1",
        "1r2k3/P1P5/8/3pP3/8/8/5p1p/K5R1 b - - 0 1",
    ]

    @pytest.mark.parametrize("fen", POSITIONS)
    def test_all_legal_moves(self, fen):
        """Legal moves classify into a known shape with distinct indices."""
        board = chess.Board(fen)
        for move in board.legal_moves:
            result = classify_move(board, move)
            check_shape(result)
            assert len(result.deltas) == DELTA_COUNTS[type(result)]
            indices = [delta.index for delta in result.deltas]
            assert len(set(indices)) == len(indices)
            assert all(0 <= i < FEATURE_SIZE for i in indices)

    def test_check_shape_rejects_wrong_count(self):
        bad = Quiet(chess.Move.from_uci("e2e4"), (FeatureDelta(28, PLACE),), chess.WHITE)
        with pytest.raises(ValueError):
            check_shape(bad)

    def test_check_shape_rejects_unknown(self):
        with pytest.raises(TypeError):
            check_shape(object())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
