"""
errors.py
Exceptions raised while classifying moves and updating feature vectors.
"""


class EncodingError(Exception):
    """Base class for feature-encoding failures."""


class IllegalMoveError(EncodingError):
    """The destination square holds a piece of the mover's own colour."""


class InconsistentBoardError(EncodingError):
    """
    The board does not match the move (e.g. empty source square).

    Callers must only pass moves consistent with the supplied board, so this
    signals a bug on the calling side rather than a runtime condition.
    """


class RevertOrderError(EncodingError):
    """A classification was reverted out of last-applied-first-reverted order."""


class PerspectiveMismatchError(EncodingError):
    """A classification built for one perspective was applied to a vector encoded for the other."""
