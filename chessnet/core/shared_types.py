"""
Type definitions used across layers

These are the wire-level vocabulary. The rules engine has its own (richer) enums in chessnet/chess/pieces.py,
and the translator in chessnet/services/translator.py is the only place that maps between the two.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# The playable board is always 8x8
BOARD_SIZE = 8


class Color(StrEnum):
    WHITE = "White"
    BLACK = "Black"

    @property
    def opponent(self) -> Color:
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class Piece(StrEnum):
    """The closed set of 13 values a square on the wire can hold."""

    NONE = "None"
    WHITE_PAWN = "WhitePawn"
    WHITE_KNIGHT = "WhiteKnight"
    WHITE_BISHOP = "WhiteBishop"
    WHITE_ROOK = "WhiteRook"
    WHITE_QUEEN = "WhiteQueen"
    WHITE_KING = "WhiteKing"
    BLACK_PAWN = "BlackPawn"
    BLACK_KNIGHT = "BlackKnight"
    BLACK_BISHOP = "BlackBishop"
    BLACK_ROOK = "BlackRook"
    BLACK_QUEEN = "BlackQueen"
    BLACK_KING = "BlackKing"

    @property
    def color(self) -> Color | None:
        if self == Piece.NONE:
            return None
        return Color.WHITE if self.value.startswith("White") else Color.BLACK

    @property
    def kind(self) -> str:
        """Piece name without the color: Pawn, Knight, ... or None for an empty square"""
        color = self.color
        return self.value.removeprefix(color.value) if color else self.value


class Joever(StrEnum):
    """Outcome of the game. Once it leaves ONGOING it never changes again."""

    ONGOING = "Ongoing"
    WHITE = "White"
    BLACK = "Black"
    DRAW = "Draw"

    @classmethod
    def won_by(cls, color: Color) -> Joever:
        return cls.WHITE if color == Color.WHITE else cls.BLACK


@dataclass(frozen=True)
class Position:
    """
    A square in wire coordinates.
    ---

    file (x) and rank (y) both run 0..7, rank 0 being White's home row.
    This is the one coordinate type passed around between the UI boundary and the engine boundary.
    """

    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, square: str) -> Position:
        """'a1' - 'h8' get converted to (0,0) - (7,7)"""
        return cls(ord(square[0].lower()) - ord("a"), int(square[1:]) - 1)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a'))}{self.rank + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_SIZE) and (0 <= self.rank < BOARD_SIZE)
