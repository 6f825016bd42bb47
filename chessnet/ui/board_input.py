"""
UI side of the coordinate story: screen pixels <--> wire Position, and square picks --> Move.

The board is drawn with White's home row at the bottom of the screen, so the rank axis is flipped
with respect to the screen's y axis.

The console only ever names squares, so `square_to_screen` and `screen_to_square` are the pixel boundary kept
for a graphical board: a click maps to a Position here and never reaches the engine as pixels.
"""

from dataclasses import dataclass, field
from typing import Optional

from chessnet.api.models import Move
from chessnet.core.exceptions import TranslationError
from chessnet.core.shared_types import BOARD_SIZE, Position

TILE_SIZE_PX = 64.0
BOARD_SIZE_PX = BOARD_SIZE * TILE_SIZE_PX


def square_to_screen(position: Position) -> tuple[float, float]:
    """Top left corner of the tile, in pixels"""
    x = position.file * TILE_SIZE_PX
    y = (BOARD_SIZE - 1 - position.rank) * TILE_SIZE_PX
    return x, y


def screen_to_square(x: float, y: float) -> Position:
    """The tile under a pixel. Pixels outside the board raise TranslationError."""
    if not (0 <= x < BOARD_SIZE_PX and 0 <= y < BOARD_SIZE_PX):
        raise TranslationError(f"Pixel ({x}, {y}) is outside the board")
    file = int(x // TILE_SIZE_PX)
    rank = BOARD_SIZE - 1 - int(y // TILE_SIZE_PX)
    return Position(file, rank)


@dataclass
class MoveSelection:
    """
    Two square picks make a move.
    ---

    The first pick selects a piece (only squares that have a legal move are selectable) and remembers
    its moves so the UI can highlight them. The second pick completes the move, whether it is
    in the list or not: the authority decides.
    """

    selected: Optional[Position] = None
    highlighted: list[Move] = field(default_factory=list)

    def pick(self, square: Position, legal_moves: list[Move]) -> Optional[Move]:
        if self.selected is None:
            self.highlighted = [move for move in legal_moves if move.start == square]
            if self.highlighted:
                self.selected = square
            return None

        move = Move.between(self.selected, square)
        self.clear()
        return move

    def clear(self) -> None:
        self.selected = None
        self.highlighted = []
