"""Terminal board: prints the board after every move and reads squares or moves from standard input."""

import re
from typing import Callable, Optional

from chessnet.api.models import BoardGrid, Move
from chessnet.core.shared_types import BOARD_SIZE, Color, Joever, Piece, Position
from chessnet.services.interfaces import GameView
from chessnet.ui.board_input import MoveSelection

# Same letters as FEN: upper case for White, lower case for Black
PIECE_SYMBOLS: dict[str, str] = {
    "Pawn": "p",
    "Knight": "n",
    "Bishop": "b",
    "Rook": "r",
    "Queen": "q",
    "King": "k",
}
EMPTY_SYMBOL = "."

SQUARE_PATTERN = re.compile(r"^[a-h][1-8]$")
MOVE_PATTERN = re.compile(r"^[a-h][1-8][a-h][1-8][nbrq]?$")


def piece_symbol(piece: Piece) -> str:
    if piece == Piece.NONE:
        return EMPTY_SYMBOL
    symbol = PIECE_SYMBOLS[piece.kind]
    return symbol.upper() if piece.color == Color.WHITE else symbol


def render_board(board: BoardGrid, flip: bool = False) -> str:
    """
    Text diagram, rank 8 on top (or rank 1 on top when `flip`, to see the board from Black's side).
    """
    ranks = range(BOARD_SIZE) if flip else range(BOARD_SIZE - 1, -1, -1)
    files = list(range(BOARD_SIZE - 1, -1, -1) if flip else range(BOARD_SIZE))
    lines = [
        f"{rank + 1} " + " ".join(piece_symbol(board[rank][file]) for file in files)
        for rank in ranks
    ]
    lines.append("  " + " ".join(chr(ord("a") + file) for file in files))
    return "\n".join(lines)


class ConsoleUI:
    """
    BoardUI for the terminal.

    Accepts a whole move ('e2e4', 'e7e8q'), or two squares one after the other ('e2' then 'e4').
    """

    def __init__(
        self,
        color: Optional[Color] = None,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self.color = color
        self.read = read
        self.write = write
        self.selection = MoveSelection()

    def pick_move(self, view: GameView) -> Move:
        while True:
            prompt = "to" if self.selection.selected else "move"
            text = self.read(f"{view.player_to_move().value} {prompt}> ").strip().lower()

            if MOVE_PATTERN.match(text):
                self.selection.clear()
                return Move.from_uci(text)

            if SQUARE_PATTERN.match(text):
                move = self.selection.pick(Position.from_algebraic(text), view.legal_moves())
                if move is not None:
                    return move
                if self.selection.selected is None:
                    self.write(f"No legal move from {text}")
                else:
                    targets = ", ".join(m.end.to_algebraic() for m in self.selection.highlighted)
                    self.write(f"{text} can go to: {targets}")
                continue

            self.selection.clear()
            self.write("Enter a move like e2e4 (e7e8q to promote) or a square like e2")

    def show(self, view: GameView) -> None:
        self.write(render_board(view.current_board(), flip=self.color == Color.BLACK))
        if view.joever == Joever.ONGOING:
            self.write(f"{view.player_to_move().value} to move")
        elif view.joever == Joever.DRAW:
            self.write("Game over: draw")
        else:
            self.write(f"Game over: {view.joever.value} wins")

    def reject(self, message: str) -> None:
        self.write(f"Move rejected: {message}")
