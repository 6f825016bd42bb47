"""Protocols for the collaborators the synchronization layer talks to (rules engine and board UI)."""

from typing import Optional, Protocol

from chessnet.api.models import BoardGrid, Move
from chessnet.chess.moves import Ply
from chessnet.chess.pieces import Color as EngineColor
from chessnet.chess.pieces import Piece as EngineTile
from chessnet.chess.pieces import PieceType
from chessnet.core.shared_types import Color, Joever


class RulesEngine(Protocol):
    """The chess rules oracle. Squares are indices of the engine's padded board."""

    def ply(
        self, origin: int, destination: int, promote_to: Optional[PieceType] = None
    ) -> Ply:
        """Apply the ply if legal and return it (promotion resolved). Raise IllegalMoveError otherwise."""
        ...

    def legal_plys(self) -> list[Ply]:
        """All legal plys for the player to move."""
        ...

    def is_checkmate(self) -> bool: ...

    def is_draw(self) -> bool: ...

    def player(self) -> EngineColor:
        """Color to move"""
        ...

    def tile_at(self, index: int) -> EngineTile: ...


class GameView(Protocol):
    """Read accessors the board UI consumes"""

    @property
    def joever(self) -> Joever: ...

    def current_board(self) -> BoardGrid: ...

    def legal_moves(self) -> list[Move]: ...

    def player_to_move(self) -> Color: ...


class BoardUI(Protocol):
    """Supplies the local player's moves and displays what happens."""

    def pick_move(self, view: GameView) -> Move:
        """Block until the local player selected a move."""
        ...

    def show(self, view: GameView) -> None:
        """Called after every accepted move, and once after the handshake."""
        ...

    def reject(self, message: str) -> None:
        """The move picked last was not accepted. pick_move() will be called again."""
        ...
