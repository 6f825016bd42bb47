"""
Translation boundary between the wire vocabulary and the rules engine.
---

* Squares: wire Position (file, rank in 0..7) <--> index of the engine's padded board.
    index = OFFSET + rank * STRIDE + file
    rank  = (index - OFFSET) // STRIDE
    file  = (index - 1) % STRIDE
* Moves: wire Move <--> engine Ply. Exact inverses over the playable squares.
* Pieces: wire Piece (13 values) <--> engine Piece. Everything the engine can store in a cell that is not one of the
    12 colored pieces (empty squares, off-board sentinels) becomes Piece.NONE.
* Colors both ways.

This is the only module that knows about both sides.
"""

from typing import Optional, Protocol

from chessnet.api.models import BoardGrid, Move
from chessnet.chess import pieces as engine
from chessnet.chess.mailbox import OFFSET, STRIDE, is_playable
from chessnet.chess.moves import Ply
from chessnet.core.exceptions import TranslationError
from chessnet.core.shared_types import BOARD_SIZE, Color, Piece, Position


class TileSource(Protocol):
    """The single engine query needed to read a board"""

    def tile_at(self, index: int) -> engine.Piece: ...


# --- COLORS ---
COLOR_TO_ENGINE: dict[Color, engine.Color] = {
    Color.WHITE: engine.Color.WHITE,
    Color.BLACK: engine.Color.BLACK,
}
COLOR_FROM_ENGINE: dict[engine.Color, Color] = {
    value: key for key, value in COLOR_TO_ENGINE.items()
}


def color_to_engine(color: Color) -> engine.Color:
    return COLOR_TO_ENGINE[color]


def color_from_engine(color: engine.Color) -> Color:
    if color not in COLOR_FROM_ENGINE:
        raise TranslationError(f"Engine color {color} has no wire counterpart")
    return COLOR_FROM_ENGINE[color]


# --- PIECES ---
KIND_TO_ENGINE: dict[str, engine.PieceType] = {
    "Pawn": engine.PieceType.PAWN,
    "Knight": engine.PieceType.KNIGHT,
    "Bishop": engine.PieceType.BISHOP,
    "Rook": engine.PieceType.ROOK,
    "Queen": engine.PieceType.QUEEN,
    "King": engine.PieceType.KING,
}

# The 12 colored pieces. Piece.NONE is handled on its own.
PIECE_TO_TILE: dict[Piece, engine.Piece] = {
    piece: engine.Piece(KIND_TO_ENGINE[piece.kind], COLOR_TO_ENGINE[piece.color])
    for piece in Piece
    if piece.color is not None
}
TILE_TO_PIECE: dict[engine.Piece, Piece] = {
    tile: piece for piece, tile in PIECE_TO_TILE.items()
}


def tile_to_piece(tile: engine.Piece) -> Piece:
    """Total: anything outside the closed set of 12 colored pieces is an empty square on the wire."""
    return TILE_TO_PIECE.get(tile, Piece.NONE)


def piece_to_tile(piece: Piece) -> engine.Piece:
    return PIECE_TO_TILE.get(piece, engine.EMPTY)


def promotion_to_engine(piece: Piece, color: engine.Color) -> Optional[engine.PieceType]:
    """The engine only wants the piece kind. The piece must still be of the promoting side's color."""
    if piece == Piece.NONE:
        return None
    if COLOR_TO_ENGINE[piece.color] != color:
        raise TranslationError(f"{color.name.capitalize()} cannot promote to {piece.value}")
    return KIND_TO_ENGINE[piece.kind]


def promotion_from_engine(kind: Optional[engine.PieceType], color: engine.Color) -> Piece:
    if kind is None:
        return Piece.NONE
    return tile_to_piece(engine.Piece(kind, color))


# --- SQUARES ---
def position_to_index(position: Position) -> int:
    if not position.is_within_bounds():
        raise TranslationError(f"{position} is not a square of the board")
    return OFFSET + position.rank * STRIDE + position.file


def index_to_position(index: int) -> Position:
    if not is_playable(index):
        raise TranslationError(f"Engine index {index} is not a playable square")
    return Position(file=(index - 1) % STRIDE, rank=(index - OFFSET) // STRIDE)


# --- MOVES ---
def to_engine(move: Move, color: engine.Color) -> Ply:
    """`color` is the color of the moving side. A promotion piece of the other color is refused."""
    return Ply(
        origin=position_to_index(move.start),
        destination=position_to_index(move.end),
        promote_to=promotion_to_engine(move.promotion, color),
    )


def to_wire(
    origin: int,
    destination: int,
    promotion: Optional[engine.PieceType] = None,
    color: engine.Color = engine.Color.WHITE,
) -> Move:
    """`color` is the color of the moving side, only needed to name the promotion piece."""
    return Move.between(
        index_to_position(origin),
        index_to_position(destination),
        promotion_from_engine(promotion, color),
    )


def ply_to_wire(ply: Ply, color: engine.Color) -> Move:
    return to_wire(ply.origin, ply.destination, ply.promote_to, color)


# --- BOARDS ---
def board_to_wire(source: TileSource) -> BoardGrid:
    """Repopulate the full 8x8 grid, indexed [rank][file]."""
    return [
        [
            tile_to_piece(source.tile_at(position_to_index(Position(file, rank))))
            for file in range(BOARD_SIZE)
        ]
        for rank in range(BOARD_SIZE)
    ]
