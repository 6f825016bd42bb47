"""
Wire models: every record that travels over the stream.

Variants are externally tagged, ex. {"Move": {...}} or {"State": {...}}, so the variant name is the only key
of the outer object. Unknown keys are forbidden everywhere, which is what makes an unknown tag fail to validate.
Validation is strict: a coordinate sent as "4", 4.0 or true is a malformed record, not the number 4.
"""

from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from chessnet.core.shared_types import BOARD_SIZE, Color, Joever, Piece, Position

Coordinate = Annotated[int, Field(ge=0, le=BOARD_SIZE - 1)]
Rank = Annotated[list[Piece], Field(min_length=BOARD_SIZE, max_length=BOARD_SIZE)]
# indexed [rank][file], rank 0 is White's home row
BoardGrid = Annotated[list[Rank], Field(min_length=BOARD_SIZE, max_length=BOARD_SIZE)]

# UCI suffix letters for the piece kinds a pawn can promote into
PROMOTION_KINDS: dict[str, str] = {"n": "Knight", "b": "Bishop", "r": "Rook", "q": "Queen"}
PROMOTION_LETTERS: dict[str, str] = {kind: letter for letter, kind in PROMOTION_KINDS.items()}


class WireModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, strict=True)


class Move(WireModel):
    model_config = ConfigDict(frozen=True)

    start_x: Coordinate
    start_y: Coordinate
    end_x: Coordinate
    end_y: Coordinate
    promotion: Piece

    @classmethod
    def between(
        cls, start: Position, end: Position, promotion: Piece = Piece.NONE
    ) -> "Move":
        return cls(
            start_x=start.file,
            start_y=start.rank,
            end_x=end.file,
            end_y=end.rank,
            promotion=promotion,
        )

    @classmethod
    def from_uci(cls, uci: str) -> "Move":
        """
        'e2e4' --> start (4, 1), end (4, 3).
        A fifth character picks the promotion piece, in the color of the rank it promotes on.
        """
        start = Position.from_algebraic(uci[:2])
        end = Position.from_algebraic(uci[2:4])
        promotion = Piece.NONE
        if len(uci) == 5:
            color = Color.WHITE if end.rank == BOARD_SIZE - 1 else Color.BLACK
            promotion = Piece(f"{color.value}{PROMOTION_KINDS[uci[4].lower()]}")
        return cls.between(start, end, promotion)

    @property
    def start(self) -> Position:
        return Position(self.start_x, self.start_y)

    @property
    def end(self) -> Position:
        return Position(self.end_x, self.end_y)

    def to_uci(self) -> str:
        suffix = PROMOTION_LETTERS.get(self.promotion.kind, "")
        return f"{self.start.to_algebraic()}{self.end.to_algebraic()}{suffix}"


# --- HANDSHAKE ---
class ClientToServerHandshake(WireModel):
    """The client picks the color the server will play. The client plays the other one."""

    server_color: Color


class ServerToClientHandshake(WireModel):
    client_color: Color
    board: BoardGrid
    moves: list[Move]
    joever: Joever


# --- CLIENT TO SERVER ---
class MoveRecord(WireModel):
    move: Move = Field(alias="Move")


# Only one variant for now. Kept as an alias so callers decode "a ClientToServer record".
ClientToServer = MoveRecord


# --- SERVER TO CLIENT ---
class State(WireModel):
    board: BoardGrid
    moves: list[Move]
    joever: Joever
    move_made: Move


class Rejected(WireModel):
    """The proposal was declined. Carries the (unchanged) state so the client can resync its view."""

    board: BoardGrid
    moves: list[Move]
    joever: Joever
    message: str


class StateRecord(WireModel):
    state: State = Field(alias="State")


class RejectedRecord(WireModel):
    rejected: Rejected = Field(alias="Rejected")


ServerToClient = Union[StateRecord, RejectedRecord]


# --- ADAPTERS USED BY THE CODEC ---
CLIENT_HANDSHAKE: TypeAdapter[ClientToServerHandshake] = TypeAdapter(ClientToServerHandshake)
SERVER_HANDSHAKE: TypeAdapter[ServerToClientHandshake] = TypeAdapter(ServerToClientHandshake)
CLIENT_TO_SERVER: TypeAdapter[ClientToServer] = TypeAdapter(ClientToServer)
SERVER_TO_CLIENT: TypeAdapter[ServerToClient] = TypeAdapter(ServerToClient)
