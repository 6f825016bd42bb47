"""Unit tests for chessnet/api/models.py: the JSON shape of every record."""

import json

import pytest
from pydantic import ValidationError

from chessnet.api.models import (
    CLIENT_HANDSHAKE,
    CLIENT_TO_SERVER,
    SERVER_TO_CLIENT,
    ClientToServerHandshake,
    Move,
    MoveRecord,
    Rejected,
    RejectedRecord,
    State,
    StateRecord,
)
from chessnet.core.shared_types import Color, Joever, Piece, Position

EMPTY_BOARD = [[Piece.NONE] * 8 for _ in range(8)]


def e2e4() -> Move:
    return Move(start_x=4, start_y=1, end_x=4, end_y=3, promotion=Piece.NONE)


def test_move_json() -> None:
    assert json.loads(e2e4().model_dump_json()) == {
        "start_x": 4,
        "start_y": 1,
        "end_x": 4,
        "end_y": 3,
        "promotion": "None",
    }


def test_move_record_is_tagged() -> None:
    record = MoveRecord(move=e2e4())
    dumped = json.loads(record.model_dump_json(by_alias=True))
    assert list(dumped) == ["Move"]
    assert dumped["Move"]["end_y"] == 3


def test_decode_move_record() -> None:
    raw = '{"Move":{"start_x":6,"start_y":0,"end_x":5,"end_y":2,"promotion":"None"}}'
    record = CLIENT_TO_SERVER.validate_json(raw)
    assert record.move.to_uci() == "g1f3"


@pytest.mark.parametrize(
    "raw",
    [
        '{"Castle":{"start_x":4,"start_y":0,"end_x":6,"end_y":0,"promotion":"None"}}',
        '{"Move":{"start_x":8,"start_y":0,"end_x":6,"end_y":0,"promotion":"None"}}',
        '{"Move":{"start_x":4,"start_y":-1,"end_x":6,"end_y":0,"promotion":"None"}}',
        '{"Move":{"start_x":4,"start_y":0,"end_x":6,"end_y":0}}',
        '{"Move":{"start_x":4,"start_y":0,"end_x":6,"end_y":0,"promotion":"WhiteUnicorn"}}',
        '{"Move":{"start_x":4,"start_y":0,"end_x":6,"end_y":0,"promotion":"None","extra":1}}',
        "[1, 2]",
    ],
)
def test_invalid_move_records(raw: str) -> None:
    with pytest.raises(ValidationError):
        CLIENT_TO_SERVER.validate_json(raw)


def test_handshake_json() -> None:
    handshake = ClientToServerHandshake(server_color=Color.BLACK)
    assert json.loads(handshake.model_dump_json()) == {"server_color": "Black"}
    assert CLIENT_HANDSHAKE.validate_json('{"server_color":"White"}').server_color == Color.WHITE


def test_server_to_client_variants() -> None:
    state = StateRecord(
        state=State(board=EMPTY_BOARD, moves=[], joever=Joever.ONGOING, move_made=e2e4())
    )
    rejected = RejectedRecord(
        rejected=Rejected(board=EMPTY_BOARD, moves=[e2e4()], joever=Joever.DRAW, message="nope")
    )

    decoded_state = SERVER_TO_CLIENT.validate_json(state.model_dump_json(by_alias=True))
    decoded_rejected = SERVER_TO_CLIENT.validate_json(rejected.model_dump_json(by_alias=True))

    assert isinstance(decoded_state, StateRecord)
    assert decoded_state.state.move_made == e2e4()
    assert isinstance(decoded_rejected, RejectedRecord)
    assert decoded_rejected.rejected.message == "nope"
    assert json.loads(rejected.model_dump_json(by_alias=True))["Rejected"]["joever"] == "Draw"


def test_board_must_be_8_by_8() -> None:
    short_board = [[Piece.NONE] * 8 for _ in range(7)]
    with pytest.raises(ValidationError):
        State(board=short_board, moves=[], joever=Joever.ONGOING, move_made=e2e4())

    narrow_board = [[Piece.NONE] * 7 for _ in range(8)]
    with pytest.raises(ValidationError):
        State(board=narrow_board, moves=[], joever=Joever.ONGOING, move_made=e2e4())


@pytest.mark.parametrize(
    "uci, start, end, promotion",
    [
        ("e2e4", (4, 1), (4, 3), Piece.NONE),
        ("a7a8q", (0, 6), (0, 7), Piece.WHITE_QUEEN),
        ("h2h1n", (7, 1), (7, 0), Piece.BLACK_KNIGHT),
    ],
)
def test_uci(uci: str, start: tuple[int, int], end: tuple[int, int], promotion: Piece) -> None:
    move = Move.from_uci(uci)
    assert move.start == Position(*start)
    assert move.end == Position(*end)
    assert move.promotion == promotion
    assert move.to_uci() == uci


def test_move_is_hashable_and_frozen() -> None:
    assert len({e2e4(), e2e4()}) == 1
    with pytest.raises(ValidationError):
        e2e4().start_x = 3  # type: ignore[misc]
