"""Unit tests for chessnet/services/handshake.py"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from chessnet.api.codec import RecordStream
from chessnet.api.models import (
    ClientToServerHandshake,
    Move,
    MoveRecord,
    ServerToClientHandshake,
)
from chessnet.chess.game import Game
from chessnet.core.exceptions import HandshakeError
from chessnet.core.shared_types import Color, Joever, Piece
from chessnet.services.authority import MoveAuthority
from chessnet.services.handshake import accept_handshake, request_handshake


@pytest.fixture
def authority() -> MoveAuthority:
    return MoveAuthority(Game.new_game())


@pytest.mark.parametrize("server_color", list(Color))
def test_handshake(
    stream_pair: tuple[RecordStream, RecordStream],
    authority: MoveAuthority,
    pool: ThreadPoolExecutor,
    server_color: Color,
) -> None:
    server, client = stream_pair
    future = pool.submit(accept_handshake, server, authority)

    opening = request_handshake(client, server_color)

    assert future.result(timeout=5.0) == server_color
    assert opening.client_color == server_color.opponent
    assert opening.joever == Joever.ONGOING
    assert len(opening.moves) == 20
    assert opening.board[0][4] == Piece.WHITE_KING


def test_first_record_is_not_a_handshake(
    stream_pair: tuple[RecordStream, RecordStream], authority: MoveAuthority
) -> None:
    server, client = stream_pair
    client.send(MoveRecord(move=Move.from_uci("e2e4")))
    with pytest.raises(HandshakeError):
        accept_handshake(server, authority)


def test_client_hangs_up_before_the_handshake(
    stream_pair: tuple[RecordStream, RecordStream], authority: MoveAuthority
) -> None:
    server, client = stream_pair
    client.close()
    with pytest.raises(HandshakeError):
        accept_handshake(server, authority)


def test_server_refuses_the_other_color(
    stream_pair: tuple[RecordStream, RecordStream], authority: MoveAuthority
) -> None:
    server, client = stream_pair
    client.send(ClientToServerHandshake(server_color=Color.WHITE))
    with pytest.raises(HandshakeError, match="only plays Black"):
        accept_handshake(server, authority, fixed_color=Color.BLACK)


def test_server_accepts_its_fixed_color(
    stream_pair: tuple[RecordStream, RecordStream], authority: MoveAuthority
) -> None:
    server, client = stream_pair
    client.send(ClientToServerHandshake(server_color=Color.BLACK))
    assert accept_handshake(server, authority, fixed_color=Color.BLACK) == Color.BLACK


def test_client_rejects_the_wrong_color(
    stream_pair: tuple[RecordStream, RecordStream], authority: MoveAuthority
) -> None:
    server, client = stream_pair
    server.send(
        ServerToClientHandshake(
            client_color=Color.WHITE,
            board=authority.current_board(),
            moves=authority.legal_moves(),
            joever=authority.joever,
        )
    )
    with pytest.raises(HandshakeError, match="assigned White"):
        request_handshake(client, server_color=Color.WHITE)


def test_client_gets_no_answer(stream_pair: tuple[RecordStream, RecordStream]) -> None:
    _, client = stream_pair
    with pytest.raises(HandshakeError):
        request_handshake(client, Color.BLACK, timeout=0.05)
