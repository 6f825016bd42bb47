"""
One-time opening exchange, before any turn record.

    client --> ClientToServerHandshake{server_color}
    server --> ServerToClientHandshake{client_color, board, moves, joever}

`server_color` is the color the client asks the server to play. The client plays the other one, which the server
confirms as `client_color`. Any failure (wrong record, stream closed, timeout, refused color) is a HandshakeError.
"""

import logging
from typing import Optional

from chessnet.api.codec import RecordStream
from chessnet.api.models import (
    CLIENT_HANDSHAKE,
    SERVER_HANDSHAKE,
    ClientToServerHandshake,
    ServerToClientHandshake,
)
from chessnet.core.exceptions import HandshakeError, SessionError
from chessnet.core.shared_types import Color
from chessnet.services.authority import MoveAuthority

log = logging.getLogger(__name__)


def accept_handshake(
    stream: RecordStream,
    authority: MoveAuthority,
    fixed_color: Optional[Color] = None,
    timeout: Optional[float] = None,
) -> Color:
    """Server side. Returns the color the server plays."""
    try:
        request = stream.receive(CLIENT_HANDSHAKE, timeout=timeout)
    except SessionError as err:
        raise HandshakeError(f"No valid handshake received: {err}") from err

    server_color = request.server_color
    if fixed_color is not None and server_color != fixed_color:
        raise HandshakeError(
            f"Client asked the server to play {server_color.value}, but it only plays {fixed_color.value}"
        )

    response = ServerToClientHandshake(
        client_color=server_color.opponent,
        board=authority.current_board(),
        moves=authority.legal_moves(),
        joever=authority.joever,
    )
    try:
        stream.send(response, timeout=timeout)
    except SessionError as err:
        raise HandshakeError(f"Could not answer the handshake: {err}") from err

    log.info("Handshake done. Server plays %s", server_color.value)
    return server_color


def request_handshake(
    stream: RecordStream, server_color: Color, timeout: Optional[float] = None
) -> ServerToClientHandshake:
    """Client side. Returns the server's answer with the starting board and legal moves."""
    try:
        stream.send(ClientToServerHandshake(server_color=server_color), timeout=timeout)
        response = stream.receive(SERVER_HANDSHAKE, timeout=timeout)
    except SessionError as err:
        raise HandshakeError(f"Handshake failed: {err}") from err

    if response.client_color != server_color.opponent:
        raise HandshakeError(
            f"Asked to play {server_color.opponent.value}, but the server assigned {response.client_color.value}"
        )

    log.info("Handshake done. Client plays %s", response.client_color.value)
    return response
