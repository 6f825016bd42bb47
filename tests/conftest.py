"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/helpers required for testing multiple layers.
"""

import socket
from concurrent.futures import ThreadPoolExecutor
from typing import Generator

import pytest

from chessnet.api.codec import RecordStream
from chessnet.core.config import Settings
from chessnet.core.shared_types import Color
from chessnet.services.session import ClientSession, ServerSession

# Generous enough for a slow CI machine, short enough that a broken test does not hang forever
TEST_TIMEOUT_S = 5.0


@pytest.fixture
def settings() -> Settings:
    return Settings(io_timeout=TEST_TIMEOUT_S, turn_timeout=TEST_TIMEOUT_S)


@pytest.fixture
def socket_pair() -> Generator[tuple[socket.socket, socket.socket], None, None]:
    """Two connected stream sockets. Stand-in for a TCP connection between server and client."""
    left, right = socket.socketpair()
    try:
        yield left, right
    finally:
        left.close()
        right.close()


@pytest.fixture
def stream_pair(
    socket_pair: tuple[socket.socket, socket.socket],
) -> tuple[RecordStream, RecordStream]:
    left, right = socket_pair
    return RecordStream(left, timeout=TEST_TIMEOUT_S), RecordStream(right, timeout=TEST_TIMEOUT_S)


@pytest.fixture
def pool() -> Generator[ThreadPoolExecutor, None, None]:
    """To run the other end of the connection while the test blocks on this end."""
    with ThreadPoolExecutor(max_workers=2) as executor:
        yield executor


@pytest.fixture
def sessions(
    settings: Settings, pool: ThreadPoolExecutor
) -> Generator[tuple[ServerSession, ClientSession], None, None]:
    """Server (playing Black) and client (playing White), handshake already done."""
    server_sock, client_sock = socket.socketpair()
    server = ServerSession(server_sock, settings)
    client = ClientSession(client_sock, settings)
    try:
        future = pool.submit(server.handshake)
        client.handshake(Color.BLACK)
        future.result(timeout=TEST_TIMEOUT_S)
        yield server, client
    finally:
        server.close()
        client.close()
