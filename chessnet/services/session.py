"""
Orchestration of one connection, from handshake to game over.

A session is built once per connection and owns its socket. Nothing about the game lives at module level:
the server session owns the MoveAuthority (and through it the engine), the client session owns the MoveSubmitter.

Turn order is strict: whoever is to move either picks locally (BoardUI) or is read from the stream.
"""

import logging
import socket
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Callable, Optional, Self

from chessnet.api.codec import RecordStream
from chessnet.api.models import (
    CLIENT_TO_SERVER,
    BoardGrid,
    Move,
    RejectedRecord,
    ServerToClient,
    State,
)
from chessnet.chess.game import Game
from chessnet.core.config import Settings
from chessnet.core.exceptions import GameError, GameStateError, IllegalMoveError
from chessnet.core.shared_types import Color, Joever
from chessnet.services.authority import MoveAuthority
from chessnet.services.handshake import accept_handshake, request_handshake
from chessnet.services.interfaces import BoardUI, RulesEngine
from chessnet.services.submitter import MoveSubmitter

log = logging.getLogger(__name__)


class Session(ABC):
    """What both ends have in common: the stream, cancellation, and the loop over turns."""

    def __init__(self, sock: socket.socket, settings: Settings) -> None:
        self.settings = settings
        self.stream = RecordStream(
            sock,
            timeout=settings.io_timeout,
            max_record_bytes=settings.max_record_bytes,
        )
        self._color: Optional[Color] = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    @property
    def color(self) -> Color:
        """Color played on this end of the connection"""
        if self._color is None:
            raise GameStateError("Handshake has not been done yet")
        return self._color

    @property
    @abstractmethod
    def joever(self) -> Joever: ...

    @abstractmethod
    def player_to_move(self) -> Color: ...

    @abstractmethod
    def current_board(self) -> BoardGrid: ...

    @abstractmethod
    def legal_moves(self) -> list[Move]: ...

    @abstractmethod
    def play_local(self, move: Move) -> State:
        """This end's own move. Raises GameError when it is refused."""

    @abstractmethod
    def wait_for_opponent(self) -> None:
        """Block until the other end's move has been applied."""

    def run(self, ui: BoardUI) -> Joever:
        """
        Play until the game is decided.

        A rejected local move goes back to the UI and the same player picks again.
        Fatal errors (SessionError) propagate to the caller.
        """
        ui.show(self)
        while self.joever == Joever.ONGOING:
            if self.player_to_move() == self.color:
                move = ui.pick_move(self)
                try:
                    self.play_local(move)
                except GameError as err:
                    ui.reject(str(err))
                    continue
            else:
                self.wait_for_opponent()
            ui.show(self)

        log.info("Game finished: %s", self.joever.value)
        return self.joever

    def cancel(self) -> None:
        """Abort from any thread. A blocked read or write fails with PeerConnectionError."""
        log.info("Cancelling session")
        self.stream.cancel()

    def close(self) -> None:
        self.stream.close()


class ServerSession(Session):
    """The end that owns the authoritative game and plays one color itself."""

    def __init__(
        self,
        sock: socket.socket,
        settings: Settings = Settings(),
        engine: Optional[RulesEngine] = None,
    ) -> None:
        super().__init__(sock, settings)
        self.authority = MoveAuthority(engine if engine is not None else Game.new_game())

    @classmethod
    def listen(
        cls,
        settings: Settings = Settings(),
        engine_factory: Callable[[], RulesEngine] = Game.new_game,
    ) -> Self:
        """Wait for exactly one client to connect."""
        with socket.create_server((settings.host, settings.port)) as server:
            log.info("Listening on %s:%d", settings.host, settings.port)
            conn, address = server.accept()
        log.info("Client connected from %s:%d", *address[:2])
        return cls(conn, settings, engine_factory())

    def handshake(self) -> Color:
        if self._color is not None:
            raise GameStateError("Handshake already done")
        self._color = accept_handshake(
            self.stream,
            self.authority,
            fixed_color=self.settings.server_color,
            timeout=self.settings.io_timeout,
        )
        return self._color

    @property
    def joever(self) -> Joever:
        return self.authority.joever

    def player_to_move(self) -> Color:
        return self.authority.player_to_move()

    def current_board(self) -> BoardGrid:
        return self.authority.current_board()

    def legal_moves(self) -> list[Move]:
        return self.authority.legal_moves()

    def play_local(self, move: Move) -> State:
        """
        The server's own move. Accepted moves are published to the client.
        A rejection stays local: nothing is sent, IllegalMoveError is raised.
        """
        response = self.authority.submit(move, self.color)
        if isinstance(response, RejectedRecord):
            raise IllegalMoveError(response.rejected.message)
        self.stream.send(response)
        return response.state

    def serve_remote(self) -> ServerToClient:
        """Read one proposal from the client and answer it with exactly one record."""
        request = self.stream.receive(
            CLIENT_TO_SERVER, timeout=self.settings.turn_timeout
        )
        response = self.authority.submit(request.move, self.color.opponent)
        self.stream.send(response)
        return response

    def wait_for_opponent(self) -> None:
        self.serve_remote()


class ClientSession(Session):
    """The end that proposes moves and mirrors the server's state."""

    def __init__(self, sock: socket.socket, settings: Settings = Settings()) -> None:
        super().__init__(sock, settings)
        self._submitter: Optional[MoveSubmitter] = None

    @classmethod
    def connect(cls, settings: Settings = Settings()) -> Self:
        sock = socket.create_connection(
            (settings.host, settings.port), timeout=settings.io_timeout
        )
        log.info("Connected to %s:%d", settings.host, settings.port)
        return cls(sock, settings)

    def handshake(self, server_color: Color) -> Color:
        """Ask the server to play `server_color`. Returns the color we play."""
        if self._submitter is not None:
            raise GameStateError("Handshake already done")
        opening = request_handshake(
            self.stream, server_color, timeout=self.settings.io_timeout
        )
        self._color = opening.client_color
        self._submitter = MoveSubmitter(
            self.stream,
            opening.client_color,
            opening,
            io_timeout=self.settings.io_timeout,
            turn_timeout=self.settings.turn_timeout,
        )
        return self._color

    @property
    def submitter(self) -> MoveSubmitter:
        if self._submitter is None:
            raise GameStateError("Handshake has not been done yet")
        return self._submitter

    @property
    def joever(self) -> Joever:
        return self.submitter.joever

    def player_to_move(self) -> Color:
        return self.submitter.player_to_move()

    def current_board(self) -> BoardGrid:
        return self.submitter.current_board()

    def legal_moves(self) -> list[Move]:
        return self.submitter.legal_moves()

    def play_local(self, move: Move) -> State:
        return self.submitter.submit(move)

    def wait_for_opponent(self) -> None:
        self.submitter.await_opponent()

