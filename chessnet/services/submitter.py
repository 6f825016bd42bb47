"""
Client side of the turn exchange.

The client only keeps the last state it received from the server. It never applies a move on its own:
the cache changes when (and only when) a State record comes in.
"""

import logging
from typing import Optional

from chessnet.api.codec import RecordStream
from chessnet.api.models import (
    SERVER_TO_CLIENT,
    BoardGrid,
    Move,
    MoveRecord,
    RejectedRecord,
    ServerToClientHandshake,
    State,
)
from chessnet.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    ProtocolError,
)
from chessnet.core.shared_types import Color, Joever

log = logging.getLogger(__name__)


def infer_player_to_move(
    board: BoardGrid, moves: list[Move], last_move: Optional[Move] = None
) -> Color:
    """
    The wire state does not name the side to move, so work it out:
    the owner of the pieces in the legal-move list, else the opponent of whoever made the last move, else White.
    """
    for move in moves:
        color = board[move.start_y][move.start_x].color
        if color is not None:
            return color
    if last_move is not None:
        color = board[last_move.end_y][last_move.end_x].color
        if color is not None:
            return color.opponent
    return Color.WHITE


class MoveSubmitter:
    """Sends the local player's proposals and keeps the cached copy of the game up to date."""

    def __init__(
        self,
        stream: RecordStream,
        color: Color,
        opening: ServerToClientHandshake,
        io_timeout: Optional[float] = None,
        turn_timeout: Optional[float] = None,
    ) -> None:
        self.stream = stream
        self.color = color
        self.io_timeout = io_timeout
        self.turn_timeout = turn_timeout

        self._board = opening.board
        self._moves = opening.moves
        self._joever = opening.joever
        self._player_to_move = infer_player_to_move(opening.board, opening.moves)

    # --- READ ACCESSORS (cached copy) ---
    @property
    def joever(self) -> Joever:
        return self._joever

    def current_board(self) -> BoardGrid:
        return self._board

    def legal_moves(self) -> list[Move]:
        return self._moves

    def player_to_move(self) -> Color:
        return self._player_to_move

    # --- TURN EXCHANGE ---
    def submit(self, move: Move) -> State:
        """
        Send one proposal and read exactly one response.
        ----

        State --> cache updated, returned.
        Rejected --> IllegalMoveError with the server's message. Cache untouched.

        Refuses without sending anything when the game is over or it is not our turn:
        the server would not be reading from us.
        """
        if self._joever != Joever.ONGOING:
            raise GameStateError(f"The game is over ({self._joever.value})")
        if self._player_to_move != self.color:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self._player_to_move.value} to make a move first."
            )

        self.stream.send(MoveRecord(move=move), timeout=self.io_timeout)
        response = self.stream.receive(SERVER_TO_CLIENT, timeout=self.io_timeout)

        if isinstance(response, RejectedRecord):
            log.warning("Server rejected %s: %s", move.to_uci(), response.rejected.message)
            raise IllegalMoveError(response.rejected.message)

        self._apply(response.state)
        return response.state

    def await_opponent(self) -> State:
        """Read the State the server publishes after its own move."""
        response = self.stream.receive(SERVER_TO_CLIENT, timeout=self.turn_timeout)
        if isinstance(response, RejectedRecord):
            raise ProtocolError(
                f"Received a rejection without having proposed a move: {response.rejected.message}"
            )
        self._apply(response.state)
        return response.state

    def _apply(self, state: State) -> None:
        if self._joever != Joever.ONGOING and state.joever != self._joever:
            raise ProtocolError(
                f"Game outcome changed from {self._joever.value} to {state.joever.value}"
            )
        self._board = state.board
        self._moves = state.moves
        self._joever = state.joever
        self._player_to_move = infer_player_to_move(
            state.board, state.moves, state.move_made
        )
        log.info("Board updated after %s (%s)", state.move_made.to_uci(), state.joever.value)
