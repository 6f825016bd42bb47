"""
Server side owner of the authoritative game.

    AWAITING_MOVE --proposal--> VALIDATING --accepted--> AWAITING_MOVE | GAME_OVER
                                           --rejected--> AWAITING_MOVE

Every proposal, local or from the network, gets exactly one record back: State when accepted, Rejected otherwise.
"""

import logging
from enum import Enum, auto

from chessnet.api.models import (
    BoardGrid,
    Move,
    Rejected,
    RejectedRecord,
    ServerToClient,
    State,
    StateRecord,
)
from chessnet.core.exceptions import GameError
from chessnet.core.shared_types import Color, Joever
from chessnet.services.interfaces import RulesEngine
from chessnet.services.translator import (
    board_to_wire,
    color_from_engine,
    color_to_engine,
    ply_to_wire,
    to_engine,
)

log = logging.getLogger(__name__)


class AuthorityState(Enum):
    AWAITING_MOVE = auto()
    VALIDATING = auto()
    GAME_OVER = auto()


class MoveAuthority:
    """Validates, applies, and publishes moves. The only object that mutates the engine."""

    def __init__(self, engine: RulesEngine) -> None:
        self.engine = engine
        self.state = AuthorityState.AWAITING_MOVE
        self._joever = Joever.ONGOING

        # a game set up from a custom position could be over before it starts
        self._update_joever(self.player_to_move().opponent)

    # --- READ ACCESSORS ---
    @property
    def joever(self) -> Joever:
        return self._joever

    @property
    def is_over(self) -> bool:
        return self.state == AuthorityState.GAME_OVER

    def current_board(self) -> BoardGrid:
        return board_to_wire(self.engine)

    def legal_moves(self) -> list[Move]:
        """Legal moves of the player to move, in wire coordinates. Empty once the game is over."""
        if self.is_over:
            return []
        color = self.engine.player()
        return [ply_to_wire(ply, color) for ply in self.engine.legal_plys()]

    def player_to_move(self) -> Color:
        return color_from_engine(self.engine.player())

    # --- STATE MACHINE ---
    def submit(self, move: Move, mover: Color) -> ServerToClient:
        """
        Handle one proposal on behalf of `mover`
        -----

        1. game over? --> Rejected, unconditionally
        2. not mover's turn? --> Rejected
        3. delegate to the engine. Illegal --> Rejected, nothing changed
        4. legal --> compute joever, State with the new board, the next player's moves and the move applied
        """
        if self.is_over:
            return self._reject(move, f"The game is over ({self._joever.value})")

        if mover != self.player_to_move():
            return self._reject(
                move, f"It is not {mover.value}'s turn. Waiting for {self.player_to_move().value}."
            )

        self.state = AuthorityState.VALIDATING
        try:
            ply = to_engine(move, color_to_engine(mover))
            applied = self.engine.ply(ply.origin, ply.destination, ply.promote_to)
        except GameError as err:
            self.state = AuthorityState.AWAITING_MOVE
            return self._reject(move, str(err))

        move_made = ply_to_wire(applied, color_to_engine(mover))
        self.state = AuthorityState.AWAITING_MOVE
        self._update_joever(mover)
        log.info("%s played %s (%s)", mover.value, move_made.to_uci(), self._joever.value)

        return StateRecord(
            state=State(
                board=self.current_board(),
                moves=self.legal_moves(),
                joever=self._joever,
                move_made=move_made,
            )
        )

    # -- PRIVATE HELPERS ---
    def _update_joever(self, last_mover: Color) -> None:
        """
        Checkmate: the side to move is mated, so the side that just moved wins.
        Once decided, joever never changes again.
        """
        if self._joever != Joever.ONGOING:
            return

        if self.engine.is_checkmate():
            self._joever = Joever.won_by(last_mover)
        elif self.engine.is_draw():
            self._joever = Joever.DRAW

        if self._joever != Joever.ONGOING:
            self.state = AuthorityState.GAME_OVER
            log.info("Game over: %s", self._joever.value)

    def _reject(self, move: Move, message: str) -> RejectedRecord:
        log.warning("Rejected %s: %s", move.to_uci(), message)
        return RejectedRecord(
            rejected=Rejected(
                board=self.current_board(),
                moves=self.legal_moves(),
                joever=self._joever,
                message=message,
            )
        )
