"""
The Game class is the entrypoint into the rules engine.

It answers everything the synchronization layer needs to know about the chess rules:
which plies are legal, applying a ply, and whether the game has ended.
Squares are always addressed with indices of the padded board (see mailbox.py).
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Self

from chessnet.chess.board import Board
from chessnet.chess.castling import CASTLING_RULES, CastlingDirection, castling_options
from chessnet.chess.fen import FENState
from chessnet.chess.mailbox import is_playable, to_algebraic
from chessnet.chess.moves import (
    LEFT,
    RIGHT,
    Ply,
    is_pawn_push_to_promotion_square,
    pawn_direction,
    pawn_pushes_w_promotion,
)
from chessnet.chess.pieces import Color, Piece, PieceType
from chessnet.core.exceptions import GameStateError, IllegalMoveError

# Fifty moves by each side without a capture or pawn move
FIFTY_MOVE_RULE_HALF_MOVES = 100


class Status(Enum):
    IN_PROGRESS = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    DRAW_REPETITION = auto()
    DRAW_FIFTY_MOVE_RULE = auto()


DRAW_STATUSES = {Status.STALEMATE, Status.DRAW_REPETITION, Status.DRAW_FIFTY_MOVE_RULE}


def describe_ply(origin: int, destination: int) -> str:
    """Algebraic notation when possible. Indices of sentinel cells are shown as they are."""

    def _square(index: int) -> str:
        return to_algebraic(index) if is_playable(index) else f"#{index}"

    return f"{_square(origin)}{_square(destination)}"


@dataclass
class Game:
    board: Board
    state: FENState
    history: list[str]  # repetition keys of every position reached, the current one included
    status: Status

    @classmethod
    def new_game(cls, starting_fen: Optional[str] = None) -> Self:
        """Standard starting position, unless a FEN is given."""
        state = (
            FENState.from_fen(starting_fen)
            if starting_fen
            else FENState.starting_position()
        )
        game = cls(
            board=Board.from_fen(state.position),
            state=state,
            history=[state.repetition_key()],
            status=Status.IN_PROGRESS,
        )
        # a custom FEN could already be mate or stalemate
        game._update_game_status()
        return game

    # --- QUERIES ---
    def player(self) -> Color:
        """Color to move"""
        return self.state.color_to_move

    def tile_at(self, index: int) -> Piece:
        return self.board.piece(index)

    def to_fen(self) -> str:
        return self.state.to_fen()

    def is_check(self) -> bool:
        return self.board.is_check(self.player())

    def is_checkmate(self) -> bool:
        return self.status == Status.CHECKMATE

    def is_stalemate(self) -> bool:
        return self.status == Status.STALEMATE

    def is_draw(self) -> bool:
        return self.status in DRAW_STATUSES

    @property
    def winner(self) -> Optional[Color]:
        """Given it is checkmate, the player to move just got mated and the opponent must be the winner"""
        if self.status != Status.CHECKMATE:
            return None
        return self.player().opponent

    def legal_plys(self) -> list[Ply]:
        """Every legal ply of the player to move. Empty once the game has ended."""
        if self.status != Status.IN_PROGRESS:
            return []
        return self._generate_legal_moves(self.player())

    def plys_from(self, origin: int) -> list[Ply]:
        return [ply for ply in self.legal_plys() if ply.origin == origin]

    # --- COMMANDS ---
    def ply(
        self, origin: int, destination: int, promote_to: Optional[PieceType] = None
    ) -> Ply:
        """
        Attempt a ply for the player to move
        -----

        1. find the matching legal ply (raises IllegalMoveError if there is none)
        2. update the board (NOTE: castling moves the rook too, en passant removes the captured pawn)
        3. update castling rights / en passant square / counters / color to move
        4. update game status

        A pawn push to the last rank without a promotion choice promotes to a queen.
        Returns the ply that was applied, with its promotion filled in.
        """
        if self.status != Status.IN_PROGRESS:
            raise GameStateError(f"Game is not in progress. status: {self.status.name}")

        applied = self._find_legal_ply(origin, destination, promote_to)
        if applied is None:
            raise IllegalMoveError(f"Move not allowed: {describe_ply(origin, destination)}")

        moving_piece = self.board.piece(applied.origin)
        is_capture = applied.is_en_passant or not self.board.piece(applied.destination).is_empty

        self._apply_to_board(self.board, applied)
        self._update_state(applied, moving_piece, is_capture)
        self.history.append(self.state.repetition_key())
        self._update_game_status()
        return applied

    # -- PRIVATE HELPERS ---
    def _find_legal_ply(
        self, origin: int, destination: int, promote_to: Optional[PieceType]
    ) -> Optional[Ply]:
        matching = [
            ply
            for ply in self.legal_plys()
            if ply.origin == origin and ply.destination == destination
        ]
        if promote_to is None and any(ply.promote_to for ply in matching):
            promote_to = PieceType.QUEEN
        return next((ply for ply in matching if ply.promote_to == promote_to), None)

    def _generate_legal_moves(self, color: Color) -> list[Ply]:
        """
        **Combines the following**

        1. generate candidate moves, using the basic movement rules for all pieces (the board does this calculation)
        2. add candidate castling moves
        3. add candidate en passant moves
        4. remove moves that would put (or leave) you in check
        5. Pawn push to promotion square? --> one ply for every piece type to promote into.
        """
        candidate_moves = self.board.generate_candidate_moves(color)
        candidate_moves.extend(self._generate_castling_moves(color))
        candidate_moves.extend(self._generate_en_passant_moves(color))

        legal_moves: list[Ply] = []
        for ply in candidate_moves:
            if self._is_putting_yourself_in_check(ply, color):
                continue
            if is_pawn_push_to_promotion_square(ply, self.board):
                legal_moves.extend(pawn_pushes_w_promotion(ply))
            else:
                legal_moves.append(ply)
        return legal_moves

    def _is_putting_yourself_in_check(self, ply: Ply, color: Color) -> bool:
        board = self.board.copy()
        self._apply_to_board(board, ply)
        return board.is_check(color)

    def _apply_to_board(self, board: Board, ply: Ply) -> None:
        if ply.is_castling:
            direction = self._castling_direction(ply)
            rule = CASTLING_RULES[direction]
            board.move_piece(Ply(rule.king_from, rule.king_to))
            board.move_piece(Ply(rule.rook_from, rule.rook_to))
        elif ply.is_en_passant:
            # the captured pawn stands right behind the en passant square
            color = board.piece(ply.origin).color
            board.move_piece(ply)
            board.remove_piece(ply.destination - pawn_direction(color))
        else:
            board.move_piece(ply)

    def _update_state(self, ply: Ply, moving_piece: Piece, is_capture: bool) -> None:
        """Create/update the FEN state to reflect the state after the ply. The board is already updated."""
        player_color = moving_piece.color
        self.state.position = self.board.to_fen()

        self._revoke_castling_rights_if_needed(ply)

        # a double pawn push creates an en passant square right behind the pawn
        is_pawn_move = moving_piece.type == PieceType.PAWN
        forward = pawn_direction(player_color)
        self.state.en_passant_square = (
            ply.origin + forward
            if is_pawn_move and ply.destination - ply.origin == 2 * forward
            else None
        )

        if is_pawn_move or is_capture:
            self.state.half_move_clock = 0
        else:
            self.state.half_move_clock += 1

        if player_color == Color.BLACK:
            self.state.num_turns += 1

        self.state.color_to_move = player_color.opponent

    def _update_game_status(self) -> None:
        """At this point the player to move is the opponent of the one who made the last ply."""
        color = self.player()
        if not self._generate_legal_moves(color):
            self.status = (
                Status.CHECKMATE if self.board.is_check(color) else Status.STALEMATE
            )
        elif self.history.count(self.state.repetition_key()) >= 3:
            self.status = Status.DRAW_REPETITION
        elif self.state.half_move_clock >= FIFTY_MOVE_RULE_HALF_MOVES:
            self.status = Status.DRAW_FIFTY_MOVE_RULE

    # -- CASTLING RULE HELPERS ---
    def _generate_castling_moves(self, color: Color) -> list[Ply]:
        """
        **you are allowed to castle if**

        * Castling rights are not yet revoked (and king / rook are really standing there).
        * You are not currently in check (you cannot castle out of check).
        * All squares between king and rook are empty.
        * The king does not cross or land on a square that is under attack.
        """
        if not self.state.can_castle(color) or self.board.is_check(color):
            return []

        plys: list[Ply] = []
        for direction in castling_options(color):
            if not self.state.castling_rights[direction]:
                continue
            rule = CASTLING_RULES[direction]
            if self.board.piece(rule.king_from) != Piece(PieceType.KING, color):
                continue
            if self.board.piece(rule.rook_from) != Piece(PieceType.ROOK, color):
                continue
            if self.board.is_any_occupied(list(rule.path)):
                continue
            if self.board.is_any_under_attack(list(rule.king_path), color.opponent):
                continue
            plys.append(Ply(rule.king_from, rule.king_to, is_castling=True))
        return plys

    def _castling_direction(self, ply: Ply) -> CastlingDirection:
        return next(
            direction
            for direction, rule in CASTLING_RULES.items()
            if (rule.king_from, rule.king_to) == (ply.origin, ply.destination)
        )

    def _revoke_castling_rights_if_needed(self, ply: Ply) -> None:
        """
        Moving the king or a rook from its starting square revokes the associated rights,
        and so does capturing a rook that is still standing on its starting square.
        """
        for direction, rule in CASTLING_RULES.items():
            touched = {ply.origin, ply.destination}
            if rule.king_from == ply.origin or rule.rook_from in touched:
                self.state.revoke_castling_rights(direction)

    # --- EN PASSANT RULE HELPERS ----
    def _generate_en_passant_moves(self, color: Color) -> list[Ply]:
        """Check the squares next to the en passant square (one step back) for pawns of the player to move."""
        target = self.state.en_passant_square
        if target is None:
            return []

        own_pawn = Piece(PieceType.PAWN, color)
        plys: list[Ply] = []
        for side in (LEFT, RIGHT):
            origin = target - pawn_direction(color) + side
            if self.board.piece(origin) == own_pawn:
                plys.append(Ply(origin, target, is_en_passant=True))
        return plys
