"""The Game board implements all rules that affect the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass
from typing import Self

from chessnet.chess.mailbox import (
    BOARD_DIMENSIONS,
    PADDED_SIZE,
    PLAYABLE_INDICES,
    square_index,
)
from chessnet.chess.moves import MOVEMENT_RULES, CandidateMovesFn, Ply, is_under_attack
from chessnet.chess.pieces import EMPTY, OFF_BOARD, Color, Piece, PieceType


@dataclass
class Board:
    cells: list[Piece]

    @classmethod
    def empty(cls) -> Self:
        """Only sentinels and empty squares"""
        cells = [OFF_BOARD] * PADDED_SIZE
        for index in PLAYABLE_INDICES:
            cells[index] = EMPTY
        return cls(cells)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the first part of a FEN string, the one that denotes the board position.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        board = cls.empty()
        for rank_idx, fen_one_rank in enumerate(fen_str.split("/")):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - 1 - rank_idx
            file = 0
            for character in fen_one_rank:
                if character.isalpha():
                    board.place_piece(Piece.from_fen(character), square_index(file, rank))
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece(square_index(file, rank))
            if piece.is_empty:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Self:
        return type(self)(list(self.cells))

    def piece(self, index: int) -> Piece:
        return self.cells[index]

    def place_piece(self, piece: Piece, index: int) -> None:
        self.cells[index] = piece

    def remove_piece(self, index: int) -> None:
        self.cells[index] = EMPTY

    def move_piece(self, ply: Ply) -> None:
        """Update the position on the board. A promotion replaces the pawn on its target square."""
        moving = self.piece(ply.origin)
        if ply.promote_to is not None:
            moving = Piece(ply.promote_to, moving.color)
        self.cells[ply.origin] = EMPTY
        self.cells[ply.destination] = moving

    def locate_color(self, color: Color) -> list[int]:
        return [index for index in PLAYABLE_INDICES if self.cells[index].color == color]

    def king_index(self, color: Color) -> int | None:
        king = Piece(PieceType.KING, color)
        return next((index for index in PLAYABLE_INDICES if self.cells[index] == king), None)

    def generate_candidate_moves(self, color: Color) -> list[Ply]:
        """
        Candidate moves from the basic movement rules of every piece, which will later be tested for legality
        (making sure it does not put yourself in check.)

        NOTE: Castling / En passant / promotion are taken care of in the Game class later.
        """
        candidate_moves: list[Ply] = []
        for origin in self.locate_color(color):
            movement_rule: CandidateMovesFn = MOVEMENT_RULES[self.piece(origin).type]
            candidate_moves.extend(movement_rule(origin, self))
        return candidate_moves

    def is_under_attack(self, index: int, by_color: Color) -> bool:
        return is_under_attack(index, by_color, self)

    def is_any_under_attack(self, indices: list[int], by_color: Color) -> bool:
        return any(self.is_under_attack(index, by_color) for index in indices)

    def is_any_occupied(self, indices: list[int]) -> bool:
        return any(not self.piece(index).is_empty for index in indices)

    def is_check(self, color: Color) -> bool:
        """Is the king of `color` attacked? A board without that king is never in check."""
        king = self.king_index(color)
        if king is None:
            return False
        return self.is_under_attack(king, color.opponent)
