"""
Geometry/Base movement and capturing/attacking rules on the padded board

Key idea: Use strategy pattern to define candidate move sets for each piece type.
Directions are index offsets: +1 is one file to the right, +STRIDE one rank up the board.

Legality (not leaving your own king in check) is checked later by Game
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from chessnet.chess.mailbox import BOARD_DIMENSIONS, STRIDE, rank_of
from chessnet.chess.pieces import Color, Piece, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, index: int) -> Piece: ...


@dataclass(frozen=True)
class Ply:
    """
    One half-move, addressed by indices of the padded board.

    NOTE: the castling / en passant flags are filled in by the move generator, so two plies compare equal
    as long as they move between the same squares (and promote to the same piece).
    """

    origin: int
    destination: int
    promote_to: Optional[PieceType] = None
    is_castling: bool = field(default=False, compare=False)
    is_en_passant: bool = field(default=False, compare=False)


UP = STRIDE
DOWN = -STRIDE
LEFT = -1
RIGHT = 1

STRAIGHTS: tuple[int, ...] = (UP, DOWN, LEFT, RIGHT)
DIAGONALS: tuple[int, ...] = (UP + LEFT, UP + RIGHT, DOWN + LEFT, DOWN + RIGHT)
ALL_DIRECTIONS: tuple[int, ...] = STRAIGHTS + DIAGONALS
KNIGHT_JUMPS: tuple[int, ...] = (
    2 * UP + LEFT,
    2 * UP + RIGHT,
    2 * DOWN + LEFT,
    2 * DOWN + RIGHT,
    UP + 2 * LEFT,
    UP + 2 * RIGHT,
    DOWN + 2 * LEFT,
    DOWN + 2 * RIGHT,
)


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return UP if color == Color.WHITE else DOWN


def pawn_start_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 2


def promotion_rank(color: Color) -> int:
    return BOARD_DIMENSIONS[1] - 1 if color == Color.WHITE else 0


# --- MOVEMENT RULES ---
def raycasting_move(index: int, board: Board, directions: tuple[int, ...]) -> list[Ply]:
    """
    Raycasting algorithm
    -----

    Walk along every direction until we hit a piece or a sentinel.
    The first piece we hit can be captured if it belongs to the opponent.
    """
    player_color = board.piece(index).color
    plys: list[Ply] = []
    for step in directions:
        target = index + step
        while True:
            piece = board.piece(target)
            if piece.is_off_board or piece.color == player_color:
                break
            plys.append(Ply(index, target))
            if not piece.is_empty:
                break
            target += step
    return plys


def single_step_move(index: int, board: Board, steps: tuple[int, ...]) -> list[Ply]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights"""
    player_color = board.piece(index).color
    plys: list[Ply] = []
    for step in steps:
        piece = board.piece(index + step)
        if piece.is_off_board or piece.color == player_color:
            continue
        plys.append(Ply(index, index + step))
    return plys


def candidate_pawn_moves(index: int, board: Board) -> list[Ply]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square only.
    - can move by two in their first move (so when on their starting rank)
    - takes diagonally

    NOTE: En passant and promotion are taken care of in the Game class
    """
    color = board.piece(index).color
    forward = pawn_direction(color)
    plys: list[Ply] = []

    one_step = index + forward
    if board.piece(one_step).is_empty:
        plys.append(Ply(index, one_step))
        two_steps = one_step + forward
        if rank_of(index) == pawn_start_rank(color) and board.piece(two_steps).is_empty:
            plys.append(Ply(index, two_steps))

    for side in (LEFT, RIGHT):
        target = index + forward + side
        if board.piece(target).color == color.opponent:
            plys.append(Ply(index, target))
    return plys


def candidate_knight_moves(index: int, board: Board) -> list[Ply]:
    return single_step_move(index, board, KNIGHT_JUMPS)


def candidate_bishop_moves(index: int, board: Board) -> list[Ply]:
    return raycasting_move(index, board, DIAGONALS)


def candidate_rook_moves(index: int, board: Board) -> list[Ply]:
    return raycasting_move(index, board, STRAIGHTS)


def candidate_queen_moves(index: int, board: Board) -> list[Ply]:
    return raycasting_move(index, board, ALL_DIRECTIONS)


def candidate_king_moves(index: int, board: Board) -> list[Ply]:
    """Castling is modelled as a special king move (handled separately)."""
    return single_step_move(index, board, ALL_DIRECTIONS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[int, Board], list[Ply]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- ATTACKING RULES ---
def is_attacked_along_rays(
    index: int, by_color: Color, board: Board, directions: tuple[int, ...], attackers: set[PieceType]
) -> bool:
    """Is the first piece found along any of the directions a slider of the given color?"""
    for step in directions:
        target = index + step
        while board.piece(target).is_empty:
            target += step
        piece = board.piece(target)
        if piece.color == by_color and piece.type in attackers:
            return True
    return False


def is_attacked_by_step(
    index: int, by_color: Color, board: Board, steps: tuple[int, ...], attacker: PieceType
) -> bool:
    return any(board.piece(index + step) == Piece(attacker, by_color) for step in steps)


def is_under_attack(index: int, by_color: Color, board: Board) -> bool:
    """
    Could a piece of `by_color` capture on this square?

    NOTE: Pawn captures are not symmetric: to see if a white pawn attacks the square, look one rank DOWN the board.
    """
    pawn_sources = tuple(-pawn_direction(by_color) + side for side in (LEFT, RIGHT))
    return (
        is_attacked_by_step(index, by_color, board, pawn_sources, PieceType.PAWN)
        or is_attacked_by_step(index, by_color, board, KNIGHT_JUMPS, PieceType.KNIGHT)
        or is_attacked_by_step(index, by_color, board, ALL_DIRECTIONS, PieceType.KING)
        or is_attacked_along_rays(
            index, by_color, board, STRAIGHTS, {PieceType.ROOK, PieceType.QUEEN}
        )
        or is_attacked_along_rays(
            index, by_color, board, DIAGONALS, {PieceType.BISHOP, PieceType.QUEEN}
        )
    )


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


def is_pawn_push_to_promotion_square(ply: Ply, board: Board) -> bool:
    moving_piece = board.piece(ply.origin)
    return moving_piece.type == PieceType.PAWN and rank_of(ply.destination) == promotion_rank(
        moving_piece.color
    )


def pawn_pushes_w_promotion(pawn_push: Ply) -> list[Ply]:
    """Return multiple copies of the pawn push with the piece type to promote into filled in."""
    return [
        Ply(pawn_push.origin, pawn_push.destination, promote_to=piece_type)
        for piece_type in PROMOTION_OPTIONS
    ]
