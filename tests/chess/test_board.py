"""Unit tests for chessnet/chess/board.py"""

import pytest

from chessnet.chess.board import Board
from chessnet.chess.mailbox import PADDED_SIZE, PLAYABLE_INDICES, from_algebraic
from chessnet.chess.moves import Ply
from chessnet.chess.pieces import EMPTY, OFF_BOARD, Color, Piece, PieceType

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_POSITION = "/".join(["8"] * 8)


@pytest.fixture
def start_board() -> Board:
    return Board.from_fen(STARTING_POSITION)


def test_empty_board_has_sentinels_around_empty_squares() -> None:
    board = Board.empty()
    assert len(board.cells) == PADDED_SIZE
    for index in range(PADDED_SIZE):
        expected = EMPTY if index in PLAYABLE_INDICES else OFF_BOARD
        assert board.piece(index) == expected


@pytest.mark.parametrize(
    "square, piece",
    [
        ("a1", Piece(PieceType.ROOK, Color.WHITE)),
        ("e1", Piece(PieceType.KING, Color.WHITE)),
        ("d8", Piece(PieceType.QUEEN, Color.BLACK)),
        ("g8", Piece(PieceType.KNIGHT, Color.BLACK)),
        ("c2", Piece(PieceType.PAWN, Color.WHITE)),
        ("f7", Piece(PieceType.PAWN, Color.BLACK)),
        ("e4", EMPTY),
    ],
)
def test_from_fen(start_board: Board, square: str, piece: Piece) -> None:
    assert start_board.piece(from_algebraic(square)) == piece


@pytest.mark.parametrize(
    "position",
    [STARTING_POSITION, EMPTY_POSITION, "r3k2r/8/8/3pP3/8/8/8/R3K2R", "4k3/P7/8/8/8/8/8/4K3"],
)
def test_to_fen_gives_back_the_position(position: str) -> None:
    assert Board.from_fen(position).to_fen() == position


def test_move_piece(start_board: Board) -> None:
    start_board.move_piece(Ply(from_algebraic("e2"), from_algebraic("e4")))
    assert start_board.piece(from_algebraic("e2")) == EMPTY
    assert start_board.piece(from_algebraic("e4")) == Piece(PieceType.PAWN, Color.WHITE)


def test_move_piece_with_promotion() -> None:
    board = Board.from_fen("8/P7/8/8/8/8/8/8")
    board.move_piece(Ply(from_algebraic("a7"), from_algebraic("a8"), PieceType.KNIGHT))
    assert board.piece(from_algebraic("a8")) == Piece(PieceType.KNIGHT, Color.WHITE)


def test_copy_is_independent(start_board: Board) -> None:
    copied = start_board.copy()
    copied.remove_piece(from_algebraic("e2"))
    assert start_board.piece(from_algebraic("e2")) == Piece(PieceType.PAWN, Color.WHITE)


def test_locate_color_and_king(start_board: Board) -> None:
    assert len(start_board.locate_color(Color.WHITE)) == 16
    assert len(start_board.locate_color(Color.BLACK)) == 16
    assert start_board.king_index(Color.WHITE) == from_algebraic("e1")
    assert start_board.king_index(Color.BLACK) == from_algebraic("e8")


def test_candidate_moves_from_starting_position(start_board: Board) -> None:
    # 16 pawn moves and 4 knight moves. Nothing else can move yet.
    assert len(start_board.generate_candidate_moves(Color.WHITE)) == 20
    assert len(start_board.generate_candidate_moves(Color.BLACK)) == 20


def test_is_check() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/8/4R2K")
    assert board.is_check(Color.BLACK)
    assert not board.is_check(Color.WHITE)


def test_no_king_is_never_check() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/R7")
    assert not board.is_check(Color.BLACK)


def test_is_any_occupied(start_board: Board) -> None:
    assert start_board.is_any_occupied([from_algebraic("e4"), from_algebraic("e2")])
    assert not start_board.is_any_occupied([from_algebraic("e4"), from_algebraic("d5")])
