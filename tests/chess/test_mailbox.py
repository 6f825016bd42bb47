"""Unit tests for chessnet/chess/mailbox.py"""

import pytest

from chessnet.chess.mailbox import (
    OFFSET,
    PADDED_SIZE,
    PLAYABLE_INDICES,
    file_of,
    from_algebraic,
    is_playable,
    rank_of,
    square_index,
    to_algebraic,
)


@pytest.mark.parametrize(
    "square, index",
    [("a1", 21), ("h1", 28), ("a2", 31), ("e4", 55), ("a8", 91), ("h8", 98)],
)
def test_algebraic_to_index(square: str, index: int) -> None:
    assert from_algebraic(square) == index
    assert to_algebraic(index) == square


def test_square_index_formula() -> None:
    assert square_index(0, 0) == OFFSET
    assert square_index(3, 5) == OFFSET + 5 * 10 + 3


def test_there_are_64_playable_squares() -> None:
    assert len(PLAYABLE_INDICES) == 64
    assert len(set(PLAYABLE_INDICES)) == 64
    assert all(is_playable(index) for index in PLAYABLE_INDICES)


def test_everything_else_is_a_sentinel() -> None:
    sentinels = [index for index in range(PADDED_SIZE) if not is_playable(index)]
    assert len(sentinels) == PADDED_SIZE - 64
    # both side columns and the two rows above and below
    for index in (0, 20, 29, 30, 39, 99, 100, 119):
        assert not is_playable(index)


def test_rank_and_file_of_index() -> None:
    for rank in range(8):
        for file in range(8):
            index = square_index(file, rank)
            assert (file_of(index), rank_of(index)) == (file, rank)
