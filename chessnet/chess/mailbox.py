"""
Addressing of the padded ("mailbox") board.

The board is stored as a flat list of 10 x 12 cells. The playable 8x8 squares sit in the middle and
are surrounded by off-board sentinel cells: two rows above and below (so knight jumps never run off the list),
one column left and right (the two columns wrap around into each other).

Moving along a direction is then just adding a fixed offset to the index, and we only need to check
if we landed on a sentinel instead of checking file/rank bounds.

    index = OFFSET + rank * STRIDE + file
"""

from string import ascii_lowercase

BOARD_DIMENSIONS = (8, 8)
STRIDE = 10
OFFSET = 21
PADDED_SIZE = 120


def square_index(file: int, rank: int) -> int:
    """file and rank both start at 0. (0, 0) is a1."""
    return OFFSET + rank * STRIDE + file


def is_playable(index: int) -> bool:
    if not (OFFSET <= index < OFFSET + BOARD_DIMENSIONS[1] * STRIDE):
        return False
    return (index - 1) % STRIDE < BOARD_DIMENSIONS[0]


def rank_of(index: int) -> int:
    return (index - OFFSET) // STRIDE


def file_of(index: int) -> int:
    return (index - 1) % STRIDE


# The 64 indices that hold real squares, a1 b1 ... h1 a2 ... h8
PLAYABLE_INDICES: tuple[int, ...] = tuple(
    square_index(file, rank)
    for rank in range(BOARD_DIMENSIONS[1])
    for file in range(BOARD_DIMENSIONS[0])
)


def from_algebraic(square: str) -> int:
    """'a1' - 'h8' --> 21 - 98"""
    file = ord(square[0]) - ord("a")
    rank = int(square[1:]) - 1
    return square_index(file, rank)


def to_algebraic(index: int) -> str:
    return f"{ascii_lowercase[file_of(index)]}{rank_of(index) + 1}"
