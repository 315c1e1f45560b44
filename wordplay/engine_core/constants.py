"""
Rule constants - board layout, tile distribution, multipliers and limits.

These values define the rule set. The layout and distribution must stay
exactly as written here for scoring compatibility between clients.
"""

from __future__ import annotations
from enum import Enum


BOARD_SIZE = 15
CENTER = (7, 7)
RACK_SIZE = 7
BINGO_BONUS = 50
MIN_PLAYERS = 2
MAX_PLAYERS = 4
TOTAL_TILES = 100

# Exchanges need a full rack's worth of tiles left in the supply
MIN_SUPPLY_FOR_EXCHANGE = 7

# Copies of one letter on a rack that unlock a free swap
FREE_SWAP_THRESHOLD = 3

BLANK = "BLANK"


class SquareType(str, Enum):
    """Premium class of a board square."""
    TRIPLE_WORD = "tw"
    DOUBLE_WORD = "dw"
    TRIPLE_LETTER = "tl"
    DOUBLE_LETTER = "dl"
    START = "st"
    NORMAL = ""


# (letter multiplier, word multiplier)
MULTIPLIERS: dict[SquareType, tuple[int, int]] = {
    SquareType.TRIPLE_WORD: (1, 3),
    SquareType.DOUBLE_WORD: (1, 2),
    SquareType.TRIPLE_LETTER: (3, 1),
    SquareType.DOUBLE_LETTER: (2, 1),
    SquareType.START: (1, 2),
    SquareType.NORMAL: (1, 1),
}

BOARD_LAYOUT: tuple[tuple[str, ...], ...] = (
    ("tw", "", "", "dl", "", "", "", "tw", "", "", "", "dl", "", "", "tw"),
    ("", "dw", "", "", "", "tl", "", "", "", "tl", "", "", "", "dw", ""),
    ("", "", "dw", "", "", "", "dl", "", "dl", "", "", "", "dw", "", ""),
    ("dl", "", "", "dw", "", "", "", "dl", "", "", "", "dw", "", "", "dl"),
    ("", "", "", "", "dw", "", "", "", "", "", "dw", "", "", "", ""),
    ("", "tl", "", "", "", "tl", "", "", "", "tl", "", "", "", "tl", ""),
    ("", "", "dl", "", "", "", "dl", "", "dl", "", "", "", "dl", "", ""),
    ("tw", "", "", "dl", "", "", "", "st", "", "", "", "dl", "", "", "tw"),
    ("", "", "dl", "", "", "", "dl", "", "dl", "", "", "", "dl", "", ""),
    ("", "tl", "", "", "", "tl", "", "", "", "tl", "", "", "", "tl", ""),
    ("", "", "", "", "dw", "", "", "", "", "", "dw", "", "", "", ""),
    ("dl", "", "", "dw", "", "", "", "dl", "", "", "", "dw", "", "", "dl"),
    ("", "", "dw", "", "", "", "dl", "", "dl", "", "", "", "dw", "", ""),
    ("", "dw", "", "", "", "tl", "", "", "", "tl", "", "", "", "dw", ""),
    ("tw", "", "", "dl", "", "", "", "tw", "", "", "", "dl", "", "", "tw"),
)

# letter -> (points, count)
TILE_DISTRIBUTION: dict[str, tuple[int, int]] = {
    "A": (1, 9), "B": (3, 2), "C": (3, 2), "D": (2, 4), "E": (1, 12),
    "F": (4, 2), "G": (2, 3), "H": (4, 2), "I": (1, 9), "J": (8, 1),
    "K": (5, 1), "L": (1, 4), "M": (3, 2), "N": (1, 6), "O": (1, 8),
    "P": (3, 2), "Q": (10, 1), "R": (1, 6), "S": (1, 4), "T": (1, 6),
    "U": (1, 4), "V": (4, 2), "W": (4, 2), "X": (8, 1), "Y": (4, 2),
    "Z": (10, 1), BLANK: (0, 2),
}

LETTER_POINTS: dict[str, int] = {
    letter: points for letter, (points, _count) in TILE_DISTRIBUTION.items()
}


def square_type_at(row: int, col: int) -> SquareType:
    """Premium class of the square at (row, col)."""
    return SquareType(BOARD_LAYOUT[row][col])
