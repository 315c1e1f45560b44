"""
Word extraction - finds every word a placement touches.

The board passed in already holds the tentatively placed tiles; the
reducer runs extraction against a scratch copy before anything is committed.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .state import Board


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class WordSpan:
    """A maximal run of two or more occupied squares."""
    text: str
    start_row: int
    start_col: int
    end_row: int
    end_col: int
    orientation: Orientation

    @property
    def squares(self) -> list[tuple[int, int]]:
        if self.orientation == Orientation.HORIZONTAL:
            return [(self.start_row, c) for c in range(self.start_col, self.end_col + 1)]
        return [(r, self.start_col) for r in range(self.start_row, self.end_row + 1)]

    @property
    def key(self) -> tuple[int, int, int, int, str]:
        return (self.start_row, self.start_col, self.end_row, self.end_col, self.orientation.value)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "start_row": self.start_row,
            "start_col": self.start_col,
            "end_row": self.end_row,
            "end_col": self.end_col,
            "orientation": self.orientation.value,
        }


def word_through(board: Board, row: int, col: int, orientation: Orientation) -> WordSpan | None:
    """The run through (row, col) along one axis, or None if shorter than 2."""
    if not board.is_occupied(row, col):
        return None

    dr, dc = (0, 1) if orientation == Orientation.HORIZONTAL else (1, 0)

    start_r, start_c = row, col
    while board.is_occupied(start_r - dr, start_c - dc):
        start_r, start_c = start_r - dr, start_c - dc

    end_r, end_c = row, col
    while board.is_occupied(end_r + dr, end_c + dc):
        end_r, end_c = end_r + dr, end_c + dc

    letters = []
    r, c = start_r, start_c
    while (r, c) != (end_r + dr, end_c + dc):
        letter = board.tile_at(r, c).display_letter
        if letter is None:
            raise ValueError(f"Blank at ({r}, {c}) has no letter")
        letters.append(letter)
        r, c = r + dr, c + dc

    if len(letters) < 2:
        return None

    return WordSpan(
        text="".join(letters),
        start_row=start_r,
        start_col=start_c,
        end_row=end_r,
        end_col=end_c,
        orientation=orientation,
    )


def find_words_formed(board: Board, placed_squares: Iterable[tuple[int, int]]) -> list[WordSpan]:
    """
    Every distinct word touched by the newly placed squares.

    Each new tile contributes its row run and its column run; a straight
    multi-tile placement yields its main word once plus one cross-word per
    tile that has perpendicular neighbours.
    """
    seen: set[tuple] = set()
    spans: list[WordSpan] = []
    for row, col in placed_squares:
        for orientation in (Orientation.HORIZONTAL, Orientation.VERTICAL):
            span = word_through(board, row, col, orientation)
            if span and span.key not in seen:
                seen.add(span.key)
                spans.append(span)
    return spans
