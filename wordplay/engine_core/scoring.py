"""
Scoring - letter and word multipliers, bingo bonus, rack values.

Premium squares count only on the turn a tile is first placed on them.
Tiles already on the board add their face value with no multiplier.
"""

from __future__ import annotations
from typing import Collection, Iterable

from .constants import BINGO_BONUS, RACK_SIZE
from .state import Board
from .tile import Tile
from .words import WordSpan


def score_word(span: WordSpan, board: Board, new_squares: Collection[tuple[int, int]]) -> int:
    """Score one word; `board` already holds the new tiles."""
    total = 0
    word_multiplier = 1
    for row, col in span.squares:
        tile = board.tile_at(row, col)
        if tile is None:
            continue
        letter_score = tile.points
        if (row, col) in new_squares:
            letter_mult, word_mult = board.multiplier(row, col)
            letter_score *= letter_mult
            word_multiplier *= word_mult
        total += letter_score
    return total * word_multiplier


def score_turn(
    spans: Iterable[WordSpan],
    board: Board,
    new_squares: Collection[tuple[int, int]],
    tiles_used: int,
) -> tuple[int, list[tuple[WordSpan, int]], bool]:
    """
    Score every word of a move.

    Returns (total, [(span, score)], bingo).
    """
    scored = [(span, score_word(span, board, new_squares)) for span in spans]
    total = sum(score for _span, score in scored)
    bingo = tiles_used == RACK_SIZE
    if bingo:
        total += BINGO_BONUS
    return total, scored, bingo


def rack_value(rack: Iterable[Tile]) -> int:
    return sum(t.points for t in rack)
