"""
Placement validation - is a proposed set of tiles a legal shape?

Checks run in a fixed order and stop at the first failure, so the caller
always gets the most basic problem first.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from .action import PlacedTileSpec, RejectReason
from .constants import CENTER
from .state import Board
from .tile import is_blank_letter


@dataclass
class PlacementResult:
    valid: bool
    reason: RejectReason | None = None
    message: str | None = None

    @classmethod
    def ok(cls) -> PlacementResult:
        return cls(valid=True)

    @classmethod
    def reject(cls, reason: RejectReason, message: str) -> PlacementResult:
        return cls(valid=False, reason=reason, message=message)


def _check_structure(placed: Sequence[PlacedTileSpec], board: Board) -> PlacementResult | None:
    if not placed:
        return PlacementResult.reject(RejectReason.NO_TILES_PLACED, "No tiles placed")

    seen: set[tuple[int, int]] = set()
    for p in placed:
        if not board.in_bounds(p.row, p.col):
            return PlacementResult.reject(
                RejectReason.OUT_OF_BOUNDS, f"Square ({p.row}, {p.col}) is off the board"
            )
        if (p.row, p.col) in seen:
            return PlacementResult.reject(
                RejectReason.DUPLICATE_SQUARE, f"Square ({p.row}, {p.col}) used twice"
            )
        seen.add((p.row, p.col))
        if board.is_occupied(p.row, p.col):
            return PlacementResult.reject(
                RejectReason.SQUARE_OCCUPIED, f"Square ({p.row}, {p.col}) is already occupied"
            )
        if p.is_blank:
            if not is_blank_letter(p.designated_letter):
                return PlacementResult.reject(
                    RejectReason.BLANK_NOT_DESIGNATED,
                    "Blank tiles need a designated letter A-Z",
                )
    return None


def validate_placement(
    placed: Sequence[PlacedTileSpec],
    board: Board,
    is_first_word: bool,
) -> PlacementResult:
    """
    Check the shape of a placement against the committed board.

    `board` must not contain the new tiles yet.
    """
    problem = _check_structure(placed, board)
    if problem:
        return problem

    squares = {(p.row, p.col) for p in placed}

    # Opening move goes through the centre and is at least two tiles
    if is_first_word:
        if CENTER not in squares:
            return PlacementResult.reject(
                RejectReason.NO_CENTER_COVERAGE, "First word must cover the center square"
            )
        if len(squares) < 2:
            return PlacementResult.reject(
                RejectReason.FIRST_WORD_TOO_SHORT, "First word must be at least 2 letters long"
            )

    rows = {r for r, _ in squares}
    cols = {c for _, c in squares}
    if len(rows) > 1 and len(cols) > 1:
        return PlacementResult.reject(
            RejectReason.NOT_IN_LINE, "All tiles must be in a single row or column"
        )

    # Every square between the ends must be filled, by new or existing tiles
    if len(rows) == 1:
        row = next(iter(rows))
        line = [(row, c) for c in range(min(cols), max(cols) + 1)]
    else:
        col = next(iter(cols))
        line = [(r, col) for r in range(min(rows), max(rows) + 1)]
    for square in line:
        if square not in squares and not board.is_occupied(*square):
            return PlacementResult.reject(
                RejectReason.GAP_IN_PLACEMENT, "Tiles cannot have gaps between them"
            )

    if not is_first_word:
        connected = any(
            board.is_occupied(r + dr, c + dc)
            for r, c in squares
            for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1))
        )
        if not connected:
            return PlacementResult.reject(
                RejectReason.DISCONNECTED, "New tiles must connect to existing words"
            )

    return PlacementResult.ok()
