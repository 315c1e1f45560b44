"""
Tests for the letter supply and tile constants.
"""

import pytest

from ..engine_core.constants import (
    BLANK, BOARD_LAYOUT, BOARD_SIZE, CENTER, TILE_DISTRIBUTION, TOTAL_TILES,
    SquareType, square_type_at,
)
from ..engine_core.supply import LetterSupply
from ..engine_core.tile import Tile


class TestDistribution:
    """The fixed tile set and board layout."""

    def test_hundred_tiles(self):
        assert sum(count for _points, count in TILE_DISTRIBUTION.values()) == TOTAL_TILES

    def test_blanks_score_zero(self):
        assert TILE_DISTRIBUTION[BLANK] == (0, 2)

    def test_layout_is_symmetric(self):
        assert len(BOARD_LAYOUT) == BOARD_SIZE
        for r in range(BOARD_SIZE):
            for c in range(BOARD_SIZE):
                assert BOARD_LAYOUT[r][c] == BOARD_LAYOUT[c][r]
                assert BOARD_LAYOUT[r][c] == BOARD_LAYOUT[BOARD_SIZE - 1 - r][c]

    def test_premium_squares(self):
        assert square_type_at(*CENTER) == SquareType.START
        assert square_type_at(0, 0) == SquareType.TRIPLE_WORD
        assert square_type_at(1, 5) == SquareType.TRIPLE_LETTER
        assert square_type_at(0, 3) == SquareType.DOUBLE_LETTER
        assert square_type_at(7, 8) == SquareType.NORMAL


class TestLetterSupply:
    """Tests for draw/return/shuffle."""

    def test_standard_supply(self):
        supply = LetterSupply.standard(seed=1)

        assert len(supply) == TOTAL_TILES
        assert len(supply.tile_ids()) == TOTAL_TILES
        assert supply.remaining_counts()["E"] == 12
        assert supply.remaining_counts()[BLANK] == 2

    def test_draw_removes_tiles(self):
        supply = LetterSupply.standard(seed=1)
        drawn = supply.draw(7)

        assert len(drawn) == 7
        assert len(supply) == TOTAL_TILES - 7
        assert not {t.tile_id for t in drawn} & supply.tile_ids()

    def test_draw_more_than_available(self):
        supply = LetterSupply(tiles=[Tile.make("A", "A-1"), Tile.make("B", "B-1")])

        drawn = supply.draw(7)

        assert len(drawn) == 2
        assert supply.is_empty

    def test_returned_blank_is_cleared(self):
        supply = LetterSupply()
        blank = Tile.make(BLANK, "BLANK-1").designate("q")

        supply.return_tiles([blank])

        assert supply.tiles[0].designated_letter is None
        assert supply.tiles[0].is_blank

    def test_breakdown_lists_every_letter(self):
        supply = LetterSupply(tiles=[Tile.make("Q", "Q-1")])
        counts = supply.remaining_counts()

        assert len(counts) == 27
        assert counts["Q"] == 1
        assert counts["Z"] == 0

    def test_seeded_supplies_match(self):
        first = LetterSupply.standard(seed=99).draw(7)
        second = LetterSupply.standard(seed=99).draw(7)

        assert [t.tile_id for t in first] == [t.tile_id for t in second]


class TestTile:
    def test_blank_display_letter(self):
        blank = Tile.make(BLANK, "BLANK-1")

        assert blank.points == 0
        assert blank.display_letter is None
        assert blank.designate("e").display_letter == "E"

    def test_only_blanks_take_a_letter(self):
        with pytest.raises(ValueError):
            Tile.make("A", "A-1").designate("B")
