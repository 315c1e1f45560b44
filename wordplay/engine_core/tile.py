"""
Tile - the single tagged representation of a letter tile.

Every tile instance carries a unique tile_id assigned when the supply is
built, so two tiles showing the same letter are never confused when removing
them from a rack.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any

from .constants import BLANK, LETTER_POINTS


def is_blank_letter(letter: str | None) -> bool:
    """True for exactly one ASCII letter A-Z (either case)."""
    return bool(letter) and len(letter) == 1 and letter.isascii() and letter.isalpha()


@dataclass(frozen=True)
class Tile:
    """A letter tile. Blanks score 0 and show their designated letter once played."""
    letter: str
    points: int
    tile_id: str
    is_blank: bool = False
    designated_letter: str | None = None

    @classmethod
    def make(cls, letter: str, tile_id: str) -> Tile:
        letter = letter.upper()
        return cls(
            letter=letter,
            points=LETTER_POINTS[letter],
            tile_id=tile_id,
            is_blank=letter == BLANK,
        )

    @property
    def display_letter(self) -> str | None:
        """Letter the tile contributes to a word."""
        if self.is_blank:
            return self.designated_letter
        return self.letter

    def designate(self, letter: str) -> Tile:
        """Return a copy of a blank with its letter chosen."""
        if not self.is_blank:
            raise ValueError(f"Tile {self.tile_id} is not a blank")
        if not is_blank_letter(letter):
            raise ValueError(f"Blank {self.tile_id} cannot stand for {letter!r}")
        return replace(self, designated_letter=letter.upper())

    def cleared(self) -> Tile:
        """Return the tile as it sits in the supply (blank designation removed)."""
        if self.is_blank and self.designated_letter is not None:
            return replace(self, designated_letter=None)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "tile_id": self.tile_id,
            "letter": self.letter,
            "points": self.points,
            "is_blank": self.is_blank,
            "designated_letter": self.designated_letter,
        }
