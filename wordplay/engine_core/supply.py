"""
Letter Supply - the pool of undrawn tiles.

Draws are random without replacement. The supply owns its own
random.Random so a session can be replayed from a seed.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
import random

from .constants import TILE_DISTRIBUTION
from .tile import Tile


@dataclass
class LetterSupply:
    """Mutable multiset of undrawn tiles."""
    tiles: list[Tile] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @classmethod
    def standard(cls, seed: int | None = None) -> LetterSupply:
        """Build the full 100-tile supply and shuffle it."""
        tiles = [
            Tile.make(letter, f"{letter}-{n}")
            for letter, (_points, count) in TILE_DISTRIBUTION.items()
            for n in range(1, count + 1)
        ]
        supply = cls(tiles=tiles, rng=random.Random(seed))
        supply.shuffle()
        return supply

    def __len__(self) -> int:
        return len(self.tiles)

    @property
    def is_empty(self) -> bool:
        return not self.tiles

    def draw(self, count: int) -> list[Tile]:
        """Draw up to `count` tiles; fewer when the supply runs short."""
        drawn = []
        for _ in range(min(count, len(self.tiles))):
            index = self.rng.randrange(len(self.tiles))
            drawn.append(self.tiles.pop(index))
        return drawn

    def return_tiles(self, tiles: list[Tile]):
        """Put tiles back. Blanks lose their designated letter."""
        self.tiles.extend(t.cleared() for t in tiles)

    def shuffle(self):
        self.rng.shuffle(self.tiles)

    def remaining_counts(self) -> dict[str, int]:
        """Per-letter breakdown of what is left, zeros included."""
        counts = Counter(t.letter for t in self.tiles)
        return {letter: counts.get(letter, 0) for letter in TILE_DISTRIBUTION}

    def letters(self) -> list[str]:
        return sorted(t.letter for t in self.tiles)

    def tile_ids(self) -> set[str]:
        return {t.tile_id for t in self.tiles}
