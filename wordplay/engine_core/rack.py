"""
Rack management - removing played tiles, refilling, and tile exchange.

Racks hold Tile instances; removal is by tile_id so two tiles with the
same letter are never swapped for one another.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from .action import PlacedTileSpec, RejectReason, RuleViolation
from .constants import BLANK, FREE_SWAP_THRESHOLD, MIN_SUPPLY_FOR_EXCHANGE, RACK_SIZE
from .state import PlayerState
from .supply import LetterSupply
from .tile import Tile, is_blank_letter


@dataclass
class ExchangeOutcome:
    new_rack: list[Tile]
    returned: list[Tile] = field(default_factory=list)
    drawn: list[Tile] = field(default_factory=list)
    is_free_swap: bool = False


def resolve_rack_tiles(rack: Sequence[Tile], placed: Sequence[PlacedTileSpec]) -> list[Tile]:
    """
    Match each placed tile to a distinct rack tile.

    A tile_id is matched exactly; otherwise the first unused rack tile with
    the same letter (or any blank, for blanks) is taken. Blanks come back
    carrying their designated letter.
    """
    used: set[str] = set()
    resolved = []
    for spec in placed:
        tile = None
        if spec.tile_id:
            tile = next(
                (t for t in rack if t.tile_id == spec.tile_id and t.tile_id not in used),
                None,
            )
        elif spec.is_blank:
            tile = next((t for t in rack if t.is_blank and t.tile_id not in used), None)
        elif spec.letter:
            letter = spec.letter.upper()
            tile = next(
                (t for t in rack if not t.is_blank and t.letter == letter and t.tile_id not in used),
                None,
            )
        if tile is None:
            label = spec.tile_id or (BLANK if spec.is_blank else spec.letter)
            raise RuleViolation(RejectReason.TILE_NOT_IN_RACK, f"Tile {label} is not on your rack")
        used.add(tile.tile_id)
        if tile.is_blank:
            if not is_blank_letter(spec.designated_letter):
                raise RuleViolation(
                    RejectReason.BLANK_NOT_DESIGNATED,
                    "Blank tiles need a designated letter A-Z",
                )
            tile = tile.designate(spec.designated_letter)
        resolved.append(tile)
    return resolved


def remove_tiles(rack: list[Tile], tiles: Sequence[Tile]) -> list[Tile]:
    """Return the rack without the given tile instances."""
    ids = {t.tile_id for t in tiles}
    return [t for t in rack if t.tile_id not in ids]


def refill(player: PlayerState, supply: LetterSupply) -> list[Tile]:
    """Draw up to a full rack. Returns the tiles drawn."""
    drawn = supply.draw(max(0, RACK_SIZE - len(player.rack)))
    player.rack.extend(drawn)
    return drawn


def repeated_letters(rack: Sequence[Tile]) -> dict[str, int]:
    """Non-blank letters held FREE_SWAP_THRESHOLD or more times."""
    counts = Counter(t.letter for t in rack if not t.is_blank)
    return {letter: n for letter, n in counts.items() if n >= FREE_SWAP_THRESHOLD}


def free_swap_eligible(rack: Sequence[Tile]) -> bool:
    return bool(repeated_letters(rack))


def exchange(
    player: PlayerState,
    supply: LetterSupply,
    tile_indices: Sequence[int],
    free_swap_used: bool,
) -> ExchangeOutcome:
    """
    Swap the selected rack tiles for fresh ones from the supply.

    Mutates `player` and `supply`; the reducer only calls this on a scratch
    copy of the state.
    """
    indices = list(tile_indices)
    if not indices:
        raise RuleViolation(RejectReason.INVALID_EXCHANGE, "Select at least one tile to exchange")
    if len(set(indices)) != len(indices):
        raise RuleViolation(RejectReason.INVALID_EXCHANGE, "A tile was selected twice")
    if any(i < 0 or i >= len(player.rack) for i in indices):
        raise RuleViolation(RejectReason.INVALID_EXCHANGE, "Tile selection is outside the rack")

    is_free_swap = not free_swap_used and free_swap_eligible(player.rack)
    if not is_free_swap and len(supply) < MIN_SUPPLY_FOR_EXCHANGE:
        raise RuleViolation(
            RejectReason.SUPPLY_TOO_LOW,
            f"Exchanges need at least {MIN_SUPPLY_FOR_EXCHANGE} tiles in the supply",
        )

    selected = set(indices)
    returned = [t for i, t in enumerate(player.rack) if i in selected]
    player.rack = [t for i, t in enumerate(player.rack) if i not in selected]

    supply.return_tiles(returned)
    supply.shuffle()
    drawn = supply.draw(len(returned))
    player.rack.extend(drawn)

    return ExchangeOutcome(
        new_rack=list(player.rack),
        returned=returned,
        drawn=drawn,
        is_free_swap=is_free_swap,
    )
