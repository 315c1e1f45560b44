"""
Pytest fixtures for Wordplay tests.
"""

import pytest

from ..dictionary import WordList
from ..engine_core.action import PlacedTileSpec
from ..engine_core.constants import BLANK, BOARD_SIZE
from ..engine_core.state import Board, GamePhase, GameState, PlayerState
from ..engine_core.supply import LetterSupply
from ..engine_core.tile import Tile


PLAYER_IDS = ["alice", "bob", "carol", "dave"]


def take_tile(supply: LetterSupply, ch: str) -> Tile:
    """Pull one tile of a letter out of the supply ('?' is a blank)."""
    letter = BLANK if ch == "?" else ch.upper()
    for i, tile in enumerate(supply.tiles):
        if tile.letter == letter:
            return supply.tiles.pop(i)
    raise ValueError(f"No {letter} left in supply")


def build_state(
    racks: list[str],
    supply_size: int | None = None,
    is_first_word: bool = True,
    seed: int = 0,
) -> GameState:
    """
    An in-progress game with known racks.

    Rack strings list letters ('?' for a blank). With supply_size, the
    surplus tiles are parked on the board from the top-left corner so the
    100-tile count still holds.
    """
    supply = LetterSupply.standard(seed)
    players = [
        PlayerState(
            player_id=PLAYER_IDS[i],
            name=PLAYER_IDS[i].title(),
            rack=[take_tile(supply, ch) for ch in letters],
        )
        for i, letters in enumerate(racks)
    ]

    board = Board.empty()
    if supply_size is not None:
        surplus = supply.tiles[supply_size:]
        supply.tiles = supply.tiles[:supply_size]
        for n, tile in enumerate(surplus):
            row, col = divmod(n, BOARD_SIZE)
            board.place(row, col, tile)

    return GameState(
        game_id="test_game",
        phase=GamePhase.IN_PROGRESS,
        players=players,
        board=board,
        supply=supply,
        is_first_word=is_first_word,
        turn_number=1,
    )


def tiles_for(rack: list[Tile], word: str, row: int, col: int, horizontal: bool = True) -> list[PlacedTileSpec]:
    """Placement specs spelling `word` from rack tiles, starting at (row, col)."""
    used: set[str] = set()
    specs = []
    for i, ch in enumerate(word):
        tile = next(t for t in rack if t.letter == ch and t.tile_id not in used)
        used.add(tile.tile_id)
        r, c = (row, col + i) if horizontal else (row + i, col)
        specs.append(PlacedTileSpec(row=r, col=c, tile_id=tile.tile_id))
    return specs


@pytest.fixture
def words() -> WordList:
    """The built-in development word list."""
    return WordList()


@pytest.fixture
def lobby_state() -> GameState:
    """A fresh game waiting for players."""
    return GameState(game_id="test_game")


@pytest.fixture
def two_player_state() -> GameState:
    """Alice to move on an empty board, holding C A T X Y Z Q."""
    return build_state(["CATXYZQ", "FGHIJKL"])


@pytest.fixture
def make_state():
    """Factory for in-progress states with fixed racks."""
    return build_state
