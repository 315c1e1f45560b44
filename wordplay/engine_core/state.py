"""
Game State - Board, players and the session-wide game state.

Design principles:
- One GameState per game session, never shared between sessions
- The reducer works on a deep copy, so a rejected action leaves the
  original untouched
- Serializable: snapshot() produces a JSON-friendly view for clients
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from copy import deepcopy
from enum import Enum

from .constants import BOARD_SIZE, MULTIPLIERS, SquareType, square_type_at
from .supply import LetterSupply
from .tile import Tile


class GamePhase(Enum):
    """High-level game phases."""
    AWAITING_PLAYERS = "awaiting_players"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


@dataclass
class Board:
    """
    The 15x15 grid of placed tiles.

    Pure data: the premium layout is a constant, only occupancy changes.
    """
    grid: list[list[Tile | None]]

    @staticmethod
    def empty() -> Board:
        return Board([[None for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)])

    @staticmethod
    def in_bounds(row: int, col: int) -> bool:
        return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE

    def tile_at(self, row: int, col: int) -> Tile | None:
        if not self.in_bounds(row, col):
            return None
        return self.grid[row][col]

    def is_occupied(self, row: int, col: int) -> bool:
        return self.tile_at(row, col) is not None

    def square_type(self, row: int, col: int) -> SquareType:
        return square_type_at(row, col)

    def multiplier(self, row: int, col: int) -> tuple[int, int]:
        """(letter multiplier, word multiplier) of a square."""
        return MULTIPLIERS[self.square_type(row, col)]

    def place(self, row: int, col: int, tile: Tile):
        if self.grid[row][col] is not None:
            raise ValueError(f"Square ({row}, {col}) is already occupied")
        self.grid[row][col] = tile

    def occupied_squares(self) -> list[tuple[int, int]]:
        return [
            (r, c)
            for r in range(BOARD_SIZE)
            for c in range(BOARD_SIZE)
            if self.grid[r][c] is not None
        ]

    def tile_count(self) -> int:
        return sum(1 for row in self.grid for cell in row if cell is not None)

    def has_tiles(self) -> bool:
        return any(cell is not None for row in self.grid for cell in row)

    def to_rows(self) -> list[list[dict[str, Any] | None]]:
        return [[t.to_dict() if t else None for t in row] for row in self.grid]


@dataclass
class PlayerState:
    """A seated player: score, rack and personal pass streak."""
    player_id: str
    name: str
    score: int = 0
    rack: list[Tile] = field(default_factory=list)
    consecutive_passes: int = 0

    def to_dict(self, show_rack: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "player_id": self.player_id,
            "name": self.name,
            "score": self.score,
            "rack_size": len(self.rack),
            "consecutive_passes": self.consecutive_passes,
        }
        data["rack"] = [t.to_dict() for t in self.rack] if show_rack else None
        return data


@dataclass
class GameState:
    """
    Complete state of one game session.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    game_id: str

    phase: GamePhase = GamePhase.AWAITING_PLAYERS
    players: list[PlayerState] = field(default_factory=list)
    current_player_idx: int = 0

    board: Board = field(default_factory=Board.empty)
    supply: LetterSupply = field(default_factory=LetterSupply)

    is_first_word: bool = True
    consecutive_passes: int = 0
    free_swap_used_this_turn: bool = False

    # Bumped on every real turn change; stale timers compare against it
    turn_number: int = 0
    turn_timer_seconds: int = 0

    # Set when the game ends
    winner_ids: list[str] = field(default_factory=list)
    end_reason: str | None = None

    random_seed: int | None = None
    last_move: dict[str, Any] | None = None

    @property
    def current_player(self) -> PlayerState | None:
        if not self.players:
            return None
        return self.players[self.current_player_idx % len(self.players)]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def host_id(self) -> str | None:
        return self.players[0].player_id if self.players else None

    @property
    def is_in_progress(self) -> bool:
        return self.phase == GamePhase.IN_PROGRESS

    def get_player(self, player_id: str) -> PlayerState | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def tiles_in_play(self) -> int:
        """Tiles in the supply, on racks and on the board."""
        return (
            len(self.supply)
            + sum(len(p.rack) for p in self.players)
            + self.board.tile_count()
        )

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)

    def snapshot(self, viewer_id: str | None = None, reveal_racks: bool = False) -> dict[str, Any]:
        """
        JSON-friendly view of the state.

        Racks are hidden except the viewer's own (or all with reveal_racks).
        """
        current = self.current_player
        return {
            "game_id": self.game_id,
            "phase": self.phase.value,
            "players": [
                p.to_dict(show_rack=reveal_racks or p.player_id == viewer_id)
                for p in self.players
            ],
            "host_id": self.host_id,
            "current_player_index": self.current_player_idx,
            "current_player_id": current.player_id if current else None,
            "board": self.board.to_rows(),
            "supply_count": len(self.supply),
            "supply_breakdown": self.supply.remaining_counts(),
            "is_first_word": self.is_first_word,
            "consecutive_passes": self.consecutive_passes,
            "free_swap_used_this_turn": self.free_swap_used_this_turn,
            "turn_number": self.turn_number,
            "turn_timer_seconds": self.turn_timer_seconds,
            "winner_ids": list(self.winner_ids),
            "end_reason": self.end_reason,
            "last_move": self.last_move,
        }
