"""
Action System - Actions, effects, and results.

Actions represent:
1. Lobby actions (join, leave, start)
2. Turn actions (place word, pass, exchange)
3. System actions (turn timer expiry)

All state changes flow through actions. Applying one returns the new
canonical state plus a list of discrete effects that callers translate
into their own notifications.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Lobby
    JOIN = "join"
    LEAVE = "leave"
    START_GAME = "start_game"

    # Turn actions
    PLACE_WORD = "place_word"
    PASS = "pass"
    EXCHANGE = "exchange"

    # System
    TIMER_EXPIRED = "timer_expired"


# Actions that only the active player may take
TURN_ACTIONS = {ActionType.PLACE_WORD, ActionType.PASS, ActionType.EXCHANGE}


class RejectReason(str, Enum):
    """Why an action was refused. Rejections never change state."""
    # Turn order / lifecycle
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_NOT_IN_PROGRESS = "GAME_NOT_IN_PROGRESS"
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    GAME_FULL = "GAME_FULL"
    ALREADY_JOINED = "ALREADY_JOINED"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    NOT_HOST = "NOT_HOST"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"

    # Placement shape
    NO_TILES_PLACED = "NO_TILES_PLACED"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    DUPLICATE_SQUARE = "DUPLICATE_SQUARE"
    SQUARE_OCCUPIED = "SQUARE_OCCUPIED"
    BLANK_NOT_DESIGNATED = "BLANK_NOT_DESIGNATED"
    NO_CENTER_COVERAGE = "NO_CENTER_COVERAGE"
    FIRST_WORD_TOO_SHORT = "FIRST_WORD_TOO_SHORT"
    NOT_IN_LINE = "NOT_IN_LINE"
    GAP_IN_PLACEMENT = "GAP_IN_PLACEMENT"
    DISCONNECTED = "DISCONNECTED"
    TILE_NOT_IN_RACK = "TILE_NOT_IN_RACK"
    NO_WORDS_FORMED = "NO_WORDS_FORMED"

    # Dictionary
    INVALID_WORD = "INVALID_WORD"
    DICTIONARY_UNAVAILABLE = "DICTIONARY_UNAVAILABLE"

    # Resources
    SUPPLY_TOO_LOW = "SUPPLY_TOO_LOW"
    INVALID_EXCHANGE = "INVALID_EXCHANGE"

    # Timer
    STALE_TIMER = "STALE_TIMER"

    # Engine
    HANDLER_ERROR = "HANDLER_ERROR"


class RuleViolation(Exception):
    """A recoverable rule failure raised by engine helpers and turned into a rejection."""

    def __init__(self, reason: RejectReason, message: str, invalid_word: str | None = None):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.invalid_word = invalid_word


class EffectType(Enum):
    """Discrete state changes reported to collaborators."""
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    GAME_STARTED = "game_started"
    WORD_PLAYED = "word_played"
    SCORE_CHANGED = "score_changed"
    RACK_UPDATED = "rack_updated"
    PLAYER_PASSED = "player_passed"
    TILES_EXCHANGED = "tiles_exchanged"
    TURN_CHANGED = "turn_changed"
    TIMER_EXPIRED = "timer_expired"
    TIMER_UPDATE = "timer_update"
    GAME_OVER = "game_over"


@dataclass
class Effect:
    """
    One discrete outcome of an action.

    `private_to` names the only player who should receive it (rack contents).
    """
    effect_type: EffectType
    payload: dict[str, Any] = field(default_factory=dict)
    private_to: str | None = None

    def to_message(self) -> dict[str, Any]:
        return {"type": self.effect_type.value, "payload": self.payload}


@dataclass
class PlacedTileSpec:
    """A tile the player proposes to set down this turn."""
    row: int
    col: int
    letter: str | None = None
    tile_id: str | None = None
    is_blank: bool = False
    designated_letter: str | None = None


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    player_id: str | None = None
    player_name: str | None = None

    # For place word
    tiles: list[PlacedTileSpec] = field(default_factory=list)
    claimed_words: list[str] = field(default_factory=list)

    # For exchange
    tile_indices: list[int] = field(default_factory=list)

    # For start
    turn_timer_seconds: int = 0
    seed: int | None = None

    # For timer expiry: the turn the timer was armed for
    turn_number: int | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are validated before application and applied atomically
    by the reducer.
    """
    action_type: ActionType
    payload: ActionPayload
    timestamp: float | None = None

    @classmethod
    def join(cls, player_id: str, name: str) -> Action:
        return cls(
            action_type=ActionType.JOIN,
            payload=ActionPayload(player_id=player_id, player_name=name),
        )

    @classmethod
    def leave(cls, player_id: str) -> Action:
        return cls(
            action_type=ActionType.LEAVE,
            payload=ActionPayload(player_id=player_id),
        )

    @classmethod
    def start_game(cls, player_id: str, turn_timer_seconds: int = 0, seed: int | None = None) -> Action:
        return cls(
            action_type=ActionType.START_GAME,
            payload=ActionPayload(
                player_id=player_id,
                turn_timer_seconds=turn_timer_seconds,
                seed=seed,
            ),
        )

    @classmethod
    def place_word(
        cls,
        player_id: str,
        tiles: list[PlacedTileSpec],
        claimed_words: list[str] | None = None,
    ) -> Action:
        return cls(
            action_type=ActionType.PLACE_WORD,
            payload=ActionPayload(
                player_id=player_id,
                tiles=list(tiles),
                claimed_words=list(claimed_words or []),
            ),
        )

    @classmethod
    def pass_turn(cls, player_id: str) -> Action:
        return cls(
            action_type=ActionType.PASS,
            payload=ActionPayload(player_id=player_id),
        )

    @classmethod
    def exchange(cls, player_id: str, tile_indices: list[int]) -> Action:
        return cls(
            action_type=ActionType.EXCHANGE,
            payload=ActionPayload(player_id=player_id, tile_indices=list(tile_indices)),
        )

    @classmethod
    def timer_expired(cls, turn_number: int) -> Action:
        return cls(
            action_type=ActionType.TIMER_EXPIRED,
            payload=ActionPayload(turn_number=turn_number),
        )


@dataclass
class ScoredWord:
    text: str
    score: int

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "score": self.score}


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Reject reason (if failed)
    - Effects (for notifications)
    - Move details for the acting player
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: RejectReason | None = None
    invalid_word: str | None = None

    effects: list[Effect] = field(default_factory=list)

    # Place word
    words: list[ScoredWord] = field(default_factory=list)
    total_score: int = 0
    bingo: bool = False

    # Exchange
    new_rack: list[Any] = field(default_factory=list)  # list[Tile]
    is_free_swap: bool = False

    @property
    def turn_changed(self) -> bool:
        return any(e.effect_type == EffectType.TURN_CHANGED for e in self.effects)

    @property
    def game_over(self) -> bool:
        return any(e.effect_type == EffectType.GAME_OVER for e in self.effects)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: RejectReason | None = None,
        invalid_word: str | None = None,
    ) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code, invalid_word=invalid_word)

    @classmethod
    def success_with_state(cls, state: Any, effects: list[Effect] | None = None) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, effects=effects or [])
