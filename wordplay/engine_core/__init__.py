"""
Engine Core - Deterministic rules and turn engine for the word game.

The engine is the authority that:
1. Holds the canonical GameState (board, racks, supply, turn)
2. Validates tile placements
3. Extracts and scores the words a placement forms
4. Manages the letter supply and tile exchanges
5. Applies actions via the reducer, returning effects
"""

from .constants import BOARD_SIZE, CENTER, RACK_SIZE, BINGO_BONUS, SquareType
from .tile import Tile
from .supply import LetterSupply
from .state import Board, GamePhase, GameState, PlayerState
from .words import Orientation, WordSpan, find_words_formed
from .validator import PlacementResult, validate_placement
from .scoring import score_word, score_turn, rack_value
from .action import (
    Action, ActionType, ActionPayload, ActionResult,
    Effect, EffectType, PlacedTileSpec, RejectReason, ScoredWord,
)
from .reducer import Reducer, TileInvariantError, apply_action

__all__ = [
    "BOARD_SIZE",
    "CENTER",
    "RACK_SIZE",
    "BINGO_BONUS",
    "SquareType",
    "Tile",
    "LetterSupply",
    "Board",
    "GamePhase",
    "GameState",
    "PlayerState",
    "Orientation",
    "WordSpan",
    "find_words_formed",
    "PlacementResult",
    "validate_placement",
    "score_word",
    "score_turn",
    "rack_value",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Effect",
    "EffectType",
    "PlacedTileSpec",
    "RejectReason",
    "ScoredWord",
    "Reducer",
    "TileInvariantError",
    "apply_action",
]
