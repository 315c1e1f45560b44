"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- (state, action) -> ActionResult with a new state and effects
- Handlers run on a deep copy, so a rejection never touches the input
- Validates before applying
- Tile conservation is checked after every accepted action
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import logging

from .action import (
    Action, ActionType, ActionResult, Effect, EffectType, RejectReason,
    RuleViolation, ScoredWord, TURN_ACTIONS,
)
from .constants import MAX_PLAYERS, MIN_PLAYERS, RACK_SIZE, TOTAL_TILES
from .rack import exchange, refill, remove_tiles, resolve_rack_tiles
from .scoring import rack_value, score_turn
from .state import GamePhase, GameState, PlayerState
from .supply import LetterSupply
from .validator import validate_placement
from .words import find_words_formed

if TYPE_CHECKING:
    from ..dictionary import WordValidator


logger = logging.getLogger(__name__)


class TileInvariantError(RuntimeError):
    """The board, racks and supply no longer account for every tile."""


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    The dictionary is the only outside collaborator.
    """
    dictionary: WordValidator | None = None

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            logger.debug(
                "game=%s rejected %s: %s",
                state.game_id, action.action_type.value, validation_error.error_code,
            )
            return validation_error

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=RejectReason.HANDLER_ERROR,
            )

        working = state.clone()
        try:
            result = handler(working, action)
        except RuleViolation as v:
            result = ActionResult.failure(v.message, v.reason, invalid_word=v.invalid_word)
        except Exception as e:
            logger.exception("game=%s handler for %s failed", state.game_id, action.action_type.value)
            return ActionResult.failure(str(e), error_code=RejectReason.HANDLER_ERROR)

        if not result.success:
            logger.debug(
                "game=%s rejected %s: %s (%s)",
                state.game_id, action.action_type.value, result.error_code, result.error,
            )
            return result

        self._check_invariants(state, result.new_state)
        return result

    def _validate_action(self, state: GameState, action: Action) -> ActionResult | None:
        """
        Validate that an action is legal in the current phase and turn.

        Returns a failure result if invalid, None if valid.
        """
        action_type = action.action_type
        payload = action.payload

        if action_type in {ActionType.JOIN, ActionType.LEAVE, ActionType.START_GAME}:
            if state.phase != GamePhase.AWAITING_PLAYERS:
                return ActionResult.failure(
                    "Game has already started", RejectReason.GAME_ALREADY_STARTED
                )
            return None

        if not state.is_in_progress:
            return ActionResult.failure("Game is not in progress", RejectReason.GAME_NOT_IN_PROGRESS)

        if action_type == ActionType.TIMER_EXPIRED:
            if payload.turn_number != state.turn_number:
                return ActionResult.failure(
                    f"Timer for turn {payload.turn_number} is stale", RejectReason.STALE_TIMER
                )
            return None

        if action_type in TURN_ACTIONS:
            if state.get_player(payload.player_id) is None:
                return ActionResult.failure(
                    f"Unknown player {payload.player_id}", RejectReason.UNKNOWN_PLAYER
                )
            if payload.player_id != state.current_player.player_id:
                return ActionResult.failure(
                    f"Not {payload.player_id}'s turn", RejectReason.NOT_YOUR_TURN
                )

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.JOIN: self._handle_join,
            ActionType.LEAVE: self._handle_leave,
            ActionType.START_GAME: self._handle_start_game,
            ActionType.PLACE_WORD: self._handle_place_word,
            ActionType.PASS: self._handle_pass,
            ActionType.EXCHANGE: self._handle_exchange,
            ActionType.TIMER_EXPIRED: self._handle_timer_expired,
        }
        return handlers.get(action_type)

    # ------------------------------------------------------------------
    # Lobby
    # ------------------------------------------------------------------

    def _handle_join(self, state: GameState, action: Action) -> ActionResult:
        player_id = action.payload.player_id
        if state.num_players >= MAX_PLAYERS:
            return ActionResult.failure(
                f"Game is full. Maximum {MAX_PLAYERS} players allowed.", RejectReason.GAME_FULL
            )
        if not player_id:
            return ActionResult.failure("Player id is required", RejectReason.UNKNOWN_PLAYER)
        if state.get_player(player_id):
            return ActionResult.failure(
                f"Player {player_id} has already joined", RejectReason.ALREADY_JOINED
            )

        name = (action.payload.player_name or "").strip() or f"Player {state.num_players + 1}"
        state.players.append(PlayerState(player_id=player_id, name=name))

        return ActionResult.success_with_state(state, [
            Effect(EffectType.PLAYER_JOINED, {
                "player_id": player_id,
                "name": name,
                "total_players": state.num_players,
            }),
        ])

    def _handle_leave(self, state: GameState, action: Action) -> ActionResult:
        """Remove a player from the lobby; the next in join order becomes host if the host leaves."""
        player = state.get_player(action.payload.player_id)
        if player is None:
            return ActionResult.failure(
                f"Unknown player {action.payload.player_id}", RejectReason.UNKNOWN_PLAYER
            )
        was_host = player.player_id == state.host_id
        state.players.remove(player)

        logger.info("game=%s %s left the lobby", state.game_id, player.player_id)
        return ActionResult.success_with_state(state, [
            Effect(EffectType.PLAYER_LEFT, {
                "player_id": player.player_id,
                "name": player.name,
                "total_players": state.num_players,
                "host_id": state.host_id,
                "host_changed": was_host,
            }),
        ])

    def _handle_start_game(self, state: GameState, action: Action) -> ActionResult:
        player_id = action.payload.player_id
        if state.get_player(player_id) is None:
            return ActionResult.failure(f"Unknown player {player_id}", RejectReason.UNKNOWN_PLAYER)
        if player_id != state.host_id:
            return ActionResult.failure("Only the host can start the game", RejectReason.NOT_HOST)
        if not MIN_PLAYERS <= state.num_players <= MAX_PLAYERS:
            return ActionResult.failure(
                f"Need {MIN_PLAYERS}-{MAX_PLAYERS} players to start", RejectReason.NOT_ENOUGH_PLAYERS
            )

        state.random_seed = action.payload.seed
        state.supply = LetterSupply.standard(action.payload.seed)
        state.turn_timer_seconds = max(0, int(action.payload.turn_timer_seconds or 0))
        state.phase = GamePhase.IN_PROGRESS
        state.current_player_idx = 0
        state.turn_number += 1

        effects = []
        for player in state.players:
            player.rack = state.supply.draw(RACK_SIZE)
            effects.append(self._rack_effect(player))

        first = state.current_player
        effects.insert(0, Effect(EffectType.GAME_STARTED, {
            "players": [p.player_id for p in state.players],
            "current_player_id": first.player_id,
            "turn_timer_seconds": state.turn_timer_seconds,
            "supply_count": len(state.supply),
        }))
        effects.append(self._turn_effect(state))

        logger.info(
            "game=%s started with %d players, timer=%ss",
            state.game_id, state.num_players, state.turn_timer_seconds,
        )
        return ActionResult.success_with_state(state, effects)

    # ------------------------------------------------------------------
    # Turn actions
    # ------------------------------------------------------------------

    def _handle_place_word(self, state: GameState, action: Action) -> ActionResult:
        if self.dictionary is None or not getattr(self.dictionary, "is_loaded", True):
            return ActionResult.failure(
                "Dictionary is not available", RejectReason.DICTIONARY_UNAVAILABLE
            )

        player = state.current_player
        placed = action.payload.tiles

        shape = validate_placement(placed, state.board, state.is_first_word)
        if not shape.valid:
            return ActionResult.failure(shape.message, shape.reason)

        tiles = resolve_rack_tiles(player.rack, placed)
        squares = [(p.row, p.col) for p in placed]
        for (row, col), tile in zip(squares, tiles):
            state.board.place(row, col, tile)

        spans = find_words_formed(state.board, squares)
        if not spans:
            return ActionResult.failure("Placement does not form a word", RejectReason.NO_WORDS_FORMED)

        for span in spans:
            if not self.dictionary.is_valid_word(span.text):
                return ActionResult.failure(
                    f'"{span.text}" is not a valid word',
                    RejectReason.INVALID_WORD,
                    invalid_word=span.text,
                )

        total, scored, bingo = score_turn(spans, state.board, set(squares), len(tiles))
        words = [ScoredWord(text=span.text, score=score) for span, score in scored]
        self._compare_claims(state, action.payload.claimed_words, words)

        player.score += total
        player.rack = remove_tiles(player.rack, tiles)
        refill(player, state.supply)
        player.consecutive_passes = 0
        state.is_first_word = False
        state.consecutive_passes = 0
        state.last_move = {
            "type": "word",
            "player_id": player.player_id,
            "words": [w.to_dict() for w in words],
            "total_score": total,
            "bingo": bingo,
            "squares": [list(sq) for sq in squares],
        }

        effects = [
            Effect(EffectType.WORD_PLAYED, {
                "player_id": player.player_id,
                "name": player.name,
                "words": [w.to_dict() for w in words],
                "total_score": total,
                "bingo": bingo,
                "squares": [list(sq) for sq in squares],
            }),
            Effect(EffectType.SCORE_CHANGED, {"player_id": player.player_id, "score": player.score}),
            self._rack_effect(player),
        ]

        logger.info(
            "game=%s %s played %s for %d%s",
            state.game_id, player.player_id, ",".join(w.text for w in words),
            total, " (bingo)" if bingo else "",
        )

        if state.supply.is_empty and not player.rack:
            self._end_game(state, effects, reason="went_out", out_player=player)
        else:
            self._advance_turn(state, effects)

        result = ActionResult.success_with_state(state, effects)
        result.words = words
        result.total_score = total
        result.bingo = bingo
        return result

    def _handle_pass(self, state: GameState, action: Action) -> ActionResult:
        effects: list[Effect] = []
        self._record_pass(state, state.current_player, effects)
        return ActionResult.success_with_state(state, effects)

    def _handle_exchange(self, state: GameState, action: Action) -> ActionResult:
        player = state.current_player
        outcome = exchange(
            player,
            state.supply,
            action.payload.tile_indices,
            state.free_swap_used_this_turn,
        )

        effects = [
            Effect(EffectType.TILES_EXCHANGED, {
                "player_id": player.player_id,
                "name": player.name,
                "count": len(outcome.returned),
                "is_free_swap": outcome.is_free_swap,
            }),
            self._rack_effect(player),
        ]
        state.last_move = {
            "type": "exchange",
            "player_id": player.player_id,
            "count": len(outcome.returned),
            "is_free_swap": outcome.is_free_swap,
        }

        if outcome.is_free_swap:
            # Same player keeps the turn; one free swap per turn slot
            state.free_swap_used_this_turn = True
            logger.info("game=%s %s used a free swap", state.game_id, player.player_id)
        else:
            state.consecutive_passes += 1
            player.consecutive_passes += 1
            self._finish_scoreless_turn(state, effects)

        result = ActionResult.success_with_state(state, effects)
        result.new_rack = outcome.new_rack
        result.is_free_swap = outcome.is_free_swap
        return result

    def _handle_timer_expired(self, state: GameState, action: Action) -> ActionResult:
        player = state.current_player
        effects = [
            Effect(EffectType.TIMER_EXPIRED, {
                "player_id": player.player_id,
                "name": player.name,
                "turn_number": state.turn_number,
            }),
        ]
        logger.info("game=%s turn %d timed out for %s", state.game_id, state.turn_number, player.player_id)
        self._record_pass(state, player, effects)
        return ActionResult.success_with_state(state, effects)

    # ------------------------------------------------------------------
    # Turn sequencing
    # ------------------------------------------------------------------

    def _record_pass(self, state: GameState, player: PlayerState, effects: list[Effect]):
        state.consecutive_passes += 1
        player.consecutive_passes += 1
        state.last_move = {"type": "pass", "player_id": player.player_id}
        effects.append(Effect(EffectType.PLAYER_PASSED, {
            "player_id": player.player_id,
            "name": player.name,
            "consecutive_passes": state.consecutive_passes,
        }))
        self._finish_scoreless_turn(state, effects)

    def _finish_scoreless_turn(self, state: GameState, effects: list[Effect]):
        if state.consecutive_passes >= 2 * state.num_players:
            self._end_game(state, effects, reason="stalemate")
        else:
            self._advance_turn(state, effects)

    def _advance_turn(self, state: GameState, effects: list[Effect]):
        state.current_player_idx = (state.current_player_idx + 1) % state.num_players
        state.turn_number += 1
        state.free_swap_used_this_turn = False
        effects.append(self._turn_effect(state))

    def _end_game(
        self,
        state: GameState,
        effects: list[Effect],
        reason: str,
        out_player: PlayerState | None = None,
    ):
        """
        Close the game and settle leftover racks.

        Everyone loses the value of the tiles still on their rack; a player
        who went out collects the total of everyone else's.
        """
        penalties = {p.player_id: rack_value(p.rack) for p in state.players}
        for player in state.players:
            player.score = max(0, player.score - penalties[player.player_id])
        if out_player is not None:
            out_player.score += sum(
                v for pid, v in penalties.items() if pid != out_player.player_id
            )

        best = max(p.score for p in state.players)
        state.winner_ids = [p.player_id for p in state.players if p.score == best]
        state.phase = GamePhase.ENDED
        state.end_reason = reason

        effects.append(Effect(EffectType.GAME_OVER, {
            "reason": reason,
            "winner_ids": list(state.winner_ids),
            "final_scores": {p.player_id: p.score for p in state.players},
            "rack_penalties": penalties,
        }))
        logger.info("game=%s ended (%s), winners=%s", state.game_id, reason, state.winner_ids)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _turn_effect(state: GameState) -> Effect:
        current = state.current_player
        return Effect(EffectType.TURN_CHANGED, {
            "current_player_index": state.current_player_idx,
            "current_player_id": current.player_id,
            "name": current.name,
            "turn_number": state.turn_number,
        })

    @staticmethod
    def _rack_effect(player: PlayerState) -> Effect:
        return Effect(
            EffectType.RACK_UPDATED,
            {"player_id": player.player_id, "rack": [t.to_dict() for t in player.rack]},
            private_to=player.player_id,
        )

    @staticmethod
    def _compare_claims(state: GameState, claimed: list[str], words: list[ScoredWord]):
        if not claimed:
            return
        if sorted(w.upper() for w in claimed) != sorted(w.text.upper() for w in words):
            logger.warning(
                "game=%s claimed words %s differ from formed words %s",
                state.game_id, claimed, [w.text for w in words],
            )

    @staticmethod
    def _check_invariants(before: GameState, after: GameState):
        """Every tile accounted for, and no committed square emptied."""
        if after.phase != GamePhase.AWAITING_PLAYERS:
            count = after.tiles_in_play()
            ids = (
                after.supply.tile_ids()
                | {t.tile_id for p in after.players for t in p.rack}
                | {after.board.tile_at(r, c).tile_id for r, c in after.board.occupied_squares()}
            )
            if count != TOTAL_TILES or len(ids) != TOTAL_TILES:
                logger.critical(
                    "game=%s tile conservation broken: %d tiles, %d distinct",
                    after.game_id, count, len(ids),
                )
                raise TileInvariantError(
                    f"Expected {TOTAL_TILES} tiles in play, found {count} ({len(ids)} distinct)"
                )

        for row, col in before.board.occupied_squares():
            if after.board.tile_at(row, col) != before.board.tile_at(row, col):
                logger.critical("game=%s committed square (%d, %d) changed", after.game_id, row, col)
                raise TileInvariantError(f"Committed square ({row}, {col}) changed")


def apply_action(state: GameState, action: Action, dictionary: WordValidator | None = None) -> ActionResult:
    """Convenience function to apply an action."""
    return Reducer(dictionary=dictionary).apply(state, action)
