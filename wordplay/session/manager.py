"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. A session is created empty (AWAITING_PLAYERS)
2. Players join; the first to join is the host
3. The host starts the game: tiles are dealt and the turn timer armed
4. Turns are applied one at a time until the supply and a rack run dry,
   or every player passes twice in a row
5. The session is removed from memory when ended

CONCURRENCY:
- Each session has exactly one writer: an asyncio.Lock around every
  mutation (join, leave, start, place, pass, exchange, timer expiry)
- The timer's expiry goes through the same lock, so a timeout and a
  player's move racing for the same turn are applied one after the other;
  whichever comes second sees a new turn number and is rejected
- Effects are queued under the lock and delivered by one publisher task
  after it is released, so listeners see them in commit order and a slow
  listener never delays the next mutation
- Readers take the current GameState reference, which is only ever
  swapped for a fully built new state

PERSISTENCE RULES:
- NO database; sessions live in memory only
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable
import asyncio
import logging
import time
import uuid

from ..engine_core.action import Action, ActionResult, Effect, PlacedTileSpec, RejectReason
from ..engine_core.reducer import Reducer
from ..engine_core.state import GamePhase, GameState
from .timer import TurnTimer

logger = logging.getLogger(__name__)

EffectListener = Callable[[Effect], Awaitable[None]]


@dataclass
class Session:
    """
    One game session.

    Contains:
    - The canonical GameState
    - The dictionary used to judge words
    - The turn timer
    - Listeners that receive every effect, in order
    """
    session_id: str
    state: GameState
    dictionary: Any | None = None
    created_at: float = field(default_factory=time.time)

    turn_timer_seconds: int = 0
    tick_interval: float = 1.0
    seed: int | None = None

    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)
    _listeners: list[EffectListener] = field(default_factory=list, init=False, repr=False)
    _outbox: asyncio.Queue = field(default_factory=asyncio.Queue, init=False, repr=False)
    _pump: asyncio.Task | None = field(default=None, init=False, repr=False)
    _timer: TurnTimer = field(init=False, repr=False)

    def __post_init__(self):
        self._timer = TurnTimer(
            on_tick=self._publish_one,
            on_expire=self.expire_turn,
            tick_interval=self.tick_interval,
        )

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def timer(self) -> TurnTimer:
        return self._timer

    def is_active(self) -> bool:
        return self.state.phase != GamePhase.ENDED

    def snapshot(self, viewer_id: str | None = None) -> dict[str, Any]:
        """State as seen by one player (their own rack only)."""
        data = self.state.snapshot(viewer_id=viewer_id)
        data["session_id"] = self.session_id
        data["time_remaining"] = self._timer.time_remaining if self._timer.is_running else None
        return data

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def add_listener(self, listener: EffectListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: EffectListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _publish_one(self, effect: Effect):
        await self._publish([effect])

    async def _publish(self, effects: list[Effect]):
        """Queue effects for delivery and wait until every listener has them."""
        if not effects:
            return
        delivered = self._enqueue(effects)
        await delivered

    def _enqueue(self, effects: list[Effect]) -> asyncio.Future:
        # Queue order is publication order; one pump task delivers it
        if self._pump is None or self._pump.done():
            self._pump = asyncio.create_task(self._run_pump())
        delivered = asyncio.get_running_loop().create_future()
        self._outbox.put_nowait((list(effects), delivered))
        return delivered

    async def _run_pump(self):
        while True:
            effects, delivered = await self._outbox.get()
            try:
                for effect in effects:
                    for listener in list(self._listeners):
                        await listener(effect)
            except asyncio.CancelledError:
                delivered.cancel()
                raise
            except Exception as e:
                if not delivered.done():
                    delivered.set_exception(e)
            else:
                if not delivered.done():
                    delivered.set_result(None)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def join(self, name: str, player_id: str | None = None) -> tuple[str, ActionResult]:
        player_id = player_id or uuid.uuid4().hex[:8]
        result = await self._dispatch(Action.join(player_id, name))
        return player_id, result

    async def leave(self, player_id: str) -> ActionResult:
        return await self._dispatch(Action.leave(player_id))

    async def start(self, player_id: str) -> ActionResult:
        return await self._dispatch(
            Action.start_game(player_id, turn_timer_seconds=self.turn_timer_seconds, seed=self.seed)
        )

    async def place_word(
        self,
        player_id: str,
        tiles: list[PlacedTileSpec],
        claimed_words: list[str] | None = None,
    ) -> ActionResult:
        return await self._dispatch(Action.place_word(player_id, tiles, claimed_words))

    async def pass_turn(self, player_id: str) -> ActionResult:
        return await self._dispatch(Action.pass_turn(player_id))

    async def exchange(self, player_id: str, tile_indices: list[int]) -> ActionResult:
        return await self._dispatch(Action.exchange(player_id, tile_indices))

    async def expire_turn(self, turn_number: int) -> ActionResult:
        """Called by the timer when a turn runs out."""
        result = await self._dispatch(Action.timer_expired(turn_number))
        if not result.success and result.error_code == RejectReason.STALE_TIMER:
            logger.debug("session=%s ignored stale expiry for turn %d", self.session_id, turn_number)
        return result

    async def _dispatch(self, action: Action) -> ActionResult:
        async with self._lock:
            result = Reducer(dictionary=self.dictionary).apply(self.state, action)
            if not result.success:
                return result

            self.state = result.new_state
            self._update_timer(result)
            delivered = self._enqueue(result.effects) if result.effects else None

        # Delivery happens outside the lock
        if delivered is not None:
            await delivered
        return result

    def _update_timer(self, result: ActionResult):
        state = self.state
        if state.phase == GamePhase.ENDED:
            self._timer.cancel()
        elif result.turn_changed and state.turn_timer_seconds > 0:
            self._timer.arm(state.turn_number, state.turn_timer_seconds, state.current_player_idx)

    def close(self):
        """Stop the timer and the publisher, and drop listeners."""
        self._timer.cancel()
        if self._pump is not None:
            self._pump.cancel()
            self._pump = None
        while not self._outbox.empty():
            _effects, delivered = self._outbox.get_nowait()
            delivered.cancel()
        self._listeners.clear()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions
    - Track active sessions
    - Clean up ended sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, dictionary: Any | None = None, tick_interval: float = 1.0):
        self.dictionary = dictionary
        self.tick_interval = tick_interval
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        turn_timer_seconds: int = 0,
        dictionary: Any | None = None,
        tick_interval: float | None = None,
        seed: int | None = None,
    ) -> Session:
        """
        Create a new, empty game session.

        Args:
            turn_timer_seconds: Seconds per turn; 0 disables the timer
            dictionary: Word validator (defaults to the manager's)
            tick_interval: Seconds between timer ticks
            seed: Seed for the letter supply, for reproducible games

        Returns:
            New Session waiting for players
        """
        session_id = str(uuid.uuid4())
        session = Session(
            session_id=session_id,
            state=GameState(game_id=session_id),
            dictionary=dictionary if dictionary is not None else self.dictionary,
            turn_timer_seconds=max(0, turn_timer_seconds),
            tick_interval=tick_interval if tick_interval is not None else self.tick_interval,
            seed=seed,
        )
        self._sessions[session_id] = session
        logger.info("session=%s created (timer=%ss)", session_id, session.turn_timer_seconds)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """
        End a session and clean up.

        The timer is cancelled and the session removed from memory.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info("session=%s ended", session_id)
        return True

    def list_sessions(self) -> list[str]:
        return list(self._sessions)

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game has not ended."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def close_all(self):
        for session_id in list(self._sessions):
            self.end_session(session_id)
