"""
Turn timer - one cancellable asyncio task per active turn.

The task ticks once per tick_interval, reports the time left, and when it
reaches zero hands the turn number it was armed for back to the session.
Re-arming always cancels and replaces the previous task, and the reducer
ignores an expiry whose turn number is no longer current, so a superseded
timer can never end a turn.
"""

from __future__ import annotations
from typing import Awaitable, Callable
import asyncio
import logging

from ..engine_core.action import Effect, EffectType

logger = logging.getLogger(__name__)

TickCallback = Callable[[Effect], Awaitable[None]]
ExpireCallback = Callable[[int], Awaitable[object]]


class TurnTimer:
    def __init__(
        self,
        on_tick: TickCallback,
        on_expire: ExpireCallback,
        tick_interval: float = 1.0,
    ):
        self._on_tick = on_tick
        self._on_expire = on_expire
        self.tick_interval = tick_interval
        self._task: asyncio.Task | None = None

        self.turn_number: int | None = None
        self.max_time = 0
        self.time_remaining = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self, turn_number: int, seconds: int, current_player_index: int):
        """Start counting down for a new turn, replacing any running countdown."""
        self.cancel()
        if seconds <= 0:
            return
        self.turn_number = turn_number
        self.max_time = seconds
        self.time_remaining = seconds
        self._task = asyncio.create_task(
            self._run(turn_number, seconds, current_player_index)
        )
        logger.debug("Timer armed for turn %d (%ds)", turn_number, seconds)

    def cancel(self):
        task, self._task = self._task, None
        if task is None or task.done():
            return
        # The expiry callback re-arms from inside the task; it finishes on its own
        if task is asyncio.current_task():
            return
        task.cancel()

    async def _run(self, turn_number: int, seconds: int, current_player_index: int):
        remaining = seconds
        try:
            while remaining > 0:
                await asyncio.sleep(self.tick_interval)
                remaining -= 1
                self.time_remaining = remaining
                await self._on_tick(Effect(EffectType.TIMER_UPDATE, {
                    "time_remaining": remaining,
                    "max_time": seconds,
                    "current_player_index": current_player_index,
                    "turn_number": turn_number,
                }))
            logger.debug("Timer for turn %d reached zero", turn_number)
            await self._on_expire(turn_number)
        except asyncio.CancelledError:
            return
