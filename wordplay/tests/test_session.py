"""
Tests for sessions: serialised mutations and the turn timer.

Each test drives its own event loop with asyncio.run().
"""

import asyncio

from ..dictionary import WordList
from ..engine_core.action import EffectType, RejectReason
from ..engine_core.state import GamePhase
from ..session import SessionManager


async def started_session(manager: SessionManager, **kwargs):
    session = manager.create_session(**kwargs)
    await session.join("Alice", player_id="alice")
    await session.join("Bob", player_id="bob")
    result = await session.start("alice")
    assert result.success
    return session


class TestSessionManager:

    def test_create_get_end(self):
        manager = SessionManager(dictionary=WordList())
        session = manager.create_session()

        assert manager.get_session(session.session_id) is session
        assert manager.list_active_sessions() == [session.session_id]
        assert manager.end_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_sessions_are_independent(self):
        async def run():
            manager = SessionManager(dictionary=WordList())
            first = await started_session(manager, seed=1)
            second = await started_session(manager, seed=1)
            await first.pass_turn("alice")
            return first, second

        first, second = asyncio.run(run())

        assert first.state.current_player.player_id == "bob"
        assert second.state.current_player.player_id == "alice"

    def test_join_generates_player_id(self):
        async def run():
            session = SessionManager().create_session()
            return await session.join("Alice")

        player_id, result = asyncio.run(run())

        assert result.success
        assert player_id


class TestSerialisation:

    def test_pass_racing_expiry_advances_once(self):
        async def run():
            manager = SessionManager(dictionary=WordList())
            session = await started_session(manager)
            results = await asyncio.gather(
                session.pass_turn("alice"),
                session.expire_turn(1),
            )
            return session, results

        session, results = asyncio.run(run())

        assert sum(r.success for r in results) == 1
        assert session.state.turn_number == 2
        assert session.state.current_player.player_id == "bob"
        assert session.state.consecutive_passes == 1

    def test_stale_expiry_ignored(self):
        async def run():
            session = await started_session(SessionManager(dictionary=WordList()))
            await session.pass_turn("alice")
            return session, await session.expire_turn(1)

        session, result = asyncio.run(run())

        assert not result.success
        assert result.error_code == RejectReason.STALE_TIMER
        assert session.state.current_player.player_id == "bob"

    def test_listeners_receive_effects_in_order(self):
        seen = []

        async def listener(effect):
            seen.append(effect.effect_type)

        async def run():
            session = SessionManager(dictionary=WordList()).create_session()
            session.add_listener(listener)
            await session.join("Alice", player_id="alice")
            await session.join("Bob", player_id="bob")
            await session.start("alice")
            await session.pass_turn("alice")

        asyncio.run(run())

        assert seen[:2] == [EffectType.PLAYER_JOINED, EffectType.PLAYER_JOINED]
        assert EffectType.GAME_STARTED in seen
        assert seen[-2:] == [EffectType.PLAYER_PASSED, EffectType.TURN_CHANGED]

    def test_rejected_action_publishes_nothing(self):
        seen = []

        async def listener(effect):
            seen.append(effect)

        async def run():
            session = await started_session(SessionManager(dictionary=WordList()))
            session.add_listener(listener)
            return await session.pass_turn("bob")

        result = asyncio.run(run())

        assert result.error_code == RejectReason.NOT_YOUR_TURN
        assert seen == []

    def test_slow_listener_does_not_block_next_action(self):
        seen = []

        async def wait_for_turn(session, turn_number):
            while session.state.turn_number < turn_number:
                await asyncio.sleep(0)

        async def run():
            session = await started_session(SessionManager(dictionary=WordList()))
            gate = asyncio.Event()

            async def slow_listener(effect):
                seen.append(effect.effect_type)
                await gate.wait()

            session.add_listener(slow_listener)
            first = asyncio.create_task(session.pass_turn("alice"))
            await asyncio.wait_for(wait_for_turn(session, 2), timeout=1)
            second = asyncio.create_task(session.pass_turn("bob"))
            await asyncio.wait_for(wait_for_turn(session, 3), timeout=1)

            # Both moves are committed while the first delivery is still stuck
            pending = not first.done() and not second.done()
            gate.set()
            results = await asyncio.gather(first, second)
            return session, pending, results

        session, pending, results = asyncio.run(run())

        assert pending
        assert all(r.success for r in results)
        assert session.state.current_player.player_id == "alice"
        assert seen == [
            EffectType.PLAYER_PASSED, EffectType.TURN_CHANGED,
            EffectType.PLAYER_PASSED, EffectType.TURN_CHANGED,
        ]

    def test_leave_moves_host(self):
        async def run():
            session = SessionManager(dictionary=WordList()).create_session()
            await session.join("Alice", player_id="alice")
            await session.join("Bob", player_id="bob")
            left = await session.leave("alice")
            started = await session.start("bob")
            return session, left, started

        session, left, started = asyncio.run(run())

        assert left.success
        assert started.error_code == RejectReason.NOT_ENOUGH_PLAYERS
        assert session.state.host_id == "bob"
        assert session.snapshot()["host_id"] == "bob"


class TestTurnTimer:

    def test_expiry_fires_once_per_turn(self):
        effects = []
        turns_after_expiry = []

        async def run():
            manager = SessionManager(dictionary=WordList())
            session = manager.create_session(turn_timer_seconds=3, tick_interval=0.01)
            expired = asyncio.Event()

            async def listener(effect):
                effects.append(effect)
                if effect.effect_type == EffectType.TIMER_EXPIRED:
                    turns_after_expiry.append(session.state.turn_number)
                    expired.set()

            session.add_listener(listener)
            await session.join("Alice", player_id="alice")
            await session.join("Bob", player_id="bob")
            await session.start("alice")
            await asyncio.wait_for(expired.wait(), timeout=5)
            manager.end_session(session.session_id)
            return session

        session = asyncio.run(run())

        expiries = [e for e in effects if e.effect_type == EffectType.TIMER_EXPIRED]
        expired_turns = [e.payload["turn_number"] for e in expiries]
        assert expired_turns[0] == 1
        assert expiries[0].payload["player_id"] == "alice"
        assert len(expired_turns) == len(set(expired_turns))
        assert turns_after_expiry[0] == 2

        ticks = [e.payload for e in effects if e.effect_type == EffectType.TIMER_UPDATE]
        assert [t["time_remaining"] for t in ticks[:3]] == [2, 1, 0]
        assert ticks[0]["max_time"] == 3
        assert ticks[0]["current_player_index"] == 0
        assert not session.timer.is_running

    def test_turn_change_rearms_timer(self):
        async def run():
            session = await started_session(
                SessionManager(dictionary=WordList()), turn_timer_seconds=30, tick_interval=1.0
            )
            first_turn = session.timer.turn_number
            await session.pass_turn("alice")
            second_turn = session.timer.turn_number
            running = session.timer.is_running
            session.close()
            return first_turn, second_turn, running

        first_turn, second_turn, running = asyncio.run(run())

        assert (first_turn, second_turn) == (1, 2)
        assert running

    def test_game_end_cancels_timer(self):
        async def run():
            session = await started_session(
                SessionManager(dictionary=WordList()), turn_timer_seconds=30
            )
            for pid in ["alice", "bob", "alice", "bob"]:
                await session.pass_turn(pid)
            return session

        session = asyncio.run(run())

        assert session.phase == GamePhase.ENDED
        assert not session.timer.is_running

    def test_no_timer_when_disabled(self):
        async def run():
            session = await started_session(SessionManager(dictionary=WordList()))
            return session.timer.is_running

        assert asyncio.run(run()) is False
