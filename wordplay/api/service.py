"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session calls
2. Manages sessions
3. Formats engine results for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..dictionary import WordList
from ..engine_core.action import ActionResult
from ..session import Session, SessionManager
from .schemas import (
    CreateSessionRequest,
    ExchangeRequest,
    JoinRequest,
    PassRequest,
    PlaceWordRequest,
    SessionResponse,
    StartRequest,
    WordCheckResponse,
)


class SessionNotFoundError(LookupError):
    """No live session with that id."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create a session and seat players
        session = service.create_session(CreateSessionRequest())
        host_id, result = await service.join(session.session_id, JoinRequest(name="Ada"))

        # Play
        result = await service.pass_turn(session.session_id, PassRequest(player_id=host_id))
    """
    dictionary: Any = field(default_factory=WordList)
    default_turn_timer: int = 0
    tick_interval: float = 1.0
    session_manager: SessionManager | None = None

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(
                dictionary=self.dictionary, tick_interval=self.tick_interval
            )

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> Session:
        timer = request.turn_timer_seconds
        if timer is None:
            timer = self.default_turn_timer
        return self.session_manager.create_session(turn_timer_seconds=timer, seed=request.seed)

    def get_session(self, session_id: str) -> Session:
        session = self.session_manager.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def session_response(self, session: Session, viewer_id: str | None = None) -> SessionResponse:
        return SessionResponse.model_validate(session.snapshot(viewer_id=viewer_id))

    # =========================================================================
    # Actions
    # =========================================================================

    async def join(self, session_id: str, request: JoinRequest) -> tuple[str, ActionResult]:
        return await self.get_session(session_id).join(request.name)

    async def leave(self, session_id: str, player_id: str) -> ActionResult:
        return await self.get_session(session_id).leave(player_id)

    async def start(self, session_id: str, request: StartRequest) -> ActionResult:
        return await self.get_session(session_id).start(request.player_id)

    async def place_word(self, session_id: str, request: PlaceWordRequest) -> ActionResult:
        session = self.get_session(session_id)
        return await session.place_word(
            request.player_id,
            [t.to_spec() for t in request.tiles],
            request.claimed_words,
        )

    async def pass_turn(self, session_id: str, request: PassRequest) -> ActionResult:
        return await self.get_session(session_id).pass_turn(request.player_id)

    async def exchange(self, session_id: str, request: ExchangeRequest) -> ActionResult:
        return await self.get_session(session_id).exchange(request.player_id, request.tile_indices)

    # =========================================================================
    # Dictionary
    # =========================================================================

    def check_word(self, word: str) -> WordCheckResponse:
        word = word.strip()
        return WordCheckResponse(word=word.upper(), valid=bool(self.dictionary.is_valid_word(word)))

    @property
    def dictionary_loaded(self) -> bool:
        return bool(getattr(self.dictionary, "is_loaded", True))
