"""
FastAPI Application - REST and WebSocket API for game clients.

Endpoints:
    GET    /health                              Health check
    POST   /api/v1/sessions                     Create game session
    GET    /api/v1/sessions                     List active sessions
    GET    /api/v1/sessions/{id}?viewer=        Get session state
    DELETE /api/v1/sessions/{id}                End session
    POST   /api/v1/sessions/{id}/players        Join a session
    DELETE /api/v1/sessions/{id}/players/{pid} Leave the lobby
    POST   /api/v1/sessions/{id}/start          Start the game (host only)
    POST   /api/v1/sessions/{id}/place          Place a word
    POST   /api/v1/sessions/{id}/pass           Pass the turn
    POST   /api/v1/sessions/{id}/exchange       Exchange rack tiles
    GET    /api/v1/dictionary/validate?word=    Check a word
    WS     /api/v1/sessions/{id}/ws?player_id=  Real-time effects

Accepted actions answer with `accepted: true` and the new session state.
Refused actions answer 400 with `accepted: false` and the engine's reason;
the session is unchanged.

All responses are JSON with explicit Pydantic schemas.
"""

from contextlib import asynccontextmanager
from typing import Annotated, Optional, Union
import json
import logging

from ..config import Settings
from ..engine_core.action import ActionResult, Effect, EffectType

logger = logging.getLogger(__name__)

# Effects after which every connection gets a fresh state_update
STATE_EFFECTS = {
    EffectType.PLAYER_JOINED,
    EffectType.PLAYER_LEFT,
    EffectType.TURN_CHANGED,
    EffectType.TILES_EXCHANGED,
    EffectType.GAME_OVER,
}


def create_app(service=None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request, WebSocket
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService, SessionNotFoundError
    from .schemas import (
        # Request models
        CreateSessionRequest,
        JoinRequest,
        StartRequest,
        PlaceWordRequest,
        PassRequest,
        ExchangeRequest,
        # Response models
        ActionResponse,
        JoinResponse,
        PlaceWordResponse,
        ExchangeResponse,
        RejectionResponse,
        SessionResponse,
        SessionListResponse,
        EndSessionResponse,
        WordCheckResponse,
        ErrorResponse,
        HealthResponse,
        # Nested models
        ScoredWordInfo,
        TileInfo,
        # Enums
        ErrorCode,
    )
    from .. import __version__

    settings = settings or Settings.from_env()
    api_service = service or APIService(
        dictionary=settings.load_dictionary(),
        default_turn_timer=settings.turn_timer_seconds,
        tick_interval=settings.tick_interval,
    )

    @asynccontextmanager
    async def lifespan(app):
        yield
        api_service.session_manager.close_all()

    app = FastAPI(
        title="Wordplay Engine API",
        description="""
Authoritative rules and turn engine for a 2-4 player tile-placement word game.

## Turn flow

1. `POST /sessions` then `POST /sessions/{id}/players` for each player
2. The first player to join starts the game with `POST /start`
   (before that, `DELETE /sessions/{id}/players/{player_id}` leaves the lobby)
3. The current player calls `/place`, `/pass` or `/exchange`
4. With a turn timer configured, an idle turn is passed automatically

## Reject reasons

| Reason | Description |
|------|-------------|
| `NOT_YOUR_TURN` | Actor is not the current player |
| `NO_CENTER_COVERAGE` | First word does not cover the centre square |
| `NOT_IN_LINE` | Tiles are not in one row or column |
| `GAP_IN_PLACEMENT` | Empty square between placed tiles |
| `DISCONNECTED` | Word does not touch existing tiles |
| `INVALID_WORD` | A formed word is not in the dictionary |
| `SUPPLY_TOO_LOW` | Exchange needs 7+ tiles in the supply |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # WebSocket connections: session_id -> [(socket, player_id)]
    ws_connections: dict[str, list[tuple[WebSocket, Optional[str]]]] = {}
    listening: set[str] = set()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def make_rejection(result: ActionResult) -> JSONResponse:
        """400 response for an action the engine refused."""
        reason = result.error_code.value if result.error_code else "REJECTED"
        return JSONResponse(
            status_code=400,
            content=RejectionResponse(
                reason=reason,
                message=result.error or reason,
                invalid_word=result.invalid_word,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found(request: Request, exc: SessionNotFoundError):
        return make_error_response(ErrorCode.SESSION_NOT_FOUND, str(exc), status_code=404)

    # =========================================================================
    # Broadcasting
    # =========================================================================

    async def send_to(ws: WebSocket, message: dict) -> bool:
        try:
            await ws.send_json(message)
            return True
        except Exception as e:
            logger.warning("Dropping WebSocket connection: %s", e)
            return False

    async def broadcast_effect(session_id: str, effect: Effect):
        """Send an effect to every connection of a session, honouring private effects."""
        connections = ws_connections.get(session_id)
        if not connections:
            return
        session = api_service.session_manager.get_session(session_id)
        dead_connections = []
        for ws, player_id in list(connections):
            if effect.private_to is not None and effect.private_to != player_id:
                continue
            if not await send_to(ws, effect.to_message()):
                dead_connections.append((ws, player_id))
                continue
            if session is not None and effect.effect_type in STATE_EFFECTS:
                snapshot = api_service.session_response(session, viewer_id=player_id)
                if not await send_to(ws, {"type": "state_update", "payload": snapshot.model_dump(mode="json")}):
                    dead_connections.append((ws, player_id))
        for conn in dead_connections:
            if conn in connections:
                connections.remove(conn)

    def ensure_listener(session):
        if session.session_id in listening:
            return

        async def listener(effect: Effect):
            await broadcast_effect(session.session_id, effect)

        session.add_listener(listener)
        listening.add(session.session_id)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        request: Optional[CreateSessionRequest] = None,
    ) -> SessionResponse:
        """Create an empty session. Players join next; the first to join hosts."""
        session = api_service.create_session(request or CreateSessionRequest())
        ensure_listener(session)
        return api_service.session_response(session)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session state",
    )
    async def get_session(
        session_id: str,
        viewer: Annotated[Optional[str], Query(description="Player id whose rack to reveal")] = None,
    ) -> SessionResponse:
        """Current state of a session. Only the viewer's own rack is included."""
        session = api_service.get_session(session_id)
        return api_service.session_response(session, viewer_id=viewer)

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id)
        listening.discard(session_id)
        for ws, _player_id in ws_connections.pop(session_id, []):
            await send_to(ws, {"type": "session_ended", "payload": {"session_id": session_id}})
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Action Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/players",
        response_model=JoinResponse,
        responses={400: {"model": RejectionResponse}, 404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Join a session",
    )
    async def join_session(session_id: str, request: JoinRequest) -> Union[JoinResponse, JSONResponse]:
        player_id, result = await api_service.join(session_id, request)
        if not result.success:
            return make_rejection(result)
        session = api_service.get_session(session_id)
        return JoinResponse(
            player_id=player_id,
            session=api_service.session_response(session, viewer_id=player_id),
        )

    @app.delete(
        "/api/v1/sessions/{session_id}/players/{player_id}",
        response_model=ActionResponse,
        responses={400: {"model": RejectionResponse}, 404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Leave the lobby",
    )
    async def leave_session(session_id: str, player_id: str) -> Union[ActionResponse, JSONResponse]:
        """Leave before the game starts. If the host leaves, the next player to have joined hosts."""
        result = await api_service.leave(session_id, player_id)
        if not result.success:
            return make_rejection(result)
        session = api_service.get_session(session_id)
        return ActionResponse(session=api_service.session_response(session))

    @app.post(
        "/api/v1/sessions/{session_id}/start",
        response_model=ActionResponse,
        responses={400: {"model": RejectionResponse}, 404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Start the game",
    )
    async def start_game(session_id: str, request: StartRequest) -> Union[ActionResponse, JSONResponse]:
        """Deal seven tiles to each player and begin with the host."""
        result = await api_service.start(session_id, request)
        if not result.success:
            return make_rejection(result)
        session = api_service.get_session(session_id)
        return ActionResponse(session=api_service.session_response(session, viewer_id=request.player_id))

    @app.post(
        "/api/v1/sessions/{session_id}/place",
        response_model=PlaceWordResponse,
        responses={400: {"model": RejectionResponse}, 404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Place tiles to form words",
    )
    async def place_word(session_id: str, request: PlaceWordRequest) -> Union[PlaceWordResponse, JSONResponse]:
        """
        Commit a placement.

        Either every formed word is valid and the whole move is scored, or
        the move is refused and nothing changes.
        """
        result = await api_service.place_word(session_id, request)
        if not result.success:
            return make_rejection(result)
        session = api_service.get_session(session_id)
        return PlaceWordResponse(
            session=api_service.session_response(session, viewer_id=request.player_id),
            total_score=result.total_score,
            words=[ScoredWordInfo(text=w.text, score=w.score) for w in result.words],
            bingo=result.bingo,
        )

    @app.post(
        "/api/v1/sessions/{session_id}/pass",
        response_model=ActionResponse,
        responses={400: {"model": RejectionResponse}, 404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Pass the turn",
    )
    async def pass_turn(session_id: str, request: PassRequest) -> Union[ActionResponse, JSONResponse]:
        result = await api_service.pass_turn(session_id, request)
        if not result.success:
            return make_rejection(result)
        session = api_service.get_session(session_id)
        return ActionResponse(session=api_service.session_response(session, viewer_id=request.player_id))

    @app.post(
        "/api/v1/sessions/{session_id}/exchange",
        response_model=ExchangeResponse,
        responses={400: {"model": RejectionResponse}, 404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Exchange rack tiles",
    )
    async def exchange_tiles(session_id: str, request: ExchangeRequest) -> Union[ExchangeResponse, JSONResponse]:
        """
        Swap rack tiles with the supply.

        A free swap (three or more of one letter) keeps the turn; any other
        exchange ends it.
        """
        result = await api_service.exchange(session_id, request)
        if not result.success:
            return make_rejection(result)
        session = api_service.get_session(session_id)
        return ExchangeResponse(
            session=api_service.session_response(session, viewer_id=request.player_id),
            new_rack=[TileInfo.model_validate(t) for t in result.new_rack],
            is_free_swap=result.is_free_swap,
        )

    # =========================================================================
    # Dictionary
    # =========================================================================

    @app.get(
        "/api/v1/dictionary/validate",
        response_model=WordCheckResponse,
        tags=["Dictionary"],
        summary="Check a word against the dictionary",
    )
    async def validate_word(word: Annotated[str, Query(min_length=1)]) -> WordCheckResponse:
        return api_service.check_word(word)

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str, player_id: Optional[str] = None):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Session state (viewer's rack only)
        - player_joined, player_left, game_started, word_played, score_changed,
          rack_updated (private), player_passed, tiles_exchanged,
          turn_changed, timer_update, timer_expired, game_over
        - player_disconnected: a player's socket closed mid-game
        - session_ended
        - error

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        session = api_service.session_manager.get_session(session_id)
        if session is None:
            await websocket.send_json({
                "type": "error",
                "payload": {"message": f"Session not found: {session_id}"},
            })
            await websocket.close()
            return

        ensure_listener(session)
        connection = (websocket, player_id)
        ws_connections.setdefault(session_id, []).append(connection)

        try:
            # Send initial state
            snapshot = api_service.session_response(session, viewer_id=player_id)
            await websocket.send_json({"type": "state_update", "payload": snapshot.model_dump(mode="json")})

            # Listen for messages
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                    if message.get("type") == "ping":
                        await websocket.send_json({"type": "pong"})
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })

        except Exception as e:
            logger.debug("WebSocket for session %s closed: %s", session_id, e)
        finally:
            connections = ws_connections.get(session_id, [])
            if connection in connections:
                connections.remove(connection)
            if player_id and session.state.is_in_progress and session.state.get_player(player_id):
                notice = {
                    "type": "player_disconnected",
                    "payload": {"player_id": player_id, "session_id": session_id},
                }
                for ws, _other in list(connections):
                    await send_to(ws, notice)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="wordplay-engine",
            version=__version__,
            dictionary_loaded=api_service.dictionary_loaded,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Wordplay Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
