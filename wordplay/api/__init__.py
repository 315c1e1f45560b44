"""
API Module - Client interface.

Exposes the engine via REST and WebSocket for game clients.
A client:
1. Creates a session
2. Joins players
3. Starts the game (host)
4. Places words, passes or exchanges on its turn
5. Receives effects and state updates over the WebSocket

All state is session-scoped. No persistent user accounts.
"""

from .schemas import (
    CreateSessionRequest,
    JoinRequest,
    StartRequest,
    PlaceWordRequest,
    PlacedTileIn,
    PassRequest,
    ExchangeRequest,
    SessionResponse,
    ActionResponse,
    PlaceWordResponse,
    ExchangeResponse,
    RejectionResponse,
    ErrorResponse,
)
from .service import APIService, SessionNotFoundError
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "JoinRequest",
    "StartRequest",
    "PlaceWordRequest",
    "PlacedTileIn",
    "PassRequest",
    "ExchangeRequest",
    # Responses
    "SessionResponse",
    "ActionResponse",
    "PlaceWordResponse",
    "ExchangeResponse",
    "RejectionResponse",
    "ErrorResponse",
    # Service
    "APIService",
    "SessionNotFoundError",
    "create_app",
]
