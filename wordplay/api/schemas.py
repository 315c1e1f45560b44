"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- ACTION_REJECTED: The engine refused the action; `reason` says why
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Unexpected server failure
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.action import PlacedTileSpec
from ..engine_core.constants import BOARD_SIZE


# =============================================================================
# Enums
# =============================================================================

class SessionPhase(str, Enum):
    """Game phases as reported to clients."""
    AWAITING_PLAYERS = "awaiting_players"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    ACTION_REJECTED = "ACTION_REJECTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class TileInfo(BaseModel):
    """A tile on a rack or on the board."""
    tile_id: str
    letter: str
    points: int
    is_blank: bool = False
    designated_letter: Optional[str] = None

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """Player information for display. `rack` is only filled for the viewer."""
    player_id: str
    name: str
    score: int = 0
    rack_size: int = 0
    consecutive_passes: int = 0
    rack: Optional[list[TileInfo]] = None


class ScoredWordInfo(BaseModel):
    text: str
    score: int


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a game session."""
    turn_timer_seconds: Optional[int] = Field(
        None, ge=0, le=3600, description="Seconds per turn; 0 disables, omitted uses the server default"
    )
    seed: Optional[int] = Field(None, description="Seed for a reproducible letter supply")


class JoinRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=32, description="Display name")


class StartRequest(BaseModel):
    player_id: str = Field(..., description="Must be the host (first player to join)")


class PlacedTileIn(BaseModel):
    """One tile set down this turn."""
    row: int = Field(..., ge=0, lt=BOARD_SIZE)
    col: int = Field(..., ge=0, lt=BOARD_SIZE)
    letter: Optional[str] = Field(None, description="Rack letter, used when tile_id is omitted")
    tile_id: Optional[str] = None
    is_blank: bool = False
    designated_letter: Optional[str] = Field(None, description="Letter chosen for a blank")

    def to_spec(self) -> PlacedTileSpec:
        return PlacedTileSpec(
            row=self.row,
            col=self.col,
            letter=self.letter,
            tile_id=self.tile_id,
            is_blank=self.is_blank,
            designated_letter=self.designated_letter,
        )


class PlaceWordRequest(BaseModel):
    player_id: str
    tiles: list[PlacedTileIn] = Field(default_factory=list)
    claimed_words: list[str] = Field(
        default_factory=list, description="Words the client thinks it formed (advisory)"
    )


class PassRequest(BaseModel):
    player_id: str


class ExchangeRequest(BaseModel):
    player_id: str
    tile_indices: list[int] = Field(default_factory=list, description="Rack positions to swap")


# =============================================================================
# Response Models
# =============================================================================

class SessionResponse(BaseModel):
    """Full session state as seen by one viewer."""
    session_id: str
    phase: SessionPhase
    players: list[PlayerInfo] = Field(default_factory=list)
    host_id: Optional[str] = Field(None, description="First player in join order; only they can start")
    current_player_index: int = 0
    current_player_id: Optional[str] = None
    board: list[list[Optional[TileInfo]]] = Field(default_factory=list)
    supply_count: int = 0
    supply_breakdown: dict[str, int] = Field(default_factory=dict)
    is_first_word: bool = True
    consecutive_passes: int = 0
    free_swap_used_this_turn: bool = False
    turn_number: int = 0
    turn_timer_seconds: int = 0
    time_remaining: Optional[int] = None
    winner_ids: list[str] = Field(default_factory=list)
    end_reason: Optional[str] = None
    last_move: Optional[dict[str, Any]] = None

    api_version: str = "v1"


class ActionResponse(BaseModel):
    """An accepted action and the state it produced."""
    accepted: bool = True
    session: SessionResponse


class JoinResponse(ActionResponse):
    player_id: str


class PlaceWordResponse(ActionResponse):
    total_score: int
    words: list[ScoredWordInfo] = Field(default_factory=list)
    bingo: bool = False


class ExchangeResponse(ActionResponse):
    new_rack: list[TileInfo] = Field(default_factory=list)
    is_free_swap: bool = False


class RejectionResponse(BaseModel):
    """A refused action. Nothing in the session changed."""
    accepted: bool = False
    reason: str = Field(..., description="Engine reject reason, e.g. NOT_YOUR_TURN")
    message: str
    invalid_word: Optional[str] = None
    error_code: ErrorCode = ErrorCode.ACTION_REJECTED


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class WordCheckResponse(BaseModel):
    word: str
    valid: bool


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    dictionary_loaded: bool = True
