"""
Session Module - Manages in-memory game sessions.

A session represents one game:
- Created empty, then players join
- Holds the canonical game state behind a single lock
- Runs the turn timer
- Destroyed when ended

Sessions are EPHEMERAL: nothing survives a restart.
"""

from .manager import SessionManager, Session
from .timer import TurnTimer

__all__ = [
    "SessionManager",
    "Session",
    "TurnTimer",
]
