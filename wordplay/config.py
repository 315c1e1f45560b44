"""
Runtime settings, read from environment variables.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os


@dataclass
class Settings:
    env: str = "development"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    # Default turn length for new sessions; 0 disables the timer
    turn_timer_seconds: int = 0
    tick_interval: float = 1.0
    wordlist_path: str | None = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            env=os.getenv("WORDPLAY_ENV", "development"),
            allowed_origins=[
                o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()
            ],
            turn_timer_seconds=int(os.getenv("WORDPLAY_TURN_TIMER", "0")),
            tick_interval=float(os.getenv("WORDPLAY_TICK_INTERVAL", "1.0")),
            wordlist_path=os.getenv("WORDPLAY_WORDLIST") or None,
            log_level=os.getenv("WORDPLAY_LOG_LEVEL", "INFO").upper(),
            host=os.getenv("WORDPLAY_HOST", "0.0.0.0"),
            port=int(os.getenv("WORDPLAY_PORT", "8000")),
        )

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    def load_dictionary(self):
        """The configured word list, or the built-in development set."""
        from .dictionary import WordList

        if self.wordlist_path:
            return WordList.from_file(self.wordlist_path)
        return WordList()
