"""
Word list - the dictionary collaborator consumed by the engine.

The engine only ever calls is_valid_word(). Loading and storage of a real
word list is left to whoever builds the WordList; a small built-in set is
used for development and tests.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable, Protocol
import logging

logger = logging.getLogger(__name__)


DEFAULT_WORDS = {
    # Two-letter words
    "AA", "AB", "AD", "AE", "AG", "AH", "AI", "AL", "AM", "AN", "AR", "AS", "AT", "AW", "AX", "AY",
    "BA", "BE", "BI", "BO", "BY",
    "DA", "DE", "DO", "ED", "EF", "EH", "EL", "EM", "EN", "ER", "ES", "ET", "EX",
    "FA", "FE", "GO", "HA", "HE", "HI", "HM", "HO", "ID", "IF", "IN", "IS", "IT",
    "JO", "KA", "KI", "LA", "LI", "LO", "MA", "ME", "MI", "MM", "MO", "MU", "MY",
    "NA", "NE", "NO", "NU", "OD", "OE", "OF", "OH", "OI", "OK", "OM", "ON", "OP", "OR", "OS", "OW", "OX", "OY",
    "PA", "PE", "PI", "QI", "RE", "SH", "SI", "SO", "TA", "TI", "TO",
    "UH", "UM", "UN", "UP", "US", "UT", "WE", "WO", "XI", "XU", "YA", "YE", "YO", "ZA",
    # Three letters
    "ACE", "ACT", "ADD", "AGE", "AIR", "ANT", "ARE", "ART", "ATE", "BAD", "BAT", "BED", "BEE",
    "BIT", "CAB", "CAN", "CAR", "CAT", "COT", "DOG", "EAR", "EAT", "END", "FAN", "HAT", "HOT",
    "ICE", "MAT", "NET", "NOT", "OAT", "RAT", "RED", "SAT", "SEA", "SET", "SIT", "TAB", "TAN",
    "TAR", "TEA", "TEN", "TIE", "TOE", "TON", "ZOO",
    # Longer
    "BEAD", "CART", "DATE", "EAST", "GATE", "RATE", "SEAT", "STAR", "TEAR", "TILE", "WORD",
    "BOARD", "CRATE", "HEART", "PLAY", "GAME", "POINT", "QUIZ", "JAZZ", "TRACE", "CARET",
    "STARE", "TEARS", "HELLO", "WORLD", "PUZZLE", "RETAINS", "STAINER", "RETINAS",
    "SCRABBLE", "RHYTHM",
}


class WordValidator(Protocol):
    """Anything that can judge a word; the engine needs nothing more."""

    def is_valid_word(self, word: str) -> bool: ...


class WordList:
    """Set-backed, case-insensitive word list."""

    def __init__(self, words: Iterable[str] | None = None):
        source = DEFAULT_WORDS if words is None else words
        self._words: set[str] = {w.strip().upper() for w in source if w and w.strip()}

    @classmethod
    def from_file(cls, path: str | Path) -> WordList:
        """Load one word per line; blank lines and '#' comments are skipped."""
        path = Path(path)
        with path.open(encoding="utf-8") as fh:
            words = [
                line.strip()
                for line in fh
                if line.strip() and not line.lstrip().startswith("#")
            ]
        logger.info("Loaded %d words from %s", len(words), path)
        return cls(words)

    @property
    def is_loaded(self) -> bool:
        return bool(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: str) -> bool:
        return self.is_valid_word(word)

    def is_valid_word(self, word: str) -> bool:
        if not word or len(word) < 2:
            return False
        return word.upper() in self._words
