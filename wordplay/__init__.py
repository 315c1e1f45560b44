"""
Wordplay - Authoritative engine for a networked tile-placement word game

A server-held rules and turn engine for 2-4 players:
- Placement validation and word extraction
- Premium-square scoring with the seven-tile bonus
- Letter supply, racks and tile exchange (including free swaps)
- Turn sequencing with a per-session turn timer
"""

__version__ = "0.1.0"
