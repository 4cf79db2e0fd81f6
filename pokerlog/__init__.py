"""
pokerlog - Live Poker Hand Logger

A small 6-max No-Limit Hold'em hand logger with:
- Pure Python betting-round state machine (no external poker dependencies)
- Session layer that tracks board cards, hero cards and opponent notes
- Local JSON hand history backed by pydantic models

Usage:
    from pokerlog.core import HandEngine, Position, ActionType
    from pokerlog.session import HandSession
    from pokerlog.history import HandHistoryStore
"""

__version__ = "0.1.0"

from pokerlog.core.engine import HandEngine, HandState
from pokerlog.core.rules import Position, Phase, ActionType
from pokerlog.core.result import HandResult

__all__ = [
    "HandEngine",
    "HandState",
    "Position",
    "Phase",
    "ActionType",
    "HandResult",
    "__version__",
]
