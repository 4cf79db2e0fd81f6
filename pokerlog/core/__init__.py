"""
pokerlog Core - Pure Python Hand Logging Logic

This module contains the betting-round state machine and its value types,
with no storage or I/O dependencies.
"""

from pokerlog.core.card import Card, Board, parse_cards
from pokerlog.core.player import Player
from pokerlog.core.actions import (
    ActionRecord, OpponentTags, Fold, Check, Call, Bet, Raise, make_command,
)
from pokerlog.core.result import HandResult, PlayerHandInfo
from pokerlog.core.engine import HandEngine, HandState, PotDetails, apply_action, new_hand
from pokerlog.core.rules import (
    Position, Phase, ActionType, CompletionType, OpponentType, OpponentStyle,
)
from pokerlog.core.errors import (
    InvalidActionError, TurnOrderError, WaitingForBoardError,
    HandCompleteError, HandNotCompleteError, HeroAlreadySetError,
)

__all__ = [
    "Card",
    "Board",
    "parse_cards",
    "Player",
    "ActionRecord",
    "OpponentTags",
    "Fold",
    "Check",
    "Call",
    "Bet",
    "Raise",
    "make_command",
    "HandResult",
    "PlayerHandInfo",
    "HandEngine",
    "HandState",
    "PotDetails",
    "apply_action",
    "new_hand",
    "Position",
    "Phase",
    "ActionType",
    "CompletionType",
    "OpponentType",
    "OpponentStyle",
    "InvalidActionError",
    "TurnOrderError",
    "WaitingForBoardError",
    "HandCompleteError",
    "HandNotCompleteError",
    "HeroAlreadySetError",
]
