"""
Hand result supplied by the user once the engine reports the hand complete.

The engine never computes a winner; it only stores what it is given.
"""

from __future__ import annotations
from typing import Optional, Tuple, Dict, Any
from dataclasses import dataclass, field
import time

from pokerlog.core.rules import Position, CompletionType
from pokerlog.core.card import Card


@dataclass(frozen=True)
class PlayerHandInfo:
    """What one player showed (or didn't) at the end of the hand."""
    position: Position
    hand: Optional[Tuple[Card, Card]] = None
    mucked: bool = False
    is_winner: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position.name,
            "hand": [str(c) for c in self.hand] if self.hand else None,
            "mucked": self.mucked,
            "is_winner": self.is_winner,
        }


@dataclass(frozen=True)
class HandResult:
    """
    Outcome of a finished hand.

    Attributes:
        completion_type: How the hand ended
        winner: Winning seat (the main winner when the pot was split)
        hero_won: Whether the hero won
        pot_awarded: Net big blinds won (positive) or lost (negative) by the hero
        showdown_hands: Hands revealed, mucked or folded at showdown
        timestamp: When the result was entered
    """
    completion_type: CompletionType
    winner: Position
    hero_won: bool
    pot_awarded: float
    showdown_hands: Tuple[PlayerHandInfo, ...] = ()
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "completion_type": self.completion_type.value,
            "winner": self.winner.name,
            "hero_won": self.hero_won,
            "pot_awarded": self.pot_awarded,
            "showdown_hands": [h.to_dict() for h in self.showdown_hands],
            "timestamp": self.timestamp,
        }
