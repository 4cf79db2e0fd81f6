"""
Player record for a logged hand.

Manages per-seat state including:
- Stack (chips behind, in big blinds)
- Contribution this street and across the hand
- Folded flag and whether the seat has acted this street

Players are immutable: every change returns a new record, so a hand
snapshot can never be altered behind the engine's back.
"""

from __future__ import annotations
from typing import Dict, Any
from dataclasses import dataclass, replace

from pokerlog.core.rules import Position, ALL_IN_EPSILON


@dataclass(frozen=True)
class Player:
    """
    One seat in the hand.

    Attributes:
        position: The seat this player occupies
        stack: Chips behind, in big blinds
        contributed: Amount put in during the current street
        total_contributed: Amount put in across the whole hand
        folded: Whether the player has folded
        is_hero: Whether this seat is the user
        has_acted: Whether the player has acted on the current street
    """
    position: Position
    stack: float
    contributed: float = 0.0
    total_contributed: float = 0.0
    folded: bool = False
    is_hero: bool = False
    has_acted: bool = False

    def commit(self, amount: float) -> Player:
        """
        Move chips from the stack into the pot.

        Args:
            amount: Chips to put in (already capped by the caller)

        Returns:
            The updated player
        """
        return replace(
            self,
            stack=self.stack - amount,
            contributed=self.contributed + amount,
            total_contributed=self.total_contributed + amount,
        )

    def fold(self) -> Player:
        """Fold the hand."""
        return replace(self, folded=True)

    def mark_acted(self) -> Player:
        return replace(self, has_acted=True)

    def make_hero(self) -> Player:
        return replace(self, is_hero=True)

    def reset_for_new_street(self) -> Player:
        """Reset per-street tracking (flop, turn, river)."""
        return replace(self, contributed=0.0, has_acted=False)

    @property
    def has_chips(self) -> bool:
        """Check if the player still has a stack to bet with."""
        return self.stack > ALL_IN_EPSILON

    @property
    def is_all_in(self) -> bool:
        return not self.folded and not self.has_chips

    @property
    def can_act(self) -> bool:
        """Check if player can take an action."""
        return not self.folded and self.has_chips

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "position": self.position.name,
            "stack": self.stack,
            "contributed": self.contributed,
            "total_contributed": self.total_contributed,
            "folded": self.folded,
            "is_hero": self.is_hero,
            "has_acted": self.has_acted,
        }

    def __str__(self) -> str:
        state = "folded" if self.folded else ("all-in" if self.is_all_in else "live")
        hero = "*" if self.is_hero else ""
        return f"{self.position.name}{hero} {self.stack:.1f}bb ({state})"
