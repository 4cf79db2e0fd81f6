"""
Action commands and the immutable action log record.

Each kind of action is its own command type, so an amount is only ever
present where it means something: Fold, Check and Call carry none, Bet
carries the amount bet and Raise the street total the player raises to.
"""

from __future__ import annotations
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field
import time
import uuid

from pokerlog.core.rules import (
    Position, Phase, ActionType, OpponentType, OpponentStyle,
)
from pokerlog.core.errors import InvalidActionError


@dataclass(frozen=True)
class OpponentTags:
    """Descriptive classification the user attached to an opponent's action."""
    type: Optional[OpponentType] = None
    style: Optional[OpponentStyle] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value if self.type else None,
            "style": self.style.value if self.style else None,
        }


@dataclass(frozen=True)
class Fold:
    position: Position
    tags: Optional[OpponentTags] = None
    kind = ActionType.FOLD


@dataclass(frozen=True)
class Check:
    position: Position
    tags: Optional[OpponentTags] = None
    kind = ActionType.CHECK


@dataclass(frozen=True)
class Call:
    position: Position
    tags: Optional[OpponentTags] = None
    kind = ActionType.CALL


@dataclass(frozen=True)
class Bet:
    """Open the betting on a postflop street with `size` big blinds."""
    position: Position
    size: float
    tags: Optional[OpponentTags] = None
    kind = ActionType.BET

    def __post_init__(self):
        if self.size is None or self.size <= 0:
            raise InvalidActionError("Bet size must be positive")


@dataclass(frozen=True)
class Raise:
    """Raise so the player's total for the street becomes `to` big blinds."""
    position: Position
    to: float
    tags: Optional[OpponentTags] = None
    kind = ActionType.RAISE

    def __post_init__(self):
        if self.to is None or self.to <= 0:
            raise InvalidActionError("Raise size must be positive")


Command = Union[Fold, Check, Call, Bet, Raise]


def make_command(
    position: Position,
    action_type: ActionType,
    bet_size: Optional[float] = None,
    tags: Optional[OpponentTags] = None,
) -> Command:
    """
    Build a command from the loose (type, size) pair a UI collects.

    The size is ignored for Fold, Check and Call.

    Raises:
        InvalidActionError: If a Bet or Raise has no positive size.
    """
    if action_type == ActionType.FOLD:
        return Fold(position, tags)
    if action_type == ActionType.CHECK:
        return Check(position, tags)
    if action_type == ActionType.CALL:
        return Call(position, tags)
    if action_type == ActionType.BET:
        return Bet(position, bet_size, tags)
    if action_type == ActionType.RAISE:
        return Raise(position, bet_size, tags)
    raise InvalidActionError(f"Unknown action: {action_type}")


def _new_action_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ActionRecord:
    """
    One entry of the hand's action log.

    Attributes:
        position: Seat that acted
        kind: What the player did
        amount: Chips this action put in (None for Fold and Check)
        pot_after: Pot size right after the action
        phase: Street the action happened on
        tags: Opponent classification supplied by the caller
        id: Unique identifier
        timestamp: Creation time (seconds since the epoch)
    """
    position: Position
    kind: ActionType
    amount: Optional[float]
    pot_after: float
    phase: Phase
    tags: Optional[OpponentTags] = None
    id: str = field(default_factory=_new_action_id)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        passive = self.kind in (ActionType.FOLD, ActionType.CHECK)
        if passive and self.amount is not None:
            raise ValueError(f"{self.kind.value} cannot carry an amount")
        if not passive and self.amount is None:
            raise ValueError(f"{self.kind.value} must carry an amount")

    def describe(self) -> str:
        """Render as '[Preflop] UTG Raise 3.0bb' (no amount for Fold/Check)."""
        text = f"[{self.phase.value}] {self.position.name} {self.kind.value}"
        if self.amount is not None:
            text += f" {self.amount:.1f}bb"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "position": self.position.name,
            "action": self.kind.value,
            "amount": self.amount,
            "pot_after": self.pot_after,
            "phase": self.phase.value,
            "timestamp": self.timestamp,
            "tags": self.tags.to_dict() if self.tags else None,
        }
