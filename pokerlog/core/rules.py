"""
Six-max No-Limit Hold'em Table Rules and Constants.

This module defines the fixed table the hand logger works with:

1. Six seats, ordered clockwise: SB, BB, UTG, HJ, CO, BTN. Every turn-order
   decision walks this order.

2. Blinds are fixed at 0.5 / 1.0 and every amount is expressed in big blinds.

3. Preflop action starts at UTG. Postflop action starts at SB, or the next
   seat clockwise from SB that is still in the hand and has chips behind.

4. A player whose stack has dropped below ALL_IN_EPSILON is all-in and takes
   no further part in the betting.
"""

from enum import Enum, IntEnum
from typing import Callable, List, Optional


class Position(IntEnum):
    """Seats at a 6-max table, valued by their clockwise ordinal."""
    SB = 0
    BB = 1
    UTG = 2
    HJ = 3
    CO = 4
    BTN = 5

    @classmethod
    def parse(cls, value: str) -> "Position":
        """Parse a seat name such as 'utg' or 'BTN'."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Invalid position: {value}") from None

    def __str__(self) -> str:
        return self.name


class Phase(Enum):
    """Betting rounds of a hand, in the order they are played."""
    PREFLOP = "Preflop"
    FLOP = "Flop"
    TURN = "Turn"
    RIVER = "River"

    @property
    def next_phase(self) -> Optional["Phase"]:
        """The street that follows this one, or None after the river."""
        order = list(Phase)
        index = order.index(self)
        return order[index + 1] if index + 1 < len(order) else None

    def __str__(self) -> str:
        return self.value


class ActionType(Enum):
    """Actions a player can record."""
    FOLD = "Fold"
    CHECK = "Check"
    CALL = "Call"
    BET = "Bet"
    RAISE = "Raise"

    @classmethod
    def parse(cls, value: str) -> "ActionType":
        """Parse an action name, case-insensitively."""
        for action in cls:
            if action.value.lower() == value.strip().lower():
                return action
        raise ValueError(f"Invalid action: {value}")

    def __str__(self) -> str:
        return self.value


class CompletionType(Enum):
    """How a finished hand ended."""
    SHOWDOWN = "showdown"
    FOLD = "fold"
    ALLIN = "allin"


class OpponentType(Enum):
    """Coarse opponent classification chosen by the user."""
    REGULAR = "Regular"
    FISH = "Fish"


class OpponentStyle(Enum):
    """Opponent playing style chosen by the user."""
    TIGHT_AGGRESSIVE = "Tight-Aggressive"
    LOOSE_AGGRESSIVE = "Loose-Aggressive"
    TIGHT_PASSIVE = "Tight-Passive"
    LOOSE_PASSIVE = "Loose-Passive"
    UNKNOWN = "unknown"


# Table settings
NUM_SEATS = 6
SMALL_BLIND = 0.5
BIG_BLIND = 1.0
DEFAULT_STACK_SIZE = 100.0

PREFLOP_FIRST_TO_ACT = Position.UTG
POSTFLOP_FIRST_TO_ACT = Position.SB

# A stack below this is treated as all-in (tolerates float contribution math)
ALL_IN_EPSILON = 0.01

# Bet sizes the UI sends to mean "all-in"; resolved before reaching the engine
ALL_IN_SHORTHAND = 999

# Cards per street
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1


def next_position(
    position: Position,
    accept: Callable[[Position], bool] = lambda _: True,
) -> Optional[Position]:
    """
    Find the next seat clockwise from `position` satisfying `accept`.

    The walk covers all six seats, so the starting seat itself is the last
    candidate considered.

    Args:
        position: Seat to start from (exclusive)
        accept: Predicate a seat must satisfy

    Returns:
        The first accepted seat, or None if no seat qualifies
    """
    for step in range(1, NUM_SEATS + 1):
        candidate = Position((position + step) % NUM_SEATS)
        if accept(candidate):
            return candidate
    return None


def seats_between(start: Position, end: Position) -> List[Position]:
    """
    List the seats walked clockwise from `start` (inclusive) to `end` (exclusive).

    Returns an empty list when start and end are the same seat.
    """
    seats = []
    seat = start
    while seat != end:
        seats.append(seat)
        seat = Position((seat + 1) % NUM_SEATS)
    return seats


def raise_label(phase: Phase, raise_count: int, current_bet: float) -> str:
    """
    Name the next aggressive action the way players talk about it.

    Preflop: Open, 3-bet, 4-bet, then n-bet.
    Postflop: Bet when nobody has bet yet, Raise over a single bet,
    Re-raise after that.
    """
    if phase == Phase.PREFLOP:
        if raise_count == 0:
            return "Open"
        return f"{raise_count + 2}-bet"

    if current_bet == 0:
        return "Bet"
    if raise_count == 1:
        return "Raise"
    return "Re-raise"
