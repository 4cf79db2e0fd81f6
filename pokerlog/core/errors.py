"""
Exceptions raised when the engine rejects an input.

All of them derive from ValueError so callers can surface any rejection as
a plain input error and re-prompt the user.
"""


class InvalidActionError(ValueError):
    """The action is not legal for this player in the current state."""


class TurnOrderError(InvalidActionError):
    """A postflop action was entered for a seat that is not due to act."""


class WaitingForBoardError(InvalidActionError):
    """Betting is paused until the next street's board cards are confirmed."""


class HandCompleteError(InvalidActionError):
    """The hand is over; no further actions can be recorded."""


class HandNotCompleteError(ValueError):
    """A result was supplied before the hand finished."""


class HeroAlreadySetError(ValueError):
    """The hero seat was already designated for this hand."""
