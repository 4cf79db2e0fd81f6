"""
Hand Engine - Betting-Round State Machine.

This module implements the core logic for logging a 6-max No-Limit Hold'em
hand action by action. It handles:
- Blind posting and preflop/postflop turn order
- Player actions (fold, check, call, bet, raise) with all-in capping
- Preflop fast-forward: acting from a later seat folds everyone in between
- Street completion, including the BB option and all-in run-outs
- Pot and contribution bookkeeping

The state is a frozen HandState. Every operation is a plain function that
takes a state and returns a new one (or raises), so a rejected action can
never leave a half-applied hand behind. HandEngine wraps these functions for
callers that prefer holding a single mutable reference.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Tuple, Any, Callable, Union
from dataclasses import dataclass, replace
import logging

from pokerlog.core.player import Player
from pokerlog.core.actions import (
    ActionRecord, Command, OpponentTags, Fold, Check, Call, Bet, Raise,
    make_command,
)
from pokerlog.core.result import HandResult
from pokerlog.core.errors import (
    InvalidActionError, TurnOrderError, WaitingForBoardError,
    HandCompleteError, HandNotCompleteError, HeroAlreadySetError,
)
from pokerlog.core.rules import (
    Position, Phase, ActionType, CompletionType,
    next_position, seats_between, raise_label,
    SMALL_BLIND, BIG_BLIND, DEFAULT_STACK_SIZE,
    PREFLOP_FIRST_TO_ACT, POSTFLOP_FIRST_TO_ACT,
)


logger = logging.getLogger(__name__)

# Contribution comparisons tolerate float rounding from fractional sizes
_CHIP_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Street:
    """Betting state of the street currently being played."""
    phase: Phase
    pot: float
    starting_pot: float
    current_bet: float
    last_aggressor: Optional[Position] = None
    raise_count: int = 0


@dataclass(frozen=True)
class PotDetails:
    """Pot breakdown for display."""
    starting_pot: float
    added_this_street: float
    total_pot: float


@dataclass(frozen=True)
class HandState:
    """
    Immutable snapshot of a hand.

    Attributes:
        players: One Player per seat, indexed by Position
        street: The street being played
        stack_size: Starting stack every seat began with
        hero: The user's seat, if known
        actions: Every recorded action, oldest first
        to_act: Seat due to act next (None once betting is over)
        waiting_for_board: Whether the next street's cards must be confirmed
        result: Outcome entered after the hand finished
    """
    players: Tuple[Player, ...]
    street: Street
    stack_size: float
    hero: Optional[Position] = None
    actions: Tuple[ActionRecord, ...] = ()
    to_act: Optional[Position] = PREFLOP_FIRST_TO_ACT
    waiting_for_board: bool = False
    result: Optional[HandResult] = None

    def player(self, position: Position) -> Player:
        return self.players[position]

    @property
    def phase(self) -> Phase:
        return self.street.phase

    @property
    def pot(self) -> float:
        return self.street.pot

    @property
    def current_bet(self) -> float:
        return self.street.current_bet

    @property
    def live_players(self) -> List[Player]:
        """Players who have not folded."""
        return [p for p in self.players if not p.folded]

    @property
    def actable_players(self) -> List[Player]:
        """Players who have not folded and still have chips behind."""
        return [p for p in self.players if p.can_act]

    @property
    def is_complete(self) -> bool:
        """Check if the hand is over (no more actions or board cards needed)."""
        if len(self.live_players) <= 1:
            return True
        return self.to_act is None and not self.waiting_for_board

    @property
    def current_actor(self) -> Optional[Position]:
        """The seat whose turn it is, or None while waiting or once complete."""
        if self.is_complete or self.waiting_for_board:
            return None
        return self.to_act

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        actor = self.current_actor
        return {
            "phase": self.phase.value,
            "pot": self.pot,
            "current_bet": self.current_bet,
            "current_actor": actor.name if actor is not None else None,
            "hero": self.hero.name if self.hero is not None else None,
            "stack_size": self.stack_size,
            "is_complete": self.is_complete,
            "waiting_for_board": self.waiting_for_board,
            "players": [p.to_dict() for p in self.players],
            "actions": [a.to_dict() for a in self.actions],
            "result": self.result.to_dict() if self.result else None,
        }


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def new_hand(
    hero: Optional[Position] = None,
    stack_size: float = DEFAULT_STACK_SIZE,
) -> HandState:
    """
    Start a hand: six seats with equal stacks, blinds posted, UTG to act.

    Args:
        hero: The user's seat, if known up front
        stack_size: Starting stack for every seat, in big blinds

    Raises:
        ValueError: If the stack cannot cover the big blind.
    """
    if stack_size < BIG_BLIND:
        raise ValueError(f"Stack size must be at least {BIG_BLIND}bb, got {stack_size}")

    players = [
        Player(position=pos, stack=stack_size, is_hero=(pos == hero))
        for pos in Position
    ]
    players[Position.SB] = players[Position.SB].commit(SMALL_BLIND)
    players[Position.BB] = players[Position.BB].commit(BIG_BLIND)

    blinds = SMALL_BLIND + BIG_BLIND
    street = Street(
        phase=Phase.PREFLOP,
        pot=blinds,
        starting_pot=blinds,
        current_bet=BIG_BLIND,
    )

    logger.info(f"New hand: hero={hero.name if hero is not None else None} stack={stack_size}bb")
    return HandState(
        players=tuple(players),
        street=street,
        stack_size=stack_size,
        hero=hero,
        to_act=PREFLOP_FIRST_TO_ACT,
    )


# ---------------------------------------------------------------------------
# Recording actions
# ---------------------------------------------------------------------------

def add_preflop_action(state: HandState, command: Command) -> HandState:
    """
    Record a preflop action, fast-forwarding to the acting seat.

    Every seat that could still act between the current actor (inclusive)
    and the acting seat (exclusive) is folded first, so the user can jump
    straight to the next interesting decision.

    Raises:
        InvalidActionError: If the action is illegal or the hand is past preflop.
    """
    if state.is_complete:
        raise HandCompleteError("The hand is already complete")
    if state.phase != Phase.PREFLOP:
        raise InvalidActionError("Preflop actions are only accepted before the flop")

    _check_can_act(state, command)

    for seat in seats_between(state.to_act, command.position):
        if state.player(seat).can_act:
            state = _record(state, Fold(seat))

    state = _record(state, command)
    return _advance(state, command.position)


def add_postflop_action(state: HandState, command: Command) -> HandState:
    """
    Record a flop, turn or river action for the seat due to act.

    Raises:
        TurnOrderError: If it is not this seat's turn.
        WaitingForBoardError: If the street's cards have not been confirmed.
        InvalidActionError: If the action is otherwise illegal.
    """
    if state.is_complete:
        raise HandCompleteError("The hand is already complete")
    if state.phase == Phase.PREFLOP:
        raise InvalidActionError("Use add_preflop_action for preflop")
    if state.waiting_for_board:
        raise WaitingForBoardError(f"Confirm the {state.phase.value} board before acting")
    if command.position != state.to_act:
        raise TurnOrderError(
            f"It's not {command.position.name}'s turn. "
            f"Current actor: {state.to_act.name if state.to_act is not None else None}"
        )

    _check_can_act(state, command)
    state = _record(state, command)
    return _advance(state, command.position)


def apply_action(state: HandState, command: Command) -> HandState:
    """Record an action with the entry rules of the current street."""
    if state.phase == Phase.PREFLOP:
        return add_preflop_action(state, command)
    return add_postflop_action(state, command)


def _check_can_act(state: HandState, command: Command) -> None:
    """Reject commands from seats that are out of the betting."""
    player = state.player(command.position)
    if player.folded:
        raise InvalidActionError(f"{command.position.name} has already folded")
    if not player.has_chips:
        raise InvalidActionError(f"{command.position.name} is all-in and cannot act")
    if isinstance(command, Fold) and _can_check(state, player):
        raise InvalidActionError("Cannot fold when check is available")


def _can_check(state: HandState, player: Player) -> bool:
    return player.contributed >= state.current_bet - _CHIP_TOLERANCE


def _record(state: HandState, command: Command) -> HandState:
    """
    Validate a command and apply it to the acting player and the street.

    Bet and raise sizes beyond the player's stack are capped (all-in).

    Returns:
        The state with the action appended to the log
    """
    position = command.position
    player = state.player(position)
    street = state.street

    if player.folded:
        raise InvalidActionError(f"{position.name} has already folded")

    amount: Optional[float] = None

    if isinstance(command, Fold):
        player = player.fold()

    elif isinstance(command, Check):
        if not _can_check(state, player):
            raise InvalidActionError("Cannot check when there is a bet to call")

    elif isinstance(command, Call):
        to_call = street.current_bet - player.contributed
        if to_call <= _CHIP_TOLERANCE:
            raise InvalidActionError("Nothing to call, use Check")
        amount = min(to_call, player.stack)
        player = player.commit(amount)

    elif isinstance(command, Bet):
        if street.current_bet > 0:
            raise InvalidActionError("Cannot bet when there is already a bet (use Raise)")
        amount = min(command.size, player.stack)
        player = player.commit(amount)
        street = replace(
            street,
            current_bet=player.contributed,
            last_aggressor=position,
            raise_count=street.raise_count + 1,
        )

    elif isinstance(command, Raise):
        raise_total = min(command.to, player.stack + player.contributed)
        amount = raise_total - player.contributed
        if amount <= _CHIP_TOLERANCE:
            raise InvalidActionError(
                f"Raise to {command.to:g}bb adds nothing over the {player.contributed:g}bb already in"
            )
        is_all_in = amount >= player.stack - _CHIP_TOLERANCE
        if raise_total <= street.current_bet + _CHIP_TOLERANCE and not is_all_in:
            raise InvalidActionError(
                f"Raise to {command.to:g}bb must exceed the current bet of {street.current_bet:g}bb"
            )
        player = player.commit(amount)
        if raise_total > street.current_bet + _CHIP_TOLERANCE:
            street = replace(
                street,
                current_bet=player.contributed,
                last_aggressor=position,
                raise_count=street.raise_count + 1,
            )

    else:
        raise InvalidActionError(f"Unknown action: {command!r}")

    player = player.mark_acted()
    street = replace(street, pot=street.pot + (amount or 0.0))

    record = ActionRecord(
        position=position,
        kind=command.kind,
        amount=amount,
        pot_after=street.pot,
        phase=street.phase,
        tags=command.tags,
    )
    logger.debug(f"Recorded {record.describe()} (pot {street.pot:.1f}bb)")

    players = list(state.players)
    players[position] = player
    return replace(
        state,
        players=tuple(players),
        street=street,
        actions=state.actions + (record,),
    )


# ---------------------------------------------------------------------------
# Turn order and street progression
# ---------------------------------------------------------------------------

def _advance(state: HandState, actor: Position) -> HandState:
    """Hand the turn to the next seat, closing the street when betting is done."""
    if len(state.live_players) <= 1:
        logger.info("Hand complete: everyone else folded")
        return replace(state, to_act=None)

    following = next_position(actor, lambda pos: state.player(pos).can_act)

    if not is_street_complete(state, following):
        if following is None:
            logger.warning("No seat can act on an unfinished street; ending the hand")
            return replace(state, to_act=None)
        return replace(state, to_act=following)

    if state.phase == Phase.RIVER:
        logger.info("Hand complete: river betting closed")
        return replace(state, to_act=None)

    return prepare_next_street(replace(state, waiting_for_board=True))


def is_street_complete(state: HandState, following: Optional[Position]) -> bool:
    """
    Check if the current betting round is over.

    Args:
        state: The hand after the latest action
        following: The seat that would act next, if any

    Returns:
        True when no further betting is possible or needed on this street
    """
    live = state.live_players
    if len(live) <= 1:
        return True

    actable = [p for p in live if p.has_chips]
    if not actable:
        return True

    if not all(p.has_acted for p in actable):
        return False

    # All-in players count as matched
    for player in live:
        if player.contributed < state.current_bet - _CHIP_TOLERANCE and player.has_chips:
            return False

    if state.phase == Phase.PREFLOP and state.street.raise_count == 0:
        big_blind = state.player(Position.BB)
        if big_blind.can_act and not big_blind.has_acted:
            return False

    # Everyone who can act has acted and matched: the action has closed,
    # whether it came back round to the aggressor or nobody is left to act.
    return True


def prepare_next_street(state: HandState) -> HandState:
    """
    Reset per-street tracking and move to the next phase.

    The first actor is SB, or the next seat clockwise from SB that can act.
    When nobody can act the hand keeps waiting for board cards, which still
    have to be confirmed street by street up to the river.
    """
    next_phase = state.phase.next_phase
    if next_phase is None:
        raise InvalidActionError("There is no street after the river")

    players = tuple(p.reset_for_new_street() for p in state.players)
    street = Street(
        phase=next_phase,
        pot=state.pot,
        starting_pot=state.pot,
        current_bet=0.0,
    )
    state = replace(state, players=players, street=street)

    first = _first_postflop_actor(state)
    logger.info(
        f"Waiting for {next_phase.value} board "
        f"(pot {state.pot:.1f}bb, first to act: {first.name if first is not None else None})"
    )
    if first is None:
        return replace(state, to_act=None, waiting_for_board=True)
    return replace(state, to_act=first)


def _first_postflop_actor(state: HandState) -> Optional[Position]:
    if state.player(POSTFLOP_FIRST_TO_ACT).can_act:
        return POSTFLOP_FIRST_TO_ACT
    return next_position(POSTFLOP_FIRST_TO_ACT, lambda pos: state.player(pos).can_act)


def confirm_board(state: HandState) -> HandState:
    """
    Resume play once the caller has supplied the next street's cards.

    If nobody can act (everyone left is all-in), the hand moves straight on
    to waiting for the following street's cards, or finishes after the river.
    Does nothing when the engine is not waiting for a board.
    """
    if not state.waiting_for_board:
        return state

    state = replace(state, waiting_for_board=False)
    if state.actable_players:
        logger.debug(f"{state.phase.value} confirmed, {state.to_act.name} to act")
        return state

    if state.phase == Phase.RIVER:
        logger.info("Hand complete: all-in run-out reached the river")
        return replace(state, to_act=None)

    return prepare_next_street(state)


def force_advance_to_next_street(state: HandState) -> HandState:
    """Confirm the pending board, if any."""
    if state.waiting_for_board:
        return confirm_board(state)
    return state


def designate_hero(state: HandState, position: Position) -> HandState:
    """
    Mark `position` as the user's seat.

    Raises:
        HeroAlreadySetError: If a different seat is already the hero.
    """
    if state.hero == position:
        return state
    if state.hero is not None:
        raise HeroAlreadySetError(
            f"Hero is already {state.hero.name}, cannot change to {position.name}"
        )
    players = list(state.players)
    players[position] = players[position].make_hero()
    return replace(state, players=tuple(players), hero=position)


# ---------------------------------------------------------------------------
# Queries and results
# ---------------------------------------------------------------------------

def available_actions(state: HandState, position: Position) -> List[ActionType]:
    """
    Get the actions a seat may choose from.

    A seat that has matched the bet may check or put in more (Bet on an
    unopened postflop street, Raise otherwise); a seat facing a bet may
    fold, call or raise.
    """
    player = state.player(position)
    if not player.can_act:
        return []

    if _can_check(state, player):
        if state.phase != Phase.PREFLOP and state.current_bet == 0:
            return [ActionType.CHECK, ActionType.BET]
        return [ActionType.CHECK, ActionType.RAISE]

    return [ActionType.FOLD, ActionType.CALL, ActionType.RAISE]


def pot_details(state: HandState) -> PotDetails:
    return PotDetails(
        starting_pot=state.street.starting_pot,
        added_this_street=state.pot - state.street.starting_pot,
        total_pot=state.pot,
    )


def completion_type(state: HandState) -> CompletionType:
    """Classify how the hand ended (or would end from here)."""
    live = state.live_players
    if len(live) == 1:
        return CompletionType.FOLD
    if not any(p.has_chips for p in live):
        return CompletionType.ALLIN
    return CompletionType.SHOWDOWN


def set_hand_result(state: HandState, result: HandResult) -> HandState:
    """
    Attach the user-entered outcome.

    Raises:
        HandNotCompleteError: If the hand is still in progress.
    """
    if not state.is_complete:
        raise HandNotCompleteError("Cannot set result for incomplete hand")
    return replace(state, result=result)


def is_ready_for_result(state: HandState) -> bool:
    """Check if the hand is over and still needs its result entered."""
    return state.is_complete and state.result is None


# ---------------------------------------------------------------------------
# Stateful wrapper
# ---------------------------------------------------------------------------

ActionSink = Callable[[ActionRecord], None]


def _as_position(value: Union[Position, str]) -> Position:
    return value if isinstance(value, Position) else Position.parse(value)


def _as_action_type(value: Union[ActionType, str]) -> ActionType:
    return value if isinstance(value, ActionType) else ActionType.parse(value)


class HandEngine:
    """
    Holds the current HandState and applies operations to it.

    Usage:
        engine = HandEngine(hero_position=Position.BTN, stack_size=100)
        engine.add_preflop_action(Position.BTN, ActionType.RAISE, 2.5)
        engine.add_preflop_action(Position.BB, ActionType.CALL)

        if engine.waiting_for_board:
            engine.confirm_board()  # after the flop cards are entered

    A failed call raises and leaves the held state untouched. Pass
    `on_action` to observe every recorded action, auto-folds included.
    """

    def __init__(
        self,
        hero_position: Optional[Union[Position, str]] = None,
        stack_size: float = DEFAULT_STACK_SIZE,
        on_action: Optional[ActionSink] = None,
    ):
        hero = _as_position(hero_position) if hero_position is not None else None
        self.state = new_hand(hero, stack_size)
        self._on_action = on_action

    def _commit(self, new_state: HandState) -> None:
        recorded = new_state.actions[len(self.state.actions):]
        self.state = new_state
        if self._on_action is not None:
            for record in recorded:
                self._on_action(record)

    def _command(
        self,
        position: Union[Position, str],
        action_type: Union[ActionType, str],
        bet_size: Optional[float],
        tags: Optional[OpponentTags],
    ) -> Command:
        return make_command(_as_position(position), _as_action_type(action_type), bet_size, tags)

    # Recording

    def add_preflop_action(
        self,
        position: Union[Position, str],
        action_type: Union[ActionType, str],
        bet_size: Optional[float] = None,
        tags: Optional[OpponentTags] = None,
    ) -> None:
        """Record a preflop action, auto-folding skipped seats."""
        command = self._command(position, action_type, bet_size, tags)
        self._commit(add_preflop_action(self.state, command))

    def add_postflop_action(
        self,
        position: Union[Position, str],
        action_type: Union[ActionType, str],
        bet_size: Optional[float] = None,
        tags: Optional[OpponentTags] = None,
    ) -> None:
        """Record an action for the seat due to act after the flop."""
        command = self._command(position, action_type, bet_size, tags)
        self._commit(add_postflop_action(self.state, command))

    def add_action(
        self,
        position: Union[Position, str],
        action_type: Union[ActionType, str],
        bet_size: Optional[float] = None,
        tags: Optional[OpponentTags] = None,
        is_hero: bool = False,
    ) -> None:
        """
        Record an action using the current street's entry rules.

        With `is_hero`, the acting seat is designated hero in the same step,
        so a rejected action leaves the hero unset.
        """
        command = self._command(position, action_type, bet_size, tags)
        state = self.state
        if is_hero:
            state = designate_hero(state, command.position)
        self._commit(apply_action(state, command))

    def confirm_board(self) -> None:
        self._commit(confirm_board(self.state))

    def force_advance_to_next_street(self) -> None:
        self._commit(force_advance_to_next_street(self.state))

    def designate_hero(self, position: Union[Position, str]) -> None:
        self._commit(designate_hero(self.state, _as_position(position)))

    def set_hand_result(self, result: HandResult) -> None:
        self._commit(set_hand_result(self.state, result))

    # Queries

    def get_state(self) -> HandState:
        return self.state

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def pot(self) -> float:
        return self.state.pot

    @property
    def current_bet(self) -> float:
        return self.state.current_bet

    @property
    def current_actor(self) -> Optional[Position]:
        return self.state.current_actor

    @property
    def is_complete(self) -> bool:
        return self.state.is_complete

    @property
    def waiting_for_board(self) -> bool:
        return self.state.waiting_for_board

    @property
    def raise_count(self) -> int:
        return self.state.street.raise_count

    @property
    def hero_position(self) -> Optional[Position]:
        return self.state.hero

    @property
    def stack_size(self) -> float:
        return self.state.stack_size

    @property
    def players(self) -> Tuple[Player, ...]:
        return self.state.players

    @property
    def actions(self) -> List[ActionRecord]:
        return list(self.state.actions)

    @property
    def hand_result(self) -> Optional[HandResult]:
        return self.state.result

    def player(self, position: Union[Position, str]) -> Player:
        return self.state.player(_as_position(position))

    def get_available_actions(self, position: Union[Position, str]) -> List[ActionType]:
        return available_actions(self.state, _as_position(position))

    def get_pot_details(self) -> PotDetails:
        return pot_details(self.state)

    def get_raise_label(self) -> str:
        street = self.state.street
        return raise_label(street.phase, street.raise_count, street.current_bet)

    def get_completion_type(self) -> CompletionType:
        return completion_type(self.state)

    def is_ready_for_result(self) -> bool:
        return is_ready_for_result(self.state)

    def export(self) -> Dict[str, Any]:
        """Summarize the hand for export."""
        return {
            "actions": [a.to_dict() for a in self.state.actions],
            "pot": self.state.pot,
            "phase": self.state.phase.value,
            "stack_size": self.state.stack_size,
            "hero_position": self.state.hero.name if self.state.hero is not None else None,
        }
