"""
Hand entry session.

A HandSession sits between a front end and the engine. It owns one
HandEngine per hand attempt and keeps everything the engine does not
track itself:
- board cards, confirming the engine's pending street when cards arrive
- the hero's hole cards and seat
- the opponent classification carried onto opponents' actions
- the "999 means all-in" bet size shorthand
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Union
import logging
import time

from pokerlog.core.card import Board, Card
from pokerlog.core.engine import HandEngine
from pokerlog.core.actions import OpponentTags
from pokerlog.core.result import HandResult, PlayerHandInfo
from pokerlog.core.errors import HandNotCompleteError
from pokerlog.core.rules import (
    Position, Phase, ActionType, OpponentType, OpponentStyle,
    ALL_IN_SHORTHAND, DEFAULT_STACK_SIZE, NUM_SEATS,
)
from pokerlog.history.schemas import SavedHand
from pokerlog.history.storage import HandHistoryStore


logger = logging.getLogger(__name__)


class HandSession:
    """
    One hand being entered by the user.

    Usage:
        session = HandSession(hero_position=Position.BTN)
        session.add_action(Position.BTN, ActionType.RAISE, 2.5, is_hero=True)
        session.add_action(Position.BB, ActionType.CALL, opponent_type=OpponentType.FISH)
        session.set_board(session.board.deal(parse_cards("As Kd 2h")))
    """

    def __init__(
        self,
        hero_position: Optional[Position] = None,
        stack_size: float = DEFAULT_STACK_SIZE,
    ):
        self.stack_size = stack_size
        self._initial_hero = hero_position
        self.reset()

    def reset(self) -> None:
        """Abandon the current hand and start a fresh one."""
        self.engine = HandEngine(self._initial_hero, self.stack_size, on_action=self._log_action)
        self.board = Board()
        self.hero_hand: Optional[List[Card]] = None
        self.opponent_type = OpponentType.REGULAR
        self.opponent_style = OpponentStyle.UNKNOWN
        logger.debug("Session reset")

    @staticmethod
    def _log_action(record) -> None:
        logger.info(record.describe())

    @property
    def hero_position(self) -> Optional[Position]:
        return self.engine.hero_position

    # Input

    def resolve_bet_size(
        self,
        position: Position,
        action_type: ActionType,
        bet_size: Optional[float],
    ) -> Optional[float]:
        """
        Turn the all-in shorthand into the player's real all-in size.

        A Bet is sized as the chips behind; a Raise as the street total the
        player reaches by shoving.
        """
        if bet_size != ALL_IN_SHORTHAND:
            return bet_size
        player = self.engine.player(position)
        if action_type == ActionType.RAISE:
            return player.stack + player.contributed
        if action_type == ActionType.BET:
            return player.stack
        return bet_size

    def add_action(
        self,
        position: Union[Position, str],
        action_type: Union[ActionType, str],
        bet_size: Optional[float] = None,
        opponent_type: Optional[OpponentType] = None,
        opponent_style: Optional[OpponentStyle] = None,
        is_hero: bool = False,
    ) -> None:
        """
        Record an action, with preflop seats skipped as needed.

        Opponent actions carry the given classification, or the last one
        used; a classification given here becomes the new default. Passing
        `is_hero` designates this seat as the hero.
        """
        if not isinstance(position, Position):
            position = Position.parse(position)
        if not isinstance(action_type, ActionType):
            action_type = ActionType.parse(action_type)

        tags = None
        if not is_hero and position != self.engine.hero_position:
            tags = OpponentTags(
                type=opponent_type or self.opponent_type,
                style=opponent_style or self.opponent_style,
            )

        size = self.resolve_bet_size(position, action_type, bet_size)
        self.engine.add_action(position, action_type, size, tags, is_hero=is_hero)

        if opponent_type is not None:
            self.opponent_type = opponent_type
        if opponent_style is not None:
            self.opponent_style = opponent_style
        self._sync_board()

    def set_board(self, board: Board) -> None:
        """
        Replace the board, confirming every pending street it has cards for.

        Cards may be entered before the betting on the previous street has
        closed; they are confirmed as soon as the engine asks for them.
        """
        if self.hero_hand and set(self.hero_hand) & set(board.cards):
            raise ValueError("Board overlaps the hero hand")
        self.board = board
        self._sync_board()

    def _sync_board(self) -> None:
        while self.engine.waiting_for_board and self.board.has_street(self.engine.phase):
            self.engine.confirm_board()

    def deal(self, cards: Sequence[Card]) -> None:
        """Add the next street's cards to the board."""
        self.set_board(self.board.deal(list(cards)))

    def set_hero_hand(self, cards: Sequence[Card]) -> None:
        if len(cards) != 2:
            raise ValueError(f"Hero hand needs 2 cards, got {len(cards)}")
        if set(cards) & set(self.board.cards):
            raise ValueError("Hero hand overlaps the board")
        self.hero_hand = list(cards)

    def record_result(
        self,
        winner: Position,
        pot_awarded: float,
        showdown_hands: Sequence[PlayerHandInfo] = (),
    ) -> HandResult:
        """
        Store the outcome the user entered.

        Raises:
            HandNotCompleteError: If the hand is still being played.
        """
        result = HandResult(
            completion_type=self.engine.get_completion_type(),
            winner=winner,
            hero_won=(winner == self.engine.hero_position),
            pot_awarded=pot_awarded,
            showdown_hands=tuple(showdown_hands),
            timestamp=time.time(),
        )
        self.engine.set_hand_result(result)
        return result

    def save(self, store: HandHistoryStore) -> SavedHand:
        """
        Write the finished hand to the history.

        Raises:
            HandNotCompleteError: If the hand is not finished or has no result.
        """
        if not self.engine.is_complete:
            raise HandNotCompleteError("Cannot save a hand that is still in progress")
        if self.engine.hand_result is None:
            raise HandNotCompleteError("Enter the hand result before saving")
        return store.save_hand(
            hero_position=self.engine.hero_position,
            villain_type=self.opponent_type,
            board=self.board,
            actions=self.engine.actions,
            final_pot=self.engine.pot,
            hero_hand=self.hero_hand,
        )

    # Display

    def available_positions(self) -> List[Position]:
        """
        Seats the user may pick next.

        Preflop that is every live seat from the current actor onwards (later
        picks fold the seats in between); postflop only the current actor.
        """
        actor = self.engine.current_actor
        if actor is None:
            return []
        if self.engine.phase != Phase.PREFLOP:
            return [actor]
        seats = (Position((actor + step) % NUM_SEATS) for step in range(NUM_SEATS))
        return [seat for seat in seats if self.engine.player(seat).can_act]

    def available_actions(self) -> List[ActionType]:
        actor = self.engine.current_actor
        if actor is None:
            return []
        return self.engine.get_available_actions(actor)

    def state(self) -> Dict[str, Any]:
        """Everything a front end needs to draw the hand."""
        engine = self.engine
        details = engine.get_pot_details()
        actor = engine.current_actor
        result = engine.hand_result
        return {
            "hero_position": engine.hero_position.name if engine.hero_position is not None else None,
            "hero_hand": [str(c) for c in self.hero_hand] if self.hero_hand else None,
            "stack_size": self.stack_size,
            "phase": engine.phase.value,
            "pot": engine.pot,
            "pot_details": {
                "starting_pot": details.starting_pot,
                "added_this_street": details.added_this_street,
                "total_pot": details.total_pot,
            },
            "current_actor": actor.name if actor is not None else None,
            "current_bet": engine.current_bet,
            "board": self.board.to_list(),
            "opponent_type": self.opponent_type.value,
            "opponent_style": self.opponent_style.value,
            "actions": [a.describe() for a in engine.actions],
            "is_complete": engine.is_complete,
            "waiting_for_board": engine.waiting_for_board,
            "available_positions": [p.name for p in self.available_positions()],
            "available_actions": [a.value for a in self.available_actions()],
            "raise_label": engine.get_raise_label(),
            "raise_count": engine.raise_count,
            "players": [p.to_dict() for p in engine.players],
            "result": result.to_dict() if result else None,
            "is_ready_for_result": engine.is_ready_for_result(),
            "completion_type": engine.get_completion_type().value if engine.is_complete else None,
        }
