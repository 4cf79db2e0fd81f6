"""
Tests for HandSession: input shorthands, tags, board handling and saving.
"""

import pytest
from pokerlog.session import HandSession
from pokerlog.core.card import parse_cards
from pokerlog.core.rules import (
    Position, Phase, ActionType, OpponentType, OpponentStyle, CompletionType,
)
from pokerlog.core.errors import HandNotCompleteError, HeroAlreadySetError


def _limp_to_flop(session):
    session.add_action(Position.SB, ActionType.CALL)
    session.add_action(Position.BB, ActionType.CHECK)


class TestBetSizeShorthand:
    """999 stands for the acting player's all-in."""

    def test_raise_all_in(self, session):
        session.add_action(Position.BTN, ActionType.RAISE, 999)

        btn = session.engine.player(Position.BTN)
        assert btn.stack == 0
        assert session.engine.actions[-1].amount == 100

    def test_raise_all_in_from_blind(self, session):
        """The big blind's shove raises to its whole starting stack."""
        session.add_action(Position.SB, ActionType.CALL)
        assert session.resolve_bet_size(Position.BB, ActionType.RAISE, 999) == 100

    def test_bet_all_in(self, session):
        _limp_to_flop(session)
        session.deal(parse_cards("As Kd 2h"))
        session.add_action(Position.SB, ActionType.BET, 999)

        assert session.engine.actions[-1].amount == 99
        assert session.engine.player(Position.SB).is_all_in

    def test_other_sizes_untouched(self, session):
        assert session.resolve_bet_size(Position.UTG, ActionType.RAISE, 3) == 3
        assert session.resolve_bet_size(Position.UTG, ActionType.CALL, None) is None


class TestOpponentTags:
    """Opponent classification carried onto actions."""

    def test_default_tags(self, session):
        session.add_action(Position.UTG, ActionType.RAISE, 3)

        tags = session.engine.actions[-1].tags
        assert tags.type == OpponentType.REGULAR
        assert tags.style == OpponentStyle.UNKNOWN

    def test_tags_become_default(self, session):
        session.add_action(
            Position.UTG, ActionType.RAISE, 3,
            opponent_type=OpponentType.FISH,
            opponent_style=OpponentStyle.LOOSE_PASSIVE,
        )
        session.add_action(Position.HJ, ActionType.CALL)

        tags = session.engine.actions[-1].tags
        assert tags.type == OpponentType.FISH
        assert tags.style == OpponentStyle.LOOSE_PASSIVE
        assert session.opponent_type == OpponentType.FISH

    def test_hero_actions_untagged(self, session):
        session.add_action(Position.BTN, ActionType.RAISE, 2.5)
        assert session.engine.actions[-1].tags is None
        assert all(a.tags is not None for a in session.engine.actions[:-1])

    def test_auto_folds_untagged(self, session):
        session.add_action(Position.CO, ActionType.RAISE, 2.5)
        assert [a.tags for a in session.engine.actions[:2]] == [None, None]


class TestHero:
    """Hero designation through the session."""

    def test_is_hero_designates(self):
        session = HandSession()
        session.add_action("CO", "raise", 2.5, is_hero=True)

        assert session.hero_position == Position.CO
        assert session.engine.actions[-1].tags is None

    def test_rejected_action_leaves_hero_unset(self):
        """Hero designation and the action succeed or fail together."""
        session = HandSession()
        with pytest.raises(ValueError, match="Nothing to call"):
            session.add_action(Position.BB, ActionType.CALL, is_hero=True)

        assert session.hero_position is None
        assert session.engine.actions == []

        session.add_action(Position.UTG, ActionType.RAISE, 3, is_hero=True)
        assert session.hero_position == Position.UTG

    def test_hero_cannot_move(self, session):
        with pytest.raises(HeroAlreadySetError):
            session.add_action(Position.UTG, ActionType.CALL, is_hero=True)
        assert session.engine.actions == []

    def test_hero_hand(self, session):
        session.set_hero_hand(parse_cards("AhKd"))
        assert [str(c) for c in session.hero_hand] == ["Ah", "Kd"]

        with pytest.raises(ValueError):
            session.set_hero_hand(parse_cards("Ah"))

    def test_hero_hand_overlapping_board(self, session):
        _limp_to_flop(session)
        session.deal(parse_cards("As Kd 2h"))
        with pytest.raises(ValueError, match="overlaps"):
            session.set_hero_hand(parse_cards("As Qc"))


class TestBoard:
    """Board entry confirms the pending street."""

    def test_deal_confirms_waiting_engine(self, session):
        _limp_to_flop(session)
        assert session.engine.waiting_for_board

        session.deal(parse_cards("As Kd 2h"))

        assert not session.engine.waiting_for_board
        assert session.engine.current_actor == Position.SB
        assert session.board.to_list() == ["As", "Kd", "2h"]

    def test_board_before_betting_closes(self, session):
        """Cards entered early are kept until their street comes up."""
        session.deal(parse_cards("As Kd 2h"))

        assert session.engine.phase == Phase.PREFLOP
        assert session.engine.current_actor == Position.UTG

    def test_early_board_still_reaches_completion(self, session):
        """Cards entered ahead of the betting are confirmed once each street closes."""
        session.deal(parse_cards("As Kd 2h"))
        _limp_to_flop(session)

        assert not session.engine.waiting_for_board
        assert session.engine.phase == Phase.FLOP
        assert session.engine.current_actor == Position.SB

        for card in ("3c", "4d"):
            session.add_action(Position.SB, ActionType.CHECK)
            session.deal(parse_cards(card))
            session.add_action(Position.BB, ActionType.CHECK)
            assert not session.engine.waiting_for_board
        session.add_action(Position.SB, ActionType.CHECK)
        session.add_action(Position.BB, ActionType.CHECK)

        assert session.engine.is_complete
        assert session.board.to_list() == ["As", "Kd", "2h", "3c", "4d"]

    def test_board_dealt_after_street_closes(self, session):
        _limp_to_flop(session)
        session.deal(parse_cards("As Kd 2h"))
        for card in ("3c", "4d"):
            session.add_action(Position.SB, ActionType.CHECK)
            session.add_action(Position.BB, ActionType.CHECK)
            assert session.engine.waiting_for_board
            session.deal(parse_cards(card))
        session.add_action(Position.SB, ActionType.CHECK)
        session.add_action(Position.BB, ActionType.CHECK)

        assert session.engine.is_complete

    def test_all_in_run_out_with_full_board(self):
        """A complete board confirms every remaining street of an all-in."""
        session = HandSession(stack_size=10)
        session.deal(parse_cards("As Kd 2h"))
        session.deal(parse_cards("3c"))
        session.deal(parse_cards("4d"))
        session.add_action(Position.SB, ActionType.CALL)
        session.add_action(Position.BB, ActionType.RAISE, 999)
        session.add_action(Position.SB, ActionType.CALL)

        assert session.engine.is_complete
        assert session.engine.get_completion_type() == CompletionType.ALLIN

    def test_board_overlapping_hero_hand(self, session):
        session.set_hero_hand(parse_cards("Ah Kd"))
        _limp_to_flop(session)
        with pytest.raises(ValueError, match="overlaps"):
            session.deal(parse_cards("As Kd 2h"))
        assert session.engine.waiting_for_board

    def test_set_board_same_streets(self, session):
        _limp_to_flop(session)
        session.set_board(session.board)
        assert session.engine.waiting_for_board

    def test_reset(self, session):
        session.add_action(Position.UTG, ActionType.RAISE, 3, opponent_type=OpponentType.FISH)
        session.reset()

        assert session.engine.actions == []
        assert session.board.cards == []
        assert session.opponent_type == OpponentType.REGULAR
        assert session.hero_position == Position.BTN


class TestResultAndSave:
    """Recording the outcome and saving to history."""

    def _finish(self, session):
        session.add_action(Position.BTN, ActionType.RAISE, 2.5)
        session.add_action(Position.SB, ActionType.FOLD)
        session.add_action(Position.BB, ActionType.FOLD)

    def test_record_result(self, session):
        self._finish(session)
        result = session.record_result(Position.BTN, 1.5)

        assert result.completion_type == CompletionType.FOLD
        assert result.hero_won
        assert session.engine.hand_result == result

    def test_record_result_incomplete(self, session):
        with pytest.raises(HandNotCompleteError):
            session.record_result(Position.BTN, 1.5)

    def test_save_requires_result(self, session, store):
        with pytest.raises(HandNotCompleteError):
            session.save(store)
        self._finish(session)
        with pytest.raises(HandNotCompleteError):
            session.save(store)
        assert store.all() == []

    def test_save(self, session, store):
        session.set_hero_hand(parse_cards("Ah Kd"))
        self._finish(session)
        session.record_result(Position.BTN, 1.5)

        saved = session.save(store)

        assert saved.hero_position == "BTN"
        assert saved.hero_hand == ["Ah", "Kd"]
        assert saved.final_pot == 4
        assert saved.actions[0] == "[Preflop] UTG Fold"
        assert saved.actions[-1] == "[Preflop] BB Fold"
        assert store.get(saved.id) == saved


class TestDisplay:
    """Queries used to draw the hand."""

    def test_available_positions_preflop(self, session):
        """Every seat still able to act, starting from the current actor."""
        session.add_action(Position.UTG, ActionType.RAISE, 3)
        assert session.available_positions() == [
            Position.HJ, Position.CO, Position.BTN, Position.SB, Position.BB, Position.UTG,
        ]

        session.add_action(Position.BTN, ActionType.CALL)
        assert session.available_positions() == [
            Position.SB, Position.BB, Position.UTG, Position.BTN,
        ]

    def test_available_positions_postflop(self, session):
        _limp_to_flop(session)
        assert session.available_positions() == []
        session.deal(parse_cards("As Kd 2h"))
        assert session.available_positions() == [Position.SB]

    def test_state(self, session):
        session.add_action(Position.UTG, ActionType.RAISE, 3)
        state = session.state()

        assert state["phase"] == "Preflop"
        assert state["current_actor"] == "HJ"
        assert state["available_actions"] == ["Fold", "Call", "Raise"]
        assert state["raise_label"] == "3-bet"
        assert state["actions"] == ["[Preflop] UTG Raise 3.0bb"]
        assert state["completion_type"] is None
