"""
Pytest configuration and shared fixtures for pokerlog tests.
"""

import pytest
from pokerlog.core.engine import HandEngine
from pokerlog.core.rules import Position, ActionType
from pokerlog.history.storage import HandHistoryStore
from pokerlog.session import HandSession


@pytest.fixture
def engine():
    """A fresh hand with hero UTG and 100bb stacks."""
    return HandEngine(hero_position=Position.UTG, stack_size=100)


@pytest.fixture
def short_engine():
    """A fresh hand with hero UTG and 10bb stacks."""
    return HandEngine(hero_position=Position.UTG, stack_size=10)


@pytest.fixture
def flop_engine():
    """
    A hand on the flop, heads-up SB vs BB with 2bb in the pot.

    UTG through BTN fold, SB completes, BB checks, flop confirmed.
    """
    engine = HandEngine(hero_position=Position.BB, stack_size=100)
    engine.add_preflop_action(Position.SB, ActionType.CALL)
    engine.add_preflop_action(Position.BB, ActionType.CHECK)
    engine.confirm_board()
    return engine


@pytest.fixture
def session():
    """A session with hero BTN and 100bb stacks."""
    return HandSession(hero_position=Position.BTN, stack_size=100)


@pytest.fixture
def store(tmp_path):
    """A hand history store in a temporary directory."""
    return HandHistoryStore(tmp_path / "history.json")


def _check_invariants(engine):
    """Chip and pot conservation must hold at every point of a hand."""
    state = engine.get_state()
    for player in state.players:
        assert player.stack + player.total_contributed == pytest.approx(state.stack_size)
        assert player.stack >= -1e-9
    assert state.pot == pytest.approx(sum(p.total_contributed for p in state.players))


@pytest.fixture
def check_invariants():
    """Return a checker for chip and pot conservation."""
    return _check_invariants
