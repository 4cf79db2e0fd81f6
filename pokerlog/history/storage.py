"""
Local hand history storage.

Finished hands are kept newest-first in a single JSON file. The history is
append-only from the recorder's point of view; the user can still delete
hands, mark favorites and edit the free-text memos.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union
import json
import logging

from pydantic import ValidationError

from pokerlog.core.actions import ActionRecord
from pokerlog.core.card import Board, Card
from pokerlog.core.rules import Position, OpponentType
from pokerlog.history.schemas import SavedHand, SavedHandUpdate, HandHistoryFile


logger = logging.getLogger(__name__)


class HistoryStoreError(Exception):
    """The history file could not be read or written."""


class HandNotFoundError(KeyError):
    """No saved hand has the requested id."""


def format_actions(actions: Iterable[ActionRecord]) -> List[str]:
    """Render actions as '[Preflop] UTG Raise 3.0bb', '[Flop] BB Check', ..."""
    return [action.describe() for action in actions]


def format_board(board: Board) -> List[str]:
    """Flatten a board to ['As', 'Kd', '2h', '3c', '4s']."""
    return board.to_list()


class HandHistoryStore:
    """
    JSON-file backed list of saved hands.

    Usage:
        store = HandHistoryStore(Path("~/.pokerlog/hand_history.json").expanduser())
        saved = store.save_hand(Position.BTN, OpponentType.FISH, board, actions, 12.5)
        store.toggle_favorite(saved.id)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> List[SavedHand]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            return HandHistoryFile.model_validate_json(raw).hands
        except (OSError, ValidationError) as e:
            raise HistoryStoreError(f"Failed to load hand history from {self.path}: {e}") from e

    def _write(self, hands: List[SavedHand]) -> None:
        data = HandHistoryFile(hands=hands)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(data.model_dump_json(indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            raise HistoryStoreError(f"Failed to save hand history to {self.path}: {e}") from e

    def all(self) -> List[SavedHand]:
        """Get every saved hand, newest first."""
        return sorted(self._load(), key=lambda h: h.timestamp, reverse=True)

    def get(self, hand_id: str) -> SavedHand:
        for hand in self._load():
            if hand.id == hand_id:
                return hand
        raise HandNotFoundError(hand_id)

    def save_hand(
        self,
        hero_position: Optional[Position],
        villain_type: OpponentType,
        board: Board,
        actions: Sequence[ActionRecord],
        final_pot: float,
        hero_hand: Optional[Sequence[Card]] = None,
    ) -> SavedHand:
        """
        Store a finished hand at the front of the history.

        Returns:
            The saved record, with its generated id and timestamp
        """
        hand = SavedHand(
            hero_position=hero_position.name if hero_position is not None else None,
            hero_hand=[str(c) for c in hero_hand] if hero_hand else None,
            villain_type=villain_type.value,
            board=format_board(board),
            actions=format_actions(actions),
            final_pot=final_pot,
        )
        self._write([hand] + self._load())
        logger.info(f"Saved hand {hand.id} ({len(hand.actions)} actions, pot {final_pot:.1f}bb)")
        return hand

    def delete(self, hand_id: str) -> None:
        hands = self._load()
        remaining = [h for h in hands if h.id != hand_id]
        if len(remaining) == len(hands):
            raise HandNotFoundError(hand_id)
        self._write(remaining)
        logger.info(f"Deleted hand {hand_id}")

    def update(
        self,
        hand_id: str,
        location_memo: Optional[str] = None,
        other_memo: Optional[str] = None,
        is_favorite: Optional[bool] = None,
    ) -> SavedHand:
        """
        Edit the memo fields or favorite flag of a saved hand.

        Arguments left as None keep their stored value.
        """
        changes = SavedHandUpdate(
            location_memo=location_memo,
            other_memo=other_memo,
            is_favorite=is_favorite,
        ).model_dump(exclude_none=True)

        hands = self._load()
        for index, hand in enumerate(hands):
            if hand.id == hand_id:
                hands[index] = hand.model_copy(update=changes)
                self._write(hands)
                return hands[index]
        raise HandNotFoundError(hand_id)

    def toggle_favorite(self, hand_id: str) -> SavedHand:
        return self.update(hand_id, is_favorite=not self.get(hand_id).is_favorite)

    def clear(self) -> None:
        """Delete every saved hand."""
        if self.path.exists():
            self._write([])

    def export_json(self) -> str:
        """Dump the whole history (newest first) as JSON text."""
        return json.dumps(
            [hand.model_dump(mode="json") for hand in self.all()],
            indent=2,
            ensure_ascii=False,
        )
