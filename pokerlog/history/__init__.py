"""
pokerlog History - Saved hands on local disk.
"""

from pokerlog.history.schemas import SavedHand, SavedHandUpdate
from pokerlog.history.storage import (
    HandHistoryStore, HistoryStoreError, HandNotFoundError,
    format_actions, format_board,
)

__all__ = [
    "SavedHand",
    "SavedHandUpdate",
    "HandHistoryStore",
    "HistoryStoreError",
    "HandNotFoundError",
    "format_actions",
    "format_board",
]
