"""
Pydantic schemas for the saved hand history.
"""

from datetime import datetime, timezone
from typing import Annotated, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


HoleCards = Annotated[List[str], Field(min_length=2, max_length=2)]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


class SavedHand(BaseModel):
    """A finished hand as stored in the history file."""
    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=_now)
    hero_position: Optional[str] = None
    hero_hand: Optional[HoleCards] = None
    villain_type: str = "Regular"
    board: List[str] = Field(default_factory=list, max_length=5)
    actions: List[str] = Field(default_factory=list, description="e.g. '[Preflop] UTG Raise 3.0bb'")
    final_pot: float = Field(ge=0)
    location_memo: Optional[str] = None
    other_memo: Optional[str] = None
    is_favorite: bool = False


class SavedHandUpdate(BaseModel):
    """Editable fields of a saved hand; unset fields are left alone."""
    location_memo: Optional[str] = None
    other_memo: Optional[str] = None
    is_favorite: Optional[bool] = None


class HandHistoryFile(BaseModel):
    """On-disk layout of the history file."""
    version: int = 1
    hands: List[SavedHand] = Field(default_factory=list)
