"""
Card and Board values for hand logging.

Cards are only recorded, never dealt or evaluated: the user types what they
saw ("As", "Kh", "T♦") and the logger keeps it in a compact, validated form.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple
from enum import IntEnum

from pokerlog.core.rules import Phase, FLOP_CARDS, TURN_CARDS, RIVER_CARDS


class Suit(IntEnum):
    """Card suits."""
    CLUBS = 0     # ♣
    DIAMONDS = 1  # ♦
    HEARTS = 2    # ♥
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks from 2 (lowest) to Ace (highest)."""
    TWO = 0
    THREE = 1
    FOUR = 2
    FIVE = 3
    SIX = 4
    SEVEN = 5
    EIGHT = 6
    NINE = 7
    TEN = 8
    JACK = 9
    QUEEN = 10
    KING = 11
    ACE = 12


SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.CLUBS: "c",
    Suit.DIAMONDS: "d",
    Suit.HEARTS: "h",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}


@dataclass(frozen=True, order=True)
class Card:
    """
    A playing card represented as (rank, suit).

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10h")
      or Card.from_string("A♠")
    """
    rank: Rank
    suit: Suit

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "2c" (rank + suit char)
        - "10h" (two-digit ten)
        - "A♠", "K♥", "T♦", "2♣" (rank + suit symbol)
        """
        s = s.strip()
        if s.startswith("10"):
            s = "T" + s[2:]
        if len(s) != 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_char = s[0].upper()
        suit_part = s[1]

        if rank_char not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_char}")

        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(CHAR_TO_RANK[rank_char], suit)

    def __str__(self) -> str:
        return f"{RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]}"

    @property
    def pretty_str(self) -> str:
        """Pretty string like 'A♠'."""
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse multiple cards from a string.

    Accepts formats:
    - "As Kh Td" (space or comma separated)
    - "AsKhTd" (no separator, 2 chars each)
    - "A♠ K♥ T♦" (with symbols)

    Raises:
        ValueError: On an unreadable card or a card listed twice.
    """
    cards_str = cards_str.replace(",", " ").strip()

    if " " in cards_str:
        cards = [Card.from_string(s) for s in cards_str.split()]
    else:
        cards = []
        i = 0
        while i < len(cards_str):
            if cards_str.startswith("10", i):
                cards.append(Card.from_string(cards_str[i:i + 3]))
                i += 3
            elif i + 1 < len(cards_str) and (
                cards_str[i + 1] in SYMBOL_TO_SUIT
                or cards_str[i + 1].lower() in CHAR_TO_SUIT
            ):
                cards.append(Card.from_string(cards_str[i:i + 2]))
                i += 2
            else:
                raise ValueError(f"Cannot parse card at position {i}: {cards_str[i:]}")

    if len(set(cards)) != len(cards):
        raise ValueError(f"Duplicate card in: {cards_str}")
    return cards


@dataclass(frozen=True)
class Board:
    """
    Community cards entered so far.

    Streets are filled in order: a turn needs a flop, a river needs a turn.
    """
    flop: Optional[Tuple[Card, Card, Card]] = None
    turn: Optional[Card] = None
    river: Optional[Card] = None

    def __post_init__(self):
        if self.flop is not None and len(self.flop) != FLOP_CARDS:
            raise ValueError(f"Flop needs {FLOP_CARDS} cards, got {len(self.flop)}")
        if self.turn is not None and self.flop is None:
            raise ValueError("Cannot set the turn before the flop")
        if self.river is not None and self.turn is None:
            raise ValueError("Cannot set the river before the turn")
        cards = self.cards
        if len(set(cards)) != len(cards):
            raise ValueError("Board contains the same card twice")

    @property
    def cards(self) -> List[Card]:
        """All board cards, flattened in dealing order."""
        cards: List[Card] = list(self.flop or ())
        if self.turn is not None:
            cards.append(self.turn)
        if self.river is not None:
            cards.append(self.river)
        return cards

    @property
    def streets_dealt(self) -> int:
        """Number of streets with cards (0 to 3)."""
        return sum(1 for part in (self.flop, self.turn, self.river) if part is not None)

    @property
    def next_street(self) -> Optional[Phase]:
        """The street whose cards are still missing, or None when complete."""
        if self.flop is None:
            return Phase.FLOP
        if self.turn is None:
            return Phase.TURN
        if self.river is None:
            return Phase.RIVER
        return None

    def has_street(self, phase: Phase) -> bool:
        """Check if the board holds the cards for `phase` (always true preflop)."""
        if phase == Phase.FLOP:
            return self.flop is not None
        if phase == Phase.TURN:
            return self.turn is not None
        if phase == Phase.RIVER:
            return self.river is not None
        return True

    def deal(self, cards: List[Card]) -> Board:
        """
        Return a new board with the next street's cards added.

        Raises:
            ValueError: If the card count does not match the street.
        """
        street = self.next_street
        if street is None:
            raise ValueError("Board is already complete")
        if street == Phase.FLOP:
            if len(cards) != FLOP_CARDS:
                raise ValueError(f"Flop needs {FLOP_CARDS} cards, got {len(cards)}")
            return Board(flop=tuple(cards))
        if street == Phase.TURN:
            if len(cards) != TURN_CARDS:
                raise ValueError(f"Turn needs {TURN_CARDS} card, got {len(cards)}")
            return Board(flop=self.flop, turn=cards[0])
        if len(cards) != RIVER_CARDS:
            raise ValueError(f"River needs {RIVER_CARDS} card, got {len(cards)}")
        return Board(flop=self.flop, turn=self.turn, river=cards[0])

    def to_list(self) -> List[str]:
        """Flatten to strings like ['As', 'Kd', '2h', '3c', '4s']."""
        return [str(card) for card in self.cards]

    def __str__(self) -> str:
        return " ".join(self.to_list()) if self.cards else "-"
