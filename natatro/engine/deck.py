"""
Deck management for Natatro.
Handles card creation, shuffling, drawing, and the player's hand.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Suit(Enum):
    SPADES = "Spades"
    HEARTS = "Hearts"
    CLUBS = "Clubs"
    DIAMONDS = "Diamonds"


RANKS = ["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
RANK_VALUES = {
    "2": 2, "3": 3, "4": 4, "5": 5, "6": 6, "7": 7, "8": 8, "9": 9, "10": 10,
    "J": 10, "Q": 10, "K": 10, "A": 11
}
RANK_ORDER = {rank: i for i, rank in enumerate(RANKS)}

SUIT_SYMBOLS = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
}


@dataclass
class Card:
    id: int
    suit: Suit
    rank: str
    value: int = field(init=False)
    chip_bonus: int = 0
    mult_bonus: int = 0
    debuffed: bool = False
    selected: bool = False

    def __post_init__(self):
        self.value = RANK_VALUES[self.rank]

    @property
    def rank_order(self) -> int:
        """Numeric order for sorting/straights."""
        return RANK_ORDER[self.rank]

    def set_rank(self, rank: str) -> None:
        """Change rank and keep the chip value in step."""
        self.rank = rank
        self.value = RANK_VALUES[rank]

    def __str__(self) -> str:
        base = f"{self.rank}{SUIT_SYMBOLS[self.suit]}"
        mods = []
        if self.chip_bonus:
            mods.append(f"+{self.chip_bonus} Chips")
        if self.mult_bonus:
            mods.append(f"+{self.mult_bonus} Mult")
        if self.debuffed:
            mods.append("Debuffed")
        if mods:
            return f"{base} [{', '.join(mods)}]"
        return base

    def __repr__(self) -> str:
        return self.__str__()


class Deck:
    """The 52 canonical cards, owned by a single game."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.cards: list[Card] = []
        self.reset()

    @staticmethod
    def standard_52() -> list[Card]:
        """Build the 52 cards in suit-major order with ids 0..51."""
        cards = []
        card_id = 0
        for suit in Suit:
            for rank in RANKS:
                cards.append(Card(id=card_id, suit=suit, rank=rank))
                card_id += 1
        return cards

    def reset(self) -> None:
        """Rebuild all 52 cards (dropping any modifiers) and shuffle."""
        self.cards = self.standard_52()
        self.shuffle()

    def shuffle(self) -> None:
        self.rng.shuffle(self.cards)

    def draw(self, n: int = 1) -> list[Card]:
        """Remove and return up to n cards from the top of the deck."""
        if n <= 0:
            return []
        drawn = self.cards[:n]
        del self.cards[:n]
        return drawn

    def cards_remaining(self) -> int:
        return len(self.cards)

    def count_by_suit(self, suit: Suit) -> int:
        return sum(1 for c in self.cards if c.suit == suit)


class Hand:
    """Represents cards currently held in hand."""

    def __init__(self, cards: list[Card] = None):
        self.cards: list[Card] = cards or []

    def add(self, cards: list[Card]) -> None:
        self.cards.extend(cards)

    def find(self, card_id: int) -> Optional[Card]:
        return next((c for c in self.cards if c.id == card_id), None)

    def toggle(self, card_id: int) -> bool:
        """Flip the selection flag of a card. Returns False if it isn't held."""
        card = self.find(card_id)
        if card is None:
            return False
        card.selected = not card.selected
        return True

    def selected(self) -> list[Card]:
        """Selected cards, in hand order."""
        return [c for c in self.cards if c.selected]

    def remove(self, cards: list[Card]) -> list[Card]:
        """Remove and return specified cards from hand."""
        ids = {c.id for c in cards}
        removed = [c for c in self.cards if c.id in ids]
        self.cards = [c for c in self.cards if c.id not in ids]
        return removed

    def remove_selected(self) -> list[Card]:
        return self.remove(self.selected())

    def deselect_all(self) -> None:
        for card in self.cards:
            card.selected = False

    def sort(self, by: str = "rank") -> bool:
        """Sort by rank (high first) or by suit then rank."""
        if by == "rank":
            self.cards.sort(key=lambda c: (c.value, c.rank_order), reverse=True)
        elif by == "suit":
            self.cards.sort(key=lambda c: (c.suit.value, -c.value, -c.rank_order))
        else:
            return False
        return True

    def clear(self) -> list[Card]:
        """Remove and return all cards."""
        cards = self.cards
        self.cards = []
        return cards

    def size(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        return ", ".join(str(c) for c in self.cards)

    def __repr__(self) -> str:
        return f"Hand({self.__str__()})"
