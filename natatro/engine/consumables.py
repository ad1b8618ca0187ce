"""
Consumable cards for Natatro.
Planets level up a hand type; tarots transform selected cards.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .deck import Card, RANKS, RANK_ORDER
from .hand_detector import HandType


class ConsumableType(Enum):
    TAROT = "Tarot"
    PLANET = "Planet"


@dataclass(frozen=True)
class Consumable:
    """A consumable card (Tarot or Planet)."""
    id: str
    name: str
    type: ConsumableType
    desc: str
    cost: int = 3
    hand_type: Optional[HandType] = None  # Planets only

    def copy(self, **changes) -> "Consumable":
        return replace(self, **changes)

    def __str__(self):
        return f"{self.name} ({self.type.value})"


# Planet cards and the hand they level up
PLANET_CARDS = {
    "Pluto": HandType.HIGH_CARD,
    "Mercury": HandType.PAIR,
    "Uranus": HandType.TWO_PAIR,
    "Venus": HandType.THREE_OF_A_KIND,
    "Saturn": HandType.STRAIGHT,
    "Jupiter": HandType.FLUSH,
    "Earth": HandType.FULL_HOUSE,
    "Mars": HandType.FOUR_OF_A_KIND,
    "Neptune": HandType.STRAIGHT_FLUSH,
    "Planet X": HandType.ROYAL_FLUSH,
}

PLANETS = [
    Consumable(
        id="planet_" + name.lower().replace(" ", "_"),
        name=name,
        type=ConsumableType.PLANET,
        desc=f"Level up {hand_type.value}",
        hand_type=hand_type,
    )
    for name, hand_type in PLANET_CARDS.items()
]

TAROT_FOOL = "tarot_fool"
TAROT_MAGICIAN = "tarot_magician"
TAROT_EMPRESS = "tarot_empress"
TAROT_STRENGTH = "tarot_strength"
TAROT_DEATH = "tarot_death"

MAGICIAN_CHIPS = 30
EMPRESS_MULT = 4
MAX_TAROT_TARGETS = 2

TAROTS = [
    Consumable(TAROT_FOOL, "The Fool", ConsumableType.TAROT,
               "Creates the last Tarot or Planet card used"),
    Consumable(TAROT_MAGICIAN, "The Magician", ConsumableType.TAROT,
               f"+{MAGICIAN_CHIPS} Chips on up to {MAX_TAROT_TARGETS} selected cards"),
    Consumable(TAROT_EMPRESS, "The Empress", ConsumableType.TAROT,
               f"+{EMPRESS_MULT} Mult on up to {MAX_TAROT_TARGETS} selected cards"),
    Consumable(TAROT_STRENGTH, "Strength", ConsumableType.TAROT,
               f"Raises rank of up to {MAX_TAROT_TARGETS} selected cards by 1"),
    Consumable(TAROT_DEATH, "Death", ConsumableType.TAROT,
               "Select 2 cards, convert the left card into the right card"),
]

CONSUMABLE_DEFINITIONS = PLANETS + TAROTS
CONSUMABLES_BY_ID = {c.id: c for c in CONSUMABLE_DEFINITIONS}


def get_consumable(consumable_id: str) -> Optional[Consumable]:
    return CONSUMABLES_BY_ID.get(consumable_id)


def rank_up(card: Card) -> bool:
    """Promote a card one rank. Aces stay Aces."""
    current_idx = RANK_ORDER[card.rank]
    if current_idx >= len(RANKS) - 1:
        return False
    card.set_rank(RANKS[current_idx + 1])
    return True


def apply_tarot(consumable: Consumable, selected: list[Card]) -> bool:
    """
    Apply a card-targeting tarot to the selected cards.

    The Fool is not handled here since it acts on slots, not cards.

    Returns:
        False when the selection doesn't suit the tarot (nothing is changed)
    """
    if consumable.type != ConsumableType.TAROT or not selected:
        return False

    targets = selected[:MAX_TAROT_TARGETS]

    if consumable.id == TAROT_STRENGTH:
        for card in targets:
            rank_up(card)
        return True

    if consumable.id == TAROT_EMPRESS:
        for card in targets:
            card.mult_bonus += EMPRESS_MULT
        return True

    if consumable.id == TAROT_MAGICIAN:
        for card in targets:
            card.chip_bonus += MAGICIAN_CHIPS
        return True

    if consumable.id == TAROT_DEATH:
        if len(selected) != 2:
            return False
        left, right = selected
        left.suit = right.suit
        left.set_rank(right.rank)
        left.value = right.value
        left.chip_bonus = right.chip_bonus
        left.mult_bonus = right.mult_bonus
        return True

    return False
