"""
Joker catalog for Natatro.

Each joker carries a trigger (when it runs in the scoring pipeline) and a
tagged effect. Effects are applied by `apply_effect`, a pure function from
running totals to new running totals.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .deck import Card, Suit
from .hand_detector import HandType


class JokerTrigger(Enum):
    """Scoring phase a joker runs in."""
    CARD_SCORE = "card_score"   # Once per scoring card
    HAND_EVAL = "hand_eval"     # Once, given the hand type
    PASSIVE = "passive"         # Once, unconditionally


class JokerKind(Enum):
    ADD_CHIPS = "add_chips"
    ADD_MULT = "add_mult"
    MULTIPLY_MULT = "multiply_mult"
    SUIT_MULT = "suit_mult"       # +mult when the scored card has a suit
    HAND_CHIPS = "hand_chips"     # +chips when the hand type matches
    HAND_MULT = "hand_mult"       # +mult when the hand type matches


@dataclass(frozen=True)
class RunningTotals:
    """Chip and mult accumulators; may be fractional until the end."""
    chips: float = 0
    mult: float = 0


@dataclass(frozen=True)
class JokerEffect:
    kind: JokerKind
    amount: float
    suit: Optional[Suit] = None
    hand_types: frozenset = frozenset()


@dataclass(frozen=True)
class Joker:
    """A joker definition. Owned jokers are value copies of these."""
    id: str
    name: str
    desc: str
    cost: int
    trigger: JokerTrigger
    effect: JokerEffect

    def copy(self, **changes) -> "Joker":
        return replace(self, **changes)


PAIR_HANDS = frozenset(ht for ht in HandType if "Pair" in ht.value)

JOKER_DEFINITIONS = [
    Joker("cola", "Nata Cola", "+4 Mult", 4, JokerTrigger.PASSIVE,
          JokerEffect(JokerKind.ADD_MULT, 4)),
    Joker("orange", "Nata Orange", "+15 Chips", 4, JokerTrigger.PASSIVE,
          JokerEffect(JokerKind.ADD_CHIPS, 15)),
    Joker("lime", "Nata Lime", "x1.5 Mult", 6, JokerTrigger.PASSIVE,
          JokerEffect(JokerKind.MULTIPLY_MULT, 1.5)),
    Joker("berry", "Nata Berry", "+3 Mult for each Heart scored", 5, JokerTrigger.CARD_SCORE,
          JokerEffect(JokerKind.SUIT_MULT, 3, suit=Suit.HEARTS)),
    Joker("grape", "Nata Grape", "+2 Mult for each Spade scored", 5, JokerTrigger.CARD_SCORE,
          JokerEffect(JokerKind.SUIT_MULT, 2, suit=Suit.SPADES)),
    Joker("lemon", "Nata Lemon", "+30 Chips if hand contains a Pair", 5, JokerTrigger.HAND_EVAL,
          JokerEffect(JokerKind.HAND_CHIPS, 30, hand_types=PAIR_HANDS)),
    Joker("peach", "Nata Peach", "+8 Mult if hand is a Straight or Flush", 6, JokerTrigger.HAND_EVAL,
          JokerEffect(JokerKind.HAND_MULT, 8,
                      hand_types=frozenset({HandType.STRAIGHT, HandType.FLUSH}))),
]

JOKERS_BY_ID = {j.id: j for j in JOKER_DEFINITIONS}


def get_joker(joker_id: str) -> Optional[Joker]:
    return JOKERS_BY_ID.get(joker_id)


def apply_effect(effect: JokerEffect, totals: RunningTotals, card: Card = None,
                 hand_type: HandType = None) -> RunningTotals:
    """
    Apply one joker effect to the running totals.

    Returns the totals unchanged when the effect's condition is not met, so
    callers can tell whether the joker triggered by comparing the result.
    """
    kind = effect.kind

    if kind == JokerKind.ADD_CHIPS:
        return replace(totals, chips=totals.chips + effect.amount)

    if kind == JokerKind.ADD_MULT:
        return replace(totals, mult=totals.mult + effect.amount)

    if kind == JokerKind.MULTIPLY_MULT:
        return replace(totals, mult=totals.mult * effect.amount)

    if kind == JokerKind.SUIT_MULT:
        if card is not None and card.suit == effect.suit:
            return replace(totals, mult=totals.mult + effect.amount)
        return totals

    if kind == JokerKind.HAND_CHIPS:
        if hand_type in effect.hand_types:
            return replace(totals, chips=totals.chips + effect.amount)
        return totals

    if kind == JokerKind.HAND_MULT:
        if hand_type in effect.hand_types:
            return replace(totals, mult=totals.mult + effect.amount)
        return totals

    return totals
