"""
Hand detection for Natatro.
Classifies played cards into a poker hand and picks the scoring cards.
"""

from collections import Counter
from dataclasses import dataclass, field, replace
from enum import Enum

from .deck import Card, RANK_ORDER


class HandType(Enum):
    """Poker hand types, ordered by base strength."""
    HIGH_CARD = "High Card"
    PAIR = "Pair"
    TWO_PAIR = "Two Pair"
    THREE_OF_A_KIND = "Three of a Kind"
    STRAIGHT = "Straight"
    FLUSH = "Flush"
    FULL_HOUSE = "Full House"
    FOUR_OF_A_KIND = "Four of a Kind"
    STRAIGHT_FLUSH = "Straight Flush"
    ROYAL_FLUSH = "Royal Flush"


# Base chips and mult for each hand type (level 1)
HAND_BASE_VALUES = {
    HandType.HIGH_CARD: (5, 1),
    HandType.PAIR: (10, 2),
    HandType.TWO_PAIR: (20, 2),
    HandType.THREE_OF_A_KIND: (30, 3),
    HandType.STRAIGHT: (30, 4),
    HandType.FLUSH: (35, 4),
    HandType.FULL_HOUSE: (40, 4),
    HandType.FOUR_OF_A_KIND: (60, 7),
    HandType.STRAIGHT_FLUSH: (100, 8),
    HandType.ROYAL_FLUSH: (100, 8),
}

# Chips and mult added per level above 1
LEVEL_UP_CHIPS = 10
LEVEL_UP_MULT = 1

# Every played card scores for these
FULL_SCORING_HANDS = {
    HandType.ROYAL_FLUSH,
    HandType.STRAIGHT_FLUSH,
    HandType.FLUSH,
    HandType.STRAIGHT,
    HandType.FULL_HOUSE,
}

WHEEL_ORDERS = [0, 1, 2, 3, 12]  # 2,3,4,5,A


@dataclass(frozen=True)
class DetectedHand:
    """Result of hand detection."""
    hand_type: HandType
    base_chips: int
    base_mult: int
    scoring_cards: list[Card] = field(default_factory=list)  # Cards that contribute chips
    played_cards: list[Card] = field(default_factory=list)   # All played cards
    level: int = 1


class HandLevels:
    """Per-hand-type levels, raised by planets and the Handy tag."""

    def __init__(self):
        self.levels: dict[HandType, int] = {ht: 1 for ht in HandType}

    def get(self, hand_type: HandType) -> int:
        return self.levels.get(hand_type, 1)

    def level_up(self, hand_type: HandType, amount: int = 1) -> int:
        """Raise a hand's level and return the new level."""
        if amount > 0:
            self.levels[hand_type] = self.get(hand_type) + amount
        return self.get(hand_type)

    def bonus(self, hand_type: HandType) -> tuple[int, int]:
        """Extra (chips, mult) granted by the current level."""
        extra = self.get(hand_type) - 1
        return extra * LEVEL_UP_CHIPS, extra * LEVEL_UP_MULT

    def apply(self, detected: DetectedHand) -> DetectedHand:
        """Fold the level bonus into a detected hand's base values."""
        chips, mult = self.bonus(detected.hand_type)
        return replace(
            detected,
            base_chips=detected.base_chips + chips,
            base_mult=detected.base_mult + mult,
            level=self.get(detected.hand_type),
        )

    def to_dict(self) -> dict[str, int]:
        return {ht.value: lv for ht, lv in self.levels.items()}


class HandEvaluator:
    """Classifies up to 5 played cards."""

    def evaluate(self, cards: list[Card]) -> DetectedHand:
        """Detect the hand formed by the played cards."""
        if not cards:
            return DetectedHand(HandType.HIGH_CARD, 0, 0, [], [])

        ordered = sorted(cards, key=lambda c: c.rank_order)
        orders = [c.rank_order for c in ordered]

        is_flush = len(cards) == 5 and len({c.suit for c in cards}) == 1
        is_straight = False
        if len(cards) == 5:
            consecutive = all(orders[i + 1] == orders[i] + 1 for i in range(4))
            is_straight = consecutive or orders == WHEEL_ORDERS

        rank_counts = Counter(c.rank for c in cards)
        counts = sorted(rank_counts.values(), reverse=True)

        if is_flush and is_straight:
            if orders[0] == RANK_ORDER["10"] and orders[-1] == RANK_ORDER["A"]:
                hand_type = HandType.ROYAL_FLUSH
            else:
                hand_type = HandType.STRAIGHT_FLUSH
        elif counts[0] >= 4:
            hand_type = HandType.FOUR_OF_A_KIND
        elif counts[0] == 3 and len(counts) > 1 and counts[1] == 2:
            hand_type = HandType.FULL_HOUSE
        elif is_flush:
            hand_type = HandType.FLUSH
        elif is_straight:
            hand_type = HandType.STRAIGHT
        elif counts[0] == 3:
            hand_type = HandType.THREE_OF_A_KIND
        elif counts[0] == 2 and len(counts) > 1 and counts[1] == 2:
            hand_type = HandType.TWO_PAIR
        elif counts[0] == 2:
            hand_type = HandType.PAIR
        else:
            hand_type = HandType.HIGH_CARD

        base_chips, base_mult = HAND_BASE_VALUES[hand_type]
        return DetectedHand(
            hand_type=hand_type,
            base_chips=base_chips,
            base_mult=base_mult,
            scoring_cards=self._scoring_cards(hand_type, ordered, rank_counts),
            played_cards=list(cards),
        )

    def _scoring_cards(self, hand_type: HandType, ordered: list[Card],
                       rank_counts: Counter) -> list[Card]:
        """Select which of the sorted cards contribute chips."""
        if hand_type in FULL_SCORING_HANDS:
            return list(ordered)
        if hand_type == HandType.HIGH_CARD:
            return [ordered[-1]]

        needed = {
            HandType.FOUR_OF_A_KIND: 4,
            HandType.THREE_OF_A_KIND: 3,
            HandType.TWO_PAIR: 2,
            HandType.PAIR: 2,
        }[hand_type]
        ranks = {r for r, n in rank_counts.items() if n >= needed}
        return [c for c in ordered if c.rank in ranks]


def evaluate_hand(cards: list[Card], hand_levels: HandLevels = None) -> DetectedHand:
    """Convenience function to classify a hand, optionally applying levels."""
    detected = HandEvaluator().evaluate(cards)
    if hand_levels is not None and cards:
        detected = hand_levels.apply(detected)
    return detected
