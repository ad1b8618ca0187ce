"""
Scoring pipeline for Natatro.
Runs a detected hand through the owned jokers to produce the final score.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from .deck import Card
from .hand_detector import DetectedHand
from .jokers import Joker, JokerTrigger, RunningTotals, apply_effect, get_joker


@dataclass(frozen=True)
class BreakdownStep:
    """One observable scoring step, replayed by the presentation layer."""
    source: str           # "card" or "joker"
    label: str
    chips: float          # Running chips after this step
    mult: float           # Running mult after this step
    card_id: Optional[int] = None
    joker_id: Optional[str] = None
    note: str = ""


@dataclass(frozen=True)
class ScoreResult:
    """
    Final score of a hand.

    total = chips × mult, where chips and mult are floored first.
    """
    chips: int
    mult: int
    total: int
    breakdown: list[BreakdownStep] = field(default_factory=list)


class JokerManager:
    """
    Owns the ordered list of jokers and scores hands through them.

    Scoring runs in three phases:
      1. card phase   - each scoring card adds chips, then CARD_SCORE jokers run on it
      2. hand phase   - HAND_EVAL jokers run once with the hand type
      3. passive phase - PASSIVE jokers run once
    """

    def __init__(self, max_jokers: int = 5):
        self.jokers: list[Joker] = []
        self.max_jokers = max_jokers

    def owns(self, joker_id: str) -> bool:
        return any(j.id == joker_id for j in self.jokers)

    def has_room(self) -> bool:
        return len(self.jokers) < self.max_jokers

    def add_joker(self, joker_id: str) -> bool:
        """Add a copy of a catalog joker. Fails when full, unknown, or already owned."""
        if not self.has_room():
            return False
        definition = get_joker(joker_id)
        if definition is None or self.owns(joker_id):
            return False
        self.jokers.append(definition.copy())
        return True

    def _with_trigger(self, trigger: JokerTrigger) -> list[Joker]:
        return [j for j in self.jokers if j.trigger == trigger]

    def calculate_score(self, hand: DetectedHand, verbose: bool = False) -> ScoreResult:
        """
        Score a detected hand.

        Args:
            hand: Detected hand with level bonuses already folded into its base values
            verbose: Record a step-by-step breakdown for animation replay
        """
        totals = RunningTotals(chips=hand.base_chips, mult=hand.base_mult)
        breakdown: list[BreakdownStep] = []

        def record(source: str, label: str, card: Card = None, joker: Joker = None, note: str = ""):
            if verbose:
                breakdown.append(BreakdownStep(
                    source=source,
                    label=label,
                    chips=totals.chips,
                    mult=totals.mult,
                    card_id=card.id if card is not None else None,
                    joker_id=joker.id if joker is not None else None,
                    note=note,
                ))

        # 1. Card phase
        card_jokers = self._with_trigger(JokerTrigger.CARD_SCORE)
        for card in hand.scoring_cards:
            if card.debuffed:
                record("card", str(card), card=card, note="Debuffed")
                continue

            totals = RunningTotals(
                chips=totals.chips + card.value + card.chip_bonus,
                mult=totals.mult + card.mult_bonus,
            )
            record("card", str(card), card=card)

            for joker in card_jokers:
                updated = apply_effect(joker.effect, totals, card=card)
                if updated != totals:
                    totals = updated
                    record("joker", joker.name, card=card, joker=joker)

        # 2. Hand-evaluation phase
        for joker in self._with_trigger(JokerTrigger.HAND_EVAL):
            updated = apply_effect(joker.effect, totals, hand_type=hand.hand_type)
            if updated != totals:
                totals = updated
                record("joker", joker.name, joker=joker)

        # 3. Passive phase
        for joker in self._with_trigger(JokerTrigger.PASSIVE):
            updated = apply_effect(joker.effect, totals)
            if updated != totals:
                totals = updated
                record("joker", joker.name, joker=joker)

        chips = max(0, math.floor(totals.chips))
        mult = max(0, math.floor(totals.mult))
        return ScoreResult(chips=chips, mult=mult, total=chips * mult, breakdown=breakdown)


def calculate_score(hand: DetectedHand, joker_ids: list[str] = None) -> ScoreResult:
    """Convenience function to score a hand with the given jokers."""
    manager = JokerManager()
    for joker_id in joker_ids or []:
        manager.add_joker(joker_id)
    return manager.calculate_score(hand)
