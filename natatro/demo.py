#!/usr/bin/env python3
"""
Demo script for Natatro.
Shows hand evaluation, joker scoring and seeded auto-played runs.

    python -m natatro.demo --seed 7
    python -m natatro.demo --runs 50 --seed 1
"""

import argparse
import logging
import sys

from .engine.deck import Card, Suit
from .engine.hand_detector import evaluate_hand
from .engine.scoring import calculate_score
from .simulator import Simulator


def _cards(*specs: tuple[str, Suit]) -> list[Card]:
    return [Card(i, suit, rank) for i, (rank, suit) in enumerate(specs)]


def demo_hand_evaluation():
    """Demonstrate hand classification."""
    print("=" * 60)
    print("HAND EVALUATION DEMO")
    print("=" * 60)

    test_hands = [
        _cards(("K", Suit.HEARTS), ("K", Suit.DIAMONDS), ("5", Suit.CLUBS)),
        _cards(("A", Suit.CLUBS), ("2", Suit.HEARTS), ("3", Suit.SPADES),
               ("4", Suit.DIAMONDS), ("5", Suit.CLUBS)),
        _cards(("10", Suit.HEARTS), ("J", Suit.HEARTS), ("Q", Suit.HEARTS),
               ("K", Suit.HEARTS), ("A", Suit.HEARTS)),
        _cards(("Q", Suit.HEARTS), ("Q", Suit.DIAMONDS), ("Q", Suit.CLUBS),
               ("9", Suit.SPADES), ("9", Suit.HEARTS)),
    ]

    for cards in test_hands:
        detected = evaluate_hand(cards)
        print(f"\nCards: {', '.join(str(c) for c in cards)}")
        print(f"  Hand: {detected.hand_type.value}")
        print(f"  Scoring cards: {', '.join(str(c) for c in detected.scoring_cards)}")
        print(f"  Base: {detected.base_chips} chips × {detected.base_mult} mult")


def demo_scoring_with_jokers():
    """Show how jokers change the score of the same hand."""
    print("\n" + "=" * 60)
    print("SCORING WITH JOKERS DEMO")
    print("=" * 60)

    cards = _cards(("9", Suit.HEARTS), ("9", Suit.SPADES), ("4", Suit.CLUBS))
    detected = evaluate_hand(cards)

    for joker_ids in ([], ["cola"], ["berry", "lemon"], ["berry", "lemon", "lime"]):
        result = calculate_score(detected, joker_ids)
        label = ", ".join(joker_ids) if joker_ids else "no jokers"
        print(f"\nPair of 9s with {label}:")
        print(f"  {result.chips} chips × {result.mult} mult = {result.total}")
        for step in result.breakdown:
            print(f"    {step.label}: {step.chips} × {step.mult} {step.note}".rstrip())


def main(argv: list[str] = None) -> int:
    parser = argparse.ArgumentParser(description="Play seeded Natatro runs.")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for the first run")
    parser.add_argument("--runs", type=int, default=1, help="number of runs to play")
    parser.add_argument("--strategy", default="greedy", help="auto-play strategy name")
    parser.add_argument("--max-ante", type=int, default=8, help="ante to clear for a victory")
    parser.add_argument("--save-log", metavar="DIR", default=None,
                        help="save each run's history as JSON in DIR")
    parser.add_argument("--verbose", action="store_true", help="show engine logging and blind results")
    parser.add_argument("--examples", action="store_true", help="print the scoring examples first")
    args = parser.parse_args(argv)

    if args.runs < 1:
        parser.error("--runs must be at least 1")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    if args.examples:
        demo_hand_evaluation()
        demo_scoring_with_jokers()
        print()

    sim = Simulator(max_ante=args.max_ante, log_dir=args.save_log)
    try:
        if args.runs == 1:
            print(sim.run(seed=args.seed, strategy=args.strategy, verbose=args.verbose))
        else:
            print(sim.run_batch(runs=args.runs, seed=args.seed, strategy=args.strategy,
                                verbose=args.verbose))
    except ValueError as e:
        parser.error(str(e))
    return 0


if __name__ == "__main__":
    sys.exit(main())
