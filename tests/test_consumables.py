from __future__ import annotations

from natatro.engine.consumables import (
    PLANETS, TAROT_EMPRESS, TAROT_FOOL, TAROT_STRENGTH, apply_tarot, get_consumable, rank_up,
)
from natatro.engine.deck import Card, Suit
from natatro.engine.hand_detector import HandType


def test_one_planet_per_hand_type() -> None:
    assert [p.hand_type for p in PLANETS] == list(HandType)
    assert get_consumable("planet_planet_x").hand_type == HandType.ROYAL_FLUSH
    assert all(p.cost == 3 for p in PLANETS)


def test_rank_up_stops_at_ace() -> None:
    king = Card(0, Suit.SPADES, "K")
    assert rank_up(king)
    assert king.rank == "A"
    assert not rank_up(king)


def test_tarots_touch_at_most_two_cards() -> None:
    cards = [Card(i, Suit.HEARTS, "5") for i in range(3)]
    assert apply_tarot(get_consumable(TAROT_EMPRESS), cards)
    assert [c.mult_bonus for c in cards] == [4, 4, 0]

    assert apply_tarot(get_consumable(TAROT_STRENGTH), cards)
    assert [c.rank for c in cards] == ["6", "6", "5"]


def test_fool_and_planets_are_not_card_tarots() -> None:
    cards = [Card(0, Suit.HEARTS, "5")]
    assert not apply_tarot(get_consumable(TAROT_FOOL), cards)
    assert not apply_tarot(PLANETS[0], cards)
    assert not apply_tarot(get_consumable(TAROT_EMPRESS), [])
