"""
Game state machine for Natatro.

BalatroGame owns the deck, hand, jokers, consumables and economy of one run and
moves it through BLIND_SELECT -> PLAYING -> SHOP -> BLIND_SELECT, ending in
GAME_OVER when a blind is lost. Invalid operations are rejected by returning
False; nothing here raises for bad input.
"""

import copy
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .blinds import BossBlind, BossEffect, CurrentBlind, get_blind
from .consumables import Consumable, ConsumableType, TAROT_FOOL, apply_tarot
from .deck import Card, Deck, Hand
from .hand_detector import DetectedHand, HandEvaluator, HandLevels, HandType
from .history import RunHistory
from .jokers import Joker
from .scoring import JokerManager, ScoreResult
from .shop import Shop, ShopConfig
from .tags import (
    ECONOMY_TAG_MONEY, SHOP_TAGS, TAG_CHARM, TAG_D6, TAG_DEFINITIONS, TAG_ECONOMY,
    TAG_HANDY, Tag,
)
from .vouchers import interest_cap, voucher_bonus

logger = logging.getLogger(__name__)

MAX_PLAYED_CARDS = 5
HOOK_DISCARDS = 2
INTEREST_STEP = 5  # $1 interest per $5 held


class GamePhase(Enum):
    BLIND_SELECT = "BLIND_SELECT"
    PLAYING = "PLAYING"
    SHOP = "SHOP"
    GAME_OVER = "GAME_OVER"


@dataclass
class GameConfig:
    """Configuration for a game run."""
    starting_money: int = 0
    hands_per_round: int = 4
    discards_per_round: int = 4
    hand_size: int = 8
    max_jokers: int = 5
    consumable_slots: int = 2
    interest_cap: int = 5
    seed: Optional[int] = None
    shop: ShopConfig = field(default_factory=ShopConfig)


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of the game handed to the presentation layer."""
    hand: tuple
    ante: int
    blind: Optional[CurrentBlind]
    next_tag: Optional[Tag]
    money: int
    target: int
    current: int
    hands_left: int
    discards_left: int
    jokers: tuple
    consumables: tuple
    vouchers: tuple
    state: GamePhase
    tags: tuple = ()
    hand_levels: dict = field(default_factory=dict)


@dataclass(frozen=True)
class HandPreview:
    """What the selected cards would score if played now."""
    hand_type: HandType
    level: int
    chips: int
    mult: int
    total: int
    scoring_cards: list[Card]


@dataclass(frozen=True)
class HandPlayedEvent:
    cards: list[Card]
    stats: DetectedHand
    score: ScoreResult


@dataclass
class GameCallbacks:
    """Synchronous notifications fired at the end of state-changing calls."""
    on_update: Optional[Callable[[GameSnapshot], None]] = None
    on_hand_played: Optional[Callable[[HandPlayedEvent], None]] = None
    on_round_end: Optional[Callable[[bool], None]] = None


class BalatroGame:
    """
    Tracks the full state of a Natatro run.

    Call prepare_blind_select() once after construction, then drive the run
    with start_round()/skip_blind(), play_hand()/discard(), the shop methods
    and next_round().
    """

    def __init__(self, config: GameConfig = None, rng: Optional[random.Random] = None,
                 callbacks: GameCallbacks = None):
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.callbacks = callbacks or GameCallbacks()

        # Cards
        self.deck = Deck(self.rng)
        self.hand = Hand()
        self.evaluator = HandEvaluator()

        # Owned items
        self.joker_manager = JokerManager(max_jokers=self.config.max_jokers)
        self.consumables: list[Optional[Consumable]] = [None] * self.config.consumable_slots
        self.last_used_consumable: Optional[Consumable] = None
        self.vouchers: list[str] = []
        self.hand_levels = HandLevels()
        self.tags: list[Tag] = []
        self.next_tag: Optional[Tag] = None

        self.shop = Shop(self.config.shop, self.rng)
        self.history = RunHistory(seed=self.config.seed)

        # Run state
        self.money = self.config.starting_money
        self.ante = 1
        self.blind_index = 0
        self.current_blind: Optional[CurrentBlind] = None
        self.blinds_beaten = 0

        # Round state
        self.target_score = 0
        self.current_score = 0
        self.hands_left = self.config.hands_per_round
        self.discards_left = self.config.discards_per_round
        self.max_hand_size = self.config.hand_size
        self._round_hands = self.hands_left
        self._round_discards = self.discards_left

        # Transient until prepare_blind_select() is called
        self.state = GamePhase.PLAYING

        self.history.add_run_start(self.money)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def jokers(self) -> list[Joker]:
        return self.joker_manager.jokers

    @property
    def is_over(self) -> bool:
        return self.state == GamePhase.GAME_OVER

    def _reject(self, operation: str, reason: str) -> bool:
        logger.debug("%s rejected: %s", operation, reason)
        return False

    def _set_state(self, phase: GamePhase) -> None:
        if phase != self.state:
            logger.info("ante %d: %s -> %s", self.ante, self.state.value, phase.value)
        self.state = phase

    def _in_round(self) -> bool:
        return self.state == GamePhase.PLAYING and self.current_blind is not None

    def _active_boss(self) -> Optional[BossBlind]:
        if self.current_blind is None:
            return None
        return self.current_blind.boss

    def _blind_label(self) -> Optional[str]:
        return self.current_blind.type.value if self.current_blind else None

    def _has_tag(self, tag_id: str) -> bool:
        return any(t.id == tag_id for t in self.tags)

    def _take_tag(self, tag_id: str) -> Optional[Tag]:
        """Remove and return the first pending tag with this id."""
        for i, tag in enumerate(self.tags):
            if tag.id == tag_id:
                return self.tags.pop(i)
        return None

    def _evaluate(self, cards: list[Card]) -> DetectedHand:
        detected = self.evaluator.evaluate(cards)
        if not cards:
            return detected
        return self.hand_levels.apply(detected)

    def _draw_hand(self) -> None:
        """Draw cards up to hand size, applying suit debuffs from the boss."""
        needed = self.max_hand_size - self.hand.size()
        if needed <= 0:
            return
        drawn = self.deck.draw(needed)
        boss = self._active_boss()
        if boss and boss.effect == BossEffect.DEBUFF_SUIT:
            for card in drawn:
                if card.suit == boss.suit:
                    card.debuffed = True
        self.hand.add(drawn)

    def _advance_blind(self) -> None:
        self.blind_index += 1
        if self.blind_index > 2:
            self.blind_index = 0
            self.ante += 1

    def _generate_shop(self) -> None:
        """
        Stock the shop on entry and on reroll; a pending Charm tag makes it free.
        """
        free = self._take_tag(TAG_CHARM) is not None
        self.shop.generate(
            owned_jokers=[j.id for j in self.jokers],
            owned_vouchers=self.vouchers,
            free=free,
        )

    def selected_cards(self) -> list[Card]:
        return self.hand.selected()

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            hand=tuple(copy.copy(c) for c in self.hand.cards),
            ante=self.ante,
            blind=self.current_blind,
            next_tag=self.next_tag,
            money=self.money,
            target=self.target_score,
            current=self.current_score,
            hands_left=self.hands_left,
            discards_left=self.discards_left,
            jokers=tuple(self.jokers),
            consumables=tuple(self.consumables),
            vouchers=tuple(self.vouchers),
            state=self.state,
            tags=tuple(self.tags),
            hand_levels=self.hand_levels.to_dict(),
        )

    def _emit(self) -> None:
        if self.callbacks.on_update:
            self.callbacks.on_update(self.snapshot())

    # ------------------------------------------------------------------
    # Blind select
    # ------------------------------------------------------------------

    def prepare_blind_select(self) -> bool:
        """Compute the upcoming blind, offer a skip tag and wait for a choice."""
        initial = self.state == GamePhase.PLAYING and self.current_blind is None
        if self.state != GamePhase.SHOP and not initial:
            return self._reject("prepare_blind_select", f"invalid in {self.state.value}")

        self.current_blind = get_blind(self.ante, self.blind_index)
        self.next_tag = self.rng.choice(TAG_DEFINITIONS).copy()
        self._set_state(GamePhase.BLIND_SELECT)
        self._emit()
        return True

    def start_round(self) -> bool:
        """Play the offered blind."""
        if self.state != GamePhase.BLIND_SELECT:
            return self._reject("start_round", f"invalid in {self.state.value}")

        self.current_score = 0
        self.hands_left = self.config.hands_per_round + voucher_bonus(self.vouchers, "extra_hands")
        self.discards_left = self.config.discards_per_round + voucher_bonus(self.vouchers, "extra_discards")
        self._round_hands = self.hands_left
        self._round_discards = self.discards_left
        self.target_score = self.current_blind.target

        hand_size = self.config.hand_size + voucher_bonus(self.vouchers, "hand_size")
        boss = self._active_boss()
        if boss and boss.effect == BossEffect.MINUS_HAND_SIZE:
            hand_size -= 1
        self.max_hand_size = hand_size

        if self._take_tag(TAG_HANDY):
            self.hand_levels.level_up(HandType.HIGH_CARD)

        self.deck.reset()
        self.hand.clear()
        self._draw_hand()

        self.history.add_blind_selected(
            self.ante, self._blind_label(), self.current_blind.name, self.target_score
        )
        self._set_state(GamePhase.PLAYING)
        self._emit()
        return True

    def skip_blind(self) -> bool:
        """Skip a Small or Big blind for its tag and go straight to the shop."""
        if self.state != GamePhase.BLIND_SELECT:
            return self._reject("skip_blind", f"invalid in {self.state.value}")
        if self.current_blind.is_boss:
            return self._reject("skip_blind", "boss blinds cannot be skipped")

        tag = self.next_tag
        if tag is not None:
            if tag.id == TAG_ECONOMY:
                self.money += ECONOMY_TAG_MONEY
            else:
                self.tags.append(tag)
        self.next_tag = None

        self.history.add_blind_skipped(self.ante, self._blind_label(), tag.name if tag else None)
        self._advance_blind()
        self._set_state(GamePhase.SHOP)
        self._generate_shop()
        self._emit()
        return True

    # ------------------------------------------------------------------
    # Playing
    # ------------------------------------------------------------------

    def select_card(self, card_id: int) -> bool:
        """Toggle selection of a held card."""
        if self.is_over:
            return self._reject("select_card", "game over")
        if not self.hand.toggle(card_id):
            return self._reject("select_card", f"card {card_id} not in hand")
        self._emit()
        return True

    def sort_hand(self, by: str = "rank") -> bool:
        """Sort the hand by "rank" or "suit"."""
        if self.is_over:
            return self._reject("sort_hand", "game over")
        if not self.hand.sort(by):
            return self._reject("sort_hand", f"unknown sort key {by!r}")
        self._emit()
        return True

    def evaluate_selected_hand(self) -> Optional[HandPreview]:
        """Preview the selected cards' score without changing anything."""
        selected = self.hand.selected()
        if not 1 <= len(selected) <= MAX_PLAYED_CARDS:
            return None
        return self.preview(selected)

    def preview(self, cards: list[Card]) -> HandPreview:
        """Score any group of cards with current levels and jokers."""
        stats = self._evaluate(cards)
        result = self.joker_manager.calculate_score(stats)
        return HandPreview(
            hand_type=stats.hand_type,
            level=stats.level,
            chips=result.chips,
            mult=result.mult,
            total=result.total,
            scoring_cards=stats.scoring_cards,
        )

    def play_hand(self) -> bool:
        """Score the selected cards against the blind."""
        if not self._in_round():
            return self._reject("play_hand", f"invalid in {self.state.value}")
        if self.hands_left <= 0:
            return self._reject("play_hand", "no hands left")
        selected = self.hand.selected()
        if not 1 <= len(selected) <= MAX_PLAYED_CARDS:
            return self._reject("play_hand", f"{len(selected)} cards selected")

        stats = self._evaluate(selected)
        self.hand.remove(selected)

        # The Hook: discard random held cards
        boss = self._active_boss()
        if boss and boss.effect == BossEffect.DISCARD_RANDOM and self.hand.cards:
            victims = self.rng.sample(self.hand.cards, min(HOOK_DISCARDS, self.hand.size()))
            self.hand.remove(victims)

        score = self.joker_manager.calculate_score(stats, verbose=True)
        self.current_score += score.total
        self.hands_left -= 1

        self.history.add_hand_played(
            self.ante, self._blind_label(), stats.hand_type.value, score.total
        )
        if self.callbacks.on_hand_played:
            self.callbacks.on_hand_played(HandPlayedEvent(cards=selected, stats=stats, score=score))

        if self.current_score >= self.target_score:
            self.end_round(True)
        elif self.hands_left == 0:
            self.end_round(False)
        else:
            self._draw_hand()
            self._emit()
        return True

    def discard(self) -> bool:
        """Throw away the selected cards and draw replacements."""
        if not self._in_round():
            return self._reject("discard", f"invalid in {self.state.value}")
        if self.discards_left <= 0:
            return self._reject("discard", "no discards left")
        selected = self.hand.selected()
        if not 1 <= len(selected) <= MAX_PLAYED_CARDS:
            return self._reject("discard", f"{len(selected)} cards selected")

        self.hand.remove(selected)
        self.discards_left -= 1
        self._draw_hand()
        self._emit()
        return True

    def end_round(self, win: bool) -> bool:
        """
        Pay out and move to the shop, or end the run.

        A win is only accepted once the score has reached the target;
        end_round(False) forfeits the blind.
        """
        if not self._in_round():
            return self._reject("end_round", f"invalid in {self.state.value}")
        if win and self.current_score < self.target_score:
            return self._reject("end_round", f"score {self.current_score} below target {self.target_score}")

        money_earned = 0
        if win:
            interest = min(interest_cap(self.vouchers, self.config.interest_cap),
                           self.money // INTEREST_STEP)
            money_earned = self.current_blind.reward + self.hands_left + interest
            self.money += money_earned

        self.history.add_blind_result(
            ante=self.ante,
            blind_type=self._blind_label(),
            blind_name=self.current_blind.name,
            score=self.current_score,
            required=self.target_score,
            success=win,
            hands_used=self._round_hands - self.hands_left,
            discards_used=self._round_discards - self.discards_left,
            money_earned=money_earned,
        )

        if win:
            self.blinds_beaten += 1
            self._advance_blind()
            self._set_state(GamePhase.SHOP)
            self._generate_shop()
        else:
            self._set_state(GamePhase.GAME_OVER)
            self.history.add_run_end(
                final_ante=self.ante,
                final_blind=self._blind_label(),
                blinds_beaten=self.blinds_beaten,
                final_money=self.money,
                jokers=[j.name for j in self.jokers],
            )

        if self.callbacks.on_round_end:
            self.callbacks.on_round_end(win)
        self._emit()
        return True

    # ------------------------------------------------------------------
    # Shop
    # ------------------------------------------------------------------

    def reroll_shop(self) -> bool:
        """Pay to restock the shop; free with a pending D6 tag."""
        if self.state != GamePhase.SHOP:
            return self._reject("reroll_shop", f"invalid in {self.state.value}")

        free = self._has_tag(TAG_D6)
        cost = 0 if free else self.config.shop.reroll_cost
        if self.money < cost:
            return self._reject("reroll_shop", f"need ${cost}, have ${self.money}")

        if free:
            self._take_tag(TAG_D6)
        self.money -= cost
        self._generate_shop()
        self.history.add_shop_reroll(self.ante, cost)
        self._emit()
        return True

    def buy_joker(self, joker_id: str) -> bool:
        if self.state != GamePhase.SHOP:
            return self._reject("buy_joker", f"invalid in {self.state.value}")
        item = self.shop.find_joker(joker_id)
        if item is None:
            return self._reject("buy_joker", f"{joker_id} not in shop")
        if not self.joker_manager.has_room():
            return self._reject("buy_joker", "joker slots full")
        if self.money < item.cost:
            return self._reject("buy_joker", f"need ${item.cost}, have ${self.money}")
        if not self.joker_manager.add_joker(item.id):
            return self._reject("buy_joker", f"{joker_id} already owned")

        self.money -= item.cost
        self.shop.remove(item)
        self.history.add_joker_acquired(self.ante, item.name, item.cost)
        self._emit()
        return True

    def buy_consumable(self, consumable_id: str) -> bool:
        if self.state != GamePhase.SHOP:
            return self._reject("buy_consumable", f"invalid in {self.state.value}")
        item = self.shop.find_consumable(consumable_id)
        if item is None:
            return self._reject("buy_consumable", f"{consumable_id} not in shop")
        if None not in self.consumables:
            return self._reject("buy_consumable", "consumable slots full")
        if self.money < item.cost:
            return self._reject("buy_consumable", f"need ${item.cost}, have ${self.money}")

        self.money -= item.cost
        self.consumables[self.consumables.index(None)] = item
        self.shop.remove(item)
        self.history.add_consumable_bought(self.ante, item.name, item.cost)
        self._emit()
        return True

    def buy_voucher(self, voucher_id: str) -> bool:
        if self.state != GamePhase.SHOP:
            return self._reject("buy_voucher", f"invalid in {self.state.value}")
        item = self.shop.find_voucher(voucher_id)
        if item is None:
            return self._reject("buy_voucher", f"{voucher_id} not in shop")
        if item.id in self.vouchers:
            return self._reject("buy_voucher", f"{voucher_id} already owned")
        if self.money < item.cost:
            return self._reject("buy_voucher", f"need ${item.cost}, have ${self.money}")

        self.money -= item.cost
        self.vouchers.append(item.id)
        self.shop.remove(item)
        self.history.add_voucher_acquired(self.ante, item.name, item.cost)
        self._emit()
        return True

    def next_round(self) -> bool:
        """Leave the shop for the next blind select."""
        if self.state != GamePhase.SHOP:
            return self._reject("next_round", f"invalid in {self.state.value}")
        self.tags = [t for t in self.tags if t.id not in SHOP_TAGS]
        self.shop.clear()
        return self.prepare_blind_select()

    # ------------------------------------------------------------------
    # Consumables
    # ------------------------------------------------------------------

    def use_consumable(self, index: int) -> bool:
        """
        Use the consumable in a slot.

        Planets level up their hand. Card tarots act on the selected cards.
        The Fool recreates the last consumable used (never itself) in another
        empty slot and fails when there is none.
        """
        if self.is_over:
            return self._reject("use_consumable", "game over")
        if not 0 <= index < len(self.consumables):
            return self._reject("use_consumable", f"no slot {index}")
        item = self.consumables[index]
        if item is None:
            return self._reject("use_consumable", f"slot {index} is empty")

        if item.type == ConsumableType.PLANET:
            self.hand_levels.level_up(item.hand_type)
        elif item.id == TAROT_FOOL:
            if self.last_used_consumable is None:
                return self._reject("use_consumable", "nothing for The Fool to copy")
            free_slots = [i for i, slot in enumerate(self.consumables)
                          if slot is None and i != index]
            if not free_slots:
                return self._reject("use_consumable", "no free slot for The Fool")
            self.consumables[free_slots[0]] = self.last_used_consumable.copy()
        elif not apply_tarot(item, self.hand.selected()):
            return self._reject("use_consumable", f"{item.name} needs a different selection")

        self.consumables[index] = None
        self.hand.deselect_all()
        if item.id != TAROT_FOOL:
            self.last_used_consumable = item
        self.history.add_consumable_used(self.ante, item.name, item.type.value)
        self._emit()
        return True
