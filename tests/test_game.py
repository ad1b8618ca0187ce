from __future__ import annotations

from natatro.engine.consumables import TAROT_DEATH, TAROT_FOOL, TAROT_MAGICIAN, TAROT_STRENGTH, get_consumable
from natatro.engine.deck import Card, Suit
from natatro.engine.game import BalatroGame, GameCallbacks, GameConfig, GamePhase
from natatro.engine.hand_detector import HandType
from natatro.engine.jokers import JOKER_DEFINITIONS
from natatro.engine.tags import TAG_CHARM, TAG_D6, TAG_ECONOMY, TAG_HANDY, get_tag
from natatro.engine.vouchers import get_voucher

S, H, C, D = Suit.SPADES, Suit.HEARTS, Suit.CLUBS, Suit.DIAMONDS


def _new_game(seed: int = 1, callbacks: GameCallbacks = None) -> BalatroGame:
    game = BalatroGame(config=GameConfig(seed=seed), callbacks=callbacks)
    game.prepare_blind_select()
    return game


def _set_hand(game: BalatroGame, *specs: tuple[str, Suit]) -> list[Card]:
    game.hand.cards = [Card(100 + i, suit, rank) for i, (rank, suit) in enumerate(specs)]
    return game.hand.cards


def _select(game: BalatroGame, *cards: Card) -> None:
    for card in cards:
        assert game.select_card(card.id)


def _win_blind(game: BalatroGame) -> None:
    assert game.start_round()
    game.target_score = 1
    _select(game, game.hand.cards[0])
    assert game.play_hand()
    assert game.state == GamePhase.SHOP


def _boss_game(ante: int) -> BalatroGame:
    game = BalatroGame(config=GameConfig(seed=4))
    game.ante = ante
    game.blind_index = 2
    game.prepare_blind_select()
    return game


# ---------------------------------------------------------------------------
# Blind select and rounds
# ---------------------------------------------------------------------------

def test_new_game_waits_for_blind_select() -> None:
    game = BalatroGame(config=GameConfig(seed=1))
    assert game.state == GamePhase.PLAYING
    assert game.hand.size() == 0
    assert game.money == 0
    assert not game.play_hand()
    assert not game.start_round()

    assert game.prepare_blind_select()
    assert game.state == GamePhase.BLIND_SELECT
    assert game.current_blind.name == "Small Blind"
    assert game.current_blind.target == 300
    assert game.next_tag is not None
    assert not game.prepare_blind_select()


def test_start_round_deals_a_hand() -> None:
    game = _new_game()
    assert game.start_round()
    assert game.state == GamePhase.PLAYING
    assert game.hand.size() == 8
    assert game.deck.cards_remaining() == 44
    assert (game.hands_left, game.discards_left) == (4, 4)
    assert (game.target_score, game.current_score) == (300, 0)
    assert not game.start_round()


def test_same_seed_deals_same_hand() -> None:
    a, b = _new_game(seed=9), _new_game(seed=9)
    a.start_round()
    b.start_round()
    assert [c.id for c in a.hand.cards] == [c.id for c in b.hand.cards]


def test_play_hand_selection_bounds() -> None:
    game = _new_game()
    game.start_round()
    assert not game.play_hand()

    _select(game, *game.hand.cards[:6])
    assert not game.play_hand()
    assert game.hands_left == 4
    assert game.evaluate_selected_hand() is None


def test_play_hand_scores_and_redraws() -> None:
    game = _new_game()
    game.start_round()
    cards = _set_hand(game, ("2", C), ("5", D), ("9", S), ("4", H),
                      ("6", C), ("8", D), ("J", S), ("K", H))
    _select(game, cards[2])

    preview = game.evaluate_selected_hand()
    assert preview.hand_type == HandType.HIGH_CARD
    assert preview.total == 14
    assert [c.id for c in preview.scoring_cards] == [102]

    assert game.play_hand()
    assert game.current_score == 14
    assert game.hands_left == 3
    assert game.hand.size() == 8
    assert game.hand.find(102) is None
    assert game.deck.cards_remaining() == 43


def test_losing_all_hands_ends_the_game() -> None:
    ends = []
    game = _new_game(callbacks=GameCallbacks(on_round_end=ends.append))
    game.start_round()

    for expected_left in (3, 2, 1, 0):
        _select(game, game.hand.cards[0])
        assert game.play_hand()
        assert game.hands_left == expected_left
        assert game.hand.size() <= game.max_hand_size

    assert game.state == GamePhase.GAME_OVER
    assert ends == [False]
    assert game.money == 0
    assert game.history.of_type("run_end")

    # Everything is a no-op now
    assert not game.select_card(game.hand.cards[0].id)
    assert not game.play_hand()
    assert not game.discard()
    assert not game.prepare_blind_select()
    assert not game.next_round()


def test_winning_pays_reward_hands_and_interest() -> None:
    game = _new_game()
    game.start_round()
    game.target_score = 10
    cards = _set_hand(game, ("2", C), ("5", D), ("9", S))
    _select(game, cards[2])

    assert game.play_hand()
    assert game.state == GamePhase.SHOP
    # $3 small blind + 3 unused hands, no interest on $0
    assert game.money == 6
    assert (game.ante, game.blind_index) == (1, 1)
    assert game.blinds_beaten == 1
    assert len(game.shop.jokers) == 2
    assert len(game.shop.consumables) == 2
    assert len(game.shop.vouchers) == 1


def test_interest_is_capped() -> None:
    game = _new_game()
    game.money = 23
    _win_blind(game)
    assert game.money == 23 + 3 + 3 + 4

    rich = _new_game()
    rich.money = 100
    _win_blind(rich)
    assert rich.money == 100 + 3 + 3 + 5


def test_seed_money_raises_interest_cap() -> None:
    game = _new_game()
    game.vouchers.append("voucher_seed_money")
    game.money = 100
    _win_blind(game)
    assert game.money == 100 + 3 + 3 + 10


def test_blind_advances_through_the_ante() -> None:
    game = _new_game()
    names = []
    for _ in range(3):
        names.append(game.current_blind.name)
        _win_blind(game)
        game.next_round()
    assert names == ["Small Blind", "Big Blind", "The Manacle"]
    assert (game.ante, game.blind_index) == (2, 0)
    assert game.current_blind.target == 800


def test_discard_replaces_cards() -> None:
    game = _new_game()
    game.start_round()
    assert not game.discard()

    dropped = game.hand.cards[:3]
    _select(game, *dropped)
    assert game.discard()
    assert game.discards_left == 3
    assert game.hand.size() == 8
    assert all(game.hand.find(c.id) is None for c in dropped)

    game.discards_left = 0
    _select(game, game.hand.cards[0])
    assert not game.discard()


def test_end_round_outside_a_round_is_rejected() -> None:
    game = _new_game()
    assert not game.end_round(True)
    assert game.state == GamePhase.BLIND_SELECT


def test_end_round_cannot_claim_an_unearned_win() -> None:
    game = _new_game()
    game.start_round()
    assert game.current_score < game.target_score

    assert not game.end_round(True)
    assert game.state == GamePhase.PLAYING
    assert game.money == 0
    assert game.blinds_beaten == 0

    assert game.end_round(False)
    assert game.state == GamePhase.GAME_OVER
    assert game.money == 0


def test_sort_hand() -> None:
    game = _new_game()
    game.start_round()
    assert game.sort_hand("rank")
    values = [c.value for c in game.hand.cards]
    assert values == sorted(values, reverse=True)
    assert not game.sort_hand("nope")


# ---------------------------------------------------------------------------
# Bosses
# ---------------------------------------------------------------------------

def test_boss_blind_cannot_be_skipped() -> None:
    game = _boss_game(ante=1)
    assert game.current_blind.is_boss
    assert game.current_blind.name == "The Manacle"
    assert not game.skip_blind()
    assert game.state == GamePhase.BLIND_SELECT


def test_manacle_shrinks_hand() -> None:
    game = _boss_game(ante=1)
    game.start_round()
    assert game.max_hand_size == 7
    assert game.hand.size() == 7


def test_wall_doubles_target() -> None:
    game = _boss_game(ante=6)
    assert game.current_blind.name == "The Wall"
    assert game.current_blind.target == 80000


def test_club_debuffs_drawn_clubs() -> None:
    game = _boss_game(ante=2)
    assert game.current_blind.name == "The Club"
    game.start_round()
    for card in game.hand.cards:
        assert card.debuffed == (card.suit == C)


def test_hook_discards_two_held_cards() -> None:
    game = _boss_game(ante=7)
    assert game.current_blind.name == "The Hook"
    game.start_round()

    played, *held = game.hand.cards
    _select(game, played)
    assert game.play_hand()

    still_held = {c.id for c in held} & {c.id for c in game.hand.cards}
    assert len(still_held) == len(held) - 2
    assert game.hand.size() == 8


# ---------------------------------------------------------------------------
# Skipping and tags
# ---------------------------------------------------------------------------

def test_skip_with_economy_tag_pays_now() -> None:
    game = _new_game()
    game.next_tag = get_tag(TAG_ECONOMY)
    assert game.skip_blind()
    assert game.state == GamePhase.SHOP
    assert game.money == 15
    assert game.tags == []
    assert (game.ante, game.blind_index) == (1, 1)
    assert game.history.of_type("blind_skipped")


def test_charm_tag_makes_next_shop_free() -> None:
    game = _new_game()
    game.next_tag = get_tag(TAG_CHARM)
    assert game.skip_blind()
    items = game.shop.jokers + game.shop.consumables + game.shop.vouchers
    assert items
    assert all(item.cost == 0 for item in items)
    assert all(t.id != TAG_CHARM for t in game.tags)

    joker = game.shop.jokers[0]
    assert game.buy_joker(joker.id)
    assert game.money == 0


def test_d6_tag_rerolls_for_free() -> None:
    game = _new_game()
    game.next_tag = get_tag(TAG_D6)
    game.skip_blind()
    assert game.money == 0
    assert game.reroll_shop()
    assert game.money == 0
    assert game.tags == []
    assert not game.reroll_shop()


def test_handy_tag_levels_high_card_next_round() -> None:
    game = _new_game()
    game.next_tag = get_tag(TAG_HANDY)
    game.skip_blind()
    assert game.next_round()
    assert game.current_blind.name == "Big Blind"
    assert game.start_round()
    assert game.hand_levels.get(HandType.HIGH_CARD) == 2
    assert game.tags == []


def test_next_round_clears_shop_tags() -> None:
    game = _new_game()
    _win_blind(game)
    game.tags.append(get_tag(TAG_D6))
    game.tags.append(get_tag(TAG_HANDY))
    assert game.next_round()
    assert [t.id for t in game.tags] == [TAG_HANDY]
    assert game.shop.is_empty()


# ---------------------------------------------------------------------------
# Shop
# ---------------------------------------------------------------------------

def test_shop_actions_need_shop_phase() -> None:
    game = _new_game()
    game.money = 100
    assert not game.reroll_shop()
    assert not game.buy_joker("cola")
    assert not game.next_round()


def test_buy_joker() -> None:
    game = _new_game()
    _win_blind(game)
    game.money = 100
    joker = game.shop.jokers[0]

    assert game.buy_joker(joker.id)
    assert game.money == 100 - joker.cost
    assert [j.id for j in game.jokers] == [joker.id]
    assert game.shop.find_joker(joker.id) is None
    assert not game.buy_joker(joker.id)


def test_overdrawn_purchase_leaves_state_unchanged() -> None:
    game = _new_game()
    _win_blind(game)
    game.money = 0
    listing = list(game.shop.jokers)

    assert not game.buy_joker(listing[0].id)
    assert not game.buy_consumable(game.shop.consumables[0].id)
    assert not game.buy_voucher(game.shop.vouchers[0].id)
    assert game.money == 0
    assert game.jokers == []
    assert game.shop.jokers == listing


def test_cannot_buy_a_sixth_joker() -> None:
    game = _new_game()
    _win_blind(game)
    for joker in JOKER_DEFINITIONS[:5]:
        assert game.joker_manager.add_joker(joker.id)
    game.money = 100
    assert game.reroll_shop()

    assert {j.id for j in game.shop.jokers} == {j.id for j in JOKER_DEFINITIONS[5:]}
    assert not game.buy_joker(game.shop.jokers[0].id)
    assert game.money == 95
    assert len(game.jokers) == 5


def test_reroll_costs_money() -> None:
    game = _new_game()
    _win_blind(game)
    game.money = 4
    assert not game.reroll_shop()
    assert game.money == 4

    game.money = 5
    assert game.reroll_shop()
    assert game.money == 0
    assert game.history.of_type("shop_reroll")[0].data["cost"] == 5


def test_shop_listings_only_change_by_paying() -> None:
    game = _new_game()
    _win_blind(game)
    assert not hasattr(game, "generate_shop")

    game.money = 0
    listing = (list(game.shop.jokers), list(game.shop.consumables), list(game.shop.vouchers))
    for _ in range(5):
        assert not game.reroll_shop()
    assert (game.shop.jokers, game.shop.consumables, game.shop.vouchers) == listing

    game.money = 12
    spent = []
    while game.reroll_shop():
        spent.append(game.money)
    assert spent == [7, 2]
    assert game.money == 2


def test_buy_consumable_until_slots_are_full() -> None:
    game = _new_game()
    _win_blind(game)
    game.money = 100
    first, second = game.shop.consumables

    assert game.buy_consumable(first.id)
    assert game.consumables[0] == first
    assert game.money == 100 - first.cost
    assert game.buy_consumable(second.id)

    assert game.reroll_shop()
    assert not game.buy_consumable(game.shop.consumables[0].id)


def test_vouchers_apply_next_round() -> None:
    game = _new_game()
    _win_blind(game)
    game.money = 100
    game.shop.vouchers = [get_voucher("voucher_grabber").copy()]

    assert game.buy_voucher("voucher_grabber")
    assert game.money == 90
    assert game.vouchers == ["voucher_grabber"]

    game.shop.vouchers = [get_voucher("voucher_grabber").copy()]
    assert not game.buy_voucher("voucher_grabber")

    game.vouchers.append("voucher_paint_brush")
    game.next_round()
    game.start_round()
    assert game.hands_left == 5
    assert game.hand.size() == 9


# ---------------------------------------------------------------------------
# Consumables
# ---------------------------------------------------------------------------

def test_planet_levels_its_hand() -> None:
    game = _new_game()
    game.consumables[0] = get_consumable("planet_mercury")
    assert game.use_consumable(0)
    assert game.hand_levels.get(HandType.PAIR) == 2
    assert game.consumables == [None, None]
    assert game.last_used_consumable.id == "planet_mercury"

    assert not game.use_consumable(0)
    assert not game.use_consumable(5)


def test_fool_recreates_last_used() -> None:
    game = _new_game()
    game.consumables[0] = get_consumable(TAROT_FOOL)
    assert not game.use_consumable(0)

    game.consumables[1] = get_consumable("planet_mercury")
    assert game.use_consumable(1)
    assert game.use_consumable(0)
    assert game.consumables[0] is None
    assert game.consumables[1].id == "planet_mercury"
    assert game.last_used_consumable.id == "planet_mercury"


def test_fool_needs_another_free_slot() -> None:
    game = _new_game()
    game.last_used_consumable = get_consumable("planet_mercury")
    game.consumables = [get_consumable(TAROT_FOOL), get_consumable("planet_jupiter")]

    assert not game.use_consumable(0)
    assert [c.id for c in game.consumables] == [TAROT_FOOL, "planet_jupiter"]


def test_strength_raises_selected_ranks() -> None:
    game = _new_game()
    game.start_round()
    nine, ace, _ = _set_hand(game, ("9", S), ("A", H), ("4", C))
    game.consumables[0] = get_consumable(TAROT_STRENGTH)

    assert not game.use_consumable(0)

    _select(game, nine, ace)
    assert game.use_consumable(0)
    assert (nine.rank, nine.value) == ("10", 10)
    assert ace.rank == "A"
    assert game.hand.selected() == []


def test_death_needs_exactly_two_cards() -> None:
    game = _new_game()
    game.start_round()
    five, king, four = _set_hand(game, ("5", C), ("K", H), ("4", D))
    king.mult_bonus = 4
    game.consumables[0] = get_consumable(TAROT_DEATH)

    _select(game, five, king, four)
    assert not game.use_consumable(0)
    game.hand.deselect_all()

    _select(game, five, king)
    assert game.use_consumable(0)
    assert (five.suit, five.rank, five.value, five.mult_bonus) == (H, "K", 10, 4)
    assert five.id == 100


def test_magician_bonus_shows_in_preview() -> None:
    game = _new_game()
    game.start_round()
    nine, _ = _set_hand(game, ("9", S), ("3", D))
    game.consumables[0] = get_consumable(TAROT_MAGICIAN)

    _select(game, nine)
    assert game.use_consumable(0)
    _select(game, nine)
    assert game.evaluate_selected_hand().total == 5 + 9 + 30


def test_no_consumables_after_game_over() -> None:
    game = _new_game()
    game.start_round()
    game.hands_left = 1
    _select(game, game.hand.cards[0])
    game.play_hand()
    assert game.state == GamePhase.GAME_OVER

    game.consumables[0] = get_consumable("planet_mercury")
    assert not game.use_consumable(0)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

def test_callbacks_fire() -> None:
    updates, played, ends = [], [], []
    game = _new_game(callbacks=GameCallbacks(
        on_update=updates.append, on_hand_played=played.append, on_round_end=ends.append,
    ))
    assert updates[-1].state == GamePhase.BLIND_SELECT
    assert updates[-1].blind.name == "Small Blind"

    game.start_round()
    game.target_score = 10
    cards = _set_hand(game, ("2", C), ("9", S))
    _select(game, cards[1])
    game.play_hand()

    assert len(played) == 1
    assert played[0].stats.hand_type == HandType.HIGH_CARD
    assert played[0].score.total == 14
    assert [c.id for c in played[0].cards] == [101]
    assert ends == [True]
    assert updates[-1].state == GamePhase.SHOP
    assert updates[-1].money == 6


def test_snapshot_is_a_copy() -> None:
    game = _new_game()
    game.start_round()
    snap = game.snapshot()
    snap.hand[0].selected = True
    assert game.hand.selected() == []
    assert len(snap.hand) == 8
    assert snap.hand_levels["High Card"] == 1


def test_preview_of_no_cards_ignores_levels() -> None:
    game = _new_game()
    game.hand_levels.level_up(HandType.HIGH_CARD)
    preview = game.preview([])
    assert (preview.chips, preview.mult, preview.total) == (0, 0, 0)
    assert preview.level == 1
