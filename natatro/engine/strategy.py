"""
Auto-play strategies for Natatro simulation.

A strategy drives a BalatroGame through its public operations only: it selects
cards by id, plays or discards, and spends money in the shop.
"""

from itertools import combinations

from .consumables import ConsumableType
from .deck import Card
from .game import BalatroGame, HandPreview, MAX_PLAYED_CARDS


class BasicStrategy:
    """
    Simple strategy that plays the highest scoring hand available.
    Never discards, never skips and only buys jokers.
    """

    def best_play(self, game: BalatroGame) -> tuple[list[Card], HandPreview]:
        """Try every 1-5 card combination and keep the best preview."""
        cards = game.hand.cards
        best_cards: list[Card] = []
        best: HandPreview = None

        for size in range(1, min(MAX_PLAYED_CARDS, len(cards)) + 1):
            for combo in combinations(cards, size):
                preview = game.preview(list(combo))
                if best is None or preview.total > best.total:
                    best_cards, best = list(combo), preview

        return best_cards, best

    def should_skip(self, game: BalatroGame) -> bool:
        return False

    def choose_discard(self, game: BalatroGame, best: HandPreview) -> list[Card]:
        return []

    def play_turn(self, game: BalatroGame) -> bool:
        """Play or discard once. Returns False when no move was possible."""
        cards, best = self.best_play(game)
        if not cards:
            return False

        to_discard = self.choose_discard(game, best)
        if to_discard:
            self._select(game, to_discard)
            return game.discard()

        self._select(game, cards)
        return game.play_hand()

    @staticmethod
    def _select(game: BalatroGame, cards: list[Card]) -> None:
        for card in game.selected_cards():
            game.select_card(card.id)
        for card in cards:
            game.select_card(card.id)

    def shop(self, game: BalatroGame) -> None:
        """Buy whatever jokers are affordable, most expensive first."""
        for joker in sorted(game.shop.jokers, key=lambda j: -j.cost):
            if joker.cost <= game.money:
                game.buy_joker(joker.id)


class GreedyStrategy(BasicStrategy):
    """
    Plays the best-scoring combination, discarding low cards when the best
    play cannot keep pace with the blind. In the shop buys jokers, then
    vouchers, then planets which it uses immediately.
    """

    def choose_discard(self, game: BalatroGame, best: HandPreview) -> list[Card]:
        if game.discards_left <= 0:
            return []

        # Good enough to clear the blind with the hands we have left
        remaining = game.target_score - game.current_score
        if best.total * game.hands_left >= remaining:
            return []

        scoring_ids = {c.id for c in best.scoring_cards}
        spare = [c for c in game.hand.cards if c.id not in scoring_ids]
        spare.sort(key=lambda c: (c.value, c.rank_order))
        return spare[:MAX_PLAYED_CARDS]

    def shop(self, game: BalatroGame) -> None:
        super().shop(game)

        for voucher in list(game.shop.vouchers):
            if voucher.cost <= game.money:
                game.buy_voucher(voucher.id)

        # Planets are only worth holding until they are used
        for item in list(game.shop.consumables):
            if item.type != ConsumableType.PLANET or item.cost > game.money:
                continue
            if game.buy_consumable(item.id):
                slot = game.consumables.index(item)
                game.use_consumable(slot)


STRATEGIES = {
    "basic": BasicStrategy,
    "greedy": GreedyStrategy,
}
