"""
Shop simulation for Natatro.
Handles joker/consumable/voucher generation for a single shop visit.
"""

import random
from dataclasses import dataclass
from typing import Optional

from .consumables import CONSUMABLE_DEFINITIONS, Consumable
from .jokers import JOKER_DEFINITIONS, Joker
from .vouchers import Voucher, get_available_vouchers


@dataclass
class ShopConfig:
    """Configuration for shop behavior."""
    joker_slots: int = 2
    consumable_slots: int = 2
    voucher_slots: int = 1
    reroll_cost: int = 5


class Shop:
    """
    Generates and manages shop contents.

    Listings hold priced copies of catalog entries; buying removes the entry.
    """

    def __init__(self, config: ShopConfig = None, rng: Optional[random.Random] = None):
        self.config = config or ShopConfig()
        self.rng = rng or random.Random()

        # Current shop contents
        self.jokers: list[Joker] = []
        self.consumables: list[Consumable] = []
        self.vouchers: list[Voucher] = []

    def generate(self, owned_jokers: list[str] = None, owned_vouchers: list[str] = None,
                 free: bool = False) -> None:
        """Generate new shop contents, skipping owned jokers and vouchers."""
        owned_jokers = set(owned_jokers or [])

        joker_pool = [j for j in JOKER_DEFINITIONS if j.id not in owned_jokers]
        self.jokers = [
            self._priced(j, free)
            for j in self._pick(joker_pool, self.config.joker_slots)
        ]

        self.consumables = [
            self._priced(c, free)
            for c in self._pick(CONSUMABLE_DEFINITIONS, self.config.consumable_slots)
        ]

        available = get_available_vouchers(owned_vouchers or [])
        self.vouchers = [
            self._priced(v, free)
            for v in self._pick(available, self.config.voucher_slots)
        ]

    def _pick(self, pool: list, count: int) -> list:
        """Distinct random picks, fewer when the pool runs short."""
        return self.rng.sample(pool, min(count, len(pool)))

    @staticmethod
    def _priced(item, free: bool):
        """Copy a catalog entry so the listing never aliases the catalog."""
        if free:
            return item.copy(cost=0)
        return item.copy()

    def find_joker(self, joker_id: str) -> Optional[Joker]:
        return next((j for j in self.jokers if j.id == joker_id), None)

    def find_consumable(self, consumable_id: str) -> Optional[Consumable]:
        return next((c for c in self.consumables if c.id == consumable_id), None)

    def find_voucher(self, voucher_id: str) -> Optional[Voucher]:
        return next((v for v in self.vouchers if v.id == voucher_id), None)

    def remove(self, item) -> None:
        """Take a bought item off its listing."""
        for listing in (self.jokers, self.consumables, self.vouchers):
            if item in listing:
                listing.remove(item)
                return

    def clear(self) -> None:
        self.jokers = []
        self.consumables = []
        self.vouchers = []

    def is_empty(self) -> bool:
        return not (self.jokers or self.consumables or self.vouchers)
