"""
Voucher definitions for Natatro.
Vouchers are permanent upgrades bought once per run.
"""

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class Voucher:
    """A voucher that provides a permanent upgrade."""
    id: str
    name: str
    cost: int
    desc: str
    effect: dict = field(default_factory=dict)

    def copy(self, **changes) -> "Voucher":
        return replace(self, **changes)

    def __str__(self):
        return f"{self.name} (${self.cost})"


VOUCHER_DEFINITIONS = [
    Voucher("voucher_paint_brush", "Paint Brush", 10, "+1 hand size", {"hand_size": 1}),
    Voucher("voucher_grabber", "Grabber", 10, "+1 hand per round", {"extra_hands": 1}),
    Voucher("voucher_wasteful", "Wasteful", 10, "+1 discard per round", {"extra_discards": 1}),
    Voucher("voucher_seed_money", "Seed Money", 10, "Raise the cap on interest earned to $10",
            {"interest_cap": 10}),
]

VOUCHERS_BY_ID = {v.id: v for v in VOUCHER_DEFINITIONS}


def get_voucher(voucher_id: str) -> Optional[Voucher]:
    return VOUCHERS_BY_ID.get(voucher_id)


def get_available_vouchers(owned_vouchers: list[str]) -> list[Voucher]:
    """Vouchers that can still be offered in the shop."""
    owned = set(owned_vouchers)
    return [v for v in VOUCHER_DEFINITIONS if v.id not in owned]


def voucher_bonus(owned_vouchers: list[str], key: str) -> int:
    """Total additive bonus for a voucher effect key."""
    return sum(VOUCHERS_BY_ID[v].effect.get(key, 0) for v in owned_vouchers if v in VOUCHERS_BY_ID)


def interest_cap(owned_vouchers: list[str], default: int = 5) -> int:
    """Highest interest cap granted by owned vouchers."""
    caps = [VOUCHERS_BY_ID[v].effect["interest_cap"] for v in owned_vouchers
            if v in VOUCHERS_BY_ID and "interest_cap" in VOUCHERS_BY_ID[v].effect]
    return max([default] + caps)
