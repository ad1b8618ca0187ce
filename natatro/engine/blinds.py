"""
Blind definitions for Natatro.
Each ante has a Small, Big and Boss blind; bosses carry a debuff rule.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .deck import Suit


class BlindType(Enum):
    SMALL = "Small"
    BIG = "Big"
    BOSS = "Boss"


BLIND_ORDER = [BlindType.SMALL, BlindType.BIG, BlindType.BOSS]


class BossEffect(Enum):
    """Types of boss effects."""
    NONE = "none"
    DISCARD_RANDOM = "discard_random"     # The Hook - Discard 2 random cards per hand
    MINUS_HAND_SIZE = "minus_hand_size"   # The Manacle - -1 hand size
    DEBUFF_SUIT = "debuff_suit"           # The Club/Goad/Head/Window - a suit doesn't score
    EXTRA_LARGE = "extra_large"           # The Wall - 2x score requirement


@dataclass(frozen=True)
class BossBlind:
    """A boss blind with its effect."""
    id: str
    name: str
    effect: BossEffect
    description: str
    suit: Optional[Suit] = None
    score_mult: float = 1.0


BOSS_BLINDS = [
    BossBlind("boss_hook", "The Hook", BossEffect.DISCARD_RANDOM, "Discards 2 random cards per hand played"),
    BossBlind("boss_manacle", "The Manacle", BossEffect.MINUS_HAND_SIZE, "-1 Hand Size"),
    BossBlind("boss_club", "The Club", BossEffect.DEBUFF_SUIT, "All Club cards are debuffed", suit=Suit.CLUBS),
    BossBlind("boss_goad", "The Goad", BossEffect.DEBUFF_SUIT, "All Spade cards are debuffed", suit=Suit.SPADES),
    BossBlind("boss_head", "The Head", BossEffect.DEBUFF_SUIT, "All Heart cards are debuffed", suit=Suit.HEARTS),
    BossBlind("boss_window", "The Window", BossEffect.DEBUFF_SUIT, "All Diamond cards are debuffed", suit=Suit.DIAMONDS),
    BossBlind("boss_wall", "The Wall", BossEffect.EXTRA_LARGE, "Extra large blind", score_mult=2.0),
]

BOSS_BLINDS_BY_ID = {b.id: b for b in BOSS_BLINDS}

# Score requirements per ante: (small, big, boss)
BLIND_REQUIREMENTS = {
    1: (300, 450, 600),
    2: (800, 1200, 1600),
    3: (2000, 3000, 4000),
    4: (5000, 7500, 10000),
    5: (11000, 16500, 22000),
    6: (20000, 30000, 40000),
    7: (35000, 52500, 70000),
    8: (50000, 75000, 100000),
}
ENDLESS_SCALING = 1.6

BLIND_REWARDS = {
    BlindType.SMALL: 3,
    BlindType.BIG: 4,
    BlindType.BOSS: 5,
}


@dataclass(frozen=True)
class CurrentBlind:
    """Snapshot of the blind being faced."""
    type: BlindType
    name: str
    desc: str
    target: int
    reward: int
    id: str

    @property
    def is_boss(self) -> bool:
        return self.type == BlindType.BOSS

    @property
    def boss(self) -> Optional[BossBlind]:
        return BOSS_BLINDS_BY_ID.get(self.id)


def boss_for_ante(ante: int) -> BossBlind:
    """Deterministic boss pick; cycles through the catalog as antes rise."""
    return BOSS_BLINDS[ante % len(BOSS_BLINDS)]


def get_score_requirement(ante: int, blind_type: BlindType) -> int:
    """Base score needed to beat a blind, before boss multipliers."""
    index = BLIND_ORDER.index(blind_type)
    if ante in BLIND_REQUIREMENTS:
        return BLIND_REQUIREMENTS[ante][index]
    # Endless mode scaling past the last table entry
    last = max(BLIND_REQUIREMENTS)
    base = BLIND_REQUIREMENTS[last][index]
    return int(base * ENDLESS_SCALING ** (ante - last))


def get_blind(ante: int, blind_index: int) -> CurrentBlind:
    """Build the blind snapshot for an ante and blind index (0=Small, 1=Big, 2=Boss)."""
    blind_type = BLIND_ORDER[blind_index]
    target = get_score_requirement(ante, blind_type)
    reward = BLIND_REWARDS[blind_type]

    if blind_type != BlindType.BOSS:
        return CurrentBlind(
            type=blind_type,
            name=f"{blind_type.value} Blind",
            desc="No special effects",
            target=target,
            reward=reward,
            id=blind_type.value.lower(),
        )

    boss = boss_for_ante(ante)
    return CurrentBlind(
        type=blind_type,
        name=boss.name,
        desc=boss.description,
        target=int(target * boss.score_mult),
        reward=reward,
        id=boss.id,
    )
