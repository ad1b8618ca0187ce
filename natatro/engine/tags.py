"""
Skip tags for Natatro.
A tag is earned by skipping a blind and pays out at a fixed point later on.
"""

from dataclasses import dataclass, replace
from typing import Optional

TAG_ECONOMY = "tag_economy"
TAG_HANDY = "tag_handy"
TAG_CHARM = "tag_charm"
TAG_D6 = "tag_d6"

ECONOMY_TAG_MONEY = 15

# Tags that only matter for the shop visit they were earned for
SHOP_TAGS = {TAG_CHARM, TAG_D6}


@dataclass(frozen=True)
class Tag:
    id: str
    name: str
    desc: str

    def copy(self) -> "Tag":
        return replace(self)


TAG_DEFINITIONS = [
    Tag(TAG_ECONOMY, "Economy Tag", f"Gain ${ECONOMY_TAG_MONEY}"),
    Tag(TAG_HANDY, "Handy Tag", "Level up High Card at the start of the next round"),
    Tag(TAG_CHARM, "Charm Tag", "Everything in the next shop is free"),
    Tag(TAG_D6, "D6 Tag", "Next shop reroll is free"),
]

TAGS_BY_ID = {t.id: t for t in TAG_DEFINITIONS}


def get_tag(tag_id: str) -> Optional[Tag]:
    return TAGS_BY_ID.get(tag_id)
