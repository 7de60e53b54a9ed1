"""
Boss Definitions.

A boss appears on every boss round instead of an item. Its hit points grow
linearly with the round (base_hp + round * hp_scaling); its attack is derived
from those hit points by the combat resolver.

Weakness and resistance are item categories: player items of the weakness
category deal 1.5x damage, items of the resistance category 0.5x.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .items import ItemCategory


class BossType(Enum):
    SKELETON_KING = "SkeletonKing"
    FIRE_DRAGON = "FireDragon"
    ICE_QUEEN = "IceQueen"
    ABYSS_LORD = "AbyssLord"
    SHADOW_REAPER = "ShadowReaper"


@dataclass(frozen=True)
class BossDefinition:
    """An immutable boss catalog entry."""
    id: str
    name: str
    boss_type: BossType
    base_hp: int
    hp_scaling: int
    weakness: Optional[ItemCategory] = None
    resistance: Optional[ItemCategory] = None
    guaranteed_drop_ids: Tuple[str, ...] = ()
    min_round: int = 1
    preferred_biome: Optional[str] = None

    def hp_at_round(self, round_num: int) -> int:
        return self.base_hp + round_num * self.hp_scaling
