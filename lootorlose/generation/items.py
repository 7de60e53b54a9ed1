"""
Item Generation - which item appears on a normal round.

Pipeline:
1. Biome filter: items with no biome list, or listing the active biome
2. Zone filter: the Tutorial zone never offers Trap or Curse items, nor
   Rare or Legendary ones
3. Weight: drop_weight * rarity base weight, where every rarity above
   Common is scaled by the zone multiplier
4. Weighted draw from the run's random stream

Zones follow the round number:
- Rounds  1-10: Tutorial (x0.5)
- Rounds 11-25: Standard (x1.0)
- Rounds 26-40: Danger   (x1.5)
- Rounds 41+  : Chaos    (x2.5)
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence, TYPE_CHECKING

from ..content.items import ItemCategory, ItemDefinition, ItemInstance, ItemRarity
from .selection import select_weighted

if TYPE_CHECKING:
    from ..state.rng import Random


logger = logging.getLogger(__name__)


# ============================================================================
# ZONES
# ============================================================================

class DungeonZone(Enum):
    TUTORIAL = "Tutorial"
    STANDARD = "Standard"
    DANGER = "Danger"
    CHAOS = "Chaos"


# Last round of each zone; anything later is Chaos
TUTORIAL_ZONE_END = 10
STANDARD_ZONE_END = 25
DANGER_ZONE_END = 40

BOSS_ROUND_INTERVAL = 15


def get_zone_for_round(round_num: int) -> DungeonZone:
    """Zone for a round number."""
    if round_num <= TUTORIAL_ZONE_END:
        return DungeonZone.TUTORIAL
    if round_num <= STANDARD_ZONE_END:
        return DungeonZone.STANDARD
    if round_num <= DANGER_ZONE_END:
        return DungeonZone.DANGER
    return DungeonZone.CHAOS


def is_boss_round(round_num: int, interval: int = BOSS_ROUND_INTERVAL) -> bool:
    """True on positive exact multiples of the boss interval."""
    return round_num > 0 and round_num % interval == 0


# ============================================================================
# WEIGHTS
# ============================================================================

RARITY_BASE_WEIGHTS: Dict[ItemRarity, float] = {
    ItemRarity.COMMON: 60.0,
    ItemRarity.UNCOMMON: 25.0,
    ItemRarity.RARE: 10.0,
    ItemRarity.LEGENDARY: 5.0,
}

ZONE_RARITY_MULTIPLIERS: Dict[DungeonZone, float] = {
    DungeonZone.TUTORIAL: 0.5,
    DungeonZone.STANDARD: 1.0,
    DungeonZone.DANGER: 1.5,
    DungeonZone.CHAOS: 2.5,
}

TUTORIAL_EXCLUDED_CATEGORIES = frozenset({ItemCategory.TRAP, ItemCategory.CURSE})
TUTORIAL_EXCLUDED_RARITIES = frozenset({ItemRarity.RARE, ItemRarity.LEGENDARY})


def get_rarity_weight(rarity: ItemRarity, zone: DungeonZone) -> float:
    """Base weight for a rarity; Common is never scaled by the zone."""
    base = RARITY_BASE_WEIGHTS[rarity]
    if rarity == ItemRarity.COMMON:
        return base
    return base * ZONE_RARITY_MULTIPLIERS[zone]


def calculate_weights(items: Sequence[ItemDefinition], zone: DungeonZone) -> List[float]:
    """Selection weight of each item in the given zone."""
    return [item.drop_weight * get_rarity_weight(item.rarity, zone) for item in items]


# ============================================================================
# FILTERS
# ============================================================================

def filter_by_biome(items: Sequence[ItemDefinition], biome: str) -> List[ItemDefinition]:
    return [item for item in items if not item.biomes or biome in item.biomes]


def filter_by_zone(items: Sequence[ItemDefinition], zone: DungeonZone) -> List[ItemDefinition]:
    if zone != DungeonZone.TUTORIAL:
        return list(items)
    return [
        item for item in items
        if item.category not in TUTORIAL_EXCLUDED_CATEGORIES
        and item.rarity not in TUTORIAL_EXCLUDED_RARITIES
    ]


def eligible_items(
    pool: Sequence[ItemDefinition],
    biome: str,
    zone: DungeonZone,
) -> List[ItemDefinition]:
    """Items that may drop for the given biome and zone."""
    return filter_by_zone(filter_by_biome(pool, biome), zone)


# ============================================================================
# GENERATION
# ============================================================================

def generate_item(
    pool: Sequence[ItemDefinition],
    round_num: int,
    biome: str,
    zone: DungeonZone,
    rng: 'Random',
) -> Optional[ItemInstance]:
    """
    Draw the item offered on a normal round.

    Args:
        pool: Full item catalog to draw from
        round_num: Current round (logged; the zone carries the round's effect)
        biome: Active biome id
        zone: Zone of the current round
        rng: Run random stream

    Returns:
        A fresh ItemInstance, or None when nothing survives the filters.
    """
    candidates = eligible_items(pool, biome, zone)
    if not candidates:
        logger.debug("Round %d: no eligible items in %s/%s", round_num, biome, zone.value)
        return None

    weights = calculate_weights(candidates, zone)
    chosen = select_weighted(candidates, weights, rng)
    logger.debug("Round %d: generated %s (%s)", round_num, chosen.id, chosen.rarity.value)
    return ItemInstance.from_definition(chosen)
