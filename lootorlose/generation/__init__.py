"""
Generation module - weighted selection and item drops.
"""

from .selection import select_weighted
from .items import (
    DungeonZone,
    generate_item,
    eligible_items,
    calculate_weights,
    get_rarity_weight,
    get_zone_for_round,
    is_boss_round,
    BOSS_ROUND_INTERVAL,
    RARITY_BASE_WEIGHTS,
    ZONE_RARITY_MULTIPLIERS,
)
