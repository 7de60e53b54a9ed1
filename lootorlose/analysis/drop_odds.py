"""
Exact item drop odds for a biome and zone.

The odds mirror generate_item(): the same eligibility filters and the same
weights, normalized to probabilities. A pool whose weights are all zero
always yields its first eligible item.
"""

from typing import Dict, List, Sequence, Tuple

import numpy as np

from ..content.items import ItemDefinition, ItemRarity
from ..generation.items import DungeonZone, calculate_weights, eligible_items


def drop_probabilities(
    pool: Sequence[ItemDefinition],
    biome: str,
    zone: DungeonZone,
) -> Dict[str, float]:
    """
    Probability of each eligible item being generated.

    Returns:
        item id -> probability (sums to 1), or {} when nothing is eligible
    """
    eligible = eligible_items(pool, biome, zone)
    if not eligible:
        return {}

    weights = np.asarray(calculate_weights(eligible, zone), dtype=float)
    total = weights.sum()
    if total <= 0:
        probs = np.zeros(len(eligible))
        probs[0] = 1.0
    else:
        probs = weights / total

    return {item.id: float(p) for item, p in zip(eligible, probs)}


def rarity_distribution(
    pool: Sequence[ItemDefinition],
    biome: str,
    zone: DungeonZone,
) -> Dict[ItemRarity, float]:
    """Probability that a generated item has each rarity."""
    by_id = {item.id: item for item in pool}
    dist = {rarity: 0.0 for rarity in ItemRarity}
    for item_id, p in drop_probabilities(pool, biome, zone).items():
        dist[by_id[item_id].rarity] += p
    return dist


def odds_table(
    pool: Sequence[ItemDefinition],
    biome: str,
) -> List[Tuple[str, Dict[DungeonZone, float]]]:
    """Drop probability of every item in every zone, most likely first (Chaos zone)."""
    per_zone = {zone: drop_probabilities(pool, biome, zone) for zone in DungeonZone}
    ids = sorted({item_id for odds in per_zone.values() for item_id in odds})
    rows = [(item_id, {zone: per_zone[zone].get(item_id, 0.0) for zone in DungeonZone}) for item_id in ids]
    rows.sort(key=lambda row: -row[1][DungeonZone.CHAOS])
    return rows
