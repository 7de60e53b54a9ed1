"""
Decision policies for headless runs.

A policy is called as policy(run_state, item) and returns a Decision, or a
(Decision, discard_indices) tuple when it wants to make room first.
"""

from typing import Dict, List, Tuple, Union

from .content.items import ItemInstance, ItemRarity
from .game import Decision
from .state.run import RunState


PolicyResult = Union[Decision, Tuple[Decision, List[int]]]

RARITY_VALUE: Dict[ItemRarity, int] = {
    ItemRarity.COMMON: 0,
    ItemRarity.UNCOMMON: 2,
    ItemRarity.RARE: 5,
    ItemRarity.LEGENDARY: 10,
}


def always_loot(run_state: RunState, item: ItemInstance) -> PolicyResult:
    return Decision.LOOT


def always_leave(run_state: RunState, item: ItemInstance) -> PolicyResult:
    return Decision.LEAVE


def timeout(run_state: RunState, item: ItemInstance) -> PolicyResult:
    return Decision.TIMEOUT


def item_value(item: ItemInstance) -> float:
    """Rough worth of holding an item: stats per slot plus a rarity bonus."""
    if item.is_hazard or item.is_cursed:
        return -1.0
    value = item.attack + item.defense + RARITY_VALUE[item.rarity]
    return value / item.slot_size


def _conflicts(run_state: RunState, item: ItemInstance) -> bool:
    for held in run_state.inventory:
        if held.id in item.anti_synergy_ids or item.id in held.anti_synergy_ids:
            return True
    return False


def greedy(run_state: RunState, item: ItemInstance) -> PolicyResult:
    """
    Loot anything useful, swapping out the lowest-value items when full.

    Hazards, cursed items and items that clash with the inventory are left.
    Healing consumables are taken only when hurt.
    """
    if item.is_hazard or item.is_cursed or _conflicts(run_state, item):
        return Decision.LEAVE

    if item.is_consumable:
        wanted = item.heal > 0 and run_state.hp < run_state.max_hp
    else:
        wanted = True
    if not wanted:
        return Decision.LEAVE

    if run_state.can_fit(item):
        return Decision.LOOT
    if item.is_consumable:
        return Decision.LEAVE

    # Drop the cheapest items until the new one fits, if that is a gain
    target = item_value(item)
    ranked = sorted(range(len(run_state.inventory)),
                    key=lambda idx: item_value(run_state.inventory[idx]))
    discards: List[int] = []
    freed = run_state.free_slots
    for idx in ranked:
        if freed >= item.slot_size:
            break
        held = run_state.inventory[idx]
        if item_value(held) >= target:
            return Decision.LEAVE
        discards.append(idx)
        freed += held.slot_size

    if freed < item.slot_size:
        return Decision.LEAVE
    return Decision.LOOT, discards


POLICIES = {
    "loot": always_loot,
    "leave": always_leave,
    "timeout": timeout,
    "greedy": greedy,
}
