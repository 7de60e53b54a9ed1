"""
Synergy and anti-synergy detection.

Synergies are recomputed from the full inventory every time they are needed;
nothing is cached on the run state.

Positive synergies (each checked independently):
- Armor Set:       Defense items with "shield", "armor" and "helmet" ids  -> +15 DEF, +20 HP
- Dual Wield:      2+ Weapon items                                          -> +10 ATK per weapon
- Potion Master:   3+ Consumable items                                      -> +5 DEF, +15 HP per consumable
- Key Collector:   3+ Key items                                             -> +5 ATK, +5 DEF, +10 HP
- Elemental Combo: any "fire" id together with any "ice" id                 -> +20 ATK, +10 DEF
- Item Combo:      two items where one names the other in synergy_ids      -> +5 ATK, +5 DEF, +5 HP

Anti-synergies: two items where one names the other in anti_synergy_ids.
10 damage, or 999 (fatal) when both items are cursed. Every unordered pair
is reported once.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

from ..content.items import ItemCategory


class SynergyType(Enum):
    ARMOR_SET = "ArmorSet"
    DUAL_WIELD = "DualWield"
    POTION_MASTER = "PotionMaster"
    KEY_COLLECTOR = "KeyCollector"
    ELEMENTAL_COMBO = "ElementalCombo"
    ITEM_COMBO = "ItemCombo"


# Bonus tables (attack, defense, hp)
ARMOR_SET_BONUS = (0, 15, 20)
DUAL_WIELD_ATTACK_PER_WEAPON = 10
DUAL_WIELD_MIN_WEAPONS = 2
POTION_MASTER_DEFENSE = 5
POTION_MASTER_HP_PER_CONSUMABLE = 15
POTION_MASTER_MIN_CONSUMABLES = 3
KEY_COLLECTOR_BONUS = (5, 5, 10)
KEY_COLLECTOR_MIN_KEYS = 3
ELEMENTAL_COMBO_BONUS = (20, 10, 0)
ITEM_COMBO_BONUS = (5, 5, 5)

ARMOR_SET_KEYWORDS = ("shield", "armor", "helmet")

ANTI_SYNERGY_DAMAGE = 10
FATAL_ANTI_SYNERGY_DAMAGE = 999


@dataclass
class SynergyResult:
    """One active synergy."""
    synergy_type: SynergyType
    description_key: str
    bonus_attack: int = 0
    bonus_defense: int = 0
    bonus_hp: int = 0
    item_ids: List[str] = field(default_factory=list)


@dataclass
class AntiSynergyResult:
    """One conflicting item pair."""
    item_a: str
    item_b: str
    damage: int
    is_fatal: bool = False
    description_key: str = "antisynergy_conflict"


@dataclass
class SynergyTotals:
    total_bonus_attack: int = 0
    total_bonus_defense: int = 0
    total_bonus_hp: int = 0
    total_anti_synergy_damage: int = 0
    has_fatal_anti_synergy: bool = False


def pair_key(a: str, b: str) -> str:
    """Order-independent key for an item pair."""
    return f"{a}|{b}" if a < b else f"{b}|{a}"


# ============================================================================
# INDIVIDUAL CHECKS
# ============================================================================

def check_armor_set(inventory: Sequence[Any]) -> Optional[SynergyResult]:
    defense_ids = [item.id for item in inventory if item.category == ItemCategory.DEFENSE]
    pieces = []
    for keyword in ARMOR_SET_KEYWORDS:
        match = next((item_id for item_id in defense_ids if keyword in item_id), None)
        if match is None:
            return None
        pieces.append(match)

    attack, defense, hp = ARMOR_SET_BONUS
    return SynergyResult(SynergyType.ARMOR_SET, "synergy_armor_set", attack, defense, hp, pieces)


def check_dual_wield(inventory: Sequence[Any]) -> Optional[SynergyResult]:
    weapons = [item.id for item in inventory if item.category == ItemCategory.WEAPON]
    if len(weapons) < DUAL_WIELD_MIN_WEAPONS:
        return None
    return SynergyResult(
        SynergyType.DUAL_WIELD, "synergy_dual_wield",
        bonus_attack=DUAL_WIELD_ATTACK_PER_WEAPON * len(weapons),
        item_ids=weapons,
    )


def check_potion_master(inventory: Sequence[Any]) -> Optional[SynergyResult]:
    consumables = [item.id for item in inventory if item.category == ItemCategory.CONSUMABLE]
    if len(consumables) < POTION_MASTER_MIN_CONSUMABLES:
        return None
    return SynergyResult(
        SynergyType.POTION_MASTER, "synergy_potion_master",
        bonus_defense=POTION_MASTER_DEFENSE,
        bonus_hp=POTION_MASTER_HP_PER_CONSUMABLE * len(consumables),
        item_ids=consumables,
    )


def check_key_collector(inventory: Sequence[Any]) -> Optional[SynergyResult]:
    keys = [item.id for item in inventory if item.category == ItemCategory.KEY]
    if len(keys) < KEY_COLLECTOR_MIN_KEYS:
        return None
    attack, defense, hp = KEY_COLLECTOR_BONUS
    return SynergyResult(SynergyType.KEY_COLLECTOR, "synergy_key_collector", attack, defense, hp, keys)


def check_elemental_combo(inventory: Sequence[Any]) -> Optional[SynergyResult]:
    fire = next((item.id for item in inventory if "fire" in item.id), None)
    ice = next((item.id for item in inventory if "ice" in item.id), None)
    if fire is None or ice is None:
        return None
    attack, defense, hp = ELEMENTAL_COMBO_BONUS
    return SynergyResult(SynergyType.ELEMENTAL_COMBO, "synergy_elemental_combo", attack, defense, hp, [fire, ice])


def check_item_combos(inventory: Sequence[Any]) -> List[SynergyResult]:
    results = []
    reported = set()

    for i, item in enumerate(inventory):
        for j, other in enumerate(inventory):
            if i == j or other.id not in item.synergy_ids:
                continue
            key = pair_key(item.id, other.id)
            if key in reported:
                continue
            reported.add(key)

            attack, defense, hp = ITEM_COMBO_BONUS
            results.append(SynergyResult(
                SynergyType.ITEM_COMBO,
                "synergy_item_combo_" + key.replace("|", "_"),
                attack, defense, hp,
                key.split("|"),
            ))

    return results


# ============================================================================
# AGGREGATE
# ============================================================================

def check_synergies(inventory: Sequence[Any]) -> List[SynergyResult]:
    """All positive synergies active for an inventory."""
    if not inventory:
        return []

    results = []
    for check in (check_armor_set, check_dual_wield, check_potion_master,
                  check_key_collector, check_elemental_combo):
        result = check(inventory)
        if result is not None:
            results.append(result)

    results.extend(check_item_combos(inventory))
    return results


def check_anti_synergies(inventory: Sequence[Any]) -> List[AntiSynergyResult]:
    """All conflicting pairs in an inventory, one result per unordered pair."""
    results = []
    reported = set()

    for i, item in enumerate(inventory):
        if not item.anti_synergy_ids:
            continue
        for j, other in enumerate(inventory):
            if i == j or other.id not in item.anti_synergy_ids:
                continue
            key = pair_key(item.id, other.id)
            if key in reported:
                continue
            reported.add(key)

            fatal = item.is_cursed and other.is_cursed
            results.append(AntiSynergyResult(
                item_a=item.id,
                item_b=other.id,
                damage=FATAL_ANTI_SYNERGY_DAMAGE if fatal else ANTI_SYNERGY_DAMAGE,
                is_fatal=fatal,
            ))

    return results


def calculate_synergy_totals(inventory: Sequence[Any]) -> SynergyTotals:
    """Summed bonuses, summed anti-synergy damage, and the fatal flag."""
    totals = SynergyTotals()

    for synergy in check_synergies(inventory):
        totals.total_bonus_attack += synergy.bonus_attack
        totals.total_bonus_defense += synergy.bonus_defense
        totals.total_bonus_hp += synergy.bonus_hp

    for conflict in check_anti_synergies(inventory):
        totals.total_anti_synergy_damage += conflict.damage
        if conflict.is_fatal:
            totals.has_fatal_anti_synergy = True

    return totals
